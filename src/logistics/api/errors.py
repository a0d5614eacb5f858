"""HTTP error mapping.

Every error leaves the API as ``{"error": <summary>, "details": <messages>}``:

    ObjectNotFoundError            404
    ValidationError / bad input    400
    ConflictError                  409
    InvalidStateError              409
    anything else                  500
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers
from starlette.exceptions import HTTPException as StarletteHTTPException

from logistics.shared.errors import ConflictError, InvalidStateError

logger = structlog.get_logger(__name__)


def _error(status_code: int, error: str, details=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "details": details})


def _details(exc: Exception):
    return getattr(exc, "messages", None) or str(exc)


async def handle_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    logger.warning("Record not found", path=request.url.path, error=str(exc))
    return _error(404, "Not found", _details(exc))


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning("Invalid input", path=request.url.path, details=exc.messages)
    return _error(400, "Validation failed", exc.messages)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = {".".join(str(part) for part in err["loc"]): [err["msg"]] for err in exc.errors()}
    logger.warning("Invalid request body", path=request.url.path, details=details)
    return _error(400, "Validation failed", details)


async def handle_conflict(request: Request, exc: ConflictError) -> JSONResponse:
    logger.warning("Conflict", path=request.url.path, details=exc.messages)
    return _error(409, "Conflict", exc.messages)


async def handle_invalid_state(request: Request, exc: InvalidStateError) -> JSONResponse:
    logger.warning("Operation not allowed in current state", path=request.url.path, details=exc.messages)
    return _error(409, "Invalid state", exc.messages)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _error(404, "Route not found", request.url.path)
    return _error(exc.status_code, str(exc.detail))


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return _error(500, "Internal server error", str(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers, then override them with the logistics error shape."""
    register_exception_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, handle_not_found)
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(ConflictError, handle_conflict)
    app.add_exception_handler(InvalidStateError, handle_invalid_state)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
