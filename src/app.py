"""Logistics FastAPI application.

Serves the consolidation, delivery, receipt, request and notification APIs.
Each request runs inside the logistics domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8001 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - unset / "test" → event_processing = "sync"  (notifications dispatched in-process)
#   - "production"   → event_processing = "async" (dispatched by the Engine, see server.py)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from logistics.domain import logistics
from logistics.utils.logging import add_context, clear_context

logistics.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Consolidation Service",
    description="Parcel consolidation, driver deliveries, receipts and customer requests",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the logistics domain context for each request."""
    clear_context()
    add_context(method=request.method, path=request.url.path)
    with logistics.domain_context():
        return await call_next(request)


# ---------------------------------------------------------------------------
# Routers and error handling
# ---------------------------------------------------------------------------
from logistics.api.errors import register_error_handlers  # noqa: E402
from logistics.api.routers import routers  # noqa: E402

for router in routers:
    app.include_router(router)

register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/")
async def root():
    return JSONResponse(content={"message": "Consolidation Service"})


@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": logistics.name})
