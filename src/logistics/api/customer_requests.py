"""FastAPI routes for customer consolidation requests."""

from fastapi import APIRouter, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from logistics.api.schemas import (
    ApproveRequestRequest,
    CountResponse,
    NumberResponse,
    ProcessRequestRequest,
    RejectRequestRequest,
    StatusResponse,
    SubmitRequestRequest,
    UpdateRequestRequest,
    UpdateRequestStatusRequest,
)
from logistics.api.views import entity_view
from logistics.request.handling import (
    ApproveRequest,
    DeleteRequest,
    ProcessRequest,
    RejectRequest,
    SubmitRequest,
    UpdateRequest,
    UpdateRequestStatus,
    peek_request_number,
)
from logistics.request.repository import DEFAULT_PAGE_SIZE
from logistics.request.request import CustomerRequest

request_router = APIRouter(prefix="/requests", tags=["requests"])


def _load(request_id: str) -> dict:
    return entity_view(current_domain.repository_for(CustomerRequest).get(request_id))


@request_router.get("/generate-number", response_model=NumberResponse)
async def preview_request_number() -> NumberResponse:
    """Request number the next submission will receive. Nothing is reserved."""
    return NumberResponse(number=peek_request_number())


@request_router.get("/pending-count", response_model=CountResponse)
async def pending_count() -> CountResponse:
    return CountResponse(count=current_domain.repository_for(CustomerRequest).pending_count())


@request_router.post("", status_code=201)
async def submit_request(body: SubmitRequestRequest) -> dict:
    command = SubmitRequest(
        customer_id=body.customer_id,
        notes=body.notes,
        request_number=body.request_number,
    )
    request_id = current_domain.process(command, asynchronous=False)
    return _load(request_id)


@request_router.get("")
async def list_requests(
    status: str | None = None,
    customer_id: str | None = None,
    processed_by: str | None = None,
    consolidation_id: str | None = None,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> list[dict]:
    results = current_domain.repository_for(CustomerRequest).search(
        status=status,
        customer_id=customer_id,
        processed_by=processed_by,
        consolidation_id=consolidation_id,
        limit=limit,
        offset=offset,
    )
    return [entity_view(r) for r in results]


@request_router.get("/id/{request_id}")
async def get_request(request_id: str) -> dict:
    return _load(request_id)


@request_router.get("/number/{request_number}")
async def get_by_number(request_number: str) -> dict:
    customer_request = current_domain.repository_for(CustomerRequest).find_by_number(request_number)
    if customer_request is None:
        raise ObjectNotFoundError(f"Request '{request_number}' does not exist")
    return entity_view(customer_request)


@request_router.get("/customer/{customer_id}")
async def list_for_customer(customer_id: str) -> list[dict]:
    results = current_domain.repository_for(CustomerRequest).search(customer_id=customer_id)
    return [entity_view(r) for r in results]


@request_router.patch("/{request_id}/status")
async def update_status(request_id: str, body: UpdateRequestStatusRequest) -> dict:
    command = UpdateRequestStatus(
        request_id=request_id,
        status=body.status,
        processed_by=body.processed_by,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return _load(request_id)


@request_router.post("/{request_id}/approve")
async def approve_request(request_id: str, body: ApproveRequestRequest) -> dict:
    command = ApproveRequest(
        request_id=request_id,
        processed_by=body.processed_by,
        consolidation_id=body.consolidation_id,
    )
    current_domain.process(command, asynchronous=False)
    return _load(request_id)


@request_router.post("/{request_id}/reject")
async def reject_request(request_id: str, body: RejectRequestRequest) -> dict:
    command = RejectRequest(request_id=request_id, processed_by=body.processed_by, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return _load(request_id)


@request_router.post("/{request_id}/process")
async def process_request(request_id: str, body: ProcessRequestRequest) -> dict:
    command = ProcessRequest(
        request_id=request_id,
        processed_by=body.processed_by,
        consolidation_id=body.consolidation_id,
    )
    current_domain.process(command, asynchronous=False)
    return _load(request_id)


@request_router.put("/{request_id}")
async def update_request(request_id: str, body: UpdateRequestRequest) -> dict:
    command = UpdateRequest(request_id=request_id, customer_id=body.customer_id, notes=body.notes)
    current_domain.process(command, asynchronous=False)
    return _load(request_id)


@request_router.delete("/{request_id}", response_model=StatusResponse)
async def delete_request(request_id: str) -> StatusResponse:
    current_domain.process(DeleteRequest(request_id=request_id), asynchronous=False)
    return StatusResponse(status="deleted")
