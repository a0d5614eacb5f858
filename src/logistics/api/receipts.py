"""FastAPI routes for receipts."""

from datetime import datetime

from fastapi import APIRouter, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from logistics.api.schemas import (
    ChargesRequest,
    CreateReceiptRequest,
    NumberResponse,
    StatusResponse,
    UpdateReceiptRequest,
)
from logistics.api.views import entity_view
from logistics.receipt.issuance import (
    DeleteReceipt,
    IssueReceipt,
    UpdateReceipt,
    UpdateReceiptCharges,
    peek_receipt_number,
)
from logistics.receipt.receipt import Receipt
from logistics.receipt.repository import DEFAULT_PAGE_SIZE

receipt_router = APIRouter(prefix="/receipts", tags=["receipts"])


def _load(receipt_id: str) -> dict:
    return entity_view(current_domain.repository_for(Receipt).get(receipt_id))


def _aware(value: datetime | None) -> datetime | None:
    # Naive query bounds are read as server-local time
    if value is not None and value.tzinfo is None:
        return value.astimezone()
    return value


@receipt_router.get("/generate-number", response_model=NumberResponse)
async def preview_receipt_number() -> NumberResponse:
    """Receipt number the next receipt will receive. Nothing is reserved."""
    return NumberResponse(number=peek_receipt_number())


@receipt_router.post("", status_code=201)
async def create_receipt(body: CreateReceiptRequest) -> dict:
    command = IssueReceipt(
        consolidation_id=body.consolidation_id,
        total_parcels=body.total_parcels,
        total_weight=body.total_weight,
        service_fee=body.charges.service_fee,
        handling_fee=body.charges.handling_fee,
        discount=body.charges.discount,
        issued_by=body.issued_by,
        receipt_number=body.receipt_number,
    )
    receipt_id = current_domain.process(command, asynchronous=False)
    return _load(receipt_id)


@receipt_router.get("")
async def list_receipts(
    consolidation_id: str | None = None,
    issued_by: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> list[dict]:
    receipts = current_domain.repository_for(Receipt).search(
        consolidation_id=consolidation_id,
        issued_by=issued_by,
        start_date=_aware(start_date),
        end_date=_aware(end_date),
        limit=limit,
        offset=offset,
    )
    return [entity_view(r) for r in receipts]


@receipt_router.get("/id/{receipt_id}")
async def get_receipt(receipt_id: str) -> dict:
    return _load(receipt_id)


@receipt_router.get("/number/{receipt_number}")
async def get_by_number(receipt_number: str) -> dict:
    receipt = current_domain.repository_for(Receipt).find_by_number(receipt_number)
    if receipt is None:
        raise ObjectNotFoundError(f"Receipt '{receipt_number}' does not exist")
    return entity_view(receipt)


@receipt_router.get("/consolidation/{consolidation_id}")
async def list_for_consolidation(consolidation_id: str) -> list[dict]:
    receipts = current_domain.repository_for(Receipt).search(consolidation_id=consolidation_id)
    return [entity_view(r) for r in receipts]


@receipt_router.patch("/{receipt_id}/charges")
async def update_charges(receipt_id: str, body: ChargesRequest) -> dict:
    command = UpdateReceiptCharges(
        receipt_id=receipt_id,
        service_fee=body.service_fee,
        handling_fee=body.handling_fee,
        discount=body.discount,
    )
    current_domain.process(command, asynchronous=False)
    return _load(receipt_id)


@receipt_router.put("/{receipt_id}")
async def update_receipt(receipt_id: str, body: UpdateReceiptRequest) -> dict:
    charges = body.charges or ChargesRequest()
    command = UpdateReceipt(
        receipt_id=receipt_id,
        consolidation_id=body.consolidation_id,
        total_parcels=body.total_parcels,
        total_weight=body.total_weight,
        issued_by=body.issued_by,
        service_fee=charges.service_fee,
        handling_fee=charges.handling_fee,
        discount=charges.discount,
    )
    current_domain.process(command, asynchronous=False)
    return _load(receipt_id)


@receipt_router.delete("/{receipt_id}", response_model=StatusResponse)
async def delete_receipt(receipt_id: str) -> StatusResponse:
    current_domain.process(DeleteReceipt(receipt_id=receipt_id), asynchronous=False)
    return StatusResponse(status="deleted")
