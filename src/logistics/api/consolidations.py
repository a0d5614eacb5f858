"""FastAPI routes for consolidations."""

import json

from fastapi import APIRouter, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from logistics.api.schemas import (
    AddParcelRequest,
    AssignDriverRequest,
    AssignmentResponse,
    CreateConsolidationRequest,
    NumberResponse,
    StatusResponse,
    UpdateConsolidationRequest,
    UpdateConsolidationStatusRequest,
)
from logistics.api.views import consolidation_view
from logistics.consolidation.assignment import AssignDriver
from logistics.consolidation.consolidation import Consolidation
from logistics.consolidation.creation import CreateConsolidation, peek_master_tracking_number
from logistics.consolidation.management import DeleteConsolidation, UpdateConsolidation
from logistics.consolidation.parcels import AddParcel, RemoveParcel
from logistics.consolidation.repository import DEFAULT_PAGE_SIZE
from logistics.consolidation.status import UpdateConsolidationStatus

consolidation_router = APIRouter(prefix="/consolidations", tags=["consolidations"])


def _load(consolidation_id: str) -> dict:
    return consolidation_view(current_domain.repository_for(Consolidation).get(consolidation_id))


@consolidation_router.post("", status_code=201)
async def create_consolidation(body: CreateConsolidationRequest) -> dict:
    command = CreateConsolidation(
        reference_code=body.reference_code,
        created_by=body.created_by,
        master_tracking_number=body.master_tracking_number,
        warehouse_id=body.warehouse_id,
        notes=body.notes,
        parcel_ids=json.dumps(body.parcels),
    )
    consolidation_id = current_domain.process(command, asynchronous=False)
    return _load(consolidation_id)


@consolidation_router.get("")
async def list_consolidations(
    status: str | None = None,
    warehouse_id: str | None = None,
    created_by: str | None = None,
    assigned_driver: str | None = None,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> list[dict]:
    consolidations = current_domain.repository_for(Consolidation).search(
        status=status,
        warehouse_id=warehouse_id,
        created_by=created_by,
        assigned_driver=assigned_driver,
        limit=limit,
        offset=offset,
    )
    return [consolidation_view(c) for c in consolidations]


@consolidation_router.get("/generate-number", response_model=NumberResponse)
async def preview_tracking_number() -> NumberResponse:
    """Tracking number the next consolidation will receive. Nothing is reserved."""
    return NumberResponse(number=peek_master_tracking_number())


@consolidation_router.get("/id/{consolidation_id}")
async def get_consolidation(consolidation_id: str) -> dict:
    return _load(consolidation_id)


@consolidation_router.get("/reference/{reference_code}")
async def get_by_reference_code(reference_code: str) -> dict:
    consolidation = current_domain.repository_for(Consolidation).find_by_reference_code(reference_code)
    if consolidation is None:
        raise ObjectNotFoundError(f"Consolidation with reference code '{reference_code}' does not exist")
    return consolidation_view(consolidation)


@consolidation_router.get("/tracking/{master_tracking_number}")
async def get_by_tracking_number(master_tracking_number: str) -> dict:
    consolidation = current_domain.repository_for(Consolidation).find_by_tracking_number(master_tracking_number)
    if consolidation is None:
        raise ObjectNotFoundError(f"Consolidation with tracking number '{master_tracking_number}' does not exist")
    return consolidation_view(consolidation)


@consolidation_router.patch("/{consolidation_id}/status")
async def update_status(consolidation_id: str, body: UpdateConsolidationStatusRequest) -> dict:
    location = body.location
    command = UpdateConsolidationStatus(
        consolidation_id=consolidation_id,
        status=body.status,
        note=body.note,
        latitude=location.latitude if location else None,
        longitude=location.longitude if location else None,
        address=location.address if location else None,
    )
    current_domain.process(command, asynchronous=False)
    return _load(consolidation_id)


@consolidation_router.patch("/{consolidation_id}/assign-driver", response_model=AssignmentResponse)
async def assign_driver(consolidation_id: str, body: AssignDriverRequest) -> AssignmentResponse:
    command = AssignDriver(
        consolidation_id=consolidation_id,
        driver_id=body.driver_id,
        estimated_delivery_time=body.estimated_delivery_time,
    )
    delivery_id = current_domain.process(command, asynchronous=False)
    return AssignmentResponse(consolidation_id=consolidation_id, delivery_id=delivery_id)


@consolidation_router.post("/{consolidation_id}/parcels")
async def add_parcel(consolidation_id: str, body: AddParcelRequest) -> dict:
    current_domain.process(
        AddParcel(consolidation_id=consolidation_id, parcel_id=body.parcel_id),
        asynchronous=False,
    )
    return _load(consolidation_id)


@consolidation_router.delete("/{consolidation_id}/parcels/{parcel_id}")
async def remove_parcel(consolidation_id: str, parcel_id: str) -> dict:
    current_domain.process(
        RemoveParcel(consolidation_id=consolidation_id, parcel_id=parcel_id),
        asynchronous=False,
    )
    return _load(consolidation_id)


@consolidation_router.put("/{consolidation_id}")
async def update_consolidation(consolidation_id: str, body: UpdateConsolidationRequest) -> dict:
    command = UpdateConsolidation(
        consolidation_id=consolidation_id,
        reference_code=body.reference_code,
        warehouse_id=body.warehouse_id,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return _load(consolidation_id)


@consolidation_router.delete("/{consolidation_id}", response_model=StatusResponse)
async def delete_consolidation(consolidation_id: str) -> StatusResponse:
    current_domain.process(DeleteConsolidation(consolidation_id=consolidation_id), asynchronous=False)
    return StatusResponse(status="deleted")
