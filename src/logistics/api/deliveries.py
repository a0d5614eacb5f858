"""FastAPI routes for driver deliveries."""

from fastapi import APIRouter, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from logistics.api.schemas import (
    AssignDeliveryRequest,
    AssignmentResponse,
    CancelDeliveryRequest,
    EndDeliveryRequest,
    LocationRequest,
)
from logistics.api.views import delivery_view
from logistics.consolidation.assignment import AssignDriver
from logistics.delivery.delivery import Delivery
from logistics.delivery.lifecycle import CancelDelivery, EndDelivery, StartDelivery, UpdateDriverLocation
from logistics.delivery.repository import DEFAULT_PAGE_SIZE

delivery_router = APIRouter(prefix="/deliveries", tags=["deliveries"])


def _load(delivery_id: str) -> dict:
    return delivery_view(current_domain.repository_for(Delivery).get(delivery_id))


@delivery_router.post("/assign", status_code=201, response_model=AssignmentResponse)
async def assign_driver(body: AssignDeliveryRequest) -> AssignmentResponse:
    """Assign a driver to a consolidation, opening a new delivery."""
    command = AssignDriver(
        consolidation_id=body.consolidation_id,
        driver_id=body.driver_id,
        estimated_delivery_time=body.estimated_delivery_time,
    )
    delivery_id = current_domain.process(command, asynchronous=False)
    return AssignmentResponse(consolidation_id=body.consolidation_id, delivery_id=delivery_id)


@delivery_router.get("")
async def list_deliveries(
    status: str | None = None,
    driver_id: str | None = None,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> list[dict]:
    deliveries = current_domain.repository_for(Delivery).search(
        status=status,
        driver_id=driver_id,
        limit=limit,
        offset=offset,
    )
    return [delivery_view(d) for d in deliveries]


@delivery_router.get("/active")
async def list_active_deliveries(driver_id: str | None = None) -> list[dict]:
    """Deliveries that are assigned or in progress."""
    return [delivery_view(d) for d in current_domain.repository_for(Delivery).active(driver_id=driver_id)]


@delivery_router.get("/driver/{driver_id}")
async def list_driver_deliveries(driver_id: str, status: str | None = None) -> list[dict]:
    deliveries = current_domain.repository_for(Delivery).search(status=status, driver_id=driver_id)
    return [delivery_view(d) for d in deliveries]


@delivery_router.get("/consolidation/{consolidation_id}")
async def get_consolidation_delivery(consolidation_id: str) -> dict:
    """The consolidation's most recent delivery."""
    delivery = current_domain.repository_for(Delivery).latest_for_consolidation(consolidation_id)
    if delivery is None:
        raise ObjectNotFoundError(f"No delivery found for consolidation '{consolidation_id}'")
    return delivery_view(delivery)


@delivery_router.get("/{delivery_id}")
async def get_delivery(delivery_id: str) -> dict:
    return _load(delivery_id)


@delivery_router.post("/{delivery_id}/start")
async def start_delivery(delivery_id: str, body: LocationRequest) -> dict:
    command = StartDelivery(
        delivery_id=delivery_id,
        latitude=body.latitude,
        longitude=body.longitude,
        address=body.address,
    )
    current_domain.process(command, asynchronous=False)
    return _load(delivery_id)


@delivery_router.post("/{delivery_id}/end")
async def end_delivery(delivery_id: str, body: EndDeliveryRequest) -> dict:
    command = EndDelivery(
        delivery_id=delivery_id,
        latitude=body.latitude,
        longitude=body.longitude,
        address=body.address,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return _load(delivery_id)


@delivery_router.patch("/{delivery_id}/location")
async def update_location(delivery_id: str, body: LocationRequest) -> dict:
    command = UpdateDriverLocation(
        delivery_id=delivery_id,
        latitude=body.latitude,
        longitude=body.longitude,
        address=body.address,
    )
    current_domain.process(command, asynchronous=False)
    return _load(delivery_id)


@delivery_router.post("/{delivery_id}/cancel")
async def cancel_delivery(delivery_id: str, body: CancelDeliveryRequest) -> dict:
    current_domain.process(CancelDelivery(delivery_id=delivery_id, reason=body.reason), asynchronous=False)
    return _load(delivery_id)
