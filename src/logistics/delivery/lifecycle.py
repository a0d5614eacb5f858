"""Delivery lifecycle — start, location updates, completion and cancellation.

Starting and completing a run also move the consolidation it carries
(``in_transit`` and ``delivered``). Both aggregates are written by the same
handler, so they commit or roll back together.
"""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from logistics.consolidation.consolidation import Consolidation
from logistics.delivery.delivery import Delivery
from logistics.domain import logistics
from logistics.shared.location import GeoLocation

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Delivery")
class StartDelivery:
    delivery_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    address = String(max_length=500)


@logistics.command(part_of="Delivery")
class EndDelivery:
    delivery_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    address = String(max_length=500)
    notes = Text()


@logistics.command(part_of="Delivery")
class UpdateDriverLocation:
    delivery_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    address = String(max_length=500)


@logistics.command(part_of="Delivery")
class CancelDelivery:
    delivery_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


def _location(command) -> GeoLocation:
    return GeoLocation(latitude=command.latitude, longitude=command.longitude, address=command.address)


@logistics.command_handler(part_of=Delivery)
class DeliveryLifecycleHandler:
    @handle(StartDelivery)
    def start_delivery(self, command):
        delivery_repo = current_domain.repository_for(Delivery)
        consolidation_repo = current_domain.repository_for(Consolidation)

        delivery = delivery_repo.get(command.delivery_id)
        location = _location(command)
        delivery.start(location)

        consolidation = consolidation_repo.get(str(delivery.consolidation_id))
        consolidation.mark_dispatched(
            delivery_id=str(delivery.id),
            driver_id=str(delivery.driver_id),
            location=location,
        )

        delivery_repo.add(delivery)
        consolidation_repo.add(consolidation)
        logger.info(
            "Delivery started",
            delivery_id=str(delivery.id),
            consolidation_id=str(consolidation.id),
            driver_id=str(delivery.driver_id),
        )

    @handle(EndDelivery)
    def end_delivery(self, command):
        delivery_repo = current_domain.repository_for(Delivery)
        consolidation_repo = current_domain.repository_for(Consolidation)

        delivery = delivery_repo.get(command.delivery_id)
        location = _location(command)
        delivery.complete(location, notes=command.notes)

        consolidation = consolidation_repo.get(str(delivery.consolidation_id))
        consolidation.mark_delivered(
            delivery_id=str(delivery.id),
            driver_id=str(delivery.driver_id),
            location=location,
            note=command.notes,
        )

        delivery_repo.add(delivery)
        consolidation_repo.add(consolidation)
        logger.info(
            "Delivery completed",
            delivery_id=str(delivery.id),
            consolidation_id=str(consolidation.id),
        )

    @handle(UpdateDriverLocation)
    def update_location(self, command):
        repo = current_domain.repository_for(Delivery)
        delivery = repo.get(command.delivery_id)
        delivery.update_location(_location(command))
        repo.add(delivery)

    @handle(CancelDelivery)
    def cancel_delivery(self, command):
        repo = current_domain.repository_for(Delivery)
        delivery = repo.get(command.delivery_id)
        delivery.cancel(command.reason)
        repo.add(delivery)
