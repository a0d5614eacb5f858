"""Consolidation status updates — command and handler.

Cancelling a consolidation also cancels any delivery that was assigned to it
but never started, so no driver is left holding an active run.
"""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from logistics.consolidation.consolidation import Consolidation, ConsolidationStatus
from logistics.delivery.delivery import Delivery
from logistics.domain import logistics
from logistics.shared.location import location_from

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Consolidation")
class UpdateConsolidationStatus:
    """Move a consolidation to a new status, optionally with a note and position."""

    consolidation_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    note = String(max_length=1000)
    latitude = Float()
    longitude = Float()
    address = String(max_length=500)


@logistics.command_handler(part_of=Consolidation)
class ConsolidationStatusHandler:
    @handle(UpdateConsolidationStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Consolidation)
        consolidation = repo.get(command.consolidation_id)
        consolidation.transition_to(
            command.status,
            note=command.note,
            location=location_from(command.latitude, command.longitude, command.address),
        )
        repo.add(consolidation)

        if consolidation.status == ConsolidationStatus.CANCELLED.value:
            self._cancel_open_deliveries(consolidation)

    def _cancel_open_deliveries(self, consolidation: Consolidation) -> None:
        delivery_repo = current_domain.repository_for(Delivery)
        for delivery in delivery_repo.not_started_for_consolidation(str(consolidation.id)):
            delivery.cancel("Consolidation cancelled")
            delivery_repo.add(delivery)
            logger.info(
                "Delivery cancelled with its consolidation",
                delivery_id=str(delivery.id),
                consolidation_id=str(consolidation.id),
            )
