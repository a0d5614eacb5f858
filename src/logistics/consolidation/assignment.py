"""Driver assignment — command and handler.

Assigning a driver moves the consolidation to ``assigned_to_driver`` and
opens a new Delivery for that driver. Any delivery of the consolidation that
was assigned but never started is cancelled first, so a consolidation has at
most one pending run.
"""

import structlog
from protean import handle
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain

from logistics.consolidation.consolidation import Consolidation
from logistics.delivery.delivery import Delivery
from logistics.domain import logistics

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Consolidation")
class AssignDriver:
    consolidation_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    estimated_delivery_time = DateTime()


@logistics.command_handler(part_of=Consolidation)
class AssignDriverHandler:
    @handle(AssignDriver)
    def assign_driver(self, command):
        consolidation_repo = current_domain.repository_for(Consolidation)
        delivery_repo = current_domain.repository_for(Delivery)

        consolidation = consolidation_repo.get(command.consolidation_id)
        consolidation.assign_driver(command.driver_id)

        for superseded in delivery_repo.not_started_for_consolidation(str(consolidation.id)):
            superseded.cancel(f"Reassigned to driver {command.driver_id}")
            delivery_repo.add(superseded)

        delivery = Delivery.assign(
            consolidation_id=str(consolidation.id),
            driver_id=command.driver_id,
            estimated_delivery_time=command.estimated_delivery_time,
        )
        consolidation_repo.add(consolidation)
        delivery_repo.add(delivery)

        logger.info(
            "Driver assigned to consolidation",
            consolidation_id=str(consolidation.id),
            driver_id=command.driver_id,
            delivery_id=str(delivery.id),
        )
        return str(delivery.id)
