"""Consolidation creation — command, handler and tracking number series."""

import json
from datetime import date

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from logistics.consolidation.consolidation import Consolidation
from logistics.domain import logistics
from logistics.sequence.sequence import next_identifier, peek_identifier
from logistics.shared.errors import ConflictError

logger = structlog.get_logger(__name__)

TRACKING_PREFIX = "MTN"


def next_master_tracking_number(today: date | None = None) -> str:
    return next_identifier(TRACKING_PREFIX, Consolidation, "master_tracking_number", "created_at", today=today)


def peek_master_tracking_number(today: date | None = None) -> str:
    return peek_identifier(TRACKING_PREFIX, Consolidation, "master_tracking_number", "created_at", today=today)


@logistics.command(part_of="Consolidation")
class CreateConsolidation:
    """Open a consolidation. A master tracking number is issued when none is given."""

    reference_code = String(required=True, max_length=100)
    created_by = Identifier(required=True)
    master_tracking_number = String(max_length=50)
    warehouse_id = Identifier()
    notes = Text()
    parcel_ids = Text()  # JSON list of parcel ids


@logistics.command_handler(part_of=Consolidation)
class CreateConsolidationHandler:
    @handle(CreateConsolidation)
    def create_consolidation(self, command):
        repo = current_domain.repository_for(Consolidation)

        if repo.find_by_reference_code(command.reference_code) is not None:
            raise ConflictError(
                {"reference_code": [f"Consolidation with reference code '{command.reference_code}' already exists"]}
            )

        tracking_number = command.master_tracking_number
        if tracking_number:
            if repo.find_by_tracking_number(tracking_number) is not None:
                raise ConflictError(
                    {"master_tracking_number": [f"Master tracking number '{tracking_number}' is already in use"]}
                )
        else:
            tracking_number = next_master_tracking_number()

        parcel_ids = json.loads(command.parcel_ids) if command.parcel_ids else []
        consolidation = Consolidation.create(
            reference_code=command.reference_code,
            created_by=command.created_by,
            master_tracking_number=tracking_number,
            warehouse_id=command.warehouse_id,
            notes=command.notes,
            parcel_ids=parcel_ids,
        )
        repo.add(consolidation)

        logger.info(
            "Consolidation created",
            consolidation_id=str(consolidation.id),
            reference_code=consolidation.reference_code,
            master_tracking_number=tracking_number,
        )
        return str(consolidation.id)
