"""Consolidation detail edits and deletion."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from logistics.consolidation.consolidation import Consolidation
from logistics.domain import logistics
from logistics.shared.errors import ConflictError


@logistics.command(part_of="Consolidation")
class UpdateConsolidation:
    """Edit descriptive fields. Omitted fields keep their value."""

    consolidation_id = Identifier(required=True)
    reference_code = String(max_length=100)
    warehouse_id = Identifier()
    notes = Text()


@logistics.command(part_of="Consolidation")
class DeleteConsolidation:
    consolidation_id = Identifier(required=True)


@logistics.command_handler(part_of=Consolidation)
class ConsolidationManagementHandler:
    @handle(UpdateConsolidation)
    def update_consolidation(self, command):
        repo = current_domain.repository_for(Consolidation)
        consolidation = repo.get(command.consolidation_id)

        if command.reference_code and command.reference_code != consolidation.reference_code:
            holder = repo.find_by_reference_code(command.reference_code)
            if holder is not None and str(holder.id) != str(consolidation.id):
                raise ConflictError(
                    {"reference_code": [f"Consolidation with reference code '{command.reference_code}' already exists"]}
                )

        if consolidation.update_details(
            reference_code=command.reference_code,
            warehouse_id=command.warehouse_id,
            notes=command.notes,
        ):
            repo.add(consolidation)

    @handle(DeleteConsolidation)
    def delete_consolidation(self, command):
        repo = current_domain.repository_for(Consolidation)
        consolidation = repo.get(command.consolidation_id)
        repo._dao.delete(consolidation)
