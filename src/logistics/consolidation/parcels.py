"""Parcel membership — add and remove commands.

Both are idempotent: adding a member again or removing a non-member leaves
the consolidation untouched.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from logistics.consolidation.consolidation import Consolidation
from logistics.domain import logistics


@logistics.command(part_of="Consolidation")
class AddParcel:
    consolidation_id = Identifier(required=True)
    parcel_id = Identifier(required=True)


@logistics.command(part_of="Consolidation")
class RemoveParcel:
    consolidation_id = Identifier(required=True)
    parcel_id = Identifier(required=True)


@logistics.command_handler(part_of=Consolidation)
class ParcelMembershipHandler:
    @handle(AddParcel)
    def add_parcel(self, command):
        repo = current_domain.repository_for(Consolidation)
        consolidation = repo.get(command.consolidation_id)
        if consolidation.add_parcel(command.parcel_id):
            repo.add(consolidation)

    @handle(RemoveParcel)
    def remove_parcel(self, command):
        repo = current_domain.repository_for(Consolidation)
        consolidation = repo.get(command.consolidation_id)
        if consolidation.remove_parcel(command.parcel_id):
            repo.add(consolidation)
