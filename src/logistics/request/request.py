"""CustomerRequest aggregate — a customer's ask to consolidate their parcels.

State Machine:
    SUBMITTED → APPROVED → PROCESSED
    SUBMITTED → REJECTED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from logistics.domain import logistics
from logistics.request.events import RequestStatusChanged, RequestSubmitted
from logistics.shared.errors import InvalidStateError


class RequestStatus(Enum):
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    PROCESSED = "processed"


_VALID_TRANSITIONS = {
    RequestStatus.SUBMITTED: {RequestStatus.APPROVED, RequestStatus.REJECTED},
    RequestStatus.APPROVED: {RequestStatus.PROCESSED},
    RequestStatus.REJECTED: set(),  # terminal
    RequestStatus.PROCESSED: set(),  # terminal
}


@logistics.aggregate
class CustomerRequest:
    request_number = String(required=True, max_length=50, unique=True)
    customer_id = Identifier(required=True)
    status = String(
        max_length=50,
        choices=RequestStatus,
        default=RequestStatus.SUBMITTED.value,
    )
    consolidation_id = Identifier()
    processed_by = Identifier()
    notes = Text()
    submitted_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def submit(cls, request_number: str, customer_id: str, notes: str | None = None):
        now = datetime.now(UTC)
        customer_request = cls(
            request_number=request_number,
            customer_id=customer_id,
            notes=notes,
            status=RequestStatus.SUBMITTED.value,
            submitted_at=now,
            updated_at=now,
        )
        customer_request.raise_(
            RequestSubmitted(
                request_id=str(customer_request.id),
                request_number=request_number,
                customer_id=customer_id,
                submitted_at=now,
            )
        )
        return customer_request

    def _assert_can_transition(self, target: RequestStatus) -> None:
        current = RequestStatus(self.status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStateError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

    def change_status(
        self,
        status: str,
        processed_by: str | None = None,
        notes: str | None = None,
        consolidation_id: str | None = None,
    ) -> None:
        try:
            target = RequestStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in RequestStatus)
            raise ValidationError({"status": [f"Unknown status '{status}'. Expected one of: {allowed}"]}) from None
        self._assert_can_transition(target)

        old_status = self.status
        now = datetime.now(UTC)
        self.status = target.value
        if processed_by:
            self.processed_by = processed_by
        if notes:
            self.notes = notes
        if consolidation_id:
            self.consolidation_id = consolidation_id
        self.updated_at = now
        self.raise_(
            RequestStatusChanged(
                request_id=str(self.id),
                request_number=self.request_number,
                customer_id=str(self.customer_id),
                old_status=old_status,
                new_status=target.value,
                processed_by=processed_by,
                consolidation_id=str(self.consolidation_id) if self.consolidation_id else None,
                notes=notes or "",
                changed_at=now,
            )
        )

    def approve(self, processed_by: str, consolidation_id: str | None = None) -> None:
        self.change_status(RequestStatus.APPROVED.value, processed_by=processed_by, consolidation_id=consolidation_id)

    def reject(self, processed_by: str, reason: str) -> None:
        if not reason:
            raise ValidationError({"reason": ["A reason is required to reject a request"]})
        self.change_status(RequestStatus.REJECTED.value, processed_by=processed_by, notes=reason)

    def process(self, processed_by: str, consolidation_id: str) -> None:
        if not consolidation_id:
            raise ValidationError({"consolidation_id": ["A consolidation is required to process a request"]})
        self.change_status(RequestStatus.PROCESSED.value, processed_by=processed_by, consolidation_id=consolidation_id)

    def update_details(self, customer_id: str | None = None, notes: str | None = None) -> None:
        """Edit the request's own fields. Status moves only through transitions."""
        if customer_id is not None:
            self.customer_id = customer_id
        if notes is not None:
            self.notes = notes
        self.updated_at = datetime.now(UTC)
