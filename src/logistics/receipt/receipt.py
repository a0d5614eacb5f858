"""Receipt aggregate — the bill issued for a consolidation.

The charge total is derived, never accepted from callers:
``total = service_fee + handling_fee - discount``.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, ValueObject

from logistics.domain import logistics
from logistics.receipt.events import ReceiptChargesUpdated, ReceiptIssued, ReceiptUpdated


def compute_total(service_fee: float, handling_fee: float, discount: float) -> float:
    return round(service_fee + handling_fee - discount, 2)


@logistics.value_object(part_of="Receipt")
class Charges:
    service_fee = Float(default=0.0, min_value=0.0)
    handling_fee = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0)

    @classmethod
    def from_components(
        cls,
        service_fee: float | None = None,
        handling_fee: float | None = None,
        discount: float | None = None,
    ) -> "Charges":
        """Build charges from their components; missing components count as zero."""
        service_fee = service_fee or 0.0
        handling_fee = handling_fee or 0.0
        discount = discount or 0.0
        return cls(
            service_fee=service_fee,
            handling_fee=handling_fee,
            discount=discount,
            total=compute_total(service_fee, handling_fee, discount),
        )

    @invariant.post
    def total_matches_components(self):
        expected = compute_total(self.service_fee or 0.0, self.handling_fee or 0.0, self.discount or 0.0)
        if self.total != expected:
            raise ValidationError({"total": [f"Charge total must be {expected}, got {self.total}"]})


@logistics.aggregate
class Receipt:
    receipt_number = String(required=True, max_length=50, unique=True)
    consolidation_id = Identifier(required=True)
    total_parcels = Integer(required=True, min_value=1)
    total_weight = Float(min_value=0.0)
    charges = ValueObject(Charges)
    issued_by = Identifier()
    issued_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def issue(
        cls,
        receipt_number: str,
        consolidation_id: str,
        total_parcels: int,
        charges: Charges,
        total_weight: float | None = None,
        issued_by: str | None = None,
    ):
        now = datetime.now(UTC)
        receipt = cls(
            receipt_number=receipt_number,
            consolidation_id=consolidation_id,
            total_parcels=total_parcels,
            total_weight=total_weight,
            charges=charges,
            issued_by=issued_by,
            issued_at=now,
            updated_at=now,
        )
        receipt.raise_(
            ReceiptIssued(
                receipt_id=str(receipt.id),
                receipt_number=receipt_number,
                consolidation_id=consolidation_id,
                total_parcels=total_parcels,
                total=charges.total,
                issued_by=issued_by,
                issued_at=now,
            )
        )
        return receipt

    def update_charges(self, charges: Charges) -> None:
        now = datetime.now(UTC)
        self.charges = charges
        self.updated_at = now
        self.raise_(
            ReceiptChargesUpdated(
                receipt_id=str(self.id),
                receipt_number=self.receipt_number,
                service_fee=charges.service_fee,
                handling_fee=charges.handling_fee,
                discount=charges.discount,
                total=charges.total,
                updated_at=now,
            )
        )

    def update_details(
        self,
        consolidation_id: str | None = None,
        total_parcels: int | None = None,
        total_weight: float | None = None,
        issued_by: str | None = None,
    ) -> None:
        """Revise the non-charge fields. The receipt number never changes."""
        if consolidation_id is not None:
            self.consolidation_id = consolidation_id
        if total_parcels is not None:
            self.total_parcels = total_parcels
        if total_weight is not None:
            self.total_weight = total_weight
        if issued_by is not None:
            self.issued_by = issued_by

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ReceiptUpdated(
                receipt_id=str(self.id),
                receipt_number=self.receipt_number,
                updated_at=now,
            )
        )
