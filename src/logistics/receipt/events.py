"""Receipt domain events."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from logistics.domain import logistics


@logistics.event(part_of="Receipt")
class ReceiptIssued:
    """A receipt was issued for a consolidation."""

    __version__ = 1

    receipt_id = Identifier(required=True)
    receipt_number = String(required=True)
    consolidation_id = Identifier(required=True)
    total_parcels = Integer(required=True)
    total = Float(required=True)
    issued_by = Identifier()
    issued_at = DateTime(required=True)


@logistics.event(part_of="Receipt")
class ReceiptChargesUpdated:
    """The receipt's charges were revised."""

    __version__ = 1

    receipt_id = Identifier(required=True)
    receipt_number = String(required=True)
    service_fee = Float(required=True)
    handling_fee = Float(required=True)
    discount = Float(required=True)
    total = Float(required=True)
    updated_at = DateTime(required=True)


@logistics.event(part_of="Receipt")
class ReceiptUpdated:
    """Receipt details other than charges were revised."""

    __version__ = 1

    receipt_id = Identifier(required=True)
    receipt_number = String(required=True)
    updated_at = DateTime(required=True)
