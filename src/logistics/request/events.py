"""Customer request events."""

from protean.fields import DateTime, Identifier, String

from logistics.domain import logistics


@logistics.event(part_of="CustomerRequest")
class RequestSubmitted:
    """A customer asked for their parcels to be consolidated."""

    __version__ = 1

    request_id = Identifier(required=True)
    request_number = String(required=True)
    customer_id = Identifier(required=True)
    submitted_at = DateTime(required=True)


@logistics.event(part_of="CustomerRequest")
class RequestStatusChanged:
    """A request was approved, rejected or processed."""

    __version__ = 1

    request_id = Identifier(required=True)
    request_number = String(required=True)
    customer_id = Identifier(required=True)
    old_status = String(required=True)
    new_status = String(required=True)
    processed_by = Identifier()
    consolidation_id = Identifier()
    notes = String()
    changed_at = DateTime(required=True)
