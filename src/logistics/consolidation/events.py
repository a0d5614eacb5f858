"""Consolidation domain events.

Every event carries the creator and the tracking identifiers so that
downstream handlers (notification fan-out first of all) never have to load
the consolidation again.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from logistics.domain import logistics


@logistics.event(part_of="Consolidation")
class ConsolidationCreated:
    """A new consolidation was opened."""

    __version__ = 1

    consolidation_id = Identifier(required=True)
    reference_code = String(required=True)
    master_tracking_number = String(required=True)
    created_by = Identifier(required=True)
    warehouse_id = String()
    status = String(required=True)
    parcel_count = Integer(default=0)
    created_at = DateTime(required=True)


@logistics.event(part_of="Consolidation")
class ConsolidationStatusChanged:
    """A consolidation moved (or re-confirmed) its status."""

    __version__ = 1

    consolidation_id = Identifier(required=True)
    reference_code = String(required=True)
    master_tracking_number = String(required=True)
    old_status = String(required=True)
    new_status = String(required=True)
    note = String()
    location = String()
    created_by = Identifier(required=True)
    assigned_driver = Identifier()
    changed_at = DateTime(required=True)


@logistics.event(part_of="Consolidation")
class DriverAssigned:
    """A driver was put in charge of transporting the consolidation."""

    __version__ = 1

    consolidation_id = Identifier(required=True)
    reference_code = String(required=True)
    master_tracking_number = String(required=True)
    driver_id = Identifier(required=True)
    previous_driver_id = Identifier()
    created_by = Identifier(required=True)
    assigned_at = DateTime(required=True)


@logistics.event(part_of="Consolidation")
class ParcelAdded:
    """A parcel joined the consolidation."""

    __version__ = 1

    consolidation_id = Identifier(required=True)
    parcel_id = Identifier(required=True)
    parcel_count = Integer(required=True)
    added_at = DateTime(required=True)


@logistics.event(part_of="Consolidation")
class ParcelRemoved:
    """A parcel left the consolidation."""

    __version__ = 1

    consolidation_id = Identifier(required=True)
    parcel_id = Identifier(required=True)
    parcel_count = Integer(required=True)
    removed_at = DateTime(required=True)


@logistics.event(part_of="Consolidation")
class ConsolidationDetailsUpdated:
    """Descriptive details (reference code, warehouse, notes) were edited."""

    __version__ = 1

    consolidation_id = Identifier(required=True)
    changed_fields = Text(required=True)  # JSON list of field names
    updated_at = DateTime(required=True)


@logistics.event(part_of="Consolidation")
class ConsolidationDispatched:
    """The assigned driver started the delivery run."""

    __version__ = 1

    consolidation_id = Identifier(required=True)
    reference_code = String(required=True)
    master_tracking_number = String(required=True)
    delivery_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    created_by = Identifier(required=True)
    start_location = String()
    dispatched_at = DateTime(required=True)


@logistics.event(part_of="Consolidation")
class ConsolidationDelivered:
    """The delivery run finished and the consolidation reached its destination."""

    __version__ = 1

    consolidation_id = Identifier(required=True)
    reference_code = String(required=True)
    master_tracking_number = String(required=True)
    delivery_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    created_by = Identifier(required=True)
    end_location = String()
    delivered_at = DateTime(required=True)
