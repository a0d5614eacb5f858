"""Delivery domain events."""

from protean.fields import DateTime, Float, Identifier, String

from logistics.domain import logistics


@logistics.event(part_of="Delivery")
class DeliveryAssigned:
    """A delivery run was created for a driver."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    consolidation_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    assigned_at = DateTime(required=True)


@logistics.event(part_of="Delivery")
class DeliveryStarted:
    """The driver set off."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    consolidation_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    address = String()
    started_at = DateTime(required=True)


@logistics.event(part_of="Delivery")
class DriverLocationUpdated:
    """The driver reported a new position mid-run."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    address = String()
    recorded_at = DateTime(required=True)


@logistics.event(part_of="Delivery")
class DeliveryCompleted:
    """The driver finished the run."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    consolidation_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    address = String()
    completed_at = DateTime(required=True)


@logistics.event(part_of="Delivery")
class DeliveryCancelled:
    """The run was called off before completion."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    consolidation_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    reason = String(required=True)
    cancelled_at = DateTime(required=True)
