"""Delivery aggregate — one driver's run carrying a consolidation.

State Machine:
    ASSIGNED → IN_PROGRESS → COMPLETED
    {ASSIGNED, IN_PROGRESS} → CANCELLED

Start data is written only when the run starts and end data only when it
completes. A run can neither be started twice nor ended unless in progress.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, HasMany, Identifier, String, Text, ValueObject

from logistics.delivery.events import (
    DeliveryAssigned,
    DeliveryCancelled,
    DeliveryCompleted,
    DeliveryStarted,
    DriverLocationUpdated,
)
from logistics.domain import logistics
from logistics.shared.errors import InvalidStateError
from logistics.shared.location import GeoLocation


class DeliveryStatus(Enum):
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ACTIVE_STATUSES = (DeliveryStatus.ASSIGNED, DeliveryStatus.IN_PROGRESS)


@logistics.entity(part_of="Delivery")
class LocationPing:
    """A position reported during the run."""

    latitude = Float(required=True, min_value=-90.0, max_value=90.0)
    longitude = Float(required=True, min_value=-180.0, max_value=180.0)
    address = String(max_length=500)
    recorded_at = DateTime(required=True)


@logistics.aggregate
class Delivery:
    consolidation_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    status = String(
        max_length=50,
        choices=DeliveryStatus,
        default=DeliveryStatus.ASSIGNED.value,
    )
    assigned_at = DateTime()
    start_time = DateTime()
    end_time = DateTime()
    start_location = ValueObject(GeoLocation)
    end_location = ValueObject(GeoLocation)
    current_location = ValueObject(GeoLocation)
    location_history = HasMany(LocationPing)
    estimated_delivery_time = DateTime()
    notes = Text()
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def assign(cls, consolidation_id: str, driver_id: str, estimated_delivery_time: datetime | None = None):
        now = datetime.now(UTC)
        delivery = cls(
            consolidation_id=consolidation_id,
            driver_id=driver_id,
            status=DeliveryStatus.ASSIGNED.value,
            assigned_at=now,
            estimated_delivery_time=estimated_delivery_time,
            created_at=now,
            updated_at=now,
        )
        delivery.raise_(
            DeliveryAssigned(
                delivery_id=str(delivery.id),
                consolidation_id=consolidation_id,
                driver_id=driver_id,
                assigned_at=now,
            )
        )
        return delivery

    @property
    def is_active(self) -> bool:
        return DeliveryStatus(self.status) in ACTIVE_STATUSES

    def _track(self, location: GeoLocation, at: datetime) -> GeoLocation:
        """Make ``location`` the current position and log it."""
        fix = GeoLocation(
            latitude=location.latitude,
            longitude=location.longitude,
            address=location.address,
            recorded_at=at,
        )
        self.current_location = fix
        self.add_location_history(
            LocationPing(
                latitude=location.latitude,
                longitude=location.longitude,
                address=location.address,
                recorded_at=at,
            )
        )
        return fix

    def start(self, location: GeoLocation) -> None:
        current = DeliveryStatus(self.status)
        if current == DeliveryStatus.IN_PROGRESS:
            raise InvalidStateError({"status": ["Delivery already in progress"]})
        if current != DeliveryStatus.ASSIGNED:
            raise InvalidStateError({"status": [f"Cannot start a delivery that is {current.value}"]})

        now = datetime.now(UTC)
        self.status = DeliveryStatus.IN_PROGRESS.value
        self.start_time = now
        self.start_location = self._track(location, now)
        self.updated_at = now
        self.raise_(
            DeliveryStarted(
                delivery_id=str(self.id),
                consolidation_id=str(self.consolidation_id),
                driver_id=str(self.driver_id),
                latitude=location.latitude,
                longitude=location.longitude,
                address=location.address or "",
                started_at=now,
            )
        )

    def update_location(self, location: GeoLocation) -> None:
        if DeliveryStatus(self.status) != DeliveryStatus.IN_PROGRESS:
            raise InvalidStateError({"status": ["Delivery is not in progress"]})

        now = datetime.now(UTC)
        self._track(location, now)
        self.updated_at = now
        self.raise_(
            DriverLocationUpdated(
                delivery_id=str(self.id),
                driver_id=str(self.driver_id),
                latitude=location.latitude,
                longitude=location.longitude,
                address=location.address or "",
                recorded_at=now,
            )
        )

    def complete(self, location: GeoLocation, notes: str | None = None) -> None:
        if DeliveryStatus(self.status) != DeliveryStatus.IN_PROGRESS:
            raise InvalidStateError({"status": ["Delivery is not in progress"]})

        now = datetime.now(UTC)
        self.status = DeliveryStatus.COMPLETED.value
        self.end_time = now
        self.end_location = self._track(location, now)
        if notes:
            self.notes = notes
        self.updated_at = now
        self.raise_(
            DeliveryCompleted(
                delivery_id=str(self.id),
                consolidation_id=str(self.consolidation_id),
                driver_id=str(self.driver_id),
                latitude=location.latitude,
                longitude=location.longitude,
                address=location.address or "",
                completed_at=now,
            )
        )

    def cancel(self, reason: str) -> None:
        current = DeliveryStatus(self.status)
        if current not in ACTIVE_STATUSES:
            raise InvalidStateError({"status": [f"Cannot cancel a delivery that is {current.value}"]})

        now = datetime.now(UTC)
        self.status = DeliveryStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.updated_at = now
        self.raise_(
            DeliveryCancelled(
                delivery_id=str(self.id),
                consolidation_id=str(self.consolidation_id),
                driver_id=str(self.driver_id),
                reason=reason,
                cancelled_at=now,
            )
        )
