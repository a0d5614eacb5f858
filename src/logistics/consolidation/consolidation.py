"""Consolidation aggregate — a batch of parcels shipped under one master
tracking number.

State Machine:
    PENDING → CONSOLIDATED → ASSIGNED_TO_DRIVER → IN_TRANSIT ⇄ OUT_FOR_DELIVERY → DELIVERED
    PENDING → ASSIGNED_TO_DRIVER
    {PENDING, CONSOLIDATED, ASSIGNED_TO_DRIVER} → CANCELLED

In-flight states may be re-entered to record progress (a new note or
location). Every transition appends exactly one status history entry.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from logistics.consolidation.events import (
    ConsolidationCreated,
    ConsolidationDelivered,
    ConsolidationDetailsUpdated,
    ConsolidationDispatched,
    ConsolidationStatusChanged,
    DriverAssigned,
    ParcelAdded,
    ParcelRemoved,
)
from logistics.domain import logistics
from logistics.shared.errors import InvalidStateError
from logistics.shared.location import GeoLocation


class ConsolidationStatus(Enum):
    PENDING = "pending"
    CONSOLIDATED = "consolidated"
    ASSIGNED_TO_DRIVER = "assigned_to_driver"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    ConsolidationStatus.PENDING: {
        ConsolidationStatus.CONSOLIDATED,
        ConsolidationStatus.ASSIGNED_TO_DRIVER,
        ConsolidationStatus.CANCELLED,
    },
    ConsolidationStatus.CONSOLIDATED: {
        ConsolidationStatus.ASSIGNED_TO_DRIVER,
        ConsolidationStatus.CANCELLED,
    },
    ConsolidationStatus.ASSIGNED_TO_DRIVER: {
        ConsolidationStatus.ASSIGNED_TO_DRIVER,  # re-assignment
        ConsolidationStatus.IN_TRANSIT,
        ConsolidationStatus.CANCELLED,
    },
    ConsolidationStatus.IN_TRANSIT: {
        ConsolidationStatus.IN_TRANSIT,
        ConsolidationStatus.OUT_FOR_DELIVERY,
        ConsolidationStatus.DELIVERED,
    },
    ConsolidationStatus.OUT_FOR_DELIVERY: {
        ConsolidationStatus.OUT_FOR_DELIVERY,
        ConsolidationStatus.IN_TRANSIT,
        ConsolidationStatus.DELIVERED,
    },
    ConsolidationStatus.DELIVERED: set(),  # terminal
    ConsolidationStatus.CANCELLED: set(),  # terminal
}


def parse_status(value: str) -> ConsolidationStatus:
    try:
        return ConsolidationStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ConsolidationStatus)
        raise ValidationError({"status": [f"Unknown status '{value}'. Expected one of: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@logistics.entity(part_of="Consolidation")
class StatusHistoryEntry:
    """One step in the consolidation's status log. Never edited once written."""

    position = Integer(required=True, min_value=1)
    status = String(required=True, max_length=50, choices=ConsolidationStatus)
    timestamp = DateTime(required=True)
    note = String(max_length=1000)
    location = ValueObject(GeoLocation)


@logistics.entity(part_of="Consolidation")
class ConsolidatedParcel:
    """Membership of a parcel in the consolidation."""

    parcel_id = Identifier(required=True)
    added_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@logistics.aggregate
class Consolidation:
    reference_code = String(required=True, max_length=100, unique=True)
    master_tracking_number = String(required=True, max_length=50, unique=True)
    status = String(
        max_length=50,
        choices=ConsolidationStatus,
        default=ConsolidationStatus.PENDING.value,
    )
    status_history = HasMany(StatusHistoryEntry)
    parcels = HasMany(ConsolidatedParcel)
    created_by = Identifier(required=True)
    assigned_driver = Identifier()
    warehouse_id = Identifier()
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        reference_code: str,
        created_by: str,
        master_tracking_number: str,
        warehouse_id: str | None = None,
        notes: str | None = None,
        parcel_ids: list[str] | None = None,
    ):
        """Open a consolidation in PENDING status with its first history entry."""
        now = datetime.now(UTC)
        consolidation = cls(
            reference_code=reference_code,
            master_tracking_number=master_tracking_number,
            created_by=created_by,
            warehouse_id=warehouse_id,
            notes=notes,
            status=ConsolidationStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        consolidation._append_history(ConsolidationStatus.PENDING, now, note="Consolidation created")
        for parcel_id in dict.fromkeys(parcel_ids or []):
            consolidation.add_parcels(ConsolidatedParcel(parcel_id=parcel_id, added_at=now))

        consolidation.raise_(
            ConsolidationCreated(
                consolidation_id=str(consolidation.id),
                reference_code=reference_code,
                master_tracking_number=master_tracking_number,
                created_by=created_by,
                warehouse_id=warehouse_id or "",
                status=consolidation.status,
                parcel_count=len(consolidation.parcels or []),
                created_at=now,
            )
        )
        return consolidation

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: ConsolidationStatus) -> None:
        current = ConsolidationStatus(self.status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStateError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

    def _append_history(
        self,
        status: ConsolidationStatus,
        at: datetime,
        note: str | None = None,
        location: GeoLocation | None = None,
    ) -> None:
        last = self.latest_history_entry()
        # History timestamps never go backwards, even if the clock does.
        if last is not None and last.timestamp and at < last.timestamp:
            at = last.timestamp
        self.add_status_history(
            StatusHistoryEntry(
                position=(last.position if last else 0) + 1,
                status=status.value,
                timestamp=at,
                note=note,
                location=location,
            )
        )

    def _move_to(
        self,
        target: ConsolidationStatus,
        note: str | None = None,
        location: GeoLocation | None = None,
    ) -> tuple[str, datetime]:
        self._assert_can_transition(target)
        old_status = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self._append_history(target, now, note=note, location=location)
        self.updated_at = now
        return old_status, now

    def history(self) -> list[StatusHistoryEntry]:
        """Status history in the order it was written."""
        return sorted(self.status_history or [], key=lambda entry: entry.position)

    def latest_history_entry(self) -> StatusHistoryEntry | None:
        entries = self.history()
        return entries[-1] if entries else None

    def parcel_ids(self) -> list[str]:
        return [str(p.parcel_id) for p in (self.parcels or [])]

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def transition_to(self, status: str, note: str | None = None, location: GeoLocation | None = None) -> None:
        """Move to ``status`` if the transition table allows it."""
        target = parse_status(status)
        old_status, now = self._move_to(target, note=note, location=location)
        self.raise_(
            ConsolidationStatusChanged(
                consolidation_id=str(self.id),
                reference_code=self.reference_code,
                master_tracking_number=self.master_tracking_number,
                old_status=old_status,
                new_status=target.value,
                note=note or "",
                location=location.describe() if location else "",
                created_by=str(self.created_by),
                assigned_driver=str(self.assigned_driver) if self.assigned_driver else None,
                changed_at=now,
            )
        )

    def assign_driver(self, driver_id: str) -> None:
        """Hand the consolidation to a driver. Re-assigning replaces the driver."""
        previous_driver = str(self.assigned_driver) if self.assigned_driver else None
        _, now = self._move_to(ConsolidationStatus.ASSIGNED_TO_DRIVER, note="Driver assigned")
        self.assigned_driver = driver_id
        self.raise_(
            DriverAssigned(
                consolidation_id=str(self.id),
                reference_code=self.reference_code,
                master_tracking_number=self.master_tracking_number,
                driver_id=driver_id,
                previous_driver_id=previous_driver,
                created_by=str(self.created_by),
                assigned_at=now,
            )
        )

    def mark_dispatched(self, delivery_id: str, driver_id: str, location: GeoLocation) -> None:
        """The driver set off with the consolidation."""
        _, now = self._move_to(ConsolidationStatus.IN_TRANSIT, note="Delivery started", location=location)
        self.raise_(
            ConsolidationDispatched(
                consolidation_id=str(self.id),
                reference_code=self.reference_code,
                master_tracking_number=self.master_tracking_number,
                delivery_id=delivery_id,
                driver_id=driver_id,
                created_by=str(self.created_by),
                start_location=location.describe(),
                dispatched_at=now,
            )
        )

    def mark_delivered(
        self,
        delivery_id: str,
        driver_id: str,
        location: GeoLocation,
        note: str | None = None,
    ) -> None:
        """The driver handed the consolidation over at its destination."""
        _, now = self._move_to(
            ConsolidationStatus.DELIVERED,
            note=note or "Delivery completed",
            location=location,
        )
        self.raise_(
            ConsolidationDelivered(
                consolidation_id=str(self.id),
                reference_code=self.reference_code,
                master_tracking_number=self.master_tracking_number,
                delivery_id=delivery_id,
                driver_id=driver_id,
                created_by=str(self.created_by),
                end_location=location.describe(),
                delivered_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Parcels
    # -------------------------------------------------------------------
    def add_parcel(self, parcel_id: str) -> bool:
        """Add a parcel. Returns False when it was already a member."""
        if parcel_id in self.parcel_ids():
            return False

        now = datetime.now(UTC)
        self.add_parcels(ConsolidatedParcel(parcel_id=parcel_id, added_at=now))
        self.updated_at = now
        self.raise_(
            ParcelAdded(
                consolidation_id=str(self.id),
                parcel_id=parcel_id,
                parcel_count=len(self.parcels),
                added_at=now,
            )
        )
        return True

    def remove_parcel(self, parcel_id: str) -> bool:
        """Remove a parcel. Returns False when it was not a member."""
        membership = next((p for p in (self.parcels or []) if str(p.parcel_id) == parcel_id), None)
        if membership is None:
            return False

        now = datetime.now(UTC)
        self.remove_parcels(membership)
        self.updated_at = now
        self.raise_(
            ParcelRemoved(
                consolidation_id=str(self.id),
                parcel_id=parcel_id,
                parcel_count=len(self.parcels or []),
                removed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_details(
        self,
        reference_code: str | None = None,
        warehouse_id: str | None = None,
        notes: str | None = None,
    ) -> list[str]:
        """Edit descriptive fields. Status and history are not editable here."""
        changes = {
            "reference_code": reference_code,
            "warehouse_id": warehouse_id,
            "notes": notes,
        }
        changed = []
        for field_name, value in changes.items():
            if value is None:
                continue
            current = getattr(self, field_name)
            if (str(current) if current is not None else None) != value:
                setattr(self, field_name, value)
                changed.append(field_name)

        if changed:
            now = datetime.now(UTC)
            self.updated_at = now
            self.raise_(
                ConsolidationDetailsUpdated(
                    consolidation_id=str(self.id),
                    changed_fields=json.dumps(changed),
                    updated_at=now,
                )
            )
        return changed
