"""Tests for the Delivery aggregate lifecycle."""

import pytest

from logistics.delivery.delivery import Delivery, DeliveryStatus
from logistics.delivery.events import (
    DeliveryCancelled,
    DeliveryCompleted,
    DeliveryStarted,
    DriverLocationUpdated,
)
from logistics.shared.errors import InvalidStateError
from logistics.shared.location import GeoLocation


def _depot():
    return GeoLocation(latitude=13.7563, longitude=100.5018, address="Central depot")


def _drop():
    return GeoLocation(latitude=13.7367, longitude=100.5231, address="Silom Rd 12")


def _make_delivery():
    delivery = Delivery.assign(consolidation_id="cons-001", driver_id="driver-001")
    delivery._events.clear()
    return delivery


def _started():
    delivery = _make_delivery()
    delivery.start(_depot())
    delivery._events.clear()
    return delivery


class TestAssign:
    def test_new_delivery_is_assigned_and_active(self):
        delivery = _make_delivery()
        assert delivery.status == DeliveryStatus.ASSIGNED.value
        assert delivery.is_active
        assert delivery.start_time is None
        assert delivery.end_time is None


class TestStart:
    def test_start_records_time_and_location(self):
        delivery = _make_delivery()
        delivery.start(_depot())
        assert delivery.status == "in_progress"
        assert delivery.start_time is not None
        assert delivery.start_location.address == "Central depot"
        assert delivery.current_location.latitude == _depot().latitude
        assert len(delivery.location_history) == 1
        assert isinstance(delivery._events[-1], DeliveryStarted)

    def test_cannot_start_twice(self):
        delivery = _started()
        with pytest.raises(InvalidStateError) as exc:
            delivery.start(_depot())
        assert "Delivery already in progress" in exc.value.messages["status"]

    def test_cannot_start_cancelled_delivery(self):
        delivery = _make_delivery()
        delivery.cancel("Vehicle breakdown")
        with pytest.raises(InvalidStateError):
            delivery.start(_depot())


class TestLocationUpdates:
    def test_ping_moves_current_location(self):
        delivery = _started()
        delivery.update_location(_drop())
        assert delivery.current_location.address == "Silom Rd 12"
        assert len(delivery.location_history) == 2
        assert isinstance(delivery._events[-1], DriverLocationUpdated)

    def test_ping_requires_run_in_progress(self):
        delivery = _make_delivery()
        with pytest.raises(InvalidStateError):
            delivery.update_location(_drop())


class TestComplete:
    def test_complete_records_end_data(self):
        delivery = _started()
        delivery.complete(_drop(), notes="Signed by reception")
        assert delivery.status == "completed"
        assert delivery.end_time >= delivery.start_time
        assert delivery.end_location.address == "Silom Rd 12"
        assert delivery.notes == "Signed by reception"
        assert not delivery.is_active
        assert isinstance(delivery._events[-1], DeliveryCompleted)

    def test_cannot_end_before_start(self):
        delivery = _make_delivery()
        with pytest.raises(InvalidStateError) as exc:
            delivery.complete(_drop())
        assert "Delivery is not in progress" in exc.value.messages["status"]
        assert delivery.end_time is None

    def test_cannot_end_twice(self):
        delivery = _started()
        delivery.complete(_drop())
        with pytest.raises(InvalidStateError):
            delivery.complete(_drop())


class TestCancel:
    def test_cancel_in_progress_run(self):
        delivery = _started()
        delivery.cancel("Road closed")
        assert delivery.status == "cancelled"
        assert delivery.cancellation_reason == "Road closed"
        assert isinstance(delivery._events[-1], DeliveryCancelled)

    def test_cannot_cancel_completed_run(self):
        delivery = _started()
        delivery.complete(_drop())
        with pytest.raises(InvalidStateError):
            delivery.cancel("Too late")
