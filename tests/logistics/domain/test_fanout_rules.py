"""Tests for who is notified about which consolidation change."""

from logistics.consolidation.consolidation import Consolidation
from logistics.notification.fanout import recipients_for
from logistics.notification.templates import (
    ConsolidationCreatedTemplate,
    DeliveryCompletedTemplate,
    DeliveryStartedTemplate,
    DriverAssignedTemplate,
    DriverAssignmentTemplate,
    DriverStatusUpdateTemplate,
    StatusUpdateTemplate,
)
from logistics.shared.location import GeoLocation


def _make_consolidation():
    return Consolidation.create(
        reference_code="REF-FAN",
        created_by="creator-1",
        master_tracking_number="MTN-20240115-0003",
    )


def _last_event(consolidation):
    return consolidation._events[-1]


def _location():
    return GeoLocation(latitude=13.7, longitude=100.5, address="Hub A")


class TestCreated:
    def test_creator_is_told(self):
        c = _make_consolidation()
        assert recipients_for(_last_event(c)) == [("creator-1", ConsolidationCreatedTemplate)]


class TestStatusChanged:
    def test_creator_told_on_real_change(self):
        c = _make_consolidation()
        c.transition_to("consolidated")
        assert recipients_for(_last_event(c)) == [("creator-1", StatusUpdateTemplate)]

    def test_driver_and_creator_told_when_in_transit(self):
        c = _make_consolidation()
        c.assign_driver("driver-7")
        c.transition_to("in_transit")
        assert recipients_for(_last_event(c)) == [
            ("creator-1", StatusUpdateTemplate),
            ("driver-7", DriverStatusUpdateTemplate),
        ]

    def test_reconfirming_status_only_reaches_driver(self):
        c = _make_consolidation()
        c.assign_driver("driver-7")
        c.transition_to("in_transit")
        c.transition_to("in_transit", note="Checkpoint")
        assert recipients_for(_last_event(c)) == [("driver-7", DriverStatusUpdateTemplate)]

    def test_no_driver_no_driver_alert(self):
        c = _make_consolidation()
        c.transition_to("cancelled")
        recipients = recipients_for(_last_event(c))
        assert [r for r, _ in recipients] == ["creator-1"]


class TestDriverAssigned:
    def test_driver_and_creator(self):
        c = _make_consolidation()
        c.assign_driver("driver-7")
        assert recipients_for(_last_event(c)) == [
            ("driver-7", DriverAssignmentTemplate),
            ("creator-1", DriverAssignedTemplate),
        ]


class TestDeliveryMilestones:
    def test_dispatch_reaches_creator(self):
        c = _make_consolidation()
        c.assign_driver("driver-7")
        c.mark_dispatched("del-1", "driver-7", _location())
        assert recipients_for(_last_event(c)) == [("creator-1", DeliveryStartedTemplate)]

    def test_delivery_reaches_creator_over_sms_too(self):
        c = _make_consolidation()
        c.assign_driver("driver-7")
        c.mark_dispatched("del-1", "driver-7", _location())
        c.mark_delivered("del-1", "driver-7", _location())
        recipients = recipients_for(_last_event(c))
        assert recipients == [("creator-1", DeliveryCompletedTemplate)]
        assert "sms" in DeliveryCompletedTemplate.channels


class TestTemplates:
    def test_status_update_message_mentions_both_statuses(self):
        rendered = StatusUpdateTemplate.render(
            {"reference_code": "REF-1", "old_status": "in_transit", "new_status": "out_for_delivery"}
        )
        assert rendered["title"] == "Consolidation Status Updated"
        assert "in transit" in rendered["message"]
        assert "out for delivery" in rendered["message"]

    def test_delivery_started_includes_location(self):
        rendered = DeliveryStartedTemplate.render({"reference_code": "REF-1", "location": "Hub A"})
        assert "Hub A" in rendered["message"]
