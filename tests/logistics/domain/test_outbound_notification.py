"""Tests for the OutboundNotification aggregate."""

import pytest
from protean.exceptions import ValidationError

from logistics.notification.events import NotificationFailed, NotificationQueued, NotificationRetried
from logistics.notification.notification import NotificationStatus, OutboundNotification
from logistics.shared.errors import InvalidStateError


def _make_notification(**overrides):
    defaults = {
        "recipient_id": "user-001",
        "title": "Consolidation Created",
        "message": "Consolidation REF-001 has been created.",
        "channels": ["in_app", "email"],
        "entity_type": "Consolidation",
        "entity_id": "cons-001",
    }
    defaults.update(overrides)
    return OutboundNotification.queue(**defaults)


class TestQueue:
    def test_starts_pending_with_no_attempts(self):
        notification = _make_notification()
        assert notification.status == NotificationStatus.PENDING.value
        assert notification.attempts == 0
        assert isinstance(notification._events[-1], NotificationQueued)

    def test_requires_a_channel(self):
        with pytest.raises(ValidationError) as exc:
            _make_notification(channels=[])
        assert "channels" in exc.value.messages

    def test_rejects_unknown_channel(self):
        with pytest.raises(ValidationError):
            _make_notification(channels=["in_app", "pigeon"])

    def test_payload_shape(self):
        notification = _make_notification()
        assert notification.payload() == {
            "userId": "user-001",
            "type": "consolidation_update",
            "title": "Consolidation Created",
            "message": "Consolidation REF-001 has been created.",
            "entityType": "Consolidation",
            "entityId": "cons-001",
            "channels": ["in_app", "email"],
        }


class TestOutcome:
    def test_mark_sent(self):
        notification = _make_notification()
        notification.mark_sent()
        assert notification.status == "sent"
        assert notification.attempts == 1
        assert notification.sent_at is not None

    def test_mark_failed_records_reason(self):
        notification = _make_notification()
        notification.mark_failed("HTTP 503")
        assert notification.status == "failed"
        assert notification.last_error == "HTTP 503"
        assert notification.attempts == 1
        assert isinstance(notification._events[-1], NotificationFailed)

    def test_sent_is_terminal(self):
        notification = _make_notification()
        notification.mark_sent()
        with pytest.raises(InvalidStateError):
            notification.mark_failed("late failure")


class TestRetry:
    def test_retry_puts_failed_back_to_pending(self):
        notification = _make_notification()
        notification.mark_failed("timeout")
        assert notification.can_retry
        notification.retry()
        assert notification.status == "pending"
        assert isinstance(notification._events[-1], NotificationRetried)

    def test_only_failed_can_be_retried(self):
        notification = _make_notification()
        with pytest.raises(InvalidStateError):
            notification.retry()

    def test_attempts_are_capped(self):
        notification = _make_notification(max_attempts=2)
        notification.mark_failed("timeout")
        notification.retry()
        notification.mark_failed("timeout")
        assert not notification.can_retry
        with pytest.raises(InvalidStateError) as exc:
            notification.retry()
        assert "attempts" in exc.value.messages
