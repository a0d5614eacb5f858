"""OutboundNotification aggregate — the notification outbox.

A row is written for every recipient a state change should reach. The
dispatcher then delivers it to the notification service and records the
outcome, so a slow or failing notification service never affects the change
that triggered it.

State Machine:
    PENDING → SENT
    PENDING → FAILED → (retry) → PENDING
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from logistics.domain import logistics
from logistics.notification.events import (
    NotificationFailed,
    NotificationQueued,
    NotificationRetried,
    NotificationSent,
)
from logistics.shared.errors import InvalidStateError

DEFAULT_MAX_ATTEMPTS = 3
NOTIFICATION_TYPE = "consolidation_update"


class NotificationChannel(Enum):
    IN_APP = "in_app"
    EMAIL = "email"
    PUSH = "push"
    SMS = "sms"


class NotificationStatus(Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {NotificationStatus.SENT, NotificationStatus.FAILED},
    NotificationStatus.FAILED: {NotificationStatus.PENDING},  # via retry
    NotificationStatus.SENT: set(),  # terminal
}


@logistics.aggregate
class OutboundNotification:
    """One notification to one recipient over one or more channels."""

    # Recipient and subject entity
    recipient_id: Identifier(required=True)
    entity_type: String(required=True, max_length=50)
    entity_id: Identifier(required=True)

    # Content
    notification_type: String(max_length=50, default=NOTIFICATION_TYPE)
    title: String(required=True, max_length=200)
    message: Text(required=True)
    channels: Text(required=True)  # JSON list of NotificationChannel values

    # Correlation
    source_event: String(max_length=200)

    # Delivery tracking
    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    attempts: Integer(default=0)
    max_attempts: Integer(default=DEFAULT_MAX_ATTEMPTS)
    last_error: String(max_length=1000)
    sent_at: DateTime()

    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def queue(
        cls,
        recipient_id: str,
        title: str,
        message: str,
        channels: list[str],
        entity_type: str,
        entity_id: str,
        source_event: str | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if not channels:
            raise ValidationError({"channels": ["At least one channel is required"]})
        known = {c.value for c in NotificationChannel}
        unknown = [c for c in channels if c not in known]
        if unknown:
            raise ValidationError({"channels": [f"Unknown channel(s): {', '.join(unknown)}"]})

        now = datetime.now(UTC)
        notification = cls(
            recipient_id=recipient_id,
            title=title,
            message=message,
            channels=json.dumps(list(channels)),
            entity_type=entity_type,
            entity_id=entity_id,
            source_event=source_event,
            status=NotificationStatus.PENDING.value,
            attempts=0,
            max_attempts=max_attempts,
            created_at=now,
            updated_at=now,
        )
        notification.raise_(
            NotificationQueued(
                notification_id=str(notification.id),
                recipient_id=recipient_id,
                entity_type=entity_type,
                entity_id=entity_id,
                source_event=source_event,
                queued_at=now,
            )
        )
        return notification

    def channel_list(self) -> list[str]:
        return json.loads(self.channels) if self.channels else []

    def payload(self) -> dict:
        """Request body understood by the notification service."""
        return {
            "userId": str(self.recipient_id),
            "type": self.notification_type,
            "title": self.title,
            "message": self.message,
            "entityType": self.entity_type,
            "entityId": str(self.entity_id),
            "channels": self.channel_list(),
        }

    def _assert_can_transition(self, target: NotificationStatus) -> None:
        current = NotificationStatus(self.status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStateError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

    def mark_sent(self) -> None:
        self._assert_can_transition(NotificationStatus.SENT)
        now = datetime.now(UTC)
        self.status = NotificationStatus.SENT.value
        self.attempts = (self.attempts or 0) + 1
        self.last_error = None
        self.sent_at = now
        self.updated_at = now
        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                attempts=self.attempts,
                sent_at=now,
            )
        )

    def mark_failed(self, reason: str) -> None:
        self._assert_can_transition(NotificationStatus.FAILED)
        now = datetime.now(UTC)
        self.status = NotificationStatus.FAILED.value
        self.attempts = (self.attempts or 0) + 1
        self.last_error = reason[:1000]
        self.updated_at = now
        self.raise_(
            NotificationFailed(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                reason=self.last_error,
                attempts=self.attempts,
                max_attempts=self.max_attempts,
                failed_at=now,
            )
        )

    @property
    def can_retry(self) -> bool:
        return NotificationStatus(self.status) == NotificationStatus.FAILED and self.attempts < self.max_attempts

    def retry(self) -> None:
        if NotificationStatus(self.status) != NotificationStatus.FAILED:
            raise InvalidStateError({"status": ["Only failed notifications can be retried"]})
        if self.attempts >= self.max_attempts:
            raise InvalidStateError({"attempts": ["Maximum delivery attempts reached"]})

        now = datetime.now(UTC)
        self.status = NotificationStatus.PENDING.value
        self.updated_at = now
        self.raise_(
            NotificationRetried(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                attempts=self.attempts,
                retried_at=now,
            )
        )
