"""Notification outbox events."""

from protean.fields import DateTime, Identifier, Integer, String

from logistics.domain import logistics


@logistics.event(part_of="OutboundNotification")
class NotificationQueued:
    """A notification was written to the outbox and awaits dispatch."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    entity_type: String(required=True)
    entity_id: Identifier(required=True)
    source_event: String()
    queued_at: DateTime(required=True)


@logistics.event(part_of="OutboundNotification")
class NotificationSent:
    """The notification service accepted the notification."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    attempts: Integer(required=True)
    sent_at: DateTime(required=True)


@logistics.event(part_of="OutboundNotification")
class NotificationFailed:
    """A dispatch attempt failed."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    reason: String(required=True)
    attempts: Integer(required=True)
    max_attempts: Integer(required=True)
    failed_at: DateTime(required=True)


@logistics.event(part_of="OutboundNotification")
class NotificationRetried:
    """A failed notification was put back in the queue."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    attempts: Integer(required=True)
    retried_at: DateTime(required=True)
