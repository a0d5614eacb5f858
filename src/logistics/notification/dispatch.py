"""Notification dispatcher — delivers queued outbox rows.

Reacts to NotificationQueued and NotificationRetried, hands the payload to
the configured gateway and records the outcome. Delivery problems are logged
and stored on the row; they never propagate.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from logistics.domain import logistics
from logistics.notification.events import NotificationQueued, NotificationRetried
from logistics.notification.gateway import NotificationDeliveryError, get_gateway
from logistics.notification.notification import NotificationStatus, OutboundNotification

logger = structlog.get_logger(__name__)


def deliver(notification_id: str) -> bool:
    """Send one pending notification. Returns True when it went out."""
    repo = current_domain.repository_for(OutboundNotification)
    try:
        notification = repo.get(notification_id)
    except Exception:
        logger.error("Failed to load notification for dispatch", notification_id=notification_id)
        return False

    if NotificationStatus(notification.status) != NotificationStatus.PENDING:
        logger.info(
            "Notification not pending, skipping dispatch",
            notification_id=notification_id,
            status=notification.status,
        )
        return False

    try:
        get_gateway().send(notification.payload())
        notification.mark_sent()
    except NotificationDeliveryError as exc:
        notification.mark_failed(exc.reason)
        logger.warning(
            "Notification delivery failed",
            notification_id=notification_id,
            recipient_id=str(notification.recipient_id),
            status_code=exc.status_code,
            error=exc.reason,
            attempts=notification.attempts,
        )
    except Exception as exc:
        notification.mark_failed(str(exc) or type(exc).__name__)
        logger.error(
            "Notification dispatch crashed",
            notification_id=notification_id,
            error=str(exc),
            exc_info=True,
        )

    repo.add(notification)
    return NotificationStatus(notification.status) == NotificationStatus.SENT


@logistics.event_handler(part_of=OutboundNotification)
class NotificationDispatcher:
    @handle(NotificationQueued)
    def on_queued(self, event: NotificationQueued) -> None:
        deliver(str(event.notification_id))

    @handle(NotificationRetried)
    def on_retried(self, event: NotificationRetried) -> None:
        deliver(str(event.notification_id))
