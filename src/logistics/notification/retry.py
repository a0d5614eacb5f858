"""Retry commands — put failed notifications back in the queue."""

import structlog
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from logistics.domain import logistics
from logistics.notification.notification import OutboundNotification
from logistics.notification.repository import DEFAULT_PAGE_SIZE

logger = structlog.get_logger(__name__)


@logistics.command(part_of="OutboundNotification")
class RetryNotification:
    notification_id: Identifier(required=True)


@logistics.command(part_of="OutboundNotification")
class RetryFailedNotifications:
    """Retry every failed notification that has attempts left."""

    batch_size: Integer(default=DEFAULT_PAGE_SIZE, min_value=1)


@logistics.command_handler(part_of=OutboundNotification)
class RetryNotificationHandler:
    @handle(RetryNotification)
    def retry_notification(self, command: RetryNotification):
        repo = current_domain.repository_for(OutboundNotification)
        notification = repo.get(command.notification_id)
        notification.retry()
        repo.add(notification)

    @handle(RetryFailedNotifications)
    def retry_failed(self, command: RetryFailedNotifications) -> int:
        repo = current_domain.repository_for(OutboundNotification)
        retried = 0
        for notification in repo.retryable(limit=command.batch_size or DEFAULT_PAGE_SIZE):
            notification.retry()
            repo.add(notification)
            retried += 1

        logger.info("Failed notifications re-queued", count=retried)
        return retried
