"""Outbox lookups."""

from logistics.domain import logistics
from logistics.notification.notification import NotificationStatus, OutboundNotification

DEFAULT_PAGE_SIZE = 100


@logistics.repository(part_of=OutboundNotification)
class OutboundNotificationRepository:
    def search(
        self,
        status: str | None = None,
        recipient_id: str | None = None,
        entity_id: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[OutboundNotification]:
        filters = {"status": status, "recipient_id": recipient_id, "entity_id": entity_id}
        active = {k: v for k, v in filters.items() if v is not None}
        query = self._dao.query.filter(**active) if active else self._dao.query
        return query.order_by("-created_at").offset(offset).limit(limit).all().items

    def retryable(self, limit: int = DEFAULT_PAGE_SIZE) -> list[OutboundNotification]:
        """Failed notifications that still have attempts left, oldest first.

        Exhausted rows stay ``failed`` for inspection, so the failed set is
        paged through until ``limit`` retryable rows are found.
        """
        query = self._dao.query.filter(status=NotificationStatus.FAILED.value).order_by("created_at")
        found: list[OutboundNotification] = []
        offset = 0
        while len(found) < limit:
            page = query.offset(offset).limit(limit).all().items
            if not page:
                break
            found.extend(n for n in page if n.can_retry)
            offset += len(page)
        return found[:limit]
