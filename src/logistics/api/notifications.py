"""FastAPI routes for the notification outbox."""

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from logistics.api.schemas import RetryFailedResponse
from logistics.api.views import notification_view
from logistics.notification.notification import OutboundNotification
from logistics.notification.repository import DEFAULT_PAGE_SIZE
from logistics.notification.retry import RetryFailedNotifications, RetryNotification

notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("")
async def list_notifications(
    status: str | None = None,
    recipient_id: str | None = None,
    entity_id: str | None = None,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> list[dict]:
    notifications = current_domain.repository_for(OutboundNotification).search(
        status=status,
        recipient_id=recipient_id,
        entity_id=entity_id,
        limit=limit,
        offset=offset,
    )
    return [notification_view(n) for n in notifications]


@notification_router.post("/retry-failed", response_model=RetryFailedResponse)
async def retry_failed() -> RetryFailedResponse:
    retried = current_domain.process(RetryFailedNotifications(), asynchronous=False)
    return RetryFailedResponse(retried=retried or 0)


@notification_router.post("/{notification_id}/retry")
async def retry_notification(notification_id: str) -> dict:
    current_domain.process(RetryNotification(notification_id=notification_id), asynchronous=False)
    repo = current_domain.repository_for(OutboundNotification)
    return notification_view(repo.get(notification_id))
