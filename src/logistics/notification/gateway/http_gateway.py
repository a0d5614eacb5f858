"""HTTP gateway — posts notifications to the external notification service."""

import requests
import structlog

from logistics.notification.gateway.port import NotificationDeliveryError, NotificationGateway

logger = structlog.get_logger(__name__)


class HttpNotificationGateway(NotificationGateway):
    def __init__(self, base_url: str, timeout: float = 5.0, session: requests.Session | None = None):
        self.endpoint = f"{base_url.rstrip('/')}/api/notifications"
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, payload: dict) -> None:
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise NotificationDeliveryError(f"Notification service unreachable: {exc}") from exc

        if not response.ok:
            raise NotificationDeliveryError(
                f"Notification service replied {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        logger.debug(
            "Notification accepted",
            endpoint=self.endpoint,
            user_id=payload.get("userId"),
            status_code=response.status_code,
        )
