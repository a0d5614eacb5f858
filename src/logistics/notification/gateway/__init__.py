"""Notification gateway registry.

``NOTIFICATION_GATEWAY`` picks the implementation:

- ``fake`` (default): records payloads in memory
- ``http``: posts to ``NOTIFICATION_SERVICE_URL``
"""

import os

from logistics.notification.gateway.port import NotificationDeliveryError, NotificationGateway

DEFAULT_SERVICE_URL = "https://notification-service.vercel.app"

_current_gateway: NotificationGateway | None = None


def _build_gateway() -> NotificationGateway:
    kind = os.environ.get("NOTIFICATION_GATEWAY", "fake").lower()
    if kind == "http":
        from logistics.notification.gateway.http_gateway import HttpNotificationGateway

        return HttpNotificationGateway(
            base_url=os.environ.get("NOTIFICATION_SERVICE_URL", DEFAULT_SERVICE_URL),
            timeout=float(os.environ.get("NOTIFICATION_TIMEOUT_SECONDS", "5")),
        )
    if kind == "fake":
        from logistics.notification.gateway.fake_gateway import FakeNotificationGateway

        return FakeNotificationGateway()
    raise ValueError(f"Unknown notification gateway: {kind}")


def get_gateway() -> NotificationGateway:
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_gateway()
    return _current_gateway


def set_gateway(gateway: NotificationGateway) -> None:
    """Override the active gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None


__all__ = [
    "NotificationDeliveryError",
    "NotificationGateway",
    "get_gateway",
    "reset_gateway",
    "set_gateway",
]
