"""Notification gateway port — how notifications leave the system."""

from abc import ABC, abstractmethod


class NotificationDeliveryError(Exception):
    """The notification service did not accept a notification."""

    def __init__(self, reason: str, status_code: int | None = None):
        self.reason = reason
        self.status_code = status_code
        super().__init__(reason)


class NotificationGateway(ABC):
    @abstractmethod
    def send(self, payload: dict) -> None:
        """Deliver one notification payload.

        Raises:
            NotificationDeliveryError: on a transport failure or a non-2xx reply.
        """
        ...
