"""Fake notification gateway — records payloads for test assertions."""

from logistics.notification.gateway.port import NotificationDeliveryError, NotificationGateway


class FakeNotificationGateway(NotificationGateway):
    def __init__(self):
        self.sent: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification service unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification service unavailable"):
        """Configure the fake gateway behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, payload: dict) -> None:
        if not self.should_succeed:
            raise NotificationDeliveryError(self.failure_reason, status_code=503)
        self.sent.append(dict(payload))

    def sent_to(self, user_id: str) -> list[dict]:
        return [p for p in self.sent if p["userId"] == user_id]

    def reset(self):
        self.sent.clear()
        self.should_succeed = True
        self.failure_reason = "Notification service unavailable"
