"""Notification fan-out — turns consolidation events into outbox rows.

Who hears about what:

    Event                                   Recipient   Channels
    ConsolidationCreated                    creator     in_app, email
    ConsolidationStatusChanged (old != new) creator     in_app, email
    ConsolidationStatusChanged to in_transit
        or out_for_delivery                 driver      in_app, push
    DriverAssigned                          driver      in_app, push, email
    DriverAssigned                          creator     in_app
    ConsolidationDispatched                 creator     in_app, email
    ConsolidationDelivered                  creator     in_app, email, sms
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from logistics.consolidation.consolidation import ConsolidationStatus
from logistics.consolidation.events import (
    ConsolidationCreated,
    ConsolidationDelivered,
    ConsolidationDispatched,
    ConsolidationStatusChanged,
    DriverAssigned,
)
from logistics.domain import logistics
from logistics.notification.notification import OutboundNotification
from logistics.notification.templates import (
    ConsolidationCreatedTemplate,
    DeliveryCompletedTemplate,
    DeliveryStartedTemplate,
    DriverAssignedTemplate,
    DriverAssignmentTemplate,
    DriverStatusUpdateTemplate,
    StatusUpdateTemplate,
)

logger = structlog.get_logger(__name__)

ENTITY_TYPE = "Consolidation"

_DRIVER_ALERT_STATUSES = {
    ConsolidationStatus.IN_TRANSIT.value,
    ConsolidationStatus.OUT_FOR_DELIVERY.value,
}


def recipients_for(event) -> list[tuple[str, type]]:
    """``(recipient_id, template)`` pairs an event should reach."""
    if isinstance(event, ConsolidationCreated):
        return [(str(event.created_by), ConsolidationCreatedTemplate)]

    if isinstance(event, ConsolidationStatusChanged):
        recipients = []
        if event.old_status != event.new_status:
            recipients.append((str(event.created_by), StatusUpdateTemplate))
        if event.new_status in _DRIVER_ALERT_STATUSES and event.assigned_driver:
            recipients.append((str(event.assigned_driver), DriverStatusUpdateTemplate))
        return recipients

    if isinstance(event, DriverAssigned):
        return [
            (str(event.driver_id), DriverAssignmentTemplate),
            (str(event.created_by), DriverAssignedTemplate),
        ]

    if isinstance(event, ConsolidationDispatched):
        return [(str(event.created_by), DeliveryStartedTemplate)]

    if isinstance(event, ConsolidationDelivered):
        return [(str(event.created_by), DeliveryCompletedTemplate)]

    return []


def _context(event) -> dict:
    context = event.to_dict()
    context["location"] = context.get("start_location") or context.get("end_location") or context.get("location")
    return context


def queue_notifications(event) -> list[str]:
    """Write one outbox row per recipient. Returns the new notification ids."""
    repo = current_domain.repository_for(OutboundNotification)
    context = _context(event)
    source_event = type(event).__name__

    notification_ids = []
    for recipient_id, template in recipients_for(event):
        rendered = template.render(context)
        notification = OutboundNotification.queue(
            recipient_id=recipient_id,
            title=rendered["title"],
            message=rendered["message"],
            channels=template.channels,
            entity_type=ENTITY_TYPE,
            entity_id=str(event.consolidation_id),
            source_event=source_event,
        )
        repo.add(notification)
        notification_ids.append(str(notification.id))

    if notification_ids:
        logger.info(
            "Notifications queued",
            source_event=source_event,
            consolidation_id=str(event.consolidation_id),
            count=len(notification_ids),
        )
    return notification_ids


@logistics.event_handler(part_of=OutboundNotification, stream_category="logistics::consolidation")
class ConsolidationNotificationFanout:
    """Queues notifications for the people a consolidation change concerns."""

    @handle(ConsolidationCreated)
    def on_created(self, event: ConsolidationCreated) -> None:
        queue_notifications(event)

    @handle(ConsolidationStatusChanged)
    def on_status_changed(self, event: ConsolidationStatusChanged) -> None:
        queue_notifications(event)

    @handle(DriverAssigned)
    def on_driver_assigned(self, event: DriverAssigned) -> None:
        queue_notifications(event)

    @handle(ConsolidationDispatched)
    def on_dispatched(self, event: ConsolidationDispatched) -> None:
        queue_notifications(event)

    @handle(ConsolidationDelivered)
    def on_delivered(self, event: ConsolidationDelivered) -> None:
        queue_notifications(event)
