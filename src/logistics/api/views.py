"""JSON views of aggregates returned by the API."""

from logistics.consolidation.consolidation import Consolidation
from logistics.delivery.delivery import Delivery
from logistics.delivery.progress import delivery_progress
from logistics.notification.notification import OutboundNotification


def consolidation_view(consolidation: Consolidation) -> dict:
    data = consolidation.to_dict()
    data["status_history"] = [entry.to_dict() for entry in consolidation.history()]
    data["parcels"] = consolidation.parcel_ids()
    data["delivery_status"] = delivery_progress(str(consolidation.id))
    return data


def delivery_view(delivery: Delivery) -> dict:
    data = delivery.to_dict()
    data["location_history"] = [
        ping.to_dict() for ping in sorted(delivery.location_history or [], key=lambda p: p.recorded_at)
    ]
    return data


def notification_view(notification: OutboundNotification) -> dict:
    data = notification.to_dict()
    data["channels"] = notification.channel_list()
    return data


def entity_view(aggregate) -> dict:
    return aggregate.to_dict()
