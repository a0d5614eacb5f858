"""Delivery progress of a consolidation, computed from its latest Delivery.

Nothing about a run is copied onto the consolidation itself, so this view
can never disagree with the Delivery record.
"""

from protean.utils.globals import current_domain

from logistics.delivery.delivery import Delivery, DeliveryStatus


def _location_dict(location) -> dict | None:
    if location is None:
        return None
    return {
        "latitude": location.latitude,
        "longitude": location.longitude,
        "address": location.address,
    }


def delivery_progress(consolidation_id: str) -> dict | None:
    """Summary of the consolidation's most recent run, or None if it never had one."""
    delivery = current_domain.repository_for(Delivery).latest_for_consolidation(consolidation_id)
    if delivery is None:
        return None

    status = DeliveryStatus(delivery.status)
    return {
        "delivery_id": str(delivery.id),
        "driver_id": str(delivery.driver_id),
        "status": status.value,
        "started": delivery.start_time is not None,
        "started_at": delivery.start_time,
        "start_location": _location_dict(delivery.start_location),
        "ended": status == DeliveryStatus.COMPLETED,
        "ended_at": delivery.end_time,
        "end_location": _location_dict(delivery.end_location),
    }
