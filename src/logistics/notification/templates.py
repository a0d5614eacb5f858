"""Notification templates.

Each template names the channels it goes out on and renders a title and a
message from the triggering event's context.
"""

from logistics.notification.notification import NotificationChannel

IN_APP = NotificationChannel.IN_APP.value
EMAIL = NotificationChannel.EMAIL.value
PUSH = NotificationChannel.PUSH.value
SMS = NotificationChannel.SMS.value


def _humanize(status: str) -> str:
    return status.replace("_", " ")


class ConsolidationCreatedTemplate:
    channels = [IN_APP, EMAIL]

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Consolidation Created",
            "message": (
                f"Consolidation {context['reference_code']} has been created "
                f"with tracking number {context['master_tracking_number']}."
            ),
        }


class StatusUpdateTemplate:
    channels = [IN_APP, EMAIL]

    @staticmethod
    def render(context: dict) -> dict:
        message = (
            f"Consolidation {context['reference_code']} changed from "
            f"{_humanize(context['old_status'])} to {_humanize(context['new_status'])}."
        )
        if context.get("note"):
            message = f"{message} {context['note']}"
        return {"title": "Consolidation Status Updated", "message": message}


class DriverStatusUpdateTemplate:
    channels = [IN_APP, PUSH]

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Consolidation Status Updated",
            "message": f"Consolidation {context['reference_code']} is now {_humanize(context['new_status'])}.",
        }


class DriverAssignmentTemplate:
    channels = [IN_APP, PUSH, EMAIL]

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "New Delivery Assignment",
            "message": (
                f"You have been assigned to deliver consolidation {context['reference_code']} "
                f"({context['master_tracking_number']})."
            ),
        }


class DriverAssignedTemplate:
    channels = [IN_APP]

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Driver Assigned",
            "message": f"A driver has been assigned to consolidation {context['reference_code']}.",
        }


class DeliveryStartedTemplate:
    channels = [IN_APP, EMAIL]

    @staticmethod
    def render(context: dict) -> dict:
        message = f"Delivery of consolidation {context['reference_code']} has started."
        if context.get("location"):
            message = f"{message} Departed from {context['location']}."
        return {"title": "Delivery Started", "message": message}


class DeliveryCompletedTemplate:
    channels = [IN_APP, EMAIL, SMS]

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Delivery Completed",
            "message": f"Consolidation {context['reference_code']} has been delivered.",
        }
