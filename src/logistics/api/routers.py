"""Routers served by the logistics app, in mount order."""

from logistics.api.consolidations import consolidation_router
from logistics.api.customer_requests import request_router
from logistics.api.deliveries import delivery_router
from logistics.api.notifications import notification_router
from logistics.api.receipts import receipt_router

routers = [
    consolidation_router,
    delivery_router,
    receipt_router,
    request_router,
    notification_router,
]
