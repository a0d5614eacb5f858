"""Logistics bounded context — parcel consolidation, driver deliveries,
receipts and customer requests.

Consolidations group parcels under a master tracking number and move through
a status workflow. Every change of interest is fanned out to the people
involved through the notification outbox.
"""

from protean.domain import Domain

from logistics.utils.logging import configure_logging

configure_logging()

logistics = Domain(name="logistics")
