"""Delivery lookups."""

from logistics.delivery.delivery import ACTIVE_STATUSES, Delivery, DeliveryStatus
from logistics.domain import logistics

DEFAULT_PAGE_SIZE = 100


@logistics.repository(part_of=Delivery)
class DeliveryRepository:
    def _query(self, **filters):
        active = {k: v for k, v in filters.items() if v is not None}
        return self._dao.query.filter(**active) if active else self._dao.query

    def search(
        self,
        status: str | None = None,
        driver_id: str | None = None,
        consolidation_id: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[Delivery]:
        query = self._query(status=status, driver_id=driver_id, consolidation_id=consolidation_id)
        return query.order_by("-created_at").offset(offset).limit(limit).all().items

    def active(self, driver_id: str | None = None, limit: int = DEFAULT_PAGE_SIZE) -> list[Delivery]:
        """Deliveries still assigned or in progress."""
        query = self._query(driver_id=driver_id).filter(status__in=[s.value for s in ACTIVE_STATUSES])
        return query.order_by("-created_at").limit(limit).all().items

    def latest_for_consolidation(self, consolidation_id: str) -> Delivery | None:
        items = self._query(consolidation_id=consolidation_id).order_by("-created_at").limit(1).all().items
        return items[0] if items else None

    def not_started_for_consolidation(self, consolidation_id: str) -> list[Delivery]:
        query = self._query(consolidation_id=consolidation_id, status=DeliveryStatus.ASSIGNED.value)
        return query.limit(DEFAULT_PAGE_SIZE).all().items
