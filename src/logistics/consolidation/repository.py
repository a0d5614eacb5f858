"""Lookups on consolidations by business key and by filter."""

from logistics.consolidation.consolidation import Consolidation
from logistics.domain import logistics

DEFAULT_PAGE_SIZE = 100


@logistics.repository(part_of=Consolidation)
class ConsolidationRepository:
    def _first(self, **filters) -> Consolidation | None:
        items = self._dao.query.filter(**filters).limit(1).all().items
        return items[0] if items else None

    def find_by_reference_code(self, reference_code: str) -> Consolidation | None:
        return self._first(reference_code=reference_code)

    def find_by_tracking_number(self, master_tracking_number: str) -> Consolidation | None:
        return self._first(master_tracking_number=master_tracking_number)

    def search(
        self,
        status: str | None = None,
        warehouse_id: str | None = None,
        created_by: str | None = None,
        assigned_driver: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[Consolidation]:
        """Newest first, narrowed by whichever filters are given."""
        filters = {
            "status": status,
            "warehouse_id": warehouse_id,
            "created_by": created_by,
            "assigned_driver": assigned_driver,
        }
        active = {k: v for k, v in filters.items() if v is not None}
        query = self._dao.query.filter(**active) if active else self._dao.query
        return query.order_by("-created_at").offset(offset).limit(limit).all().items
