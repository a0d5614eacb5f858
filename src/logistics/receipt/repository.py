"""Receipt lookups."""

from datetime import datetime

from logistics.domain import logistics
from logistics.receipt.receipt import Receipt

DEFAULT_PAGE_SIZE = 100


@logistics.repository(part_of=Receipt)
class ReceiptRepository:
    def find_by_number(self, receipt_number: str) -> Receipt | None:
        items = self._dao.query.filter(receipt_number=receipt_number).limit(1).all().items
        return items[0] if items else None

    def search(
        self,
        consolidation_id: str | None = None,
        issued_by: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[Receipt]:
        """Newest first. ``start_date`` and ``end_date`` bound ``issued_at`` inclusively."""
        filters = {
            "consolidation_id": consolidation_id,
            "issued_by": issued_by,
            "issued_at__gte": start_date,
            "issued_at__lte": end_date,
        }
        active = {k: v for k, v in filters.items() if v is not None}
        query = self._dao.query.filter(**active) if active else self._dao.query
        return query.order_by("-issued_at").offset(offset).limit(limit).all().items
