"""Customer request lookups."""

from logistics.domain import logistics
from logistics.request.request import CustomerRequest, RequestStatus

DEFAULT_PAGE_SIZE = 100


@logistics.repository(part_of=CustomerRequest)
class CustomerRequestRepository:
    def find_by_number(self, request_number: str) -> CustomerRequest | None:
        items = self._dao.query.filter(request_number=request_number).limit(1).all().items
        return items[0] if items else None

    def search(
        self,
        status: str | None = None,
        customer_id: str | None = None,
        processed_by: str | None = None,
        consolidation_id: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[CustomerRequest]:
        filters = {
            "status": status,
            "customer_id": customer_id,
            "processed_by": processed_by,
            "consolidation_id": consolidation_id,
        }
        active = {k: v for k, v in filters.items() if v is not None}
        query = self._dao.query.filter(**active) if active else self._dao.query
        return query.order_by("-submitted_at").offset(offset).limit(limit).all().items

    def pending_count(self) -> int:
        """Number of requests still waiting for a decision."""
        return self._dao.query.filter(status=RequestStatus.SUBMITTED.value).all().total
