"""
List Sales Use Case.

Sales history over a named range.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from pharmastock.application.dto.requests import ListSalesRequest
from pharmastock.application.dto.responses import SaleListResponse, SaleRecordResponse
from pharmastock.application.use_cases.list_medicines import resolve_page
from pharmastock.core.entities.medicine import utcnow
from pharmastock.core.entities.sale import SaleRecord
from pharmastock.core.interfaces.sale_store import ISaleStore
from pharmastock.core.services.expiry import sales_range_bounds


@dataclass
class SalePage:
    items: list[SaleRecord]
    total: int
    page: int
    per_page: int
    start: datetime
    end: datetime

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.total else 0


class ListSalesUseCase:
    """Sale records newest first, optionally for one medicine."""

    def __init__(
        self,
        sale_store: ISaleStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._sale_store = sale_store
        self._clock = clock or utcnow

    async def _get_sale_store(self) -> ISaleStore:
        if self._sale_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_sale_store

            self._sale_store = await get_sale_store()
        return self._sale_store

    async def execute(self, request: ListSalesRequest) -> SalePage:
        page, per_page = resolve_page(request.page, request.limit)
        start, end = sales_range_bounds(request.range, self._clock())

        store = await self._get_sale_store()
        items, total = await store.list_sales(
            start=start,
            end=end,
            medicine_id=request.medicine_id,
            limit=per_page,
            offset=(page - 1) * per_page,
        )
        return SalePage(
            items=items, total=total, page=page, per_page=per_page, start=start, end=end
        )

    def to_response(self, result: SalePage) -> SaleListResponse:
        return SaleListResponse(
            items=[SaleRecordResponse.from_entity(r) for r in result.items],
            total=result.total,
            page=result.page,
            per_page=result.per_page,
            total_pages=result.total_pages,
            range_start=result.start,
            range_end=result.end,
        )
