"""
Sales Report Use Case.

KPIs, a per-day trend and the full list of sold lines for a named range.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from functools import reduce

from pharmastock.application.dto.responses import (
    DailySalesResponse,
    SaleRecordResponse,
    SalesReportResponse,
    SalesTotalsResponse,
)
from pharmastock.config import get_logger
from pharmastock.core.entities.medicine import MedicineStatus, utcnow
from pharmastock.core.entities.sale import DailySales, SaleRecord, SalesTotals
from pharmastock.core.interfaces.medicine_store import IMedicineStore
from pharmastock.core.interfaces.sale_store import ISaleStore
from pharmastock.core.services.expiry import SalesRange, sales_range_bounds

logger = get_logger(__name__)


@dataclass
class SalesReport:
    start: datetime
    end: datetime
    trend: list[DailySales]
    lines: list[SaleRecord]
    low_stock_count: int = 0
    out_of_stock_count: int = 0
    totals: SalesTotals = field(init=False)

    def __post_init__(self) -> None:
        self.totals = reduce(lambda acc, day: acc + day, self.trend, SalesTotals())


def _totals_response(totals: SalesTotals) -> SalesTotalsResponse:
    return SalesTotalsResponse(
        units_sold=totals.units_sold,
        revenue=round(totals.revenue, 2),
        profit=round(totals.profit, 2),
    )


class SalesReportUseCase:
    """
    Summarise sales over a look-back range.

    Totals are the sum of the daily trend, so the KPIs and the chart can
    never disagree. Stock alert counts are taken after the expiry sweep,
    as on the dashboard.
    """

    def __init__(
        self,
        sale_store: ISaleStore | None = None,
        medicine_store: IMedicineStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._sale_store = sale_store
        self._medicine_store = medicine_store
        self._clock = clock or utcnow

    async def _get_sale_store(self) -> ISaleStore:
        if self._sale_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_sale_store

            self._sale_store = await get_sale_store()
        return self._sale_store

    async def _get_medicine_store(self) -> IMedicineStore:
        if self._medicine_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_medicine_store

            self._medicine_store = await get_medicine_store()
        return self._medicine_store

    async def execute(self, sales_range: SalesRange | None = None) -> SalesReport:
        now = self._clock()
        start, end = sales_range_bounds(sales_range, now)

        sale_store = await self._get_sale_store()
        medicine_store = await self._get_medicine_store()

        await medicine_store.mark_expired(now)
        by_status = await medicine_store.count_by_status()
        trend = await sale_store.daily_sales(start, end)
        lines = await sale_store.records_between(start, end)

        report = SalesReport(
            start=start,
            end=end,
            trend=trend,
            lines=lines,
            low_stock_count=by_status.get(MedicineStatus.LOW_STOCK, 0),
            out_of_stock_count=by_status.get(MedicineStatus.OUT_OF_STOCK, 0),
        )
        logger.info(
            "sales_report_built",
            range=sales_range.value if sales_range else None,
            days=len(trend),
            lines=len(lines),
            units_sold=report.totals.units_sold,
        )
        return report

    def to_response(self, report: SalesReport) -> SalesReportResponse:
        return SalesReportResponse(
            range_start=report.start,
            range_end=report.end,
            totals=_totals_response(report.totals),
            low_stock_count=report.low_stock_count,
            out_of_stock_count=report.out_of_stock_count,
            trend=[
                DailySalesResponse(day=day.day, **_totals_response(day).model_dump())
                for day in report.trend
            ],
            lines=[SaleRecordResponse.from_entity(record) for record in report.lines],
        )
