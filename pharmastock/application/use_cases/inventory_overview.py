"""
Inventory Overview Use Case.

Dashboard counts, top sellers and the upcoming expiry trend.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from pharmastock.application.dto.responses import (
    ExpiryMonthResponse,
    InventoryOverviewResponse,
    TopSellerResponse,
)
from pharmastock.config import get_logger
from pharmastock.core.entities.medicine import ExpiryMonth, MedicineStatus, utcnow
from pharmastock.core.entities.sale import TopSeller
from pharmastock.core.interfaces.medicine_store import IMedicineStore
from pharmastock.core.interfaces.sale_store import ISaleStore

logger = get_logger(__name__)

TOP_SELLER_COUNT = 5
EXPIRY_TREND_MONTHS = 6


@dataclass
class InventoryOverview:
    """Counts of live medicines by status, best sellers and expiries per month."""

    by_status: dict[MedicineStatus, int]
    top_sellers: list[TopSeller] = field(default_factory=list)
    expiry_trend: list[ExpiryMonth] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.by_status.values())

    def count(self, status: MedicineStatus) -> int:
        return self.by_status.get(status, 0)


class InventoryOverviewUseCase:
    def __init__(
        self,
        medicine_store: IMedicineStore | None = None,
        sale_store: ISaleStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._medicine_store = medicine_store
        self._sale_store = sale_store
        self._clock = clock or utcnow

    async def _get_medicine_store(self) -> IMedicineStore:
        if self._medicine_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_medicine_store

            self._medicine_store = await get_medicine_store()
        return self._medicine_store

    async def _get_sale_store(self) -> ISaleStore:
        if self._sale_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_sale_store

            self._sale_store = await get_sale_store()
        return self._sale_store

    async def execute(self) -> InventoryOverview:
        medicine_store = await self._get_medicine_store()
        sale_store = await self._get_sale_store()

        now = self._clock()
        await medicine_store.mark_expired(now)
        by_status = await medicine_store.count_by_status()
        top_sellers = await sale_store.top_sellers(limit=TOP_SELLER_COUNT)
        expiry_trend = await medicine_store.expiry_counts_by_month(
            now.date(), EXPIRY_TREND_MONTHS
        )

        overview = InventoryOverview(
            by_status=by_status, top_sellers=top_sellers, expiry_trend=expiry_trend
        )
        logger.debug(
            "inventory_overview_computed",
            total=overview.total,
            expired=overview.count(MedicineStatus.EXPIRED),
        )
        return overview

    def to_response(self, overview: InventoryOverview) -> InventoryOverviewResponse:
        return InventoryOverviewResponse(
            total_medicines=overview.total,
            by_status={status.value: overview.count(status) for status in MedicineStatus},
            expired_count=overview.count(MedicineStatus.EXPIRED),
            low_stock_count=overview.count(MedicineStatus.LOW_STOCK),
            out_of_stock_count=overview.count(MedicineStatus.OUT_OF_STOCK),
            top_sellers=[
                TopSellerResponse(
                    medicine_id=t.medicine_id, brand_name=t.brand_name, total_sold=t.total_sold
                )
                for t in overview.top_sellers
            ],
            expiry_trend=[
                ExpiryMonthResponse(
                    month=m.month.strftime("%Y-%m"), label=m.month.strftime("%b"), count=m.count
                )
                for m in overview.expiry_trend
            ],
        )
