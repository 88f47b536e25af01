"""Abstract interface for the sale ledger."""

from abc import ABC, abstractmethod
from datetime import datetime

from pharmastock.core.entities.medicine import Medicine
from pharmastock.core.entities.sale import DailySales, SaleRecord, TopSeller


class ISaleStore(ABC):
    """Interface for sale record persistence. Records are append-only."""

    @abstractmethod
    async def commit_sales(
        self,
        medicines: list[tuple[Medicine, int]],
        records: list[SaleRecord],
    ) -> list[SaleRecord]:
        """
        Persist stock decrements and their sale records as one transaction.

        ``medicines`` pairs each updated medicine with the version it was read
        at. If any conditional write misses, nothing is committed and
        ConcurrentUpdateError is raised. Returns records with IDs assigned.
        """
        pass

    @abstractmethod
    async def get(self, sale_id: int) -> SaleRecord | None:
        """Get a sale record by ID."""
        pass

    @abstractmethod
    async def list_sales(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        medicine_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[SaleRecord], int]:
        """List sale records newest first, with the total match count."""
        pass

    @abstractmethod
    async def top_sellers(self, limit: int = 5) -> list[TopSeller]:
        """Medicines ranked by total quantity sold."""
        pass

    @abstractmethod
    async def daily_sales(self, start: datetime, end: datetime) -> list[DailySales]:
        """Units, revenue and profit per day sold in [start, end], oldest day first."""
        pass

    @abstractmethod
    async def records_between(self, start: datetime, end: datetime) -> list[SaleRecord]:
        """Every sale record in [start, end], newest first."""
        pass
