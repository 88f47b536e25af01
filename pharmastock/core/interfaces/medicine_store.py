"""Abstract interface for medicine storage."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime

from pharmastock.core.entities.medicine import ExpiryMonth, Medicine, MedicineStatus

SORTABLE_FIELDS = frozenset(
    {
        "expiry_date",
        "brand_name",
        "generic_name",
        "created_at",
        "received_date",
        "selling_price",
        "store_quantity",
        "dispenser_quantity",
        "status",
    }
)


@dataclass
class MedicineQuery:
    """Filter, sort and page parameters for catalog listing."""

    search: str | None = None
    status: MedicineStatus | None = None
    expiry_from: datetime | None = None
    expiry_to: datetime | None = None
    sort_by: str = "expiry_date"
    descending: bool = True
    limit: int = 10
    offset: int = 0


class IMedicineStore(ABC):
    """Interface for medicine persistence. Soft-deleted rows are never returned."""

    @abstractmethod
    async def create(self, medicine: Medicine) -> Medicine:
        """Insert a medicine and assign its ID."""
        pass

    @abstractmethod
    async def get(self, medicine_id: int) -> Medicine | None:
        """Get a live (not soft-deleted) medicine by ID."""
        pass

    @abstractmethod
    async def find_by_identity(
        self,
        brand_name: str,
        strength: str,
        batch_number: str,
        exclude_id: int | None = None,
    ) -> Medicine | None:
        """Find a live medicine with the same brand/strength/batch."""
        pass

    @abstractmethod
    async def update(self, medicine: Medicine, expected_version: int) -> Medicine:
        """
        Write all fields if the stored row still has ``expected_version``.

        Raises ConcurrentUpdateError when the row changed or was deleted
        since it was read.
        """
        pass

    @abstractmethod
    async def search(self, query: MedicineQuery) -> tuple[list[Medicine], int]:
        """Return one page of live medicines and the total match count."""
        pass

    @abstractmethod
    async def mark_expired(self, now: datetime) -> int:
        """Set status=expired on live medicines whose expiry has passed."""
        pass

    @abstractmethod
    async def count_by_status(self) -> dict[MedicineStatus, int]:
        """Count live medicines per status."""
        pass

    @abstractmethod
    async def expiry_counts_by_month(self, first_month: date, months: int) -> list[ExpiryMonth]:
        """
        Live medicines expiring in each of ``months`` calendar months.

        Starts at the month containing ``first_month``. Every month is
        present in the result, empty ones with a zero count.
        """
        pass
