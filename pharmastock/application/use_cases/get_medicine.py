"""Get Medicine Use Case."""

from collections.abc import Callable
from datetime import datetime

from pharmastock.application.dto.responses import MedicineResponse
from pharmastock.core.entities.medicine import Medicine, utcnow
from pharmastock.core.exceptions import MedicineNotFoundError
from pharmastock.core.interfaces.medicine_store import IMedicineStore
from pharmastock.core.services.stock_status import status_for


class GetMedicineUseCase:
    """
    Fetch one live medicine.

    The status is re-derived against the clock on read, so a batch that
    expired since its last write is reported as Expired even before the
    next list sweep persists it.
    """

    def __init__(
        self,
        medicine_store: IMedicineStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._medicine_store = medicine_store
        self._clock = clock or utcnow

    async def _get_medicine_store(self) -> IMedicineStore:
        if self._medicine_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_medicine_store

            self._medicine_store = await get_medicine_store()
        return self._medicine_store

    async def execute(self, medicine_id: int) -> Medicine:
        store = await self._get_medicine_store()
        medicine = await store.get(medicine_id)
        if medicine is None:
            raise MedicineNotFoundError(medicine_id)
        return medicine.model_copy(update={"status": status_for(medicine, self._clock())})

    def to_response(self, medicine: Medicine) -> MedicineResponse:
        return MedicineResponse.from_entity(medicine)
