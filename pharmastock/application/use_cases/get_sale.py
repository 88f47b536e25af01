"""Get Sale Use Case."""

from pharmastock.application.dto.responses import SaleRecordResponse
from pharmastock.core.entities.sale import SaleRecord
from pharmastock.core.exceptions import SaleNotFoundError
from pharmastock.core.interfaces.sale_store import ISaleStore


class GetSaleUseCase:
    def __init__(self, sale_store: ISaleStore | None = None):
        self._sale_store = sale_store

    async def _get_sale_store(self) -> ISaleStore:
        if self._sale_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_sale_store

            self._sale_store = await get_sale_store()
        return self._sale_store

    async def execute(self, sale_id: int) -> SaleRecord:
        store = await self._get_sale_store()
        record = await store.get(sale_id)
        if record is None:
            raise SaleNotFoundError(sale_id)
        return record

    def to_response(self, record: SaleRecord) -> SaleRecordResponse:
        return SaleRecordResponse.from_entity(record)
