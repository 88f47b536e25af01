"""
Transfer Stock Use Case.

Move units from the store to the dispenser.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from pharmastock.application.audit import AuditRecorder
from pharmastock.application.concurrency import run_with_version_retry
from pharmastock.application.dto.responses import MedicineResponse, TransferStockResponse
from pharmastock.config import get_logger
from pharmastock.core.entities.audit import Actor, AuditAction
from pharmastock.core.entities.medicine import Medicine, utcnow
from pharmastock.core.exceptions import (
    InsufficientStoreStockError,
    InvalidQuantityError,
    MedicineNotFoundError,
)
from pharmastock.core.interfaces.audit_sink import IAuditSink
from pharmastock.core.interfaces.medicine_store import IMedicineStore
from pharmastock.core.services.sale_planner import is_positive_quantity
from pharmastock.core.services.stock_status import status_for

logger = get_logger(__name__)


@dataclass
class TransferResult:
    """Result of a transfer."""

    medicine: Medicine
    quantity: int

    @property
    def store_reorder_needed(self) -> bool:
        return self.medicine.store_reorder_needed


class TransferStockUseCase:
    """Store to dispenser transfer. Total stock is conserved."""

    def __init__(
        self,
        medicine_store: IMedicineStore | None = None,
        audit_sink: IAuditSink | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._medicine_store = medicine_store
        self._audit = AuditRecorder(audit_sink)
        self._clock = clock or utcnow

    async def _get_medicine_store(self) -> IMedicineStore:
        if self._medicine_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_medicine_store

            self._medicine_store = await get_medicine_store()
        return self._medicine_store

    async def execute(self, medicine_id: int, quantity: int, actor: Actor) -> TransferResult:
        """Execute transfer stock use case."""
        logger.info(
            "transfer_stock_started",
            medicine_id=medicine_id,
            quantity=quantity,
            actor_id=actor.id,
        )

        if not is_positive_quantity(quantity):
            raise InvalidQuantityError(quantity)

        store = await self._get_medicine_store()

        async def _attempt() -> Medicine:
            current = await store.get(medicine_id)
            if current is None:
                raise MedicineNotFoundError(medicine_id)
            if quantity > current.store_quantity:
                raise InsufficientStoreStockError(
                    medicine_id, requested=quantity, available=current.store_quantity
                )

            moved = current.model_copy(
                update={
                    "store_quantity": current.store_quantity - quantity,
                    "dispenser_quantity": current.dispenser_quantity + quantity,
                }
            )
            moved = moved.model_copy(update={"status": status_for(moved, self._clock())})
            return await store.update(moved, expected_version=current.version)

        medicine = await run_with_version_retry(_attempt)
        result = TransferResult(medicine=medicine, quantity=quantity)

        await self._audit.record(
            actor,
            AuditAction.TRANSFER,
            f"Transferred {quantity} {medicine.unit_type} of {medicine.brand_name} "
            f"{medicine.strength} batch {medicine.batch_number} (id {medicine.id}) "
            f"from store to dispenser",
        )

        logger.info(
            "transfer_stock_complete",
            medicine_id=medicine.id,
            store_quantity=medicine.store_quantity,
            dispenser_quantity=medicine.dispenser_quantity,
            status=medicine.status.value,
            store_reorder_needed=result.store_reorder_needed,
        )
        return result

    def to_response(self, result: TransferResult) -> TransferStockResponse:
        """Convert result to API response."""
        return TransferStockResponse(
            medicine=MedicineResponse.from_entity(result.medicine),
            transferred=result.quantity,
            store_reorder_needed=result.store_reorder_needed,
        )
