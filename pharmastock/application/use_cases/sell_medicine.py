"""
Sell Medicine Use Case.

Single-line sale from the dispenser.
"""

from collections.abc import Callable
from datetime import datetime

from pharmastock.application.audit import AuditRecorder
from pharmastock.application.dto.responses import SaleResultResponse, SellResponse
from pharmastock.application.use_cases.sell_cart import SellCartUseCase
from pharmastock.config import get_logger
from pharmastock.core.entities.audit import Actor, AuditAction
from pharmastock.core.entities.sale import CartLine, SaleResult
from pharmastock.core.exceptions import InvalidQuantityError
from pharmastock.core.interfaces.audit_sink import IAuditSink
from pharmastock.core.interfaces.medicine_store import IMedicineStore
from pharmastock.core.interfaces.sale_store import ISaleStore
from pharmastock.core.services.sale_planner import is_positive_quantity

logger = get_logger(__name__)


class SellMedicineUseCase:
    """Sell one medicine; a one-line cart with its own audit entry."""

    def __init__(
        self,
        medicine_store: IMedicineStore | None = None,
        sale_store: ISaleStore | None = None,
        audit_sink: IAuditSink | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._cart = SellCartUseCase(
            medicine_store=medicine_store,
            sale_store=sale_store,
            clock=clock,
        )
        self._audit = AuditRecorder(audit_sink)

    async def execute(self, medicine_id: int, quantity: int, actor: Actor) -> SaleResult:
        """Execute sell medicine use case."""
        logger.info(
            "sell_medicine_started",
            medicine_id=medicine_id,
            quantity=quantity,
            actor_id=actor.id,
        )

        if not is_positive_quantity(quantity):
            raise InvalidQuantityError(quantity)

        [result] = await self._cart.commit([CartLine(medicine_id=medicine_id, quantity=quantity)])

        await self._audit.record(
            actor,
            AuditAction.SELL,
            f"Sold {result.quantity_sold} x {result.brand_name} {result.strength} "
            f"batch {result.batch_number} (id {result.medicine_id}) "
            f"for {result.selling_price * result.quantity_sold:.2f}",
        )

        logger.info(
            "sell_medicine_complete",
            sale_id=result.sale_id,
            medicine_id=result.medicine_id,
            new_dispenser_stock=result.new_dispenser_stock,
            status=result.status.value,
        )
        return result

    def to_response(self, result: SaleResult) -> SellResponse:
        return SellResponse(
            results=[SaleResultResponse.from_result(result)],
            total_quantity=result.quantity_sold,
            total_amount=result.selling_price * result.quantity_sold,
            total_profit=result.profit,
        )
