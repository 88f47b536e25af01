"""
Sell Cart Use Case.

All-or-nothing multi-line sale.
"""

from collections.abc import Callable
from datetime import datetime

from pharmastock.application.audit import AuditRecorder
from pharmastock.application.concurrency import run_with_version_retry
from pharmastock.application.dto.responses import SaleResultResponse, SellResponse
from pharmastock.config import get_logger
from pharmastock.core.entities.audit import Actor, AuditAction
from pharmastock.core.entities.medicine import Medicine, utcnow
from pharmastock.core.entities.sale import CartLine, SaleResult
from pharmastock.core.exceptions import ValidationError
from pharmastock.core.interfaces.audit_sink import IAuditSink
from pharmastock.core.interfaces.medicine_store import IMedicineStore
from pharmastock.core.interfaces.sale_store import ISaleStore
from pharmastock.core.services.sale_planner import plan_sales

logger = get_logger(__name__)


class SellCartUseCase:
    """
    Sell every line of a cart or none of them.

    The whole cart is validated against fresh reads before any write; all
    stock decrements and sale records then commit in one transaction. A
    version conflict re-runs read, validation and commit from scratch.
    """

    def __init__(
        self,
        medicine_store: IMedicineStore | None = None,
        sale_store: ISaleStore | None = None,
        audit_sink: IAuditSink | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._medicine_store = medicine_store
        self._sale_store = sale_store
        self._audit = AuditRecorder(audit_sink)
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

    async def commit(self, cart: list[CartLine]) -> list[SaleResult]:
        """Validate and commit ``cart`` without auditing."""
        if not cart:
            raise ValidationError("items", "Cart must contain at least one item")

        medicine_store = await self._get_medicine_store()
        sale_store = await self._get_sale_store()
        medicine_ids = list(dict.fromkeys(line.medicine_id for line in cart))

        async def _attempt() -> list[SaleResult]:
            medicines: dict[int, Medicine] = {}
            for medicine_id in medicine_ids:
                medicine = await medicine_store.get(medicine_id)
                if medicine is not None:
                    medicines[medicine_id] = medicine

            plan = plan_sales(cart, medicines, self._clock())
            saved = await sale_store.commit_sales(plan.updates, plan.records)
            return plan.results(saved)

        return await run_with_version_retry(_attempt)

    async def execute(self, cart: list[CartLine], actor: Actor) -> list[SaleResult]:
        """Execute sell cart use case."""
        logger.info("sell_cart_started", lines=len(cart), actor_id=actor.id)

        results = await self.commit(cart)

        total_quantity = sum(r.quantity_sold for r in results)
        total_amount = sum(r.selling_price * r.quantity_sold for r in results)
        lines = "; ".join(f"{r.quantity_sold} x {r.brand_name} {r.strength}" for r in results)
        await self._audit.record(
            actor,
            AuditAction.SELL,
            f"Sold cart of {len(results)} line(s), {total_quantity} unit(s), "
            f"total {total_amount:.2f}: {lines}",
        )

        logger.info(
            "sell_cart_complete",
            lines=len(results),
            total_quantity=total_quantity,
            total_amount=total_amount,
        )
        return results

    def to_response(self, results: list[SaleResult]) -> SellResponse:
        """Convert results to API response."""
        return SellResponse(
            results=[SaleResultResponse.from_result(r) for r in results],
            total_quantity=sum(r.quantity_sold for r in results),
            total_amount=sum(r.selling_price * r.quantity_sold for r in results),
            total_profit=sum(r.profit for r in results),
        )
