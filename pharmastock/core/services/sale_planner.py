"""
Cart planning for the sale engine.

Validates a whole cart against freshly read medicines and computes every
stock decrement and ledger record before anything is written. Lines for the
same medicine draw down a running dispenser quantity, so a second line sees
the stock left by the first.
"""

from dataclasses import dataclass, field
from datetime import datetime

from pharmastock.core.entities.medicine import Medicine, MedicineStatus
from pharmastock.core.entities.sale import CartLine, SaleRecord, SaleResult
from pharmastock.core.exceptions import (
    InsufficientDispenserStockError,
    InvalidQuantityError,
    MedicineNotFoundError,
    ValidationError,
)
from pharmastock.core.services.stock_status import status_for


@dataclass
class PlannedSale:
    record: SaleRecord
    status_after: MedicineStatus


@dataclass
class SalePlan:
    """Everything one cart commit writes."""

    updates: list[tuple[Medicine, int]] = field(default_factory=list)
    sales: list[PlannedSale] = field(default_factory=list)

    @property
    def records(self) -> list[SaleRecord]:
        return [sale.record for sale in self.sales]

    def results(self, saved: list[SaleRecord]) -> list[SaleResult]:
        """Pair committed records (with IDs) back up with their line status."""
        return [
            SaleResult(
                sale_id=record.id,
                medicine_id=record.medicine_id,
                brand_name=record.brand_name,
                generic_name=record.generic_name,
                batch_number=record.batch_number,
                strength=record.strength,
                quantity_sold=record.quantity_sold,
                selling_price=record.selling_price,
                purchase_cost=record.purchase_cost,
                profit=record.profit,
                new_dispenser_stock=record.stock_after,
                status=sale.status_after,
            )
            for record, sale in zip(saved, self.sales, strict=True)
        ]


def is_positive_quantity(quantity: object) -> bool:
    """Strictly positive integer; bools are rejected."""
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0


def plan_sales(
    lines: list[CartLine],
    medicines: dict[int, Medicine],
    now: datetime,
) -> SalePlan:
    """
    Validate ``lines`` in order and plan their effects.

    ``medicines`` holds the live medicines the cart refers to, keyed by ID;
    a line whose medicine is absent is rejected as not found. Any rejected
    line rejects the whole cart.
    """
    if not lines:
        raise ValidationError("items", "Cart must contain at least one item")

    running: dict[int, Medicine] = {}
    plan = SalePlan()

    for line in lines:
        if not is_positive_quantity(line.quantity):
            raise InvalidQuantityError(line.quantity)

        current = running.get(line.medicine_id) or medicines.get(line.medicine_id)
        if current is None or current.is_deleted:
            raise MedicineNotFoundError(line.medicine_id)

        if line.quantity > current.dispenser_quantity:
            raise InsufficientDispenserStockError(
                line.medicine_id,
                requested=line.quantity,
                available=current.dispenser_quantity,
            )

        record = SaleRecord.for_sale(
            current, line.quantity, stock_before=current.dispenser_quantity, sold_at=now
        )
        after = current.model_copy(update={"dispenser_quantity": record.stock_after})
        after = after.model_copy(update={"status": status_for(after, now)})
        running[line.medicine_id] = after
        plan.sales.append(PlannedSale(record=record, status_after=after.status))

    # One write per distinct medicine, in first-seen order
    plan.updates = [
        (medicine, medicines[medicine_id].version) for medicine_id, medicine in running.items()
    ]
    return plan
