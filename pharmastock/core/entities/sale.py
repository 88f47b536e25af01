"""Sale ledger domain entities."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pharmastock.core.entities.medicine import Medicine, MedicineStatus, utcnow


class CartLine(BaseModel):
    """One line of a cart: sell ``quantity`` units of a medicine."""

    medicine_id: int
    quantity: int


class SaleRecord(BaseModel):
    """
    Immutable ledger entry for one consumption of dispenser stock.

    Carries a snapshot of the medicine's descriptive fields so history
    survives later edits to the medicine.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    medicine_id: int

    # Snapshot
    brand_name: str
    generic_name: str
    batch_number: str
    strength: str
    dosage_form: str
    unit_type: str

    quantity_sold: int = Field(..., ge=1)
    selling_price: float
    purchase_cost: float
    profit: float
    stock_before: int = Field(..., ge=0)
    stock_after: int = Field(..., ge=0)
    sold_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def check_stock_delta(self) -> "SaleRecord":
        """Dispenser delta must equal the quantity sold."""
        if self.stock_before - self.stock_after != self.quantity_sold:
            raise ValueError(
                f"stock_before ({self.stock_before}) - stock_after ({self.stock_after}) "
                f"!= quantity_sold ({self.quantity_sold})"
            )
        return self

    @classmethod
    def for_sale(
        cls,
        medicine: Medicine,
        quantity: int,
        stock_before: int,
        sold_at: datetime | None = None,
    ) -> "SaleRecord":
        """Build the record for selling ``quantity`` of ``medicine``."""
        return cls(
            medicine_id=medicine.id,  # type: ignore[arg-type]
            brand_name=medicine.brand_name,
            generic_name=medicine.generic_name,
            batch_number=medicine.batch_number,
            strength=medicine.strength,
            dosage_form=medicine.dosage_form,
            unit_type=medicine.unit_type,
            quantity_sold=quantity,
            selling_price=medicine.selling_price,
            purchase_cost=medicine.purchase_cost,
            profit=(medicine.selling_price - medicine.purchase_cost) * quantity,
            stock_before=stock_before,
            stock_after=stock_before - quantity,
            sold_at=sold_at or utcnow(),
        )

    def with_id(self, sale_id: int) -> "SaleRecord":
        return self.model_copy(update={"id": sale_id})


class SaleResult(BaseModel):
    """Outcome of selling one cart line."""

    sale_id: int | None = None
    medicine_id: int
    brand_name: str
    generic_name: str
    batch_number: str
    strength: str
    quantity_sold: int
    selling_price: float
    purchase_cost: float
    profit: float
    new_dispenser_stock: int
    status: MedicineStatus


class TopSeller(BaseModel):
    """Aggregate of units sold for one medicine."""

    medicine_id: int
    brand_name: str
    total_sold: int


class SalesTotals(BaseModel):
    """Units, revenue and profit summed over a set of sale records."""

    units_sold: int = 0
    revenue: float = 0.0
    profit: float = 0.0

    def __add__(self, other: "SalesTotals") -> "SalesTotals":
        return SalesTotals(
            units_sold=self.units_sold + other.units_sold,
            revenue=self.revenue + other.revenue,
            profit=self.profit + other.profit,
        )


class DailySales(SalesTotals):
    """Sales totals for one calendar day."""

    day: date
