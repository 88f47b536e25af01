"""Tests for cart planning."""

from datetime import datetime

import pytest

from pharmastock.core.entities import CartLine, MedicineStatus
from pharmastock.core.exceptions import (
    InsufficientDispenserStockError,
    InvalidQuantityError,
    MedicineNotFoundError,
    ValidationError,
)
from pharmastock.core.services import is_positive_quantity, plan_sales

NOW = datetime(2026, 3, 15, 10, 30)


class TestPlanSales:
    def test_single_line(self, make_medicine):
        med = make_medicine(store_quantity=10, dispenser_quantity=90, version=3)
        plan = plan_sales([CartLine(medicine_id=1, quantity=85)], {1: med}, NOW)

        assert len(plan.records) == 1
        record = plan.records[0]
        assert record.stock_before == 90
        assert record.stock_after == 5
        assert record.sold_at == NOW

        [(updated, expected_version)] = plan.updates
        assert updated.dispenser_quantity == 5
        assert updated.status == MedicineStatus.LOW_STOCK
        assert expected_version == 3

    def test_repeated_medicine_is_cumulative(self, make_medicine):
        med = make_medicine(dispenser_quantity=10)
        lines = [CartLine(medicine_id=1, quantity=4), CartLine(medicine_id=1, quantity=6)]
        plan = plan_sales(lines, {1: med}, NOW)

        first, second = plan.records
        assert (first.stock_before, first.stock_after) == (10, 6)
        assert (second.stock_before, second.stock_after) == (6, 0)
        # One write per medicine
        assert len(plan.updates) == 1
        assert plan.updates[0][0].dispenser_quantity == 0

    def test_cumulative_overdraw_rejects_cart(self, make_medicine):
        med = make_medicine(dispenser_quantity=10)
        lines = [CartLine(medicine_id=1, quantity=6), CartLine(medicine_id=1, quantity=6)]
        with pytest.raises(InsufficientDispenserStockError) as exc_info:
            plan_sales(lines, {1: med}, NOW)
        assert exc_info.value.details["available"] == 4
        # Input medicines are untouched
        assert med.dispenser_quantity == 10

    def test_multiple_medicines_keep_first_seen_order(self, make_medicine):
        a = make_medicine(id=1, dispenser_quantity=5)
        b = make_medicine(id=2, batch_number="B-2", dispenser_quantity=5)
        lines = [
            CartLine(medicine_id=2, quantity=1),
            CartLine(medicine_id=1, quantity=1),
            CartLine(medicine_id=2, quantity=1),
        ]
        plan = plan_sales(lines, {1: a, 2: b}, NOW)
        assert [m.id for m, _ in plan.updates] == [2, 1]
        assert [r.medicine_id for r in plan.records] == [2, 1, 2]

    def test_empty_cart(self):
        with pytest.raises(ValidationError):
            plan_sales([], {}, NOW)

    def test_unknown_medicine(self, make_medicine):
        with pytest.raises(MedicineNotFoundError):
            plan_sales([CartLine(medicine_id=99, quantity=1)], {}, NOW)

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity(self, make_medicine, quantity):
        med = make_medicine(dispenser_quantity=10)
        with pytest.raises(InvalidQuantityError):
            plan_sales([CartLine(medicine_id=1, quantity=quantity)], {1: med}, NOW)

    def test_later_invalid_line_rejects_whole_cart(self, make_medicine):
        a = make_medicine(id=1, dispenser_quantity=5)
        lines = [CartLine(medicine_id=1, quantity=2), CartLine(medicine_id=7, quantity=1)]
        with pytest.raises(MedicineNotFoundError):
            plan_sales(lines, {1: a}, NOW)

    def test_results_pair_records_with_status(self, make_medicine):
        med = make_medicine(store_quantity=0, dispenser_quantity=3)
        plan = plan_sales([CartLine(medicine_id=1, quantity=3)], {1: med}, NOW)
        saved = [r.with_id(i + 100) for i, r in enumerate(plan.records)]

        [result] = plan.results(saved)
        assert result.sale_id == 100
        assert result.new_dispenser_stock == 0
        assert result.status == MedicineStatus.OUT_OF_STOCK
        assert result.profit == pytest.approx(4.5)


class TestIsPositiveQuantity:
    @pytest.mark.parametrize("value", [1, 5, 10_000])
    def test_accepts(self, value):
        assert is_positive_quantity(value)

    @pytest.mark.parametrize("value", [0, -1, 1.5, "3", True, None])
    def test_rejects(self, value):
        assert not is_positive_quantity(value)
