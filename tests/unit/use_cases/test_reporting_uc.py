"""Tests for sales history, overview and audit log use cases."""

from datetime import date, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from pharmastock.application.dto.requests import ListSalesRequest
from pharmastock.application.use_cases.get_sale import GetSaleUseCase
from pharmastock.application.use_cases.inventory_overview import InventoryOverviewUseCase
from pharmastock.application.use_cases.list_audit_logs import ListAuditLogsUseCase
from pharmastock.application.use_cases.list_sales import ListSalesUseCase
from pharmastock.application.use_cases.sales_report import SalesReportUseCase
from pharmastock.core.entities import (
    AuditAction,
    AuditLogEntry,
    DailySales,
    ExpiryMonth,
    MedicineStatus,
    SaleRecord,
    TopSeller,
)
from pharmastock.core.exceptions import SaleNotFoundError, ValidationError
from pharmastock.core.services import SalesRange


@pytest.fixture
def sale_record(make_medicine):
    return SaleRecord.for_sale(
        make_medicine(dispenser_quantity=20), 5, stock_before=20, sold_at=datetime(2026, 3, 14)
    ).with_id(11)


class TestListSalesUseCase:
    @pytest.fixture
    def use_case(self, mock_sale_store, clock):
        return ListSalesUseCase(sale_store=mock_sale_store, clock=clock)

    async def test_default_range_is_thirty_days(self, use_case, mock_sale_store, sale_record, now):
        mock_sale_store.list_sales.return_value = ([sale_record], 1)

        page = await use_case.execute(ListSalesRequest())

        kwargs = mock_sale_store.list_sales.call_args.kwargs
        assert kwargs["start"] == now - timedelta(days=30)
        assert kwargs["end"] == now
        assert kwargs["medicine_id"] is None
        assert page.items == [sale_record]

    async def test_filters_and_paging(self, use_case, mock_sale_store, now):
        mock_sale_store.list_sales.return_value = ([], 0)

        await use_case.execute(
            ListSalesRequest(range=SalesRange.TODAY, medicine_id=4, page=2, limit=25)
        )

        kwargs = mock_sale_store.list_sales.call_args.kwargs
        assert kwargs["start"] == datetime(2026, 3, 15)
        assert kwargs["medicine_id"] == 4
        assert (kwargs["limit"], kwargs["offset"]) == (25, 25)

    async def test_rejects_bad_page(self, use_case, mock_sale_store):
        with pytest.raises(ValidationError):
            await use_case.execute(ListSalesRequest(page=0))
        mock_sale_store.list_sales.assert_not_called()

    async def test_to_response(self, use_case, mock_sale_store, sale_record, now):
        mock_sale_store.list_sales.return_value = ([sale_record], 11)

        response = use_case.to_response(await use_case.execute(ListSalesRequest(limit=5)))

        assert response.total_pages == 3
        assert response.items[0].id == 11
        assert response.range_end == now


class TestGetSaleUseCase:
    async def test_found(self, mock_sale_store, sale_record):
        mock_sale_store.get.return_value = sale_record
        record = await GetSaleUseCase(sale_store=mock_sale_store).execute(11)
        assert record.quantity_sold == 5

    async def test_not_found(self, mock_sale_store):
        mock_sale_store.get.return_value = None
        with pytest.raises(SaleNotFoundError):
            await GetSaleUseCase(sale_store=mock_sale_store).execute(11)


class TestInventoryOverviewUseCase:
    async def test_counts_and_top_sellers(self, mock_medicine_store, mock_sale_store, clock, now):
        mock_medicine_store.count_by_status.return_value = {
            MedicineStatus.AVAILABLE: 7,
            MedicineStatus.EXPIRED: 2,
            MedicineStatus.LOW_STOCK: 1,
        }
        mock_sale_store.top_sellers.return_value = [
            TopSeller(medicine_id=3, brand_name="Brufen", total_sold=40)
        ]
        mock_medicine_store.expiry_counts_by_month.return_value = [
            ExpiryMonth(month=date(2026, 3, 1), count=2),
            ExpiryMonth(month=date(2026, 4, 1), count=0),
        ]
        use_case = InventoryOverviewUseCase(
            medicine_store=mock_medicine_store, sale_store=mock_sale_store, clock=clock
        )

        overview = await use_case.execute()
        response = use_case.to_response(overview)

        mock_medicine_store.mark_expired.assert_awaited_once_with(now)
        mock_sale_store.top_sellers.assert_awaited_once_with(limit=5)
        assert response.total_medicines == 10
        assert response.expired_count == 2
        assert response.out_of_stock_count == 0
        assert response.by_status["out-of-stock"] == 0
        assert response.top_sellers[0].brand_name == "Brufen"
        mock_medicine_store.expiry_counts_by_month.assert_awaited_once_with(date(2026, 3, 15), 6)
        assert [(m.month, m.label, m.count) for m in response.expiry_trend] == [
            ("2026-03", "Mar", 2),
            ("2026-04", "Apr", 0),
        ]


class TestSalesReportUseCase:
    @pytest.fixture
    def use_case(self, mock_sale_store, mock_medicine_store, clock):
        mock_medicine_store.count_by_status.return_value = {
            MedicineStatus.AVAILABLE: 4,
            MedicineStatus.LOW_STOCK: 2,
            MedicineStatus.OUT_OF_STOCK: 1,
        }
        mock_sale_store.daily_sales.return_value = []
        mock_sale_store.records_between.return_value = []
        return SalesReportUseCase(
            sale_store=mock_sale_store, medicine_store=mock_medicine_store, clock=clock
        )

    async def test_totals_follow_trend(self, use_case, mock_sale_store, sale_record, now):
        mock_sale_store.daily_sales.return_value = [
            DailySales(day=date(2026, 3, 13), units_sold=3, revenue=10.5, profit=4.5),
            DailySales(day=date(2026, 3, 14), units_sold=5, revenue=17.5, profit=7.5),
        ]
        mock_sale_store.records_between.return_value = [sale_record]

        report = await use_case.execute(SalesRange.LAST_7_DAYS)

        mock_sale_store.daily_sales.assert_awaited_once_with(now - timedelta(days=7), now)
        mock_sale_store.records_between.assert_awaited_once_with(now - timedelta(days=7), now)
        assert report.totals.units_sold == 8
        assert report.totals.revenue == pytest.approx(28.0)
        assert report.totals.profit == pytest.approx(12.0)
        assert report.lines == [sale_record]

    async def test_stock_alerts_after_expiry_sweep(self, use_case, mock_medicine_store, now):
        report = await use_case.execute()

        mock_medicine_store.mark_expired.assert_awaited_once_with(now)
        assert (report.low_stock_count, report.out_of_stock_count) == (2, 1)

    async def test_default_range_is_thirty_days(self, use_case, now):
        report = await use_case.execute(None)

        assert report.start == now - timedelta(days=30)
        assert report.totals.units_sold == 0
        assert report.totals.revenue == 0.0

    async def test_to_response(self, use_case, mock_sale_store, sale_record):
        mock_sale_store.daily_sales.return_value = [
            DailySales(day=date(2026, 3, 14), units_sold=5, revenue=17.499999, profit=7.5)
        ]
        mock_sale_store.records_between.return_value = [sale_record]

        response = use_case.to_response(await use_case.execute(SalesRange.TODAY))

        assert response.range_start == datetime(2026, 3, 15)
        assert response.totals.revenue == 17.5
        assert response.trend[0].day == date(2026, 3, 14)
        assert response.trend[0].units_sold == 5
        assert response.lines[0].id == 11
        assert response.out_of_stock_count == 1


class TestListAuditLogsUseCase:
    async def test_default_limit(self):
        store = AsyncMock()
        store.list_recent.return_value = [
            AuditLogEntry(
                id=1,
                actor_id="user-42",
                actor_name="Amina Pharmacist",
                action=AuditAction.SELL,
                details="Sold 1 x Panadol 500mg",
            )
        ]
        use_case = ListAuditLogsUseCase(audit_log_store=store)

        entries = await use_case.execute()

        store.list_recent.assert_awaited_once_with(limit=250)
        assert use_case.to_response(entries).items[0].action == "Sell"

    @pytest.mark.parametrize("limit", [0, 251])
    async def test_limit_bounds(self, mock_audit_sink, limit):
        with pytest.raises(ValidationError):
            await ListAuditLogsUseCase(audit_log_store=mock_audit_sink).execute(limit)
