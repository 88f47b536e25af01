"""Tests for TransferStockUseCase."""

import pytest

from pharmastock.application.use_cases.transfer_stock import TransferResult, TransferStockUseCase
from pharmastock.core.entities import AuditAction, MedicineStatus
from pharmastock.core.exceptions import (
    ConcurrentUpdateError,
    InsufficientStoreStockError,
    InvalidQuantityError,
    MedicineNotFoundError,
)


@pytest.fixture
def use_case(mock_medicine_store, mock_audit_sink, clock):
    return TransferStockUseCase(
        medicine_store=mock_medicine_store, audit_sink=mock_audit_sink, clock=clock
    )


class TestTransferStockUseCase:
    async def test_successful_transfer(self, use_case, mock_medicine_store, actor, make_medicine):
        """Units move from the store to the dispenser."""
        mock_medicine_store.get.return_value = make_medicine(store_quantity=100, version=4)

        result = await use_case.execute(1, 90, actor)

        assert result.medicine.store_quantity == 10
        assert result.medicine.dispenser_quantity == 90
        assert result.quantity == 90
        _, kwargs = mock_medicine_store.update.call_args
        assert kwargs["expected_version"] == 4

    async def test_total_is_conserved(self, use_case, mock_medicine_store, actor, make_medicine):
        before = make_medicine(store_quantity=37, dispenser_quantity=5)
        mock_medicine_store.get.return_value = before

        result = await use_case.execute(1, 12, actor)

        assert result.medicine.total_quantity == before.total_quantity

    async def test_status_uses_combined_total(
        self, use_case, mock_medicine_store, actor, make_medicine
    ):
        """Store stock drops under the threshold but total stock stays available."""
        mock_medicine_store.get.return_value = make_medicine(store_quantity=100)

        result = await use_case.execute(1, 90, actor)

        assert result.medicine.status == MedicineStatus.AVAILABLE
        assert result.store_reorder_needed is True

    async def test_insufficient_store_stock(
        self, use_case, mock_medicine_store, mock_audit_sink, actor, make_medicine
    ):
        """Over-transfer fails and writes nothing."""
        mock_medicine_store.get.return_value = make_medicine(store_quantity=5)

        with pytest.raises(InsufficientStoreStockError) as exc_info:
            await use_case.execute(1, 6, actor)

        assert exc_info.value.details["available"] == 5
        mock_medicine_store.update.assert_not_called()
        mock_audit_sink.record.assert_not_called()

    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_invalid_quantity(self, use_case, mock_medicine_store, actor, quantity):
        with pytest.raises(InvalidQuantityError):
            await use_case.execute(1, quantity, actor)
        mock_medicine_store.get.assert_not_called()

    async def test_medicine_not_found(self, use_case, mock_medicine_store, actor):
        mock_medicine_store.get.return_value = None

        with pytest.raises(MedicineNotFoundError):
            await use_case.execute(99, 1, actor)

    async def test_audit_entry(
        self, use_case, mock_medicine_store, mock_audit_sink, actor, make_medicine
    ):
        mock_medicine_store.get.return_value = make_medicine()

        await use_case.execute(1, 10, actor)

        recorded_actor, action, details = mock_audit_sink.record.call_args[0]
        assert recorded_actor == actor
        assert action == AuditAction.TRANSFER
        assert "Transferred 10 Box of Panadol" in details

    async def test_retries_on_version_conflict(
        self, use_case, mock_medicine_store, actor, make_medicine
    ):
        """A conflicting write re-reads and re-validates."""
        mock_medicine_store.get.side_effect = [
            make_medicine(store_quantity=50, version=1),
            make_medicine(store_quantity=40, version=2),
        ]
        mock_medicine_store.update.side_effect = [
            ConcurrentUpdateError(1),
            make_medicine(store_quantity=30, dispenser_quantity=10, version=3),
        ]

        result = await use_case.execute(1, 10, actor)

        assert result.medicine.version == 3
        assert mock_medicine_store.get.call_count == 2
        retried = mock_medicine_store.update.call_args_list[1]
        assert retried[0][0].store_quantity == 30
        assert retried[1]["expected_version"] == 2

    async def test_retry_revalidates_stock(
        self, use_case, mock_medicine_store, actor, make_medicine
    ):
        """Stock consumed by a concurrent writer fails the retry."""
        mock_medicine_store.get.side_effect = [
            make_medicine(store_quantity=10, version=1),
            make_medicine(store_quantity=2, version=2),
        ]
        mock_medicine_store.update.side_effect = ConcurrentUpdateError(1)

        with pytest.raises(InsufficientStoreStockError):
            await use_case.execute(1, 5, actor)

    def test_to_response(self, use_case, make_medicine):
        result = TransferResult(medicine=make_medicine(store_quantity=3), quantity=7)
        response = use_case.to_response(result)

        assert response.transferred == 7
        assert response.store_reorder_needed is True
        assert response.medicine.id == 1
