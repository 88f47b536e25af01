"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Generator
from datetime import date, datetime
from typing import Any

import pytest

from pharmastock.config import reset_settings
from pharmastock.core.entities import Actor, Medicine, MedicineStatus, PrescriptionStatus

FIXED_NOW = datetime(2026, 3, 15, 10, 30, 0)


@pytest.fixture(autouse=True)
def _fresh_settings(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Point settings at a per-test data directory."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock(now: datetime) -> Callable[[], datetime]:
    return lambda: now


@pytest.fixture
def actor() -> Actor:
    return Actor(id="user-42", name="Amina Pharmacist")


@pytest.fixture
def make_medicine() -> Callable[..., Medicine]:
    """Factory for medicines; keyword overrides win over defaults."""

    def _make(**overrides: Any) -> Medicine:
        fields: dict[str, Any] = {
            "id": 1,
            "brand_name": "Panadol",
            "generic_name": "Paracetamol",
            "dosage_form": "Tablet",
            "strength": "500mg",
            "unit_type": "Box",
            "batch_number": "B-1001",
            "store_quantity": 100,
            "dispenser_quantity": 0,
            "purchase_cost": 2.0,
            "selling_price": 3.5,
            "reorder_threshold": 20,
            "expiry_date": date(2027, 6, 30),
            "received_date": date(2026, 1, 10),
            "prescription_status": PrescriptionStatus.OTC,
            "status": MedicineStatus.AVAILABLE,
            "version": 1,
        }
        fields.update(overrides)
        return Medicine(**fields)

    return _make
