"""
Stock-health status derivation.

Status is a pure function of total stock, reorder threshold, expiry and the
current time. Use cases call it at every write that changes one of those
inputs; nothing recomputes it implicitly.
"""

from datetime import date, datetime

from pharmastock.core.entities.medicine import Medicine, MedicineStatus


def _is_expired(expiry_date: date | datetime, now: datetime) -> bool:
    if isinstance(expiry_date, datetime):
        return expiry_date < now
    return expiry_date < now.date()


def derive_status(
    store_qty: int,
    dispenser_qty: int,
    threshold: int,
    expiry_date: date | datetime,
    now: datetime,
) -> MedicineStatus:
    """
    Compute a medicine's availability status.

    Rules are ordered; the first match wins:
    1. expiry date in the past -> expired
    2. no stock in either pool -> out-of-stock
    3. total stock under the reorder threshold -> low-stock
    4. otherwise -> available
    """
    if _is_expired(expiry_date, now):
        return MedicineStatus.EXPIRED

    total = store_qty + dispenser_qty
    if total == 0:
        return MedicineStatus.OUT_OF_STOCK
    if total < threshold:
        return MedicineStatus.LOW_STOCK
    return MedicineStatus.AVAILABLE


def status_for(medicine: Medicine, now: datetime) -> MedicineStatus:
    """``derive_status`` over a medicine's current fields."""
    return derive_status(
        medicine.store_quantity,
        medicine.dispenser_quantity,
        medicine.reorder_threshold,
        medicine.expiry_date,
        now,
    )
