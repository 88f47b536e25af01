"""SQLite implementation of medicine storage."""

from datetime import date, datetime
from typing import Any

import aiosqlite

from pharmastock.config import get_logger
from pharmastock.core.entities.medicine import (
    ExpiryMonth,
    Medicine,
    MedicineStatus,
    PrescriptionStatus,
    StorageLocation,
    utcnow,
)
from pharmastock.core.exceptions import ConcurrentUpdateError, DuplicateBatchError
from pharmastock.core.interfaces.medicine_store import (
    SORTABLE_FIELDS,
    IMedicineStore,
    MedicineQuery,
)
from pharmastock.core.services.expiry import add_months
from pharmastock.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)

# Columns written on insert and full update, in binding order.
_WRITE_COLUMNS = (
    "brand_name",
    "generic_name",
    "dosage_form",
    "strength",
    "unit_type",
    "batch_number",
    "store_quantity",
    "dispenser_quantity",
    "sub_unit_quantity",
    "purchase_cost",
    "selling_price",
    "reorder_threshold",
    "reorder_quantity",
    "expiry_date",
    "received_date",
    "prescription_status",
    "storage_location",
    "storage_conditions",
    "supplier_info",
    "notes",
    "image_url",
    "status",
    "is_deleted",
)


def _bind_values(medicine: Medicine) -> list[Any]:
    return [
        medicine.brand_name,
        medicine.generic_name,
        medicine.dosage_form,
        medicine.strength,
        medicine.unit_type,
        medicine.batch_number,
        medicine.store_quantity,
        medicine.dispenser_quantity,
        medicine.sub_unit_quantity,
        medicine.purchase_cost,
        medicine.selling_price,
        medicine.reorder_threshold,
        medicine.reorder_quantity,
        medicine.expiry_date.isoformat(),
        medicine.received_date.isoformat(),
        medicine.prescription_status.value,
        medicine.storage_location.value if medicine.storage_location else None,
        medicine.storage_conditions,
        medicine.supplier_info,
        medicine.notes,
        medicine.image_url,
        medicine.status.value,
        1 if medicine.is_deleted else 0,
    ]


async def write_medicine(
    conn: aiosqlite.Connection,
    medicine: Medicine,
    expected_version: int,
) -> Medicine:
    """
    Conditionally overwrite a medicine row inside the caller's transaction.

    The write only lands if the row is still live and at ``expected_version``;
    otherwise ConcurrentUpdateError is raised and the caller's transaction
    rolls back.
    """
    updated_at = utcnow()
    assignments = ", ".join(f"{col} = ?" for col in _WRITE_COLUMNS)
    cursor = await conn.execute(
        f"""
        UPDATE medicines SET
            {assignments},
            version = version + 1,
            updated_at = ?
        WHERE id = ? AND version = ? AND is_deleted = 0
        """,
        (*_bind_values(medicine), updated_at.isoformat(), medicine.id, expected_version),
    )
    if cursor.rowcount == 0:
        raise ConcurrentUpdateError(medicine.id)  # type: ignore[arg-type]

    return medicine.model_copy(
        update={"version": expected_version + 1, "updated_at": updated_at}
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLiteMedicineStore(IMedicineStore):
    """SQLite implementation of medicine storage."""

    async def create(self, medicine: Medicine) -> Medicine:
        """Insert a medicine and assign its ID."""
        now = utcnow()
        medicine.created_at = now
        medicine.updated_at = now
        columns = ", ".join(_WRITE_COLUMNS)
        placeholders = ", ".join("?" for _ in _WRITE_COLUMNS)
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    f"""
                    INSERT INTO medicines (
                        {columns}, version, created_at, updated_at
                    ) VALUES ({placeholders}, 1, ?, ?)
                    """,
                    (*_bind_values(medicine), now.isoformat(), now.isoformat()),
                )
                medicine.id = cursor.lastrowid
                medicine.version = 1
        except aiosqlite.IntegrityError as e:
            if "idx_medicines_identity" not in str(e) and "UNIQUE" not in str(e):
                raise
            existing = await self.find_by_identity(
                medicine.brand_name, medicine.strength, medicine.batch_number
            )
            raise DuplicateBatchError(
                medicine.brand_name,
                medicine.strength,
                medicine.batch_number,
                existing_id=existing.id if existing and existing.id else 0,
            ) from e

        logger.info(
            "medicine_created",
            medicine_id=medicine.id,
            brand_name=medicine.brand_name,
            batch_number=medicine.batch_number,
        )
        return medicine

    async def get(self, medicine_id: int) -> Medicine | None:
        """Get a live medicine by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM medicines WHERE id = ? AND is_deleted = 0",
                (medicine_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_medicine(row)

    async def find_by_identity(
        self,
        brand_name: str,
        strength: str,
        batch_number: str,
        exclude_id: int | None = None,
    ) -> Medicine | None:
        """Find a live medicine sharing brand, strength and batch."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM medicines
                WHERE brand_name = ? AND strength = ? AND batch_number = ?
                  AND is_deleted = 0 AND id != ?
                LIMIT 1
                """,
                (brand_name, strength, batch_number, exclude_id or -1),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_medicine(row)

    async def update(self, medicine: Medicine, expected_version: int) -> Medicine:
        """Conditionally overwrite a medicine."""
        try:
            async with get_transaction() as conn:
                updated = await write_medicine(conn, medicine, expected_version)
        except aiosqlite.IntegrityError as e:
            existing = await self.find_by_identity(
                medicine.brand_name,
                medicine.strength,
                medicine.batch_number,
                exclude_id=medicine.id,
            )
            if existing is None:
                raise
            raise DuplicateBatchError(
                medicine.brand_name,
                medicine.strength,
                medicine.batch_number,
                existing_id=existing.id,  # type: ignore[arg-type]
            ) from e

        logger.info(
            "medicine_updated",
            medicine_id=updated.id,
            version=updated.version,
            status=updated.status.value,
        )
        return updated

    async def search(self, query: MedicineQuery) -> tuple[list[Medicine], int]:
        """Return one page of live medicines and the total match count."""
        if query.sort_by not in SORTABLE_FIELDS:
            raise ValueError(f"Unsupported sort field: {query.sort_by}")

        clauses = ["is_deleted = 0"]
        params: list[Any] = []

        if query.search and query.search.strip():
            pattern = f"%{_escape_like(query.search.strip())}%"
            clauses.append(
                "(brand_name LIKE ? ESCAPE '\\' OR generic_name LIKE ? ESCAPE '\\' "
                "OR batch_number LIKE ? ESCAPE '\\')"
            )
            params.extend([pattern, pattern, pattern])

        if query.status is not None:
            clauses.append("status = ?")
            params.append(query.status.value)

        if query.expiry_from is not None:
            clauses.append("expiry_date >= ?")
            params.append(query.expiry_from.date().isoformat())

        if query.expiry_to is not None:
            clauses.append("expiry_date <= ?")
            params.append(query.expiry_to.date().isoformat())

        where = " AND ".join(clauses)
        direction = "DESC" if query.descending else "ASC"

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM medicines WHERE {where}", params
            )
            total_row = await cursor.fetchone()
            total = int(total_row[0]) if total_row else 0

            cursor = await conn.execute(
                f"""
                SELECT * FROM medicines
                WHERE {where}
                ORDER BY {query.sort_by} {direction}, id {direction}
                LIMIT ? OFFSET ?
                """,
                (*params, query.limit, query.offset),
            )
            rows = await cursor.fetchall()

        return [self._row_to_medicine(row) for row in rows], total

    async def mark_expired(self, now: datetime) -> int:
        """Flip lapsed live medicines to expired."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE medicines SET
                    status = 'expired',
                    version = version + 1,
                    updated_at = ?
                WHERE is_deleted = 0
                  AND status != 'expired'
                  AND expiry_date < ?
                """,
                (utcnow().isoformat(), now.date().isoformat()),
            )
            count = cursor.rowcount

        if count:
            logger.info("medicines_marked_expired", count=count)
        return count

    async def count_by_status(self) -> dict[MedicineStatus, int]:
        """Count live medicines per status."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT status, COUNT(*) AS n FROM medicines
                WHERE is_deleted = 0
                GROUP BY status
                """
            )
            rows = await cursor.fetchall()

        counts = {status: 0 for status in MedicineStatus}
        for row in rows:
            counts[MedicineStatus(row["status"])] = int(row["n"])
        return counts

    async def expiry_counts_by_month(self, first_month: date, months: int) -> list[ExpiryMonth]:
        """Live medicines grouped by expiry month, zero-filled."""
        starts = [add_months(first_month.replace(day=1), offset) for offset in range(months)]
        if not starts:
            return []
        end = add_months(starts[0], months)

        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT strftime('%Y-%m', expiry_date) AS month, COUNT(*) AS n
                FROM medicines
                WHERE is_deleted = 0
                  AND expiry_date >= ?
                  AND expiry_date < ?
                GROUP BY month
                """,
                (starts[0].isoformat(), end.isoformat()),
            )
            rows = await cursor.fetchall()

        counts = {row["month"]: int(row["n"]) for row in rows}
        return [
            ExpiryMonth(month=start, count=counts.get(start.strftime("%Y-%m"), 0))
            for start in starts
        ]

    @staticmethod
    def _row_to_medicine(row: aiosqlite.Row) -> Medicine:
        """Convert a database row to a Medicine entity."""
        return Medicine(
            id=row["id"],
            brand_name=row["brand_name"],
            generic_name=row["generic_name"],
            dosage_form=row["dosage_form"],
            strength=row["strength"],
            unit_type=row["unit_type"],
            batch_number=row["batch_number"],
            store_quantity=int(row["store_quantity"]),
            dispenser_quantity=int(row["dispenser_quantity"]),
            sub_unit_quantity=row["sub_unit_quantity"],
            purchase_cost=float(row["purchase_cost"]),
            selling_price=float(row["selling_price"]),
            reorder_threshold=int(row["reorder_threshold"]),
            reorder_quantity=row["reorder_quantity"],
            expiry_date=date.fromisoformat(row["expiry_date"]),
            received_date=date.fromisoformat(row["received_date"]),
            prescription_status=PrescriptionStatus(row["prescription_status"]),
            storage_location=(
                StorageLocation(row["storage_location"]) if row["storage_location"] else None
            ),
            storage_conditions=row["storage_conditions"],
            supplier_info=row["supplier_info"],
            notes=row["notes"],
            image_url=row["image_url"],
            status=MedicineStatus(row["status"]),
            is_deleted=bool(row["is_deleted"]),
            version=int(row["version"]),
            created_at=_parse_timestamp(row["created_at"]),
            updated_at=_parse_timestamp(row["updated_at"]),
        )


def _parse_timestamp(value: str | None) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            pass
    return utcnow()
