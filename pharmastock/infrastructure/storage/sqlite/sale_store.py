"""SQLite implementation of the append-only sale ledger."""

from datetime import date, datetime
from typing import Any

import aiosqlite

from pharmastock.config import get_logger
from pharmastock.core.entities.medicine import Medicine, utcnow
from pharmastock.core.entities.sale import DailySales, SaleRecord, TopSeller
from pharmastock.core.interfaces.sale_store import ISaleStore
from pharmastock.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)
from pharmastock.infrastructure.storage.sqlite.medicine_store import write_medicine

logger = get_logger(__name__)


class SQLiteSaleStore(ISaleStore):
    """SQLite implementation of sale record storage."""

    async def commit_sales(
        self,
        medicines: list[tuple[Medicine, int]],
        records: list[SaleRecord],
    ) -> list[SaleRecord]:
        """Apply every stock decrement and insert every record, or nothing."""
        saved: list[SaleRecord] = []
        async with get_transaction() as conn:
            for medicine, expected_version in medicines:
                await write_medicine(conn, medicine, expected_version)

            for record in records:
                cursor = await conn.execute(
                    """
                    INSERT INTO sale_records (
                        medicine_id, brand_name, generic_name, batch_number,
                        strength, dosage_form, unit_type, quantity_sold,
                        selling_price, purchase_cost, profit,
                        stock_before, stock_after, sold_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.medicine_id,
                        record.brand_name,
                        record.generic_name,
                        record.batch_number,
                        record.strength,
                        record.dosage_form,
                        record.unit_type,
                        record.quantity_sold,
                        record.selling_price,
                        record.purchase_cost,
                        record.profit,
                        record.stock_before,
                        record.stock_after,
                        record.sold_at.isoformat(),
                    ),
                )
                saved.append(record.with_id(cursor.lastrowid))  # type: ignore[arg-type]

        logger.info(
            "sales_committed",
            medicines=len(medicines),
            records=len(saved),
            units=sum(r.quantity_sold for r in saved),
        )
        return saved

    async def get(self, sale_id: int) -> SaleRecord | None:
        """Get a sale record by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM sale_records WHERE id = ?",
                (sale_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_record(row)

    async def list_sales(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        medicine_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[SaleRecord], int]:
        """List sale records newest first."""
        clauses: list[str] = []
        params: list[Any] = []

        if start is not None:
            clauses.append("sold_at >= ?")
            params.append(start.isoformat())
        if end is not None:
            clauses.append("sold_at <= ?")
            params.append(end.isoformat())
        if medicine_id is not None:
            clauses.append("medicine_id = ?")
            params.append(medicine_id)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM sale_records {where}", params
            )
            total_row = await cursor.fetchone()
            total = int(total_row[0]) if total_row else 0

            cursor = await conn.execute(
                f"""
                SELECT * FROM sale_records
                {where}
                ORDER BY sold_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()

        return [self._row_to_record(row) for row in rows], total

    async def top_sellers(self, limit: int = 5) -> list[TopSeller]:
        """Medicines ranked by total units sold, ties broken by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT medicine_id,
                       (SELECT brand_name FROM sale_records r2
                        WHERE r2.medicine_id = r.medicine_id
                        ORDER BY r2.id DESC LIMIT 1) AS brand_name,
                       SUM(quantity_sold) AS total_sold
                FROM sale_records r
                GROUP BY medicine_id
                ORDER BY total_sold DESC, medicine_id ASC
                LIMIT ?
                """,
                (limit,),
            )
            rows = await cursor.fetchall()

        return [
            TopSeller(
                medicine_id=row["medicine_id"],
                brand_name=row["brand_name"],
                total_sold=int(row["total_sold"]),
            )
            for row in rows
        ]

    async def daily_sales(self, start: datetime, end: datetime) -> list[DailySales]:
        """Per-day sums over [start, end]; days without sales are absent."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT date(sold_at) AS day,
                       SUM(quantity_sold) AS units_sold,
                       SUM(quantity_sold * selling_price) AS revenue,
                       SUM(profit) AS profit
                FROM sale_records
                WHERE sold_at >= ? AND sold_at <= ?
                GROUP BY day
                ORDER BY day ASC
                """,
                (start.isoformat(), end.isoformat()),
            )
            rows = await cursor.fetchall()

        return [
            DailySales(
                day=date.fromisoformat(row["day"]),
                units_sold=int(row["units_sold"]),
                revenue=float(row["revenue"]),
                profit=float(row["profit"]),
            )
            for row in rows
        ]

    async def records_between(self, start: datetime, end: datetime) -> list[SaleRecord]:
        """All records sold in [start, end], newest first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM sale_records
                WHERE sold_at >= ? AND sold_at <= ?
                ORDER BY sold_at DESC, id DESC
                """,
                (start.isoformat(), end.isoformat()),
            )
            rows = await cursor.fetchall()

        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> SaleRecord:
        """Convert a database row to a SaleRecord."""
        try:
            sold_at = datetime.fromisoformat(row["sold_at"])
        except (ValueError, TypeError):
            sold_at = utcnow()

        return SaleRecord(
            id=row["id"],
            medicine_id=row["medicine_id"],
            brand_name=row["brand_name"],
            generic_name=row["generic_name"],
            batch_number=row["batch_number"],
            strength=row["strength"],
            dosage_form=row["dosage_form"],
            unit_type=row["unit_type"],
            quantity_sold=int(row["quantity_sold"]),
            selling_price=float(row["selling_price"]),
            purchase_cost=float(row["purchase_cost"]),
            profit=float(row["profit"]),
            stock_before=int(row["stock_before"]),
            stock_after=int(row["stock_after"]),
            sold_at=sold_at,
        )
