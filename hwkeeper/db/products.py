"""Product inventory CRUD operations."""

from __future__ import annotations

import calendar
import sqlite3
from dataclasses import dataclass, fields
from datetime import date, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from .schema import ensure_schema

if TYPE_CHECKING:
    from ..models import ReceiptProcessingResult

PRODUCT_STATUSES = ("active", "discontinued", "broken", "sold")

# Window used for "warranty expiring soon"
EXPIRING_WITHIN_DAYS = 30


@dataclass
class ProductCreate:
    """Fields accepted when adding a product."""

    name: str
    brand: str | None = None
    model: str | None = None
    purchase_date: str | None = None  # YYYY-MM-DD
    warranty_months: int | None = None
    purchase_price: float | None = None
    receipt_image_url: str | None = None
    status: str = "active"
    is_public: bool = False
    notes: str | None = None


@dataclass
class Product:
    """A stored product row."""

    id: int
    name: str
    brand: str | None
    model: str | None
    purchase_date: str | None
    warranty_months: int | None
    warranty_expires_at: str | None
    purchase_price: float | None
    receipt_image_url: str | None
    status: str
    discontinue_reason: str | None
    is_public: bool
    notes: str | None
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Product:
        data = dict(row)
        data["is_public"] = bool(data["is_public"])
        return cls(**data)


_UPDATABLE_FIELDS = frozenset(
    f.name for f in fields(ProductCreate)
) | {"discontinue_reason", "warranty_expires_at"}


def add_months(start: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping to the month's end."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def warranty_expiry(purchase_date: str | None, warranty_months: int | None) -> str | None:
    """Warranty end date, or None unless both inputs are known."""
    if not purchase_date or not warranty_months:
        return None
    try:
        start = date.fromisoformat(purchase_date)
    except ValueError:
        return None
    return add_months(start, warranty_months).isoformat()


def _check_status(status: str) -> None:
    if status not in PRODUCT_STATUSES:
        raise ValueError(
            f"Unknown product status: {status!r} (choose {' / '.join(PRODUCT_STATUSES)})"
        )


class ProductDB:
    """Manages the products table."""

    def __init__(self, db_path: str | Path = "~/.config/hwkeeper/products.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def create_product(self, data: ProductCreate) -> Product:
        """Insert a product, computing its warranty expiry date."""
        _check_status(data.status)
        conn = self._get_conn()
        cur = conn.execute(
            """INSERT INTO products
               (name, brand, model, purchase_date, warranty_months,
                warranty_expires_at, purchase_price, receipt_image_url,
                status, is_public, notes)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                data.name,
                data.brand,
                data.model,
                data.purchase_date,
                data.warranty_months,
                warranty_expiry(data.purchase_date, data.warranty_months),
                data.purchase_price,
                data.receipt_image_url,
                data.status,
                int(data.is_public),
                data.notes,
            ),
        )
        conn.commit()
        return self.get_product(cur.lastrowid)

    def create_products(self, items: list[ProductCreate]) -> list[Product]:
        return [self.create_product(item) for item in items]

    def get_product(self, product_id: int) -> Product:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM products WHERE id = ?", (product_id,)
        ).fetchone()
        if row is None:
            raise LookupError(f"Product {product_id} not found")
        return Product.from_row(row)

    def update_product(self, product_id: int, **changes) -> Product:
        """Update the given columns.

        The warranty expiry is recomputed when the purchase date or the
        warranty length changes and both are known afterwards.
        """
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if "status" in changes:
            _check_status(changes["status"])

        current = self.get_product(product_id)
        if "warranty_months" in changes or "purchase_date" in changes:
            expiry = warranty_expiry(
                changes.get("purchase_date", current.purchase_date),
                changes.get("warranty_months", current.warranty_months),
            )
            if expiry is not None:
                changes["warranty_expires_at"] = expiry
        if "is_public" in changes:
            changes["is_public"] = int(bool(changes["is_public"]))
        if not changes:
            return current

        columns = sorted(changes)
        assignments = ", ".join(f"{column} = ?" for column in columns)
        conn = self._get_conn()
        conn.execute(
            f"""UPDATE products
                SET {assignments},
                    updated_at = strftime('%Y-%m-%dT%H:%M:%f', 'now', 'localtime')
                WHERE id = ?""",
            (*[changes[c] for c in columns], product_id),
        )
        conn.commit()
        return self.get_product(product_id)

    def delete_product(self, product_id: int) -> None:
        """Delete a product by ID."""
        conn = self._get_conn()
        cur = conn.execute("DELETE FROM products WHERE id = ?", (product_id,))
        conn.commit()
        if cur.rowcount == 0:
            raise LookupError(f"Product {product_id} not found")

    def list_products(
        self,
        *,
        status: str | None = None,
        search: str | None = None,
        expiring_only: bool = False,
        today: date | None = None,
    ) -> list[Product]:
        """Return products, newest first.

        ``search`` matches name, brand or model case-insensitively.
        ``expiring_only`` keeps products whose warranty ends within
        EXPIRING_WITHIN_DAYS (including ones already expired).
        """
        clauses: list[str] = []
        params: list = []

        if status is not None:
            _check_status(status)
            clauses.append("status = ?")
            params.append(status)
        if search:
            pattern = f"%{search.lower()}%"
            clauses.append(
                "(lower(name) LIKE ? OR lower(coalesce(brand, '')) LIKE ?"
                " OR lower(coalesce(model, '')) LIKE ?)"
            )
            params.extend([pattern, pattern, pattern])
        if expiring_only:
            limit = (today or date.today()) + timedelta(days=EXPIRING_WITHIN_DAYS)
            clauses.append("warranty_expires_at IS NOT NULL AND warranty_expires_at < ?")
            params.append(limit.isoformat())

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        conn = self._get_conn()
        rows = conn.execute(
            f"SELECT * FROM products {where} ORDER BY created_at DESC, id DESC",
            params,
        ).fetchall()
        return [Product.from_row(r) for r in rows]

    def product_stats(self, today: date | None = None) -> dict[str, int]:
        """Counts for the inventory overview."""
        today = today or date.today()
        limit = today + timedelta(days=EXPIRING_WITHIN_DAYS)
        conn = self._get_conn()
        row = conn.execute(
            """SELECT
                   COUNT(*) AS total,
                   COALESCE(SUM(status = 'active'), 0) AS active,
                   COALESCE(SUM(is_public), 0) AS public,
                   COALESCE(SUM(warranty_expires_at > ?
                                AND warranty_expires_at <= ?), 0) AS expiring_soon
               FROM products""",
            (today.isoformat(), limit.isoformat()),
        ).fetchone()
        return dict(row)


def products_from_result(
    result: ReceiptProcessingResult,
    selected: list[int] | None = None,
    receipt_image_url: str | None = None,
) -> list[ProductCreate]:
    """Map extracted receipt products to insertable records.

    ``selected`` holds zero-based indexes into ``result.products``; None
    takes every product.
    """
    products = result.products
    if selected is not None:
        products = [products[i] for i in selected]

    return [
        ProductCreate(
            name=p.name,
            purchase_date=p.purchase_date,
            warranty_months=p.warranty_months,
            purchase_price=p.price,
            receipt_image_url=receipt_image_url,
            notes=f"Product Type: {p.product_type}" if p.product_type else None,
        )
        for p in products
    ]
