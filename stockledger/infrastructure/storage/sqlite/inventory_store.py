"""SQLite implementation of inventory storage."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.movement import MovementType, StockMovement
from stockledger.core.entities.product import Category, Product
from stockledger.core.exceptions import (
    DatabaseError,
    DuplicateProductError,
    ProductNotFoundError,
)
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@asynccontextmanager
async def _db_errors(operation: str) -> AsyncIterator[None]:
    """Translate driver errors into DatabaseError."""
    try:
        yield
    except aiosqlite.Error as e:
        logger.error("database_operation_failed", operation=operation, error=str(e))
        raise DatabaseError(operation, str(e)) from e


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of product and stock movement storage."""

    async def add_product(self, product: Product) -> Product:
        """Insert a new product."""
        try:
            async with _db_errors("add_product"), get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO products (
                        sku, name, category, unit_price, quantity,
                        minimum_quantity, created_at, lot_number, expiration_date
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        product.sku,
                        product.name,
                        product.category.value,
                        str(product.unit_price),
                        product.quantity,
                        product.minimum_quantity,
                        _iso(product.created_at),
                        product.lot_number,
                        _iso(product.expiration_date),
                    ),
                )
        except DatabaseError as e:
            if "UNIQUE constraint failed" in e.details.get("error", ""):
                raise DuplicateProductError(product.sku) from e
            raise
        logger.info("product_stored", sku=product.sku)
        return product

    async def get_product(self, sku: int) -> Product | None:
        """Get product by SKU."""
        async with _db_errors("get_product"), get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM products WHERE sku = ?", (sku,))
            row = await cursor.fetchone()
        return self._row_to_product(row) if row else None

    async def list_products(self, limit: int | None = None, offset: int = 0) -> list[Product]:
        """List products ordered by SKU."""
        async with _db_errors("list_products"), get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products ORDER BY sku LIMIT ? OFFSET ?",
                (-1 if limit is None else limit, offset),
            )
            rows = await cursor.fetchall()
        return [self._row_to_product(row) for row in rows]

    async def list_below_minimum(self) -> list[Product]:
        """List products whose quantity is below their minimum quantity."""
        async with _db_errors("list_below_minimum"), get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE quantity < minimum_quantity ORDER BY sku"
            )
            rows = await cursor.fetchall()
        return [self._row_to_product(row) for row in rows]

    async def update_product(self, product: Product) -> Product:
        """Update product metadata. The quantity column is left untouched."""
        async with _db_errors("update_product"), get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE products SET
                    name = ?,
                    category = ?,
                    unit_price = ?,
                    minimum_quantity = ?,
                    lot_number = ?,
                    expiration_date = ?
                WHERE sku = ?
                """,
                (
                    product.name,
                    product.category.value,
                    str(product.unit_price),
                    product.minimum_quantity,
                    product.lot_number,
                    _iso(product.expiration_date),
                    product.sku,
                ),
            )
            if cursor.rowcount == 0:
                raise ProductNotFoundError(product.sku)
            cursor = await conn.execute("SELECT * FROM products WHERE sku = ?", (product.sku,))
            row = await cursor.fetchone()
        logger.info("product_record_updated", sku=product.sku)
        return self._row_to_product(row)

    async def delete_product(self, sku: int) -> bool:
        """Delete a product. Ledger rows are kept."""
        async with _db_errors("delete_product"), get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM products WHERE sku = ?", (sku,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("product_deleted", sku=sku)
        return deleted

    async def append_movement(
        self, movement: StockMovement, new_quantity: int
    ) -> tuple[Product, StockMovement]:
        """Update quantity and insert the ledger row in one transaction."""
        sku = movement.product_sku
        async with _db_errors("append_movement"), get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE products SET quantity = ? WHERE sku = ?",
                (new_quantity, sku),
            )
            if cursor.rowcount == 0:
                raise ProductNotFoundError(sku)  # type: ignore[arg-type]

            cursor = await conn.execute(
                """
                INSERT INTO stock_movements (
                    product_sku, movement_type, quantity,
                    movement_date, batch, expiration_date
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    sku,
                    movement.movement_type.value,
                    movement.quantity,
                    _iso(movement.date),
                    movement.batch,
                    _iso(movement.expiration_date),
                ),
            )
            recorded = movement.model_copy(update={"id": cursor.lastrowid})

            cursor = await conn.execute("SELECT * FROM products WHERE sku = ?", (sku,))
            row = await cursor.fetchone()

        logger.info(
            "stock_movement_recorded",
            movement_id=recorded.id,
            sku=sku,
            type=recorded.movement_type.value,
            qty=recorded.quantity,
        )
        return self._row_to_product(row), recorded

    async def get_movement(self, movement_id: int) -> StockMovement | None:
        """Get movement by ID."""
        async with _db_errors("get_movement"), get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_movements WHERE id = ?", (movement_id,)
            )
            row = await cursor.fetchone()
        return self._row_to_movement(row) if row else None

    async def list_movements(self, limit: int = 100, offset: int = 0) -> list[StockMovement]:
        """List all movements, newest first."""
        async with _db_errors("list_movements"), get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_movements
                ORDER BY movement_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
        return [self._row_to_movement(row) for row in rows]

    async def list_movements_by_product(
        self, sku: int, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        """Get movements for a product, newest first."""
        async with _db_errors("list_movements_by_product"), get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_movements
                WHERE product_sku = ?
                ORDER BY movement_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (sku, limit, offset),
            )
            rows = await cursor.fetchall()
        return [self._row_to_movement(row) for row in rows]

    def _row_to_product(self, row: aiosqlite.Row) -> Product:
        """Convert database row to Product."""
        return Product(
            sku=row["sku"],
            name=row["name"],
            category=Category(row["category"]),
            unit_price=Decimal(row["unit_price"]),
            quantity=row["quantity"],
            minimum_quantity=row["minimum_quantity"],
            created_at=_dt(row["created_at"]),
            lot_number=row["lot_number"],
            expiration_date=_dt(row["expiration_date"]),
        )

    def _row_to_movement(self, row: aiosqlite.Row) -> StockMovement:
        """Convert database row to StockMovement."""
        return StockMovement(
            id=row["id"],
            product_sku=row["product_sku"],
            movement_type=MovementType(row["movement_type"]),
            quantity=row["quantity"],
            date=_dt(row["movement_date"]),
            batch=row["batch"],
            expiration_date=_dt(row["expiration_date"]),
        )
