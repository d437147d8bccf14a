"""
Catalog service — produce listed in the storefront.

Products are hard-deleted, but only while no order references them; orders
price themselves from the live product row.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Order, Product, utcnow
from domain.constants import MAX_ROW_ID
from domain.errors import NotFoundError, ProductInUseError

logger = logging.getLogger(__name__)


async def create_product(db: AsyncSession, *, name: str, price: float) -> Product:
    product = Product(name=name, price=price)
    db.add(product)
    await db.flush()
    logger.info(f"Product created: #{product.id} {product.name} @ {product.price}")
    return product


async def get_product(db: AsyncSession, *, product_id: int) -> Product | None:
    # No row can have an id outside SQLite's INTEGER range
    if not 1 <= product_id <= MAX_ROW_ID:
        return None
    res = await db.execute(select(Product).where(Product.id == product_id))
    return res.scalar_one_or_none()


async def require_product(db: AsyncSession, *, product_id: int) -> Product:
    product = await get_product(db, product_id=product_id)
    if not product:
        raise NotFoundError("Product", str(product_id))
    return product


async def list_all_products(db: AsyncSession) -> list[Product]:
    """Admin listing: every product, newest first."""
    res = await db.execute(select(Product).order_by(Product.created_at.desc(), Product.id.desc()))
    return res.scalars().all()


async def list_store_products(
    db: AsyncSession,
    *,
    query: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Product], int]:
    """Public listing with optional case-insensitive name search. Returns (page, total)."""
    stmt = select(Product)
    if query:
        stmt = stmt.where(Product.name.ilike(f"%{query.strip()}%"))

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    res = await db.execute(
        stmt.order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return res.scalars().all(), total


async def update_product(
    db: AsyncSession,
    *,
    product_id: int,
    name: str | None = None,
    price: float | None = None,
) -> Product:
    """Update a product's fields. Only provided fields are updated."""
    product = await require_product(db, product_id=product_id)

    if name is not None:
        product.name = name
    if price is not None:
        product.price = price

    product.updated_at = utcnow()
    await db.flush()
    return product


async def count_orders_for_product(db: AsyncSession, *, product_id: int) -> int:
    res = await db.execute(select(func.count(Order.id)).where(Order.product_id == product_id))
    return res.scalar_one()


async def delete_product(db: AsyncSession, *, product_id: int) -> Product:
    """Delete a product that no order references."""
    product = await require_product(db, product_id=product_id)

    order_count = await count_orders_for_product(db, product_id=product_id)
    if order_count:
        logger.info(f"Refusing to delete product #{product_id}: {order_count} order(s) reference it")
        raise ProductInUseError(product_id, order_count)

    await db.delete(product)
    await db.flush()
    logger.info(f"Product deleted: #{product_id} {product.name}")
    return product
