"""
Order service — order placement, tracking, and status progression.

Every order holds exactly one product. A cart checkout becomes one order per
cart line, all tagged with the same checkout_session_id (see grouping.py).
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Order, Product, utcnow
from domain.constants import MAX_ROW_ID
from domain.enums import OrderStatus
from domain.errors import InvalidStatusTransitionError, NotFoundError, ValidationError
from services.grouping import CheckoutGroup, group_orders, new_checkout_session_id

logger = logging.getLogger(__name__)


async def _products_by_id(db: AsyncSession, product_ids: set[int]) -> dict[int, Product]:
    res = await db.execute(select(Product).where(Product.id.in_(product_ids)))
    return {p.id: p for p in res.scalars().all()}


async def create_order(
    db: AsyncSession,
    *,
    product_id: int,
    quantity: int,
    buyer_name: str,
    contact: str,
    address: str,
    checkout_session_id: str | None = None,
) -> Order:
    products = await _products_by_id(db, {product_id})
    product = products.get(product_id)
    if not product:
        raise ValidationError(f"Unknown product {product_id}", field="productId")

    order = Order(
        product=product,
        quantity=quantity,
        buyer_name=buyer_name,
        contact=contact,
        address=address,
        status=OrderStatus.PENDING.value,
        checkout_session_id=checkout_session_id or None,
    )
    db.add(order)
    await db.flush()

    logger.info(
        f"Order placed: #{order.id} {quantity} x {product.name}"
        + (f" (session {checkout_session_id})" if checkout_session_id else "")
    )
    return order


async def submit_checkout(
    db: AsyncSession,
    *,
    items: list[dict],
    buyer_name: str,
    contact: str,
    address: str,
) -> tuple[str, list[Order]]:
    """
    Place one order per cart line under a fresh checkout session.

    items: [{product_id:int, quantity:int}]
    All lines are flushed together, so the caller's commit makes the whole
    checkout visible at once (or none of it).
    """
    if not items:
        raise ValidationError("Cart is empty", field="items")

    products = await _products_by_id(db, {int(i["product_id"]) for i in items})
    missing = sorted({int(i["product_id"]) for i in items} - products.keys())
    if missing:
        raise ValidationError(
            f"Unknown product(s): {', '.join(str(m) for m in missing)}",
            field="items",
            details={"missingProductIds": missing},
        )

    session_id = new_checkout_session_id()
    orders = []
    for i in items:
        order = Order(
            product=products[int(i["product_id"])],
            quantity=int(i["quantity"]),
            buyer_name=buyer_name,
            contact=contact,
            address=address,
            status=OrderStatus.PENDING.value,
            checkout_session_id=session_id,
        )
        db.add(order)
        orders.append(order)
    await db.flush()

    logger.info(f"Checkout {session_id}: {len(orders)} order(s) for {buyer_name}")
    return session_id, orders


async def get_order(db: AsyncSession, *, order_id: int) -> Order | None:
    if not 1 <= order_id <= MAX_ROW_ID:
        return None
    res = await db.execute(select(Order).where(Order.id == order_id))
    return res.scalar_one_or_none()


async def require_order(db: AsyncSession, *, order_id: int) -> Order:
    order = await get_order(db, order_id=order_id)
    if not order:
        raise NotFoundError("Order", str(order_id))
    return order


async def list_orders(db: AsyncSession) -> list[Order]:
    """Every order, newest first."""
    res = await db.execute(select(Order).order_by(Order.created_at.desc(), Order.id.desc()))
    return res.scalars().all()


async def list_order_groups(db: AsyncSession) -> list[CheckoutGroup]:
    return group_orders(await list_orders(db))


async def get_checkout_group(db: AsyncSession, *, session_id: str) -> CheckoutGroup:
    """All orders of one checkout session, in placement order."""
    res = await db.execute(
        select(Order)
        .where(Order.checkout_session_id == session_id)
        .order_by(Order.id)
    )
    orders = res.scalars().all()
    if not orders:
        raise NotFoundError("Checkout session", session_id)
    return group_orders(orders)[0]


async def update_order_status(
    db: AsyncSession,
    *,
    order_id: int,
    status: OrderStatus,
) -> Order:
    """
    Move an order one step along PENDING -> IN_PROGRESS -> DELIVERED.

    Anything else (skipping a step, going back, re-applying the current
    status, touching a delivered order) is rejected.
    """
    order = await require_order(db, order_id=order_id)

    current = OrderStatus(order.status)
    allowed = current.next_status()
    if status != allowed:
        raise InvalidStatusTransitionError(
            current.value,
            status.value,
            allowed.value if allowed else None,
        )

    order.status = status.value
    order.updated_at = utcnow()
    await db.flush()

    logger.info(f"Order #{order.id} status {current.value} -> {status.value}")
    return order
