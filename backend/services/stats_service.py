"""
Admin dashboard statistics.

A plain reduction over every order (no windowing). Revenue uses the current
product price, the same way order totals are shown elsewhere.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Order
from domain.constants import TOP_PRODUCTS_LIMIT
from domain.enums import OrderStatus


def compute_stats(orders: list, top_limit: int = TOP_PRODUCTS_LIMIT) -> dict:
    total_orders = len(orders)
    completed_orders = sum(1 for o in orders if o.status == OrderStatus.DELIVERED.value)
    total_revenue = sum(o.product.price * o.quantity for o in orders)

    # Insertion-ordered dict + stable sort: ties keep first-seen order
    counts: dict[int, dict] = {}
    for o in orders:
        entry = counts.setdefault(o.product_id, {"id": o.product_id, "name": o.product.name, "count": 0})
        entry["count"] += 1
    top_products = sorted(counts.values(), key=lambda p: p["count"], reverse=True)[:top_limit]

    return {
        "total_orders": total_orders,
        "completed_orders": completed_orders,
        "total_revenue": total_revenue,
        "average_order_value": total_revenue / total_orders if total_orders else 0.0,
        "conversion_rate": completed_orders / total_orders * 100 if total_orders else 0.0,
        "top_products": top_products,
    }


async def get_admin_stats(db: AsyncSession) -> dict:
    # Oldest first, so top-product ties favour the product ordered earliest
    res = await db.execute(select(Order).order_by(Order.id))
    return compute_stats(res.scalars().all())
