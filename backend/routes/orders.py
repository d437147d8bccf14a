"""
Storefront order endpoints — place orders, check out a cart, track orders.

No authentication: anyone holding an order id or a checkout session id can
track it.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from deps import get_db
from domain.responses import success_response
from models import CheckoutGroupOut, CheckoutRequest, OrderCreateRequest, OrderOut, to_json
from services import order_service
from services.grouping import group_orders
from utils.validators import validated_session_id

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["orders"])


@router.post("/order")
async def create_order(request: OrderCreateRequest, db: AsyncSession = Depends(get_db)):
    order = await order_service.create_order(
        db,
        product_id=request.product_id,
        quantity=request.quantity,
        buyer_name=request.buyer_name,
        contact=request.contact,
        address=request.address,
        checkout_session_id=request.checkout_session_id,
    )
    await db.commit()
    return success_response(data=to_json(OrderOut, order))


@router.get("/order/{order_id}")
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    order = await order_service.require_order(db, order_id=order_id)
    return success_response(data=to_json(OrderOut, order))


@router.post("/checkout", status_code=status.HTTP_201_CREATED)
async def checkout(request: CheckoutRequest, db: AsyncSession = Depends(get_db)):
    """Place every cart line as its own order under one new checkout session."""
    session_id, orders = await order_service.submit_checkout(
        db,
        items=[{"product_id": i.product_id, "quantity": i.quantity} for i in request.items],
        buyer_name=request.buyer_name,
        contact=request.contact,
        address=request.address,
    )
    await db.commit()
    group = group_orders(orders)[0]
    return success_response(data=to_json(CheckoutGroupOut, group), meta={"sessionId": session_id})


@router.get("/checkout/{session_id}")
async def get_checkout_session(
    session_id: str = Depends(validated_session_id),
    db: AsyncSession = Depends(get_db),
):
    group = await order_service.get_checkout_group(db, session_id=session_id)
    return success_response(
        data=to_json(CheckoutGroupOut, group),
        meta={"itemCount": len(group.orders)},
    )
