"""
Admin endpoints — login, product management, order status, dashboard stats.

Everything except POST /api/admin/auth requires an admin bearer token.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from deps import get_db, require_admin
from domain.errors import UnauthorizedError
from domain.responses import success_response
from middleware.auth import check_admin_password, issue_admin_token
from middleware.rate_limit import rate_limit
from models import (
    AdminAuthRequest,
    AdminStats,
    AdminTokenResponse,
    CheckoutGroupOut,
    OrderOut,
    ProductCreateRequest,
    ProductOut,
    ProductUpdateRequest,
    StatusUpdateRequest,
    to_json,
)
from services import catalog_service, order_service, stats_service

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api/admin", tags=["admin"])
router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# ── Auth ────────────────────────────────────────────────────────────

@auth_router.post("/auth")
async def admin_login(
    request: AdminAuthRequest,
    _rate=Depends(rate_limit(
        lambda: settings.admin_auth_max_attempts,
        lambda: settings.admin_auth_window_seconds,
    )),
):
    if not check_admin_password(request.password):
        logger.warning("Admin login rejected: invalid password")
        raise UnauthorizedError("Invalid password")

    token = issue_admin_token()
    logger.info("Admin token issued")
    return success_response(
        data=to_json(
            AdminTokenResponse,
            {"token": token, "expires_in_seconds": settings.admin_token_ttl_minutes * 60},
        )
    )


# ── Products ────────────────────────────────────────────────────────

@router.get("/products")
async def list_products(db: AsyncSession = Depends(get_db)):
    products = await catalog_service.list_all_products(db)
    return success_response(
        data=[to_json(ProductOut, p) for p in products],
        meta={"total": len(products)},
    )


@router.post("/products", status_code=status.HTTP_201_CREATED)
async def create_product(request: ProductCreateRequest, db: AsyncSession = Depends(get_db)):
    product = await catalog_service.create_product(db, name=request.name, price=request.price)
    await db.commit()
    await db.refresh(product)
    return success_response(data=to_json(ProductOut, product))


@router.put("/products/{product_id}")
async def update_product(
    product_id: int,
    request: ProductUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    product = await catalog_service.update_product(
        db,
        product_id=product_id,
        name=request.name,
        price=request.price,
    )
    await db.commit()
    await db.refresh(product)
    return success_response(data=to_json(ProductOut, product))


@router.delete("/products/{product_id}")
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await catalog_service.delete_product(db, product_id=product_id)
    await db.commit()
    return success_response(
        data={
            "id": product_id,
            "deleted": True,
            "message": f"Product '{product.name}' deleted",
        }
    )


# ── Orders ──────────────────────────────────────────────────────────

@router.get("/orders")
async def list_orders(db: AsyncSession = Depends(get_db)):
    orders = await order_service.list_orders(db)
    return success_response(
        data=[to_json(OrderOut, o) for o in orders],
        meta={"total": len(orders)},
    )


@router.get("/orders/grouped")
async def list_order_groups(db: AsyncSession = Depends(get_db)):
    """Orders partitioned by checkout session, newest group first."""
    groups = await order_service.list_order_groups(db)
    return success_response(
        data=[to_json(CheckoutGroupOut, g) for g in groups],
        meta={"total": len(groups)},
    )


@router.put("/order/{order_id}")
async def update_order_status(
    order_id: int,
    request: StatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    order = await order_service.update_order_status(db, order_id=order_id, status=request.status)
    await db.commit()
    return success_response(data=to_json(OrderOut, order))


# ── Stats ───────────────────────────────────────────────────────────

@router.get("/stats")
async def get_stats(db: AsyncSession = Depends(get_db)):
    stats = await stats_service.get_admin_stats(db)
    return success_response(data=to_json(AdminStats, stats))
