"""
Public catalog endpoints — browse and search produce.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from deps import Pagination, get_db, pagination_params
from domain.responses import paginated_response, success_response
from models import ProductOut, to_json
from services import catalog_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/products", tags=["catalog"])


@router.get("")
async def list_products(
    query: Optional[str] = Query(None, max_length=100, description="Case-insensitive name search"),
    page: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    products, total = await catalog_service.list_store_products(
        db,
        query=query,
        limit=page["limit"],
        offset=page["offset"],
    )
    return paginated_response(
        [to_json(ProductOut, p) for p in products],
        limit=page["limit"],
        offset=page["offset"],
        total=total,
    )


@router.get("/{product_id}")
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await catalog_service.require_product(db, product_id=product_id)
    return success_response(data=to_json(ProductOut, product))
