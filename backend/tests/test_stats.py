"""
Tests for admin dashboard statistics.

Tests: compute_stats() reduction, top products, empty input, DB-backed read.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from types import SimpleNamespace

import pytest

from services.stats_service import compute_stats, get_admin_stats


def _order(product_id, price, quantity=1, status="PENDING", name=None):
    return SimpleNamespace(
        product_id=product_id,
        product=SimpleNamespace(id=product_id, name=name or f"P{product_id}", price=price),
        quantity=quantity,
        status=status,
    )


class TestComputeStats:

    @pytest.mark.unit
    def test_totals(self):
        """Two delivered (10, 20) and one pending (5)."""
        stats = compute_stats([
            _order(1, 10.0, status="DELIVERED"),
            _order(2, 20.0, status="DELIVERED"),
            _order(3, 5.0),
        ])
        assert stats["total_orders"] == 3
        assert stats["completed_orders"] == 2
        assert stats["total_revenue"] == 35.0
        assert stats["conversion_rate"] == pytest.approx(66.67, abs=0.01)
        assert stats["average_order_value"] == pytest.approx(35.0 / 3)

    @pytest.mark.unit
    def test_revenue_counts_all_statuses(self):
        stats = compute_stats([_order(1, 2.5, quantity=4, status="IN_PROGRESS")])
        assert stats["total_revenue"] == 10.0
        assert stats["completed_orders"] == 0

    @pytest.mark.unit
    def test_empty(self):
        stats = compute_stats([])
        assert stats == {
            "total_orders": 0,
            "completed_orders": 0,
            "total_revenue": 0,
            "average_order_value": 0.0,
            "conversion_rate": 0.0,
            "top_products": [],
        }

    @pytest.mark.unit
    def test_top_products_by_order_count(self):
        orders = [_order(1, 1.0), _order(2, 1.0), _order(2, 1.0, quantity=50), _order(3, 1.0)]
        top = compute_stats(orders)["top_products"]
        assert top[0] == {"id": 2, "name": "P2", "count": 2}
        # ties keep first-seen order
        assert [p["id"] for p in top] == [2, 1, 3]

    @pytest.mark.unit
    def test_top_products_limited(self):
        orders = [_order(i, 1.0) for i in range(1, 9)]
        assert len(compute_stats(orders)["top_products"]) == 5
        assert len(compute_stats(orders, top_limit=2)["top_products"]) == 2


class TestGetAdminStats:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_reads_all_orders(self, db_session, make_product, make_order):
        tomatoes = await make_product("Tomatoes", 3.0)
        onions = await make_product("Onions", 5.0)
        await make_order(tomatoes, quantity=2)
        await make_order(onions, quantity=1)
        await make_order(tomatoes, quantity=1)

        stats = await get_admin_stats(db_session)
        assert stats["total_orders"] == 3
        assert stats["total_revenue"] == 14.0
        assert stats["top_products"][0]["name"] == "Tomatoes"
        assert stats["top_products"][0]["count"] == 2
