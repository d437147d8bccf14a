"""
Tests for the order service.

Tests: placement, checkout submission, checkout lookup, status progression.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest

from domain.enums import OrderStatus
from domain.errors import InvalidStatusTransitionError, NotFoundError, ValidationError
from services import order_service


class TestCreateOrder:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_new_order_is_pending(self, make_product, make_order):
        product = await make_product("Tomatoes", 3.0)
        order = await make_order(product, quantity=4)
        assert order.status == "PENDING"
        assert order.line_total == 12.0
        assert order.checkout_session_id is None

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_keeps_checkout_session(self, make_product, make_order):
        product = await make_product()
        order = await make_order(product, session_id="cart_checkout_1_abcdefgh")
        assert order.checkout_session_id == "cart_checkout_1_abcdefgh"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_unknown_product(self, db_session):
        with pytest.raises(ValidationError) as exc:
            await order_service.create_order(
                db_session,
                product_id=404,
                quantity=1,
                buyer_name="Asha",
                contact="asha@example.com",
                address="Pune",
            )
        assert "Unknown product 404" in exc.value.message


class TestSubmitCheckout:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_one_order_per_line_same_session(self, db_session, make_product):
        a = await make_product("A", 3.0)
        b = await make_product("B", 5.0)

        session_id, orders = await order_service.submit_checkout(
            db_session,
            items=[{"product_id": a.id, "quantity": 2}, {"product_id": b.id, "quantity": 1}],
            buyer_name="Asha",
            contact="asha@example.com",
            address="Pune",
        )
        await db_session.commit()

        assert session_id.startswith("cart_checkout_")
        assert len(orders) == 2
        assert {o.checkout_session_id for o in orders} == {session_id}

        group = await order_service.get_checkout_group(db_session, session_id=session_id)
        assert group.total_amount == 11.0
        assert [o.product_id for o in group.orders] == [a.id, b.id]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_unknown_product_places_nothing(self, db_session, make_product):
        a = await make_product("A", 3.0)
        with pytest.raises(ValidationError) as exc:
            await order_service.submit_checkout(
                db_session,
                items=[{"product_id": a.id, "quantity": 1}, {"product_id": 999, "quantity": 1}],
                buyer_name="Asha",
                contact="asha@example.com",
                address="Pune",
            )
        assert exc.value.details == {"missingProductIds": [999]}
        assert await order_service.list_orders(db_session) == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_empty_cart(self, db_session):
        with pytest.raises(ValidationError):
            await order_service.submit_checkout(
                db_session, items=[], buyer_name="Asha", contact="x", address="y",
            )


class TestCheckoutLookup:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_unknown_session(self, db_session):
        with pytest.raises(NotFoundError) as exc:
            await order_service.get_checkout_group(db_session, session_id="cart_checkout_0_zzzzzzzz")
        assert exc.value.status_code == 404

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_list_order_groups(self, db_session, make_product, make_order):
        product = await make_product()
        await make_order(product, session_id="S1")
        await make_order(product, session_id="S1")
        single = await make_order(product)

        groups = await order_service.list_order_groups(db_session)
        keys = {g.key for g in groups}
        assert keys == {"S1", f"single_{single.id}"}


class TestUpdateOrderStatus:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_full_lifecycle(self, db_session, make_product, make_order):
        order = await make_order(await make_product())

        order = await order_service.update_order_status(
            db_session, order_id=order.id, status=OrderStatus.IN_PROGRESS,
        )
        assert order.status == "IN_PROGRESS"

        order = await order_service.update_order_status(
            db_session, order_id=order.id, status=OrderStatus.DELIVERED,
        )
        assert order.status == "DELIVERED"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_cannot_skip_a_step(self, db_session, make_product, make_order):
        order = await make_order(await make_product())
        with pytest.raises(InvalidStatusTransitionError) as exc:
            await order_service.update_order_status(
                db_session, order_id=order.id, status=OrderStatus.DELIVERED,
            )
        assert exc.value.details["allowed"] == "IN_PROGRESS"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_cannot_reapply_current_status(self, db_session, make_product, make_order):
        order = await make_order(await make_product())
        with pytest.raises(InvalidStatusTransitionError):
            await order_service.update_order_status(
                db_session, order_id=order.id, status=OrderStatus.PENDING,
            )

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_delivered_is_final(self, db_session, make_product, make_order):
        order = await make_order(await make_product())
        for step in (OrderStatus.IN_PROGRESS, OrderStatus.DELIVERED):
            await order_service.update_order_status(db_session, order_id=order.id, status=step)

        with pytest.raises(InvalidStatusTransitionError) as exc:
            await order_service.update_order_status(
                db_session, order_id=order.id, status=OrderStatus.IN_PROGRESS,
            )
        assert exc.value.details["allowed"] is None

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_missing_order(self, db_session):
        with pytest.raises(NotFoundError):
            await order_service.update_order_status(
                db_session, order_id=77, status=OrderStatus.IN_PROGRESS,
            )


class TestOutOfRangeIds:

    @pytest.mark.integration
    @pytest.mark.asyncio
    @pytest.mark.parametrize("order_id", [0, -1, 2**63, 10**20])
    async def test_get_order_outside_row_range(self, db_session, order_id):
        assert await order_service.get_order(db_session, order_id=order_id) is None
        with pytest.raises(NotFoundError):
            await order_service.require_order(db_session, order_id=order_id)
