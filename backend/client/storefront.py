"""
Async HTTP client for the storefront and admin APIs.

Mirrors what the web frontend does:
  - checkout() fans a cart out into one POST /api/order per line, all tagged
    with one checkout session id, fired concurrently
  - advance_group() moves every order of a checkout group to the next status
    with one concurrent PUT per member

Neither operation is atomic. Orders (or status changes) that succeeded before
a failure stay in place; the raised error lists what did and did not go
through so the caller can retry the rest.
"""
import asyncio
import logging
from typing import Any, Optional

import httpx

from client.cart import Cart
from config import settings
from domain.enums import OrderStatus
from models import BuyerDetails
from services.grouping import new_checkout_session_id

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    """Non-2xx answer from the API."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.details = details


class CheckoutError(Exception):
    """Some cart lines could not be ordered."""

    def __init__(self, message: str, session_id: Optional[str] = None,
                 placed: Optional[list] = None, failed: Optional[list] = None):
        super().__init__(message)
        self.session_id = session_id
        self.placed = placed or []
        self.failed = failed or []


class GroupTransitionError(Exception):
    """A checkout group could not be (fully) moved to its next status."""

    def __init__(self, message: str, updated: Optional[list] = None,
                 failed_order_ids: Optional[list[int]] = None):
        super().__init__(message)
        self.updated = updated or []
        self.failed_order_ids = failed_order_ids or []


class StorefrontClient:
    """
    Thin wrapper around httpx.AsyncClient.

    Usage:
        async with StorefrontClient() as api:
            products = await api.list_products(query="tomato")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.storefront_api_url,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "StorefrontClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Plumbing ────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, *, admin: bool = False, **kwargs) -> dict:
        headers = kwargs.pop("headers", {})
        if admin:
            if not self.token:
                raise StorefrontError(401, "Not logged in as admin")
            headers["Authorization"] = f"Bearer {self.token}"

        response = await self._client.request(method, path, headers=headers, **kwargs)
        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.is_error:
            error = payload.get("error") if isinstance(payload, dict) else None
            error = error if isinstance(error, dict) else {}
            raise StorefrontError(
                response.status_code,
                error.get("message") or response.reason_phrase,
                error.get("details"),
            )
        return payload

    async def _data(self, method: str, path: str, **kwargs) -> Any:
        return (await self._request(method, path, **kwargs))["data"]

    # ── Catalog ─────────────────────────────────────────────────────

    async def list_products(self, query: Optional[str] = None, limit: int = 50, offset: int = 0) -> list[dict]:
        params = {"limit": limit, "offset": offset}
        if query:
            params["query"] = query
        return await self._data("GET", "/api/products", params=params)

    async def get_product(self, product_id: int) -> dict:
        return await self._data("GET", f"/api/products/{product_id}")

    # ── Orders ──────────────────────────────────────────────────────

    async def place_order(
        self,
        product_id: int,
        quantity: int,
        buyer: BuyerDetails,
        checkout_session_id: Optional[str] = None,
    ) -> dict:
        body = {
            "productId": product_id,
            "quantity": quantity,
            **buyer.model_dump(by_alias=True),
        }
        if checkout_session_id:
            body["checkoutSessionId"] = checkout_session_id
        return await self._data("POST", "/api/order", json=body)

    async def get_order(self, order_id: int) -> dict:
        return await self._data("GET", f"/api/order/{order_id}")

    async def get_checkout_session(self, session_id: str) -> dict:
        return await self._data("GET", f"/api/checkout/{session_id}")

    async def checkout(self, cart: Cart, buyer: BuyerDetails) -> dict:
        """
        Order every cart line under one new checkout session.

        The cart is cleared only when every line was ordered.
        Returns {"sessionId", "orders"}.
        """
        if cart.is_empty:
            raise CheckoutError("Cart is empty")

        session_id = new_checkout_session_id()
        lines = cart.items
        results = await asyncio.gather(
            *(self.place_order(i.product_id, i.quantity, buyer, session_id) for i in lines),
            return_exceptions=True,
        )

        placed = [r for r in results if not isinstance(r, BaseException)]
        failed = [(line, r) for line, r in zip(lines, results) if isinstance(r, BaseException)]
        if failed:
            logger.warning(
                f"Checkout {session_id}: {len(failed)} of {len(lines)} line(s) failed, "
                f"{len(placed)} order(s) already placed"
            )
            raise CheckoutError(
                "Failed to place one or more orders",
                session_id=session_id,
                placed=placed,
                failed=failed,
            )

        cart.clear()
        logger.info(f"Checkout {session_id}: {len(placed)} order(s) placed")
        return {"sessionId": session_id, "orders": placed}

    # ── Admin ───────────────────────────────────────────────────────

    async def login(self, password: str) -> str:
        data = await self._data("POST", "/api/admin/auth", json={"password": password})
        self.token = data["token"]
        return self.token

    async def list_all_products(self) -> list[dict]:
        return await self._data("GET", "/api/admin/products", admin=True)

    async def create_product(self, name: str, price: float) -> dict:
        return await self._data("POST", "/api/admin/products", admin=True, json={"name": name, "price": price})

    async def update_product(self, product_id: int, *, name: Optional[str] = None,
                             price: Optional[float] = None) -> dict:
        body = {k: v for k, v in {"name": name, "price": price}.items() if v is not None}
        return await self._data("PUT", f"/api/admin/products/{product_id}", admin=True, json=body)

    async def delete_product(self, product_id: int) -> dict:
        return await self._data("DELETE", f"/api/admin/products/{product_id}", admin=True)

    async def list_orders(self) -> list[dict]:
        return await self._data("GET", "/api/admin/orders", admin=True)

    async def list_order_groups(self) -> list[dict]:
        return await self._data("GET", "/api/admin/orders/grouped", admin=True)

    async def update_order_status(self, order_id: int, status: OrderStatus) -> dict:
        return await self._data(
            "PUT", f"/api/admin/order/{order_id}", admin=True,
            json={"status": OrderStatus(status).value},
        )

    async def advance_group(self, group: dict) -> list[dict]:
        """
        Move every order of a checkout group (as returned by the API) one step on.

        Groups whose members disagree (MIXED) or are all delivered have no
        next status and are refused without touching any order.
        """
        next_status = group.get("nextStatus")
        if not next_status:
            raise GroupTransitionError(
                f"Group {group.get('key')} has no common next status (status {group.get('status')})"
            )

        orders = group["orders"]
        results = await asyncio.gather(
            *(self.update_order_status(o["id"], next_status) for o in orders),
            return_exceptions=True,
        )

        updated = [r for r in results if not isinstance(r, BaseException)]
        failed_ids = [o["id"] for o, r in zip(orders, results) if isinstance(r, BaseException)]
        if failed_ids:
            logger.warning(f"Group {group.get('key')}: status update failed for orders {failed_ids}")
            raise GroupTransitionError(
                "Failed to update order statuses",
                updated=updated,
                failed_order_ids=failed_ids,
            )
        return updated

    async def get_stats(self) -> dict:
        return await self._data("GET", "/api/admin/stats", admin=True)
