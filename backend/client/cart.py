"""
Cart store — the shopper's pending order lines.

A plain state object owned by whoever drives the checkout (a UI session, a
script, a test). Prices are captured when a product is first added and are
not re-read from the catalog afterwards.
"""
import json
import math
import logging
from dataclasses import asdict, dataclass
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


def _restored_price(value) -> float:
    """Saved prices came from the catalog, so anything not positive and finite is corrupt."""
    price = float(value)
    if not math.isfinite(price) or price <= 0:
        raise ValueError(f"invalid saved price {value!r}")
    return price


@dataclass
class CartItem:
    product_id: int
    name: str
    price: float
    quantity: int

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Cart:
    """Ordered collection of CartItem, at most one line per product."""

    def __init__(self, items: Optional[list[CartItem]] = None):
        self._items: list[CartItem] = []
        for item in items or []:
            self.add({"id": item.product_id, "name": item.name, "price": item.price}, item.quantity)

    # ── Reads ───────────────────────────────────────────────────────

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def total_items(self) -> int:
        return sum(i.quantity for i in self._items)

    @property
    def total_price(self) -> float:
        return sum(i.line_total for i in self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get(self, product_id: int) -> Optional[CartItem]:
        for item in self._items:
            if item.product_id == product_id:
                return item
        return None

    def __iter__(self) -> Iterator[CartItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self._items)

    # ── Writes ──────────────────────────────────────────────────────

    def add(self, product: dict, quantity: int = 1) -> CartItem:
        """
        Add `quantity` of a catalog product ({"id", "name", "price"}).

        Adding a product already in the cart bumps its quantity; the
        original name and price are kept.
        """
        if quantity < 1:
            raise ValueError("quantity must be at least 1")

        existing = self.get(product["id"])
        if existing:
            existing.quantity += quantity
            return existing

        item = CartItem(
            product_id=product["id"],
            name=product["name"],
            price=float(product["price"]),
            quantity=quantity,
        )
        self._items.append(item)
        return item

    def update_quantity(self, product_id: int, quantity: int) -> None:
        if quantity < 1:
            raise ValueError("quantity must be at least 1; use remove() to drop a line")
        item = self.get(product_id)
        if item:
            item.quantity = quantity

    def remove(self, product_id: int) -> None:
        self._items = [i for i in self._items if i.product_id != product_id]

    def clear(self) -> None:
        self._items = []

    # ── Persistence ─────────────────────────────────────────────────

    def to_json(self) -> str:
        """Serialize as [{"productId", "name", "price", "quantity"}, ...]."""
        return json.dumps([
            {
                "productId": i.product_id,
                "name": i.name,
                "price": i.price,
                "quantity": i.quantity,
            }
            for i in self._items
        ])

    @classmethod
    def from_json(cls, raw: Optional[str]) -> "Cart":
        """Restore a saved cart; unreadable data gives an empty cart."""
        if not raw:
            return cls()
        try:
            items = [
                CartItem(
                    product_id=int(entry["productId"]),
                    name=str(entry["name"]),
                    price=_restored_price(entry["price"]),
                    quantity=int(entry["quantity"]),
                )
                for entry in json.loads(raw)
            ]
            return cls(items)
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Failed to parse saved cart, starting empty: {e}")
            return cls()

    def __repr__(self) -> str:
        return f"Cart({[asdict(i) for i in self._items]!r})"
