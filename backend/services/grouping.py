"""
Checkout-session grouping.

Orders placed from one cart share a checkout_session_id. For display and
bulk actions they are partitioned into groups:

    key = checkout_session_id or "single_<order id>"

Groups are derived on every read and never stored. Buyer details and
created_at come from the first member seen in the input, so callers that
want "latest member" semantics pass orders sorted newest first.
"""
import secrets
import string
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional

from domain.constants import (
    CHECKOUT_SESSION_PREFIX,
    MIXED_STATUS,
    SINGLE_ORDER_GROUP_PREFIX,
)
from domain.enums import OrderStatus

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits


@dataclass
class CheckoutGroup:
    key: str
    session_id: Optional[str]
    buyer_name: str
    contact: str
    address: str
    created_at: object
    orders: list = field(default_factory=list)

    @property
    def total_amount(self) -> float:
        return sum(o.product.price * o.quantity for o in self.orders)

    @property
    def status(self) -> str:
        return group_status(self.orders)

    @property
    def next_status(self) -> Optional[OrderStatus]:
        return group_next_status(self.orders)

    @property
    def is_checkout_session(self) -> bool:
        return self.session_id is not None


def new_checkout_session_id() -> str:
    """Token shared by every order of one checkout: cart_checkout_<epoch ms>_<8 chars>."""
    suffix = "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(8))
    return f"{CHECKOUT_SESSION_PREFIX}{int(time.time() * 1000)}_{suffix}"


def group_key(order) -> str:
    return order.checkout_session_id or f"{SINGLE_ORDER_GROUP_PREFIX}{order.id}"


def group_orders(orders: Iterable) -> list[CheckoutGroup]:
    """Partition orders by checkout session, newest group first."""
    groups: dict[str, CheckoutGroup] = {}
    for order in orders:
        key = group_key(order)
        group = groups.get(key)
        if group is None:
            group = CheckoutGroup(
                key=key,
                session_id=order.checkout_session_id or None,
                buyer_name=order.buyer_name,
                contact=order.contact,
                address=order.address,
                created_at=order.created_at,
            )
            groups[key] = group
        group.orders.append(order)

    # sorted() is stable: groups created at the same instant keep input order
    return sorted(groups.values(), key=lambda g: g.created_at, reverse=True)


def group_status(orders: list) -> str:
    """Shared member status, or MIXED when members disagree."""
    statuses = {OrderStatus(o.status) for o in orders}
    if len(statuses) == 1:
        return statuses.pop().value
    return MIXED_STATUS


def group_next_status(orders: list) -> Optional[OrderStatus]:
    """
    Status every member can move to together.

    Only offered when all members share one status; a MIXED group (or an
    all-delivered one) has no bulk transition.
    """
    statuses = {OrderStatus(o.status) for o in orders}
    if len(statuses) != 1:
        return None
    return statuses.pop().next_status()
