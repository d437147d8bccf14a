"""
Domain enums.
"""

from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    """Linear order lifecycle: PENDING -> IN_PROGRESS -> DELIVERED."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    DELIVERED = "DELIVERED"

    def next_status(self) -> Optional["OrderStatus"]:
        """Successor in the lifecycle, or None once delivered."""
        if self is OrderStatus.PENDING:
            return OrderStatus.IN_PROGRESS
        if self is OrderStatus.IN_PROGRESS:
            return OrderStatus.DELIVERED
        return None

    @property
    def is_terminal(self) -> bool:
        return self.next_status() is None
