"""
SQLAlchemy ORM models for the Agrofix storefront.

Tables:
    products — catalog entries (name, unit price)
    orders   — one row per ordered product; rows placed from the same cart
               share a checkout_session_id
"""
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite stores no timezone)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Product(Base):
    """Produce offered in the catalog."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    price = Column(Float, nullable=False)  # per unit, always > 0
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Order(Base):
    """A single-product order. Status is the only field changed after creation."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    buyer_name = Column(String(200), nullable=False)
    contact = Column(String(200), nullable=False)
    address = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="PENDING", index=True)  # PENDING | IN_PROGRESS | DELIVERED
    checkout_session_id = Column(String(100), nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Always needed to price the order, so load it with the row
    product = relationship("Product", lazy="selectin")

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity
