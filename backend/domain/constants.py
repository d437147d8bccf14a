"""
Domain constants used across services/routers.
"""

# Group key for an order placed outside any checkout session: "single_<order id>"
SINGLE_ORDER_GROUP_PREFIX = "single_"

# Checkout session tokens: "cart_checkout_<epoch ms>_<8 chars>"
CHECKOUT_SESSION_PREFIX = "cart_checkout_"
CHECKOUT_SESSION_MAX_LENGTH = 100
CHECKOUT_SESSION_PATTERN = r"^[A-Za-z0-9_-]+$"

# Group status label when members disagree
MIXED_STATUS = "MIXED"

# Admin dashboard
TOP_PRODUCTS_LIMIT = 5

# Column limits: SQLite INTEGER is a signed 64-bit value
MAX_ROW_ID = 2**63 - 1

# Business caps that keep totals finite and JSON-safe
MAX_UNIT_PRICE = 1_000_000.0
MAX_ORDER_QUANTITY = 1_000_000
