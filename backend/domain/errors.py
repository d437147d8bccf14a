"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to HTTP status codes by the exception handlers
in main.py.
"""
from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, details: dict | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.details = details or {}


class NotFoundError(DomainError):
    """Resource not found (404)."""
    def __init__(self, resource_type: str, identifier: str, details: dict | None = None):
        message = f"{resource_type} not found: {identifier}"
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, details=details)


class ValidationError(DomainError):
    """Validation error (400)."""
    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        if field:
            message = f"Validation error on {field}: {message}"
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class ProductInUseError(DomainError):
    """Product still referenced by orders (400)."""
    def __init__(self, product_id: int, order_count: int):
        super().__init__(
            "Cannot delete product with existing orders",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"productId": product_id, "orderCount": order_count},
        )


class InvalidStatusTransitionError(DomainError):
    """Status change that does not follow PENDING -> IN_PROGRESS -> DELIVERED (400)."""
    def __init__(self, current: str, requested: str, allowed: str | None):
        if allowed:
            message = f"Cannot move order from {current} to {requested}; next status is {allowed}"
        else:
            message = f"Cannot move order from {current} to {requested}; {current} is final"
        super().__init__(
            message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"current": current, "requested": requested, "allowed": allowed},
        )


class UnauthorizedError(DomainError):
    """Unauthorized access (401)."""
    def __init__(self, message: str = "Unauthorized", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED, details=details)
