"""
Error hierarchy for the shop service.

Every error carries a code and an HTTP status; the global handlers in
error_handlers.py turn them into JSON responses.
"""
from typing import Dict, Optional


class ShopError(Exception):
    """Base exception for all shop service errors."""

    def __init__(self, message: str, code: str, http_status: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status

    def to_response(self) -> dict:
        return {"detail": self.message, "code": self.code}


# ---------------- Client errors ----------------

class ValidationError(ShopError):
    """One or more fields break an entity rule."""

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        super().__init__(
            message or "Validation failed: " + ", ".join(sorted(errors)),
            "VALIDATION_ERROR",
            400,
        )
        self.errors = errors

    def to_response(self) -> dict:
        return {"errors": self.errors}


class InsufficientStockError(ValidationError):
    """A placement would take more units than the product has in stock."""

    def __init__(self, product_id: int, available: int, requested: int):
        super().__init__(
            {"products": f"product {product_id} has {available} in stock, {requested} requested"},
            message=f"Insufficient stock for product {product_id}",
        )
        self.code = "INSUFFICIENT_STOCK"
        self.product_id = product_id
        self.available = available
        self.requested = requested


class ForbiddenError(ShopError):
    """Caller is not authenticated or does not own the resource."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, "FORBIDDEN", 403)


class NotFoundError(ShopError):
    """Requested resource does not exist."""

    def __init__(self, resource: str, resource_id):
        super().__init__(f"{resource} not found", "RESOURCE_NOT_FOUND", 404)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(ShopError):
    """Write would break a reference held by other records."""

    def __init__(self, message: str):
        super().__init__(message, "CONFLICT", 409)
