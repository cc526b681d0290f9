# backend/services/exceptions.py
"""Errors raised by the stock ledger.

Every error is a rejected request: the enclosing transaction has been (or
must be) rolled back and nothing was persisted. ``main.py`` maps them to HTTP
responses through ``status_code`` and ``code``.
"""
from typing import Optional


class StockError(Exception):
    status_code = 400
    code = "STOCK_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


# --- validation ---

class InvalidQuantity(StockError):
    code = "INVALID_QUANTITY"

    def __init__(self, quantity):
        super().__init__(f"Quantity must be greater than 0 (got {quantity!r})")
        self.quantity = quantity


class InvalidMovement(StockError):
    """Structurally invalid movement: unknown type, missing or identical locations."""
    code = "INVALID_MOVEMENT"


# --- not found ---

class ProductNotFound(StockError):
    status_code = 404
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, ref):
        super().__init__(f"Product {ref} not found")
        self.ref = ref


class LocationNotFound(StockError):
    status_code = 404
    code = "LOCATION_NOT_FOUND"

    def __init__(self, location_id):
        super().__init__(f"Location {location_id} not found")
        self.location_id = location_id


class OperationNotFound(StockError):
    status_code = 404
    code = "OPERATION_NOT_FOUND"

    def __init__(self, operation_id):
        super().__init__(f"Operation {operation_id} not found")
        self.operation_id = operation_id


# --- conflicts ---

class InsufficientStock(StockError):
    status_code = 409
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: int, location_id: int, available: float, requested: float,
                 location_name: Optional[str] = None):
        where = location_name or f"location {location_id}"
        super().__init__(
            f"Insufficient stock for product {product_id} at {where} "
            f"(requested {requested:g}, available {available:g})"
        )
        self.product_id = product_id
        self.location_id = location_id
        self.available = available
        self.requested = requested

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "product_id": self.product_id,
            "location_id": self.location_id,
            "available": self.available,
            "requested": self.requested,
        })
        return data


class InvalidState(StockError):
    """The operation's status does not allow the requested change."""
    status_code = 409
    code = "INVALID_STATE"
