# core/exceptions.py

"""
RETAIL SERVICE ERRORS

Centralized domain error taxonomy shared by orders, inventory and discounts.

Every class carries:
- code: stable machine-readable identifier returned to API clients
- http_status: status used by core.api_errors when rendering the error

Domain modules subclass these instead of raising them directly, so callers can
catch either the broad class (NotFoundError) or the precise one
(InventoryMissingError).
"""

from rest_framework import status


class RetailServiceError(Exception):
    """Base exception for all order / inventory / discount service failures."""

    code = "SERVICE_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "", *, code: str | None = None):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or self.code
        if code:
            self.code = code


class ValidationFailedError(RetailServiceError):
    """Malformed input. Raised before any state is touched."""

    code = "VALIDATION_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST


class NotFoundError(RetailServiceError):
    """Referenced order, line, product, coupon or inventory row does not exist."""

    code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND


class InvalidStateError(RetailServiceError):
    """Operation not allowed in the current lifecycle state."""

    code = "INVALID_STATE"
    http_status = status.HTTP_409_CONFLICT


class ConflictError(RetailServiceError):
    """Duplicate application, duplicate unique value or usage limit reached."""

    code = "CONFLICT"
    http_status = status.HTTP_409_CONFLICT


class InsufficientStockError(RetailServiceError):
    """On-hand quantity is lower than requested."""

    code = "INSUFFICIENT_STOCK"
    http_status = status.HTTP_409_CONFLICT
