"""
Custom exceptions for order checkout.
"""
from pos_backend.exceptions import PosCoreError


class OrderValidationError(PosCoreError):
    """Raised when a cart cannot be turned into an order submission."""

    default_code = "order_invalid"

    def __init__(self, errors, message=None):
        self.errors = errors
        if message is None:
            message = "Order cannot be submitted: " + ", ".join(sorted(errors))
        super().__init__(message, details=errors)
