"""
Custom exceptions for menu pricing.
"""
from pos_backend.exceptions import PosCoreError


class InvalidVariantConfigError(PosCoreError):
    """Raised when a variant configuration fails validation at construction."""

    default_code = "invalid_variant_config"

    def __init__(self, message, field=None):
        self.field = field
        super().__init__(message, details={"field": field} if field else None)


class PriceUnavailableError(PosCoreError):
    """Raised when a line is added without a resolved price for its channel."""

    default_code = "price_unavailable"

    def __init__(self, menu_id, channel, message=None):
        self.menu_id = menu_id
        self.channel = channel
        if message is None:
            message = f"No {channel} price configured for menu '{menu_id}'"
        super().__init__(message, details={"menu_id": menu_id, "channel": channel})
