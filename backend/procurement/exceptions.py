"""
Custom exceptions for purchase orders.
"""
from rest_framework import status

from pos_backend.exceptions import PosCoreError


class CatalogResolutionError(PosCoreError):
    """Raised when a purchase-order line cannot be matched to an active supplier catalog item."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "catalog_unresolved"

    def __init__(self, catalog_item_id, supplier_id=None, message=None):
        self.catalog_item_id = catalog_item_id
        self.supplier_id = supplier_id
        if message is None:
            supplier_info = f" for supplier '{supplier_id}'" if supplier_id else ""
            message = f"Catalog item '{catalog_item_id}' is not an active catalog item{supplier_info}"
        super().__init__(message, details={"catalogItemId": catalog_item_id})


class InvalidPurchaseOrderError(PosCoreError):
    """Raised when a purchase-order request is malformed (e.g. a quantity below 1)."""

    default_code = "purchase_order_invalid"


class PurchaseOrderLockedError(PosCoreError):
    """Raised when a completed purchase order would be changed or deleted."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "purchase_order_locked"

    def __init__(self, order_id, message=None):
        self.order_id = order_id
        if message is None:
            message = f"Purchase order '{order_id}' is complete and can no longer change"
        super().__init__(message, details={"purchaseOrderId": order_id})
