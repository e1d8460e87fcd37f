"""
Purchase-order lifecycle.

Orders are priced locally, created through the purchase-order service and
kept in a short-lived cache so status changes can be applied optimistically
and rolled back if the service rejects them.
"""
import logging
from typing import Any, Iterable, Mapping, Optional

from django.conf import settings

from pos_backend.choices import PurchaseOrderStatus
from pos_backend.exceptions import RemoteServiceError
from pos_backend.optimistic import CacheStore, optimistic_update

from .calculators import PurchaseOrderTotalCalculator, StockLevel, compute_stock_receipts
from .clients import PurchaseOrderClient
from .exceptions import PurchaseOrderLockedError
from .purchase_orders import CatalogItem, PurchaseOrder
from .signals import purchase_order_completed, purchase_order_created

logger = logging.getLogger(__name__)


class PurchaseOrderService:

    def __init__(self, client: Optional[PurchaseOrderClient] = None, store: Optional[CacheStore] = None):
        self.client = client or PurchaseOrderClient()
        self.store = store or CacheStore("pos.purchase_orders", settings.POS_PURCHASE_ORDER_CACHE_TIMEOUT)

    def get_cached(self, order_id: str) -> Optional[PurchaseOrder]:
        data = self.store.get(order_id)
        return PurchaseOrder.from_dict(data) if data else None

    def create_purchase_order(
        self,
        supplier_id: str,
        items: Iterable[Mapping[str, Any]],
        catalog: Iterable[CatalogItem],
        extra_totals: Optional[Mapping[str, Any]] = None,
        status: str = PurchaseOrderStatus.DRAFT,
        issued_at=None,
    ) -> PurchaseOrder:
        """
        Price the order against the supplier catalog and submit it.

        Nothing is sent when a line cannot be resolved.
        """
        order = PurchaseOrderTotalCalculator(catalog).calculate(
            supplier_id, items, extra_totals=extra_totals, status=status, issued_at=issued_at
        )

        response = self.client.create(order.to_payload())
        order_id = response.get("id")
        if not order_id:
            raise RemoteServiceError("Purchase order service did not return an id", details=response)

        order = order.with_id(order_id)
        self.store[order.id] = order.to_dict()
        logger.info(
            f"[PurchaseOrderService.create_purchase_order] Created {order.id} for supplier "
            f"{order.supplier_id} (grand total {order.totals.grand_total})"
        )
        purchase_order_created.send(sender=self.__class__, purchase_order=order)
        return order

    def update_status(
        self,
        order: PurchaseOrder,
        status: str,
        stock_levels: Optional[Mapping[str, StockLevel]] = None,
    ) -> PurchaseOrder:
        """
        Move an order to a new status.

        The cached copy is updated before the remote call and restored if the
        call fails. Completing an order stamps `completed_at` and sends the
        stock receipts with `purchase_order_completed`.
        """
        if order.is_complete:
            raise PurchaseOrderLockedError(order.id)

        status = PurchaseOrderStatus(status).value
        if status == order.status:
            return order

        tentative = order.with_status(status)
        with optimistic_update(self.store, order.id, tentative.to_dict()) as update:
            self.client.update(order.id, {"status": status})
            update.confirm(tentative.to_dict())

        logger.info(f"[PurchaseOrderService.update_status] {order.id}: {order.status} -> {status}")

        if tentative.is_complete:
            receipts = compute_stock_receipts(tentative, stock_levels or {})
            purchase_order_completed.send(sender=self.__class__, purchase_order=tentative, receipts=receipts)
        return tentative

    def delete_purchase_order(self, order: PurchaseOrder) -> None:
        if order.is_complete:
            raise PurchaseOrderLockedError(order.id)
        self.client.delete(order.id)
        del self.store[order.id]
        logger.info(f"[PurchaseOrderService.delete_purchase_order] Deleted {order.id}")
