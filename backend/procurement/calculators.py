"""
Purchase-order total calculator.

Formula:
    line_total  = quantity * purchase_price   (price copied at creation)
    grand_total = sum(line_total)

Any line that cannot be matched to an active catalog item of the order's
supplier rejects the whole order; no partial order is produced.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from django.utils import timezone

from payments.money import parse_int, round_half_up, to_decimal
from pos_backend.choices import PurchaseOrderStatus

from .exceptions import CatalogResolutionError, InvalidPurchaseOrderError
from .purchase_orders import CatalogItem, PurchaseOrder, PurchaseOrderLine, PurchaseOrderTotals

logger = logging.getLogger(__name__)


class PurchaseOrderTotalCalculator:
    """
    Builds a priced PurchaseOrder from requested quantities and a lookup of
    the supplier's catalog items.
    """

    def __init__(self, catalog: Union[Mapping[str, CatalogItem], Iterable[CatalogItem]]):
        if isinstance(catalog, Mapping):
            self.catalog = dict(catalog)
        else:
            self.catalog = {item.id: item for item in catalog}

    def resolve(self, supplier_id: str, catalog_item_id: str) -> CatalogItem:
        item = self.catalog.get(catalog_item_id)
        if item is None or not item.is_active or item.supplier_id != supplier_id:
            raise CatalogResolutionError(catalog_item_id, supplier_id=supplier_id)
        return item

    def build_lines(self, supplier_id: str, items: Iterable[Mapping[str, Any]]) -> List[PurchaseOrderLine]:
        lines = []
        for index, requested in enumerate(items):
            catalog_item_id = str(requested.get("catalog_item_id") or requested.get("catalogItemId") or "")
            quantity = parse_int(requested.get("quantity"))
            if quantity is None or quantity < 1:
                raise InvalidPurchaseOrderError(
                    f"Quantity for line {index + 1} must be at least 1",
                    details={"line": index, "catalogItemId": catalog_item_id},
                )

            catalog_item = self.resolve(supplier_id, catalog_item_id)
            lines.append(
                PurchaseOrderLine(
                    catalog_item_id=catalog_item.id,
                    quantity=quantity,
                    price=catalog_item.purchase_price,
                    name=catalog_item.name,
                    base_uom=catalog_item.base_uom,
                )
            )
        if not lines:
            raise InvalidPurchaseOrderError("A purchase order needs at least one line")
        return lines

    def calculate(
        self,
        supplier_id: str,
        items: Iterable[Mapping[str, Any]],
        extra_totals: Optional[Mapping[str, Any]] = None,
        status: str = PurchaseOrderStatus.DRAFT,
        issued_at: Optional[datetime] = None,
    ) -> PurchaseOrder:
        """
        Price every line and freeze the totals snapshot.

        A `grand_total` key in `extra_totals` is ignored; the computed
        grand total always wins.
        """
        supplier_id = str(supplier_id)
        lines = self.build_lines(supplier_id, items)
        grand_total = sum(line.line_total for line in lines)

        logger.info(
            f"[PurchaseOrderTotalCalculator.calculate] Supplier {supplier_id}: "
            f"{len(lines)} lines, grand total {grand_total}"
        )
        return PurchaseOrder(
            supplier_id=supplier_id,
            lines=tuple(lines),
            totals=PurchaseOrderTotals(grand_total=grand_total, extra=extra_totals or {}),
            status=PurchaseOrderStatus(status).value,
            issued_at=issued_at or timezone.now(),
        )


@dataclass(frozen=True)
class StockLevel:
    current_stock: int = 0
    avg_cost: int = 0


@dataclass(frozen=True)
class StockReceipt:
    catalog_item_id: str
    quantity: int
    previous_stock: int
    new_stock: int
    previous_avg_cost: int
    new_avg_cost: int


def compute_stock_receipts(order: PurchaseOrder, levels: Mapping[str, StockLevel]) -> List[StockReceipt]:
    """
    Stock level and weighted average cost after receiving a completed order.

        new_avg = round_half_up((stock * avg + qty * price) / (stock + qty))

    When the resulting stock is 0 the previous average is kept. Repeated
    lines for the same item are received one after another.
    """
    running: Dict[str, StockLevel] = dict(levels)
    receipts = []
    for line in order.lines:
        level = running.get(line.catalog_item_id, StockLevel())
        quantity = max(line.quantity, 0)
        new_stock = level.current_stock + quantity
        if new_stock == 0:
            new_avg = level.avg_cost
        else:
            new_avg = round_half_up(
                (to_decimal(level.current_stock) * level.avg_cost + to_decimal(quantity) * line.price)
                / max(new_stock, 1)
            )
        receipts.append(
            StockReceipt(
                catalog_item_id=line.catalog_item_id,
                quantity=quantity,
                previous_stock=level.current_stock,
                new_stock=new_stock,
                previous_avg_cost=level.avg_cost,
                new_avg_cost=new_avg,
            )
        )
        running[line.catalog_item_id] = StockLevel(current_stock=new_stock, avg_cost=new_avg)
    return receipts
