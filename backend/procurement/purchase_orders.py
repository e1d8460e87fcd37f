"""
Purchase-order value objects.

Prices are copied from the supplier catalog when the order is created and
the totals snapshot is frozen with it. Status changes produce a new
PurchaseOrder; lines and totals are carried over untouched.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from pos_backend.choices import PurchaseOrderStatus


@dataclass(frozen=True)
class CatalogItem:
    """A supplier's purchasable item, as read from the supplier catalog service."""

    id: str
    supplier_id: str
    name: str
    purchase_price: int
    base_uom: str = "pcs"
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CatalogItem":
        return cls(
            id=str(data["id"]),
            supplier_id=str(data["supplier_id"]),
            name=data.get("name", ""),
            purchase_price=int(data["purchase_price"]),
            base_uom=data.get("base_uom") or "pcs",
            is_active=bool(data.get("is_active", True)),
        )


@dataclass(frozen=True)
class PurchaseOrderLine:
    catalog_item_id: str
    quantity: int
    price: int
    name: str = ""
    base_uom: str = "pcs"

    @property
    def line_total(self) -> int:
        return self.quantity * self.price


@dataclass(frozen=True)
class PurchaseOrderTotals:
    """Frozen totals snapshot: the computed grand total plus carried extras."""

    grand_total: int
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        extra = {key: value for key, value in dict(self.extra).items() if key != "grand_total"}
        object.__setattr__(self, "extra", MappingProxyType(extra))

    def to_dict(self) -> Dict[str, Any]:
        return {**self.extra, "grand_total": self.grand_total}


@dataclass(frozen=True)
class PurchaseOrder:
    supplier_id: str
    lines: Tuple[PurchaseOrderLine, ...]
    totals: PurchaseOrderTotals
    status: str = PurchaseOrderStatus.DRAFT
    id: Optional[str] = None
    issued_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def is_complete(self) -> bool:
        return self.status == PurchaseOrderStatus.COMPLETE

    def with_id(self, order_id: str) -> "PurchaseOrder":
        return replace(self, id=str(order_id))

    def with_status(self, status: str, now: Optional[datetime] = None) -> "PurchaseOrder":
        status = PurchaseOrderStatus(status).value
        completed_at = self.completed_at
        if status == PurchaseOrderStatus.COMPLETE and not self.is_complete:
            completed_at = now or timezone.now()
        return replace(self, status=status, completed_at=completed_at)

    def to_payload(self) -> Dict[str, Any]:
        """Creation payload for the purchase-order service."""
        payload = {
            "supplierId": self.supplier_id,
            "status": str(self.status),
            "items": [
                {"catalogItemId": line.catalog_item_id, "quantity": line.quantity, "price": line.price}
                for line in self.lines
            ],
            "totals": self.totals.to_dict(),
        }
        if self.issued_at is not None:
            payload["issuedAt"] = self.issued_at.isoformat()
        return payload

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "supplier_id": self.supplier_id,
            "status": str(self.status),
            "lines": [
                {
                    "catalog_item_id": line.catalog_item_id,
                    "quantity": line.quantity,
                    "price": line.price,
                    "name": line.name,
                    "base_uom": line.base_uom,
                }
                for line in self.lines
            ],
            "totals": self.totals.to_dict(),
            "issued_at": self.issued_at.isoformat() if self.issued_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PurchaseOrder":
        totals = dict(data.get("totals") or {})
        grand_total = int(totals.pop("grand_total", 0))
        issued_at = data.get("issued_at")
        completed_at = data.get("completed_at")
        return cls(
            id=data.get("id"),
            supplier_id=str(data["supplier_id"]),
            status=PurchaseOrderStatus(data.get("status", PurchaseOrderStatus.DRAFT)).value,
            lines=tuple(
                PurchaseOrderLine(
                    catalog_item_id=str(line["catalog_item_id"]),
                    quantity=int(line["quantity"]),
                    price=int(line["price"]),
                    name=line.get("name", ""),
                    base_uom=line.get("base_uom") or "pcs",
                )
                for line in data.get("lines", [])
            ),
            totals=PurchaseOrderTotals(grand_total=grand_total, extra=totals),
            issued_at=parse_datetime(issued_at) if issued_at else None,
            completed_at=parse_datetime(completed_at) if completed_at else None,
        )
