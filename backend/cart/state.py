"""
In-memory POS cart state.

Lines capture their unit price and channel when they are added; nothing here
recomputes a price afterwards. States round-trip through plain dicts so they
can be kept in the cache framework between requests.
"""
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from payments.money import clamp_percentage, normalize_tax_rate, parse_decimal
from pos_backend.choices import Channel, DiscountMode, PaymentMethod, PaymentStatus


@dataclass(frozen=True)
class CartLine:
    line_id: str
    menu_id: str
    name: str
    unit_price: int
    quantity: int
    channel: str
    variant_key: Optional[str] = None
    variant_label: Optional[str] = None
    size: Optional[str] = None
    temperature: Optional[str] = None

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int) -> "CartLine":
        return replace(self, quantity=quantity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line_id": self.line_id,
            "menu_id": self.menu_id,
            "name": self.name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "channel": self.channel,
            "variant_key": self.variant_key,
            "variant_label": self.variant_label,
            "size": self.size,
            "temperature": self.temperature,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        unit_price = data["unit_price"]
        quantity = data["quantity"]
        if not isinstance(unit_price, int) or unit_price < 0:
            raise ValueError(f"Invalid unit_price for line {data.get('line_id')}")
        if not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"Invalid quantity for line {data.get('line_id')}")
        return cls(
            line_id=str(data["line_id"]),
            menu_id=str(data["menu_id"]),
            name=data.get("name", ""),
            unit_price=unit_price,
            quantity=quantity,
            channel=Channel(data.get("channel", Channel.RETAIL)).value,
            variant_key=data.get("variant_key"),
            variant_label=data.get("variant_label"),
            size=data.get("size"),
            temperature=data.get("temperature"),
        )


@dataclass(frozen=True)
class CartDiscount:
    """
    Order-level discount. `value` is a Decimal percentage in [0, 100] for
    percentage mode and a whole nominal amount otherwise.
    """

    mode: str = DiscountMode.NONE
    value: Union[int, Decimal] = 0

    def to_dict(self) -> Dict[str, Any]:
        value = str(self.value) if isinstance(self.value, Decimal) else self.value
        return {"mode": str(self.mode), "value": value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartDiscount":
        mode = DiscountMode(data.get("mode", DiscountMode.NONE)).value
        value = data.get("value", 0)
        if mode == DiscountMode.PERCENTAGE:
            if parse_decimal(value) is None:
                raise ValueError(f"Invalid percentage discount: {value!r}")
            return cls(mode=mode, value=clamp_percentage(value))
        if mode == DiscountMode.NONE:
            return cls(mode=mode, value=0)
        return cls(mode=mode, value=int(value))


@dataclass(frozen=True)
class CartPayment:
    method: str = PaymentMethod.CASH
    status: str = PaymentStatus.PAID
    due_date: Optional[date] = None
    amount_received: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": str(self.method),
            "status": str(self.status),
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "amount_received": self.amount_received,
        }


@dataclass
class CartState:
    lines: List[CartLine] = field(default_factory=list)
    discount: CartDiscount = field(default_factory=CartDiscount)
    tax_rate: Optional[str] = None
    payment: CartPayment = field(default_factory=CartPayment)
    channel: str = Channel.RETAIL
    reseller_id: Optional[str] = None
    customer_name: str = ""
    note: str = ""
    bypass_served: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def find_line(self, line_id: str) -> Optional[CartLine]:
        for line in self.lines:
            if line.line_id == line_id:
                return line
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "discount": self.discount.to_dict(),
            "tax_rate": self.tax_rate,
            "payment": self.payment.to_dict(),
            "channel": str(self.channel),
            "reseller_id": self.reseller_id,
            "customer_name": self.customer_name,
            "note": self.note,
            "bypass_served": self.bypass_served,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartState":
        """
        Rebuild a state from its stored form. Missing keys take their default
        values; present but malformed values raise ValueError/KeyError/TypeError.
        """
        default = cls()
        discount = data.get("discount") or {}
        payment = data.get("payment") or {}
        due_date = payment.get("due_date")
        tax_rate = data.get("tax_rate", default.tax_rate)
        if tax_rate is not None:
            tax_rate = normalize_tax_rate(tax_rate)
        return cls(
            lines=[CartLine.from_dict(line) for line in data.get("lines", [])],
            discount=CartDiscount.from_dict(discount),
            tax_rate=tax_rate,
            payment=CartPayment(
                method=PaymentMethod(payment.get("method", PaymentMethod.CASH)).value,
                status=PaymentStatus(payment.get("status", PaymentStatus.PAID)).value,
                due_date=date.fromisoformat(due_date) if due_date else None,
                amount_received=int(payment.get("amount_received", 0)),
            ),
            channel=Channel(data.get("channel", default.channel)).value,
            reseller_id=data.get("reseller_id"),
            customer_name=data.get("customer_name", ""),
            note=data.get("note", ""),
            bypass_served=bool(data.get("bypass_served", False)),
        )


def default_cart_state() -> CartState:
    """Empty cart, no discount, cash payment marked paid."""
    return CartState()
