"""
Cart financial calculator.

Every total is a pure reduction over the current cart state, so computing
twice on the same state gives the same result.

Formula:
    subtotal    = sum(unit_price * quantity)
    discount    = strategy(subtotal, discount.value)
    net_total   = max(subtotal - discount, 0)
    tax         = round_half_up(net_total * tax_rate)
    grand_total = net_total + tax
    change_due  = max(amount_received - grand_total, 0) for cash, else 0

Usage:
    from orders.calculators import compute_totals
    totals = compute_totals(state, settings.POS_DEFAULT_TAX_RATE)
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from cart.state import CartState
from payments.money import Number, apply_rate
from pos_backend.choices import PaymentMethod

from .discounts import DiscountStrategyFactory


@dataclass(frozen=True)
class CartTotals:
    subtotal: int
    discount_amount: int
    net_total: int
    tax: int
    grand_total: int
    change_due: int
    item_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_change_due(method: str, amount_received: int, grand_total: int) -> int:
    if method != PaymentMethod.CASH:
        return 0
    return max(amount_received - grand_total, 0)


class OrderCalculator:
    """
    Calculator for a POS cart state.

    The cart's own tax rate wins; `default_tax_rate` applies when the cart
    carries none.
    """

    def __init__(self, state: CartState, default_tax_rate: Optional[Number] = None):
        self.state = state
        self.default_tax_rate = default_tax_rate

    @property
    def tax_rate(self) -> Number:
        if self.state.tax_rate is not None:
            return self.state.tax_rate
        if self.default_tax_rate is not None:
            return self.default_tax_rate
        return 0

    def calculate_subtotal(self) -> int:
        return sum((line.line_total for line in self.state.lines), 0)

    def calculate_discount(self, subtotal: int) -> int:
        discount = self.state.discount
        strategy = DiscountStrategyFactory.get_strategy(discount.mode)
        return strategy.apply(subtotal, discount.value)

    def calculate_tax(self, net_total: int) -> int:
        return max(apply_rate(net_total, self.tax_rate), 0)

    def calculate_totals(self) -> CartTotals:
        subtotal = self.calculate_subtotal()
        discount_amount = self.calculate_discount(subtotal)
        net_total = max(subtotal - discount_amount, 0)
        tax = self.calculate_tax(net_total)
        grand_total = net_total + tax

        payment = self.state.payment
        return CartTotals(
            subtotal=subtotal,
            discount_amount=discount_amount,
            net_total=net_total,
            tax=tax,
            grand_total=grand_total,
            change_due=compute_change_due(payment.method, payment.amount_received, grand_total),
            item_count=sum(line.quantity for line in self.state.lines),
        )


def compute_totals(state: CartState, default_tax_rate: Optional[Number] = None) -> CartTotals:
    return OrderCalculator(state, default_tax_rate).calculate_totals()
