"""
Cart Totals Calculator Tests

Run with: pytest backend/orders/tests/test_calculators.py -v
"""
from decimal import Decimal

import pytest

from cart.state import CartDiscount, CartLine, CartPayment, CartState
from orders.calculators import OrderCalculator, compute_change_due, compute_totals


def make_line(line_id, unit_price, quantity):
    return CartLine(
        line_id=line_id,
        menu_id=f"menu-{line_id}",
        name=f"Item {line_id}",
        unit_price=unit_price,
        quantity=quantity,
        channel="retail",
    )


def make_state(lines, mode="none", value=0, tax_rate="0.11", method="cash", received=0):
    return CartState(
        lines=lines,
        discount=CartDiscount(mode=mode, value=value),
        tax_rate=tax_rate,
        payment=CartPayment(method=method, amount_received=received),
    )


class TestComputeTotals:

    def test_percentage_discount_scenario(self):
        totals = compute_totals(make_state([make_line("a", 20000, 2)], "percentage", 10))
        assert totals.subtotal == 40000
        assert totals.discount_amount == 4000
        assert totals.net_total == 36000
        assert totals.tax == 3960
        assert totals.grand_total == 39960

    def test_fractional_percentage_discount(self):
        totals = compute_totals(make_state([make_line("a", 20000, 2)], "percentage", Decimal("12.5")))
        assert totals.discount_amount == 5000
        assert totals.net_total == 35000
        assert totals.tax == 3850

    def test_nominal_discount_capped_at_subtotal(self):
        totals = compute_totals(make_state([make_line("a", 20000, 2)], "nominal", 50000))
        assert totals.discount_amount == 40000
        assert totals.net_total == 0
        assert totals.tax == 0
        assert totals.grand_total == 0

    def test_change_due_for_cash(self):
        state = make_state([make_line("a", 20000, 2)], "percentage", 10, received=50000)
        assert compute_totals(state).change_due == 10040

    def test_underpayment_gives_no_change(self):
        state = make_state([make_line("a", 20000, 2)], "percentage", 10, received=30000)
        assert compute_totals(state).change_due == 0

    def test_transfer_never_has_change(self):
        assert compute_change_due("transfer", 100000, 39960) == 0

    def test_default_rate_used_when_cart_has_none(self):
        state = make_state([make_line("a", 10000, 1)], tax_rate=None)
        assert compute_totals(state, "0.10").tax == 1000
        assert compute_totals(state).tax == 0

    def test_empty_cart(self):
        totals = compute_totals(make_state([]))
        assert totals.grand_total == 0
        assert totals.item_count == 0

    def test_is_pure(self):
        state = make_state([make_line("a", 15000, 3), make_line("b", 8000, 5)], "percentage", 15)
        assert compute_totals(state) == compute_totals(state)


class TestDiscountProperties:

    @pytest.mark.parametrize("percentage", [0, 1, 12, 33, 50, 99, 100])
    @pytest.mark.parametrize("subtotal", [0, 1, 999, 12345, 40000])
    def test_percentage_within_bounds(self, percentage, subtotal):
        state = make_state([make_line("a", subtotal, 1)], "percentage", percentage)
        calculator = OrderCalculator(state)
        discount = calculator.calculate_discount(calculator.calculate_subtotal())
        assert 0 <= discount <= subtotal

    @pytest.mark.parametrize("nominal", [0, 500, 12345, 10**9])
    def test_nominal_is_min_of_value_and_subtotal(self, nominal):
        state = make_state([make_line("a", 12345, 1)], "nominal", nominal)
        assert compute_totals(state).discount_amount == min(nominal, 12345)

    def test_grand_total_is_net_plus_tax(self):
        state = make_state([make_line("a", 12345, 3)], "percentage", 7, tax_rate="0.115")
        totals = compute_totals(state)
        assert totals.grand_total == totals.net_total + totals.tax
        assert totals.grand_total >= 0
