"""
Cart service layer for the POS register.

This service handles:
- Session lifecycle (hydrate from storage, reset)
- Adding/updating/removing lines at their captured price
- Discount, tax, channel and payment form state
- Totals for the current state

One CartService instance owns one session's cart. Every mutation is written
through to CartStorage.
"""

from dataclasses import replace
from datetime import date
from typing import Optional, Union
import logging
import uuid

from django.conf import settings
from django.utils.dateparse import parse_date

from orders.calculators import CartTotals, compute_totals
from payments.money import clamp_percentage, coerce_amount, coerce_quantity, normalize_tax_rate, parse_int
from pos_backend.choices import Channel, DiscountMode, PaymentMethod, PaymentStatus
from products.exceptions import PriceUnavailableError
from products.pricing import list_sellable_options, resolve_default_option
from products.variants import MenuItem

from .state import CartDiscount, CartLine, CartPayment, CartState, default_cart_state
from .storage import CartStorage

logger = logging.getLogger(__name__)

_UNSET = object()


class CartService:
    """Session-scoped POS cart container."""

    def __init__(self, session_id: str, storage: Optional[CartStorage] = None, default_tax_rate=None):
        self.session_id = session_id
        self.storage = storage or CartStorage(session_id)
        self.default_tax_rate = (
            default_tax_rate if default_tax_rate is not None else settings.POS_DEFAULT_TAX_RATE
        )
        self._state: Optional[CartState] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> CartState:
        """Hydrate the cart from storage for this session."""
        self._state = self.storage.load()
        logger.debug(f"[CartService.init] Session {self.session_id} hydrated with {len(self._state.lines)} lines")
        return self._state

    def reset(self) -> CartState:
        """Drop the stored cart and start from the default state."""
        self.storage.clear()
        self._state = default_cart_state()
        return self._state

    @property
    def state(self) -> CartState:
        if self._state is None:
            self.init()
        return self._state

    def _commit(self) -> CartState:
        self.storage.save(self._state)
        return self._state

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def add_line(
        self,
        menu_id: str,
        name: str,
        unit_price: Optional[int],
        quantity=1,
        channel: Optional[str] = None,
        variant_key: Optional[str] = None,
        variant_label: Optional[str] = None,
        size: Optional[str] = None,
        temperature: Optional[str] = None,
    ) -> CartLine:
        """
        Append a new line at an already-resolved unit price.

        Identical items added twice become two lines; lines are never merged.

        Raises:
            PriceUnavailableError: If `unit_price` is None (not sellable)
        """
        channel = Channel(channel or self.state.channel).value
        if unit_price is None:
            raise PriceUnavailableError(menu_id, channel)
        if isinstance(unit_price, bool) or not isinstance(unit_price, int) or unit_price < 0:
            raise ValueError(f"unit_price must be a non-negative integer, got {unit_price!r}")

        line = CartLine(
            line_id=uuid.uuid4().hex,
            menu_id=str(menu_id),
            name=name,
            unit_price=unit_price,
            quantity=coerce_quantity(quantity),
            channel=channel,
            variant_key=variant_key,
            variant_label=variant_label,
            size=size,
            temperature=temperature,
        )
        self.state.lines.append(line)
        self._commit()
        logger.info(f"[CartService.add_line] Added {line.quantity}x {name} at {unit_price} ({channel})")
        return line

    def add_menu_item(
        self,
        menu: MenuItem,
        size: Optional[str] = None,
        temperature: Optional[str] = None,
        quantity=1,
    ) -> CartLine:
        """
        Resolve the menu item's price on the cart's channel and add it.

        For variant items a full size/temperature selection is looked up
        directly; an incomplete one falls back to the default option.
        """
        channel = self.state.channel
        if menu.variants is None:
            return self.add_line(
                menu_id=menu.id,
                name=menu.name,
                unit_price=menu.pricing.price_for(channel),
                quantity=quantity,
                channel=channel,
            )

        if size and temperature:
            option = next(
                (
                    o for o in list_sellable_options(menu.variants, channel)
                    if o.size == size and o.temperature == temperature
                ),
                None,
            )
        else:
            option = resolve_default_option(menu.variants, channel)

        if option is None:
            raise PriceUnavailableError(menu.id, channel)

        return self.add_line(
            menu_id=menu.id,
            name=menu.name,
            unit_price=option.price,
            quantity=quantity,
            channel=channel,
            variant_key=option.key,
            variant_label=option.label,
            size=option.size,
            temperature=option.temperature,
        )

    def update_quantity(self, line_id: str, quantity) -> Optional[CartLine]:
        """
        Replace a line's quantity.

        A numeric quantity below 1 is ignored and the line is left as it
        was; unparseable input counts as 1. Returns the updated line, or
        None when nothing changed.
        """
        parsed = parse_int(quantity)
        if parsed is not None and parsed < 1:
            logger.debug(f"[CartService.update_quantity] Ignoring quantity {parsed} for line {line_id}")
            return None
        new_quantity = coerce_quantity(parsed)

        for index, line in enumerate(self.state.lines):
            if line.line_id == line_id:
                updated = line.with_quantity(new_quantity)
                self.state.lines[index] = updated
                self._commit()
                return updated
        return None

    def remove_line(self, line_id: str) -> None:
        remaining = [line for line in self.state.lines if line.line_id != line_id]
        if len(remaining) != len(self.state.lines):
            self.state.lines = remaining
            self._commit()

    # ------------------------------------------------------------------
    # Order-level settings
    # ------------------------------------------------------------------

    def set_discount(self, mode: str, value=0) -> CartDiscount:
        """Replace the discount wholesale; values are clamped, never rejected."""
        mode = DiscountMode(mode).value
        if mode == DiscountMode.PERCENTAGE:
            amount = clamp_percentage(value)
        elif mode == DiscountMode.NOMINAL:
            amount = coerce_amount(value)
        else:
            amount = 0
        self.state.discount = CartDiscount(mode=mode, value=amount)
        self._commit()
        return self.state.discount

    def set_tax_rate(self, rate) -> Optional[str]:
        """Override the tax rate for this cart; None restores the default."""
        self.state.tax_rate = None if rate is None else normalize_tax_rate(rate)
        self._commit()
        return self.state.tax_rate

    def set_channel(self, channel: str, reseller_id: Optional[str] = None) -> CartState:
        """
        Switch the sales context for lines added from now on.

        Retail sales are always settled on the spot, so switching to retail
        drops the reseller and forces the payment status back to paid.
        """
        channel = Channel(channel).value
        self.state.channel = channel
        if channel == Channel.RETAIL:
            self.state.reseller_id = None
            self.state.payment = replace(self.state.payment, status=PaymentStatus.PAID.value, due_date=None)
        else:
            self.state.reseller_id = str(reseller_id) if reseller_id else None
        return self._commit()

    def set_payment(
        self,
        method=_UNSET,
        status=_UNSET,
        due_date: Union[date, str, None, object] = _UNSET,
        amount_received=_UNSET,
    ) -> CartPayment:
        """Merge the given payment fields into the current payment state."""
        payment = self.state.payment

        if method is not _UNSET:
            payment = replace(payment, method=PaymentMethod(method).value)
        if status is not _UNSET:
            payment = replace(payment, status=PaymentStatus(status).value)
        if due_date is not _UNSET:
            if isinstance(due_date, str):
                try:
                    due_date = parse_date(due_date) if due_date else None
                except ValueError:
                    # well formed but not a calendar date, e.g. 2025-02-30
                    due_date = None
            payment = replace(payment, due_date=due_date)
        if amount_received is not _UNSET:
            payment = replace(payment, amount_received=coerce_amount(amount_received))

        if payment.method != PaymentMethod.CASH:
            payment = replace(payment, amount_received=0)
        if payment.status != PaymentStatus.UNPAID:
            payment = replace(payment, due_date=None)

        self.state.payment = payment
        self._commit()
        return payment

    def set_customer_name(self, name: Optional[str]) -> None:
        self.state.customer_name = (name or "").strip()
        self._commit()

    def set_note(self, note: Optional[str]) -> None:
        self.state.note = note or ""
        self._commit()

    def set_bypass_served(self, bypass: bool) -> None:
        self.state.bypass_served = bool(bypass)
        self._commit()

    # ------------------------------------------------------------------
    # Totals & clearing
    # ------------------------------------------------------------------

    def totals(self) -> CartTotals:
        return compute_totals(self.state, self.default_tax_rate)

    def clear(self) -> CartState:
        """Reset to a fresh default state (after submission or on request)."""
        logger.info(f"[CartService.clear] Clearing cart for session {self.session_id}")
        self._state = default_cart_state()
        return self._commit()
