"""
Monetary helpers for integer minor-unit arithmetic.

Every amount handled by the POS core is an integer in the smallest currency
unit (e.g. rupiah). Fractions only appear transiently, when a percentage or a
tax rate is applied, and are settled back to integers here.

Key Principles:
1. NEVER use float for money; rates are converted through str() to Decimal
2. Round half away from zero (ROUND_HALF_UP) when settling fractions
3. Malformed user input clamps to a safe default instead of raising
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from typing import Optional, Union

getcontext().prec = 28

Number = Union[Decimal, str, int, float]

# Rates and percentages are kept to this many decimal places
RATE_DECIMAL_PLACES = 4

# Currency minor unit exponents (how many decimal places are displayed)
CURRENCY_EXPONENT = {
    "IDR": 0,  # Indonesian Rupiah (amounts are whole rupiah)
    "JPY": 0,
    "KRW": 0,
    "VND": 0,
    "USD": 2,
    "EUR": 2,
    "SGD": 2,
    "MYR": 2,
}

CURRENCY_SYMBOLS = {
    "IDR": "Rp",
    "USD": "$",
    "EUR": "€",
    "SGD": "S$",
    "MYR": "RM",
    "JPY": "¥",
}


def to_decimal(value: Number) -> Decimal:
    """
    Convert a numeric value to Decimal without float artefacts.

    Examples:
        >>> to_decimal(0.11)
        Decimal('0.11')
        >>> to_decimal("10")
        Decimal('10')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = str(value)
    return Decimal(value)


def round_half_up(amount: Number) -> int:
    """
    Settle a fractional amount to an integer minor unit, half away from zero.

    Examples:
        >>> round_half_up("2.5")
        3
        >>> round_half_up("-2.5")
        -3
        >>> round_half_up("3959.9999")
        3960
    """
    return int(to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage_of(amount: int, percentage: Number) -> int:
    """
    Percentage of an integer amount, rounded half-up.

    Examples:
        >>> percentage_of(40000, 10)
        4000
        >>> percentage_of(12345, "12.5")
        1543
    """
    return round_half_up(to_decimal(percentage) / Decimal("100") * Decimal(amount))


def apply_rate(amount: int, rate: Number) -> int:
    """
    Apply a fractional rate (e.g. a 0.11 tax rate) to an integer amount.

    Examples:
        >>> apply_rate(36000, 0.11)
        3960
    """
    return round_half_up(Decimal(amount) * to_decimal(rate))


def to_json_number(value: Number) -> Union[int, float]:
    """
    Wire form of a rate or percentage: an int when whole, else a float.

    Examples:
        >>> to_json_number(Decimal("12.5"))
        12.5
        >>> to_json_number(Decimal("10"))
        10
    """
    decimal_value = to_decimal(value)
    if decimal_value == decimal_value.to_integral_value():
        return int(decimal_value)
    return float(decimal_value)


def normalize_tax_rate(value: Number) -> str:
    """
    Validate a fractional tax rate in [0, 1] and return its canonical string.

    Raises ValueError for malformed or out-of-range rates.

    Examples:
        >>> normalize_tax_rate(0.11)
        '0.11'
    """
    if isinstance(value, bool):
        raise ValueError("Tax rate must be a number")
    try:
        rate = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f"Invalid tax rate: {value!r}") from e
    if not rate.is_finite() or rate < 0 or rate > 1:
        raise ValueError(f"Tax rate must be between 0 and 1, got {value!r}")
    rate = rate.normalize()
    if rate.as_tuple().exponent < -RATE_DECIMAL_PLACES:
        raise ValueError(f"Tax rate allows at most {RATE_DECIMAL_PLACES} decimal places, got {value!r}")
    return str(rate)


def parse_decimal(value) -> Optional[Decimal]:
    """
    Parse live text-field input into a finite Decimal, or None when malformed.

    Thousands separators are dropped. Booleans are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        decimal_value = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not decimal_value.is_finite():
        return None
    return decimal_value


def parse_int(value) -> Optional[int]:
    """
    Parse live text-field input into an integer, or None when malformed.

    Decimal strings are rounded half-up ("2.5" -> 3). Booleans are rejected.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    decimal_value = parse_decimal(value)
    if decimal_value is None:
        return None
    return round_half_up(decimal_value)


def clamp_percentage(value) -> Decimal:
    """
    Coerce percentage input into [0, 100], keeping fractions up to
    RATE_DECIMAL_PLACES places. Malformed input becomes 0.

    Examples:
        >>> clamp_percentage("12.5")
        Decimal('12.5')
        >>> clamp_percentage(150)
        Decimal('100')
        >>> clamp_percentage("abc")
        Decimal('0')
    """
    percentage = parse_decimal(value)
    if percentage is None:
        return Decimal(0)
    percentage = min(max(percentage, Decimal(0)), Decimal(100))
    percentage = percentage.quantize(Decimal(1).scaleb(-RATE_DECIMAL_PLACES), rounding=ROUND_HALF_UP)
    if percentage == percentage.to_integral_value():
        return Decimal(int(percentage))
    return percentage.normalize()


def coerce_amount(value) -> int:
    """
    Coerce user input into a non-negative amount; malformed input becomes 0.

    Examples:
        >>> coerce_amount("50000")
        50000
        >>> coerce_amount("abc")
        0
        >>> coerce_amount(-10)
        0
    """
    parsed = parse_int(value)
    if parsed is None:
        return 0
    return max(parsed, 0)


def coerce_quantity(value) -> int:
    """
    Coerce user input into a quantity; malformed or sub-1 input becomes 1.

    Examples:
        >>> coerce_quantity("3")
        3
        >>> coerce_quantity("")
        1
    """
    parsed = parse_int(value)
    if parsed is None:
        return 1
    return max(parsed, 1)


def currency_exponent(currency: str) -> int:
    return CURRENCY_EXPONENT.get(currency.upper(), 0)


def format_money(currency: str, minor: int) -> str:
    """
    Format minor units as a human-readable currency string.

    Examples:
        >>> format_money("IDR", 39960)
        'Rp39,960'
        >>> format_money("USD", 1013)
        '$10.13'
    """
    exponent = currency_exponent(currency)
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper() + " ")
    amount = Decimal(minor) / (Decimal(10) ** exponent)
    if exponent == 0:
        return f"{symbol}{amount:,.0f}"
    return f"{symbol}{amount:,.{exponent}f}"
