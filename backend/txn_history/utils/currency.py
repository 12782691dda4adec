"""
Currency Formatting — Minor-unit integers to display strings (₹12,345.00).
"""
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "AED": "AED ",
    "SGD": "S$",
}

_TWO_PLACES = Decimal("0.01")

# ₹10 lakh crore in paise; larger cells are treated as malformed
MAX_MINOR_UNITS = 10 ** 15


def to_minor_units(value) -> int:
    """Coerce a cell value to an integer minor-unit amount.

    Accepts ints, floats and numeric strings ("1,234,500" included), rounding
    halves away from zero. Anything non-numeric, NaN, infinite or beyond
    MAX_MINOR_UNITS becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if abs(value) <= MAX_MINOR_UNITS else 0
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return 0
        text = repr(value)
    else:
        text = str(value).strip().replace(",", "")
    if not text:
        return 0
    try:
        number = Decimal(text)
    except InvalidOperation:
        return 0
    if not number.is_finite() or abs(number) > MAX_MINOR_UNITS:
        return 0
    return int(number.to_integral_value(rounding=ROUND_HALF_UP))


def group_digits(digits: str, indian: bool = True) -> str:
    """Insert thousands separators into a string of digits.

    Indian grouping keeps the last three digits together and groups the rest
    in pairs (12,34,567); western grouping uses threes (1,234,567).
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    size = 2 if indian else 3
    groups = []
    while head:
        groups.insert(0, head[-size:])
        head = head[:-size]
    return ",".join(groups + [tail])


def format_amount(minor_units, currency: str = "INR") -> str:
    """Format paise (or cents) as a major-unit string with two decimals.

    Examples:
        format_amount(1234500)  → "₹12,345.00"
        format_amount(123456)   → "₹1,234.56"
        format_amount(None)     → "₹0.00"
    """
    code = (currency or "INR").strip().upper() or "INR"
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    with localcontext() as ctx:
        ctx.prec = 40
        amount = (Decimal(to_minor_units(minor_units)) / 100).quantize(_TWO_PLACES)

    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")
    return f"{sign}{symbol}{group_digits(whole, indian=(code == 'INR'))}.{fraction}"
