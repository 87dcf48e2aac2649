"""
Price parsing and subtotal arithmetic for quote emails.

This is a best-effort accumulator for a human-read summary, not a currency
engine: currency symbols and thousands separators are thrown away and
anything unparsable counts as zero.
"""

import logging
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from quote_mailer.models.quote import LineItem

logger = logging.getLogger(__name__)

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]+")
# Longest leading decimal literal, mirroring a lenient parseFloat
_LEADING_FLOAT_RE = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)")


def parse_price(value: Any) -> float:
    """
    Parse a numeric amount from a formatted price token.

    Examples:
        "$12.50"      -> 12.5
        "1,299.00 $"  -> 1299.0
        "5"           -> 5.0
        "-3.25"       -> -3.25
        "12.50.10"    -> 12.5   (leading number wins)
        "Free"        -> 0.0
        None / ""     -> 0.0
    """
    if value is None or value == "":
        return 0.0

    if isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        try:
            amount = float(value)
        except OverflowError:
            return 0.0
        return amount if math.isfinite(amount) else 0.0

    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    match = _LEADING_FLOAT_RE.match(cleaned)
    if not match:
        logger.debug("parse_price: no numeric content in %r", value)
        return 0.0

    try:
        amount = float(match.group(0))
    except ValueError:
        logger.debug("parse_price: could not convert %r to float", match.group(0))
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def format_currency(amount: float) -> str:
    """
    Format an amount as dollars with exactly two decimals, e.g. 15 -> "$15.00".

    Exact ties round away from zero (0.125 -> "$0.13"); values whose binary
    form sits just below a tie keep rounding down (2.675 -> "$2.67").
    """
    if amount == 0:
        amount = 0.0  # no "$-0.00" for a "-0" token
    cents = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"${cents}"


def calculate_subtotal(items: Iterable[LineItem]) -> float:
    """Sum parse_price over each item's effective price token."""
    return sum((parse_price(item.price) for item in items), 0.0)
