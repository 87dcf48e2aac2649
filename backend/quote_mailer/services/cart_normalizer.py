"""
Cart payload normalization.

The storefront has posted cart_items in three shapes over time:

  - a JSON array of item objects (current theme)
  - the same array JSON-encoded into a form string
  - a legacy plain-text block, three lines per item:

        Organic Maple Syrup
        Qty: 4
        Price: $9.99

classify_cart_payload() resolves the raw value into exactly one CartPayload
kind, and normalize_cart_items() handles each kind.  Normalization never
raises: anything unrecognisable becomes an empty list.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from quote_mailer.models.quote import DETAILED, QuoteVariant

logger = logging.getLogger(__name__)

_QTY_RE = re.compile(r"Qty:\s*(\d+)", re.IGNORECASE)
_PRICE_RE = re.compile(r"Price:\s*(.*)", re.IGNORECASE)

# Lines per item in the legacy text format: title, quantity, price
_LEGACY_GROUP_SIZE = 3


def _reject_constant(token: str) -> Any:
    # NaN and Infinity are not JSON; treat such payloads as legacy text
    raise ValueError(f"Non-standard JSON constant {token!r}")


class CartPayloadKind(str, Enum):
    ITEMS = "items"
    JSON_TEXT = "json_text"
    LEGACY_TEXT = "legacy_text"
    EMPTY = "empty"


@dataclass(frozen=True)
class CartPayload:
    """A cart_items value tagged with its detected shape."""
    kind: CartPayloadKind
    value: Any = None


def classify_cart_payload(raw: Any) -> CartPayload:
    """
    Decide which shape a raw cart_items value has.

    JSON_TEXT carries the decoded value (which may still be a non-list);
    LEGACY_TEXT carries the original string.
    """
    if isinstance(raw, (list, tuple)):
        return CartPayload(CartPayloadKind.ITEMS, raw)

    if isinstance(raw, str) and raw.strip():
        try:
            decoded = json.loads(raw, parse_constant=_reject_constant)
        except (ValueError, RecursionError):
            return CartPayload(CartPayloadKind.LEGACY_TEXT, raw)
        return CartPayload(CartPayloadKind.JSON_TEXT, decoded)

    return CartPayload(CartPayloadKind.EMPTY)


def parse_legacy_cart_text(text: str, variant: QuoteVariant = DETAILED) -> list[dict]:
    """
    Parse the legacy three-lines-per-item text format.

    Blank lines are dropped before grouping.  A trailing group with fewer
    than three lines still yields an item; its missing lines count as empty.
    When a group has no "Qty:" or "Price:" match the variant's legacy
    defaults are used (0 / "0" for detailed, "" / "" for simple).
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    items: list[dict] = []
    for start in range(0, len(lines), _LEGACY_GROUP_SIZE):
        group = lines[start:start + _LEGACY_GROUP_SIZE]
        group += [""] * (_LEGACY_GROUP_SIZE - len(group))
        title, qty_line, price_line = group

        qty_match = _QTY_RE.search(qty_line)
        price_match = _PRICE_RE.search(price_line)

        items.append(
            {
                "title": title,
                "variant": None,
                "quantity": (
                    int(qty_match.group(1)) if qty_match else variant.legacy_missing_quantity
                ),
                "price_formatted": (
                    price_match.group(1).strip() if price_match else variant.legacy_missing_price
                ),
            }
        )

    return items


def normalize_cart_items(raw: Any, variant: QuoteVariant = DETAILED) -> list:
    """
    Turn a raw cart_items value into an ordered list of item entries.

    Array input is returned as-is (order kept, no deduplication); field
    defaults are applied later when each entry is rendered.
    """
    payload = classify_cart_payload(raw)

    if payload.kind is CartPayloadKind.ITEMS:
        return list(payload.value)

    if payload.kind is CartPayloadKind.JSON_TEXT:
        if isinstance(payload.value, list):
            return payload.value
        logger.debug(
            "normalize_cart_items: JSON cart payload is %s, not a list; ignoring",
            type(payload.value).__name__,
        )
        return []

    if payload.kind is CartPayloadKind.LEGACY_TEXT:
        items = parse_legacy_cart_text(payload.value, variant)
        logger.debug("normalize_cart_items: parsed %d item(s) from legacy text", len(items))
        return items

    if payload.kind is CartPayloadKind.EMPTY:
        if raw is not None and raw != "":
            logger.debug(
                "normalize_cart_items: unsupported cart payload type %s",
                type(raw).__name__,
            )
        return []

    raise AssertionError(f"Unhandled cart payload kind: {payload.kind!r}")
