"""
Pydantic models for the quote request pipeline.

Models:
  QuoteRequest     — inbound form submission (customer details + cart payload)
  LineItem         — one cart entry after field aliases are resolved
  RenderedEmail    — subject + HTML body ready for dispatch
  MessageResponse  — JSON body returned by the send-quote endpoints
  QuoteVariant     — switches that distinguish the detailed and simple handlers
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ValidationInfo, field_validator

# Text fields that may arrive as numbers (e.g. postal codes) and are coerced to str.
_TEXT_FIELDS = (
    "name",
    "email",
    "invoice_contact",
    "street",
    "city",
    "province",
    "postal_code",
    "country",
    "preferred_contact",
    "preferred_delivery",
    "notes",
    "location",
    "language",
    "label_name",
    "label_email",
    "label_invoice_contact",
    "label_street",
    "label_city",
    "label_province",
    "label_postal_code",
    "label_country",
    "label_contact",
    "label_delivery",
    "label_notes",
    "label_location",
)

# Must be truthy as submitted; false or 0 counts as missing, not "False" or "0"
_REQUIRED_FIELDS = ("name", "email")


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return str(value)


class QuoteRequest(BaseModel):
    """
    A customer quote request as posted by the storefront form.

    Every field is optional at the model level so that a bad submission can be
    answered with the 400 message the storefront expects instead of a 422
    validation body. Use has_required_fields() before doing any work.
    """
    model_config = {"extra": "ignore"}

    name: Optional[str] = None
    email: Optional[str] = None
    invoice_contact: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    preferred_contact: Optional[str] = None
    preferred_delivery: Optional[str] = None
    notes: Optional[str] = None
    location: Optional[str] = None

    # Array, JSON-encoded string or legacy three-line text. Left untyped on
    # purpose: the cart normalizer owns the shape dispatch.
    cart_items: Any = None

    language: Optional[str] = None

    # Caller-supplied replacements for the customer-details labels
    label_name: Optional[str] = None
    label_email: Optional[str] = None
    label_invoice_contact: Optional[str] = None
    label_street: Optional[str] = None
    label_city: Optional[str] = None
    label_province: Optional[str] = None
    label_postal_code: Optional[str] = None
    label_country: Optional[str] = None
    label_contact: Optional[str] = None
    label_delivery: Optional[str] = None
    label_notes: Optional[str] = None
    label_location: Optional[str] = None

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, value: Any, info: ValidationInfo) -> Optional[str]:
        if info.field_name in _REQUIRED_FIELDS and not value:
            return None
        return _as_text(value)

    def has_required_fields(self) -> bool:
        """True when both name and email are non-blank."""
        return bool((self.name or "").strip()) and bool((self.email or "").strip())

    def label_override(self, field_id: str) -> Optional[str]:
        """Return the caller's label for field_id, or None when unset or blank."""
        value = getattr(self, f"label_{field_id}", None)
        return value if value else None


class LineItem(BaseModel):
    """
    One cart entry with field aliases resolved.

    price_formatted is the storefront's display string, when it sent one.
    price is the token used for arithmetic: price_formatted, else
    formatted_price, else price from the raw entry.
    """

    title: str = ""
    variant: Optional[str] = None
    quantity: Any = None
    price_formatted: Optional[str] = None
    price: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "LineItem":
        """
        Build a LineItem from an arbitrary cart entry.

        Non-mapping entries (strings, numbers, nulls inside the array) become
        an empty item rather than an error.
        """
        if not isinstance(raw, dict):
            return cls()

        variant = _as_text(raw.get("variant")) or None
        if variant == "null":
            variant = None

        price_formatted = _as_text(raw.get("price_formatted")) or None
        price = (
            price_formatted
            or _as_text(raw.get("formatted_price"))
            or _as_text(raw.get("price"))
            or None
        )

        return cls(
            title=_as_text(raw.get("title")) or _as_text(raw.get("name")) or "",
            variant=variant,
            quantity=raw.get("quantity"),
            price_formatted=price_formatted,
            price=price,
        )


class RenderedEmail(BaseModel):
    """Subject line and HTML document for one outbound message."""
    subject: str
    html: str


class MessageResponse(BaseModel):
    """JSON body of every send-quote response."""
    message: str
    error: Optional[str] = None


@dataclass(frozen=True)
class QuoteVariant:
    """
    Behaviour switches for one send-quote handler.

    include_subtotal      — parse prices, render the subtotal row and fall back
                            to a computed "$x.xx" when an item has no display price
    label_overrides       — honour label_* fields from the request for the
                            customer-details block
    numeric_quantity      — render quantity as a number (0 when missing)
    legacy_missing_quantity / legacy_missing_price
                          — values used by the legacy text parser when the
                            "Qty:" / "Price:" line is absent
    """

    name: str
    include_subtotal: bool
    label_overrides: bool
    numeric_quantity: bool
    legacy_missing_quantity: Union[int, str]
    legacy_missing_price: str


DETAILED = QuoteVariant(
    name="detailed",
    include_subtotal=True,
    label_overrides=True,
    numeric_quantity=True,
    legacy_missing_quantity=0,
    legacy_missing_price="0",
)

SIMPLE = QuoteVariant(
    name="simple",
    include_subtotal=False,
    label_overrides=False,
    numeric_quantity=False,
    legacy_missing_quantity="",
    legacy_missing_price="",
)
