"""
HTML rendering for quote request emails.

Public API:
  escape_html(value) -> str
  render_quote_html(items, request, variant, branding) -> str
  render_quote_emails(items, request, variant, branding) -> QuoteEmails

Both recipients get the same document; only the subject line differs.
Every value that came from the request goes through escape_html() before
it is placed in the markup.
"""

import html
import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from quote_mailer.config import Branding
from quote_mailer.models.quote import DETAILED, LineItem, QuoteRequest, QuoteVariant, RenderedEmail
from quote_mailer.services.labels import field_label, translate
from quote_mailer.services.pricing import calculate_subtotal, format_currency, parse_price

logger = logging.getLogger(__name__)

# (label id, QuoteRequest attribute) in display order
CUSTOMER_FIELDS = (
    ("name", "name"),
    ("email", "email"),
    ("invoice_contact", "invoice_contact"),
    ("street", "street"),
    ("city", "city"),
    ("province", "province"),
    ("postal_code", "postal_code"),
    ("country", "country"),
    ("contact", "preferred_contact"),
    ("delivery", "preferred_delivery"),
)

_BRAND_GREEN = "#82b517"
_BRAND_BROWN = "#231709"
_TEXT_GREY = "#4b4a4a"

_CELL = "border:1px solid #ddd;padding:8px;"
_HEADER_CELL = (
    f"border:1px solid #ddd; padding:10px; background:{_BRAND_BROWN};"
    " color: #fff; font-size:17px; font-weight: 500;"
)


@dataclass(frozen=True)
class QuoteEmails:
    """The two messages sent for one quote request."""
    admin: RenderedEmail
    customer: RenderedEmail


def escape_html(value: Any) -> str:
    """Escape & < > " ' for safe inclusion in HTML text or attributes. None -> ""."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def _notes_html(notes: str) -> str:
    # Escape first so the inserted <br> tags survive
    escaped = escape_html(notes)
    return escaped.replace("\r\n", "\n").replace("\n", "<br>")


def _numeric_quantity(value: Any) -> str:
    """Render a quantity as a number; missing or unparsable values show as 0."""
    if isinstance(value, bool) or value is None or value == "":
        return "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        number = value
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            logger.debug("quantity %r is not numeric; showing 0", value)
            return "0"
    if not math.isfinite(number):
        return "0"
    if number.is_integer():
        return str(int(number))
    return str(number)


def _raw_quantity(value: Any) -> str:
    if value is None:
        return ""
    return escape_html(value)


def _item_title(item: LineItem) -> str:
    title = escape_html(item.title)
    if item.variant:
        title += f" ({escape_html(item.variant)})"
    return title


def _item_price(item: LineItem, variant: QuoteVariant) -> str:
    if variant.include_subtotal:
        if item.price_formatted:
            return escape_html(item.price_formatted)
        return format_currency(parse_price(item.price))
    return escape_html(item.price or "")


def render_item_row(item: LineItem, variant: QuoteVariant = DETAILED) -> str:
    """Render one <tr> for the items table."""
    quantity = (
        _numeric_quantity(item.quantity)
        if variant.numeric_quantity
        else _raw_quantity(item.quantity)
    )
    return (
        "<tr>"
        f'<td style="{_CELL}">{_item_title(item)}</td>'
        f'<td style="{_CELL}text-align:center;">{quantity}</td>'
        f'<td style="{_CELL}text-align:right;">{_item_price(item, variant)}</td>'
        "</tr>"
    )


def _header_block(branding: Branding) -> str:
    return f"""
    <div style="background:{_BRAND_GREEN};color:#fff;padding:10px 20px;text-align:left;">
      <img src="{escape_html(branding.logo_url)}" alt="{escape_html(branding.store_name or 'logo')}" style="height: 80px; width: 80px;">
    </div>"""


def _body_block(language: Optional[str], branding: Branding) -> str:
    phone_tel = escape_html(branding.phone_tel)
    return f"""
    <div style="padding: 10px 25px;">
      <h2 style="font-size: 30px; font-weight: 600; color: {_TEXT_GREY};">{translate(language, 'heading')}</h2>
      <p style="font-size:16px; line-height: 26px; color: {_TEXT_GREY}; margin:0px; margin-bottom: 15px;">
        {translate(language, 'intro')}
      </p>
      <p style="font-size:16px; line-height: 26px; color: {_TEXT_GREY}; margin:0px;">
        <b>{translate(language, 'reminder_title')}</b> {translate(language, 'reminder')}
        <a href="tel:{phone_tel}" style="font-size:16px; color: {_BRAND_GREEN}; line-height: 24px; text-decoration: none;"> {escape_html(branding.phone_display)}</a>.
      </p>
    </div>"""


def _items_block(items: list[LineItem], language: Optional[str], variant: QuoteVariant) -> str:
    rows = "".join(render_item_row(item, variant) for item in items)

    subtotal_row = ""
    if variant.include_subtotal:
        subtotal = format_currency(calculate_subtotal(items))
        subtotal_row = (
            "<tr>"
            f'<td colspan="2" style="{_CELL}text-align:right; font-weight:bold; font-size:16px; color: {_BRAND_BROWN};">'
            f'{translate(language, "subtotal")}</td>'
            f'<td style="{_CELL}text-align:right; font-weight:bold; font-size:18px; color: {_BRAND_BROWN};">'
            f"{subtotal}</td>"
            "</tr>"
        )

    return f"""
    <div style="padding:10px 25px;">
      <h3 style="font-size:18px; color:#444;">{translate(language, 'cart_items')}</h3>
      <table style="border-collapse:collapse;width:100%;margin-top:10px;font-size:14px;">
        <thead>
          <tr>
            <th style="{_HEADER_CELL} text-align:left;">{translate(language, 'product')}</th>
            <th style="{_HEADER_CELL} text-align:center;">{translate(language, 'quantity')}</th>
            <th style="{_HEADER_CELL} text-align:right;">{translate(language, 'price')}</th>
          </tr>
        </thead>
        <tbody>
          {rows}
          {subtotal_row}
        </tbody>
      </table>
    </div>"""


def _label(request: QuoteRequest, field_id: str, variant: QuoteVariant) -> str:
    return escape_html(
        field_label(
            field_id,
            request.language,
            override=request.label_override(field_id),
            use_overrides=variant.label_overrides,
        )
    )


def _details_block(request: QuoteRequest, variant: QuoteVariant) -> str:
    fields = list(CUSTOMER_FIELDS)
    # location is only collected by some storefront forms
    if request.location:
        fields.append(("location", "location"))

    lines = "".join(
        f"<strong>{_label(request, field_id, variant)}:</strong> "
        f"{escape_html(getattr(request, attr))}<br>\n"
        for field_id, attr in fields
    )

    notes = ""
    if request.notes:
        notes = f"""
      <div style="margin:20px 0;">
        <h3 style="font-size:16px;margin-bottom:8px;color:#444;">{_label(request, 'notes', variant)}</h3>
        <p style="background:#fafafa;padding:12px;border-left:4px solid {_BRAND_GREEN};border-radius:4px;font-size:14px;line-height:1.5;">
          {_notes_html(request.notes)}
        </p>
      </div>"""

    return f"""
    <div style="padding:25px;">
      <div style="background-color: #fafafa; border: 1px solid #ddd; padding:25px;">
        <p style="font-size:15px; margin:0px; line-height: 28px; color: {_TEXT_GREY};">
          {lines}
        </p>
      </div>
      {notes}
    </div>"""


def _footer_block(language: Optional[str], branding: Branding) -> str:
    link = "font-size:16px; line-height: 24px; color:#fff; text-decoration: none;"
    return f"""
    <div style="background: {_BRAND_BROWN}; padding:15px; text-align:left;">
      <table style="width: 100%;">
        <tr>
          <td style="width: 20%;">
            <img src="{escape_html(branding.logo_url)}" alt="{escape_html(branding.store_name or 'logo')}" style="height: 90px; width: 90px;">
          </td>
          <td style="padding: 20px; width: 70%;">
            <h4 style="font-size:18px; line-height: 28px; font-weight: 600; color:#fff; margin: 0;">{translate(language, 'contact_us')}</h4>
            <a href="{escape_html(branding.website_url)}" style="{link}">{translate(language, 'website')}: {escape_html(branding.website_display)}</a><br>
            <a href="mailto:{escape_html(branding.contact_email)}" style="{link}">{translate(language, 'footer_email')}: {escape_html(branding.contact_email)}</a><br>
            <a href="tel:{escape_html(branding.phone_tel)}" style="{link}">{translate(language, 'phone')}: +1 {escape_html(branding.phone_display)}</a>
          </td>
          <td style="width: 10%;">
            <a href="{escape_html(branding.instagram_url)}">
              <img src="{escape_html(branding.instagram_icon_url)}" alt="instagram" style="height: 35px; width: 35px;">
            </a>
          </td>
        </tr>
      </table>
    </div>"""


def render_quote_html(
    items: Iterable[Any],
    request: QuoteRequest,
    variant: QuoteVariant,
    branding: Branding,
) -> str:
    """
    Render the full quote email document.

    items are raw cart entries as returned by normalize_cart_items(); each
    one is converted with LineItem.from_raw() so missing fields get their
    defaults here.
    """
    line_items = [LineItem.from_raw(raw) for raw in items]
    language = request.language

    return f"""
<div style="font-family: Arial, sans-serif; color: #333; background:#f7f7f7;">
  <div style="max-width:800px;margin:0 auto;background:#fff;border-radius:8px;overflow:hidden;box-shadow:0 2px 6px rgba(0,0,0,0.1);">
    {_header_block(branding)}
    {_body_block(language, branding)}
    {_items_block(line_items, language, variant)}
    {_details_block(request, variant)}
    {_footer_block(language, branding)}
  </div>
</div>"""


def admin_subject(request: QuoteRequest) -> str:
    return f"{translate(request.language, 'admin_subject')} {request.name}"


def customer_subject(request: QuoteRequest, store_name: str = "") -> str:
    subject = f"{translate(request.language, 'customer_subject')} {request.name} {store_name}"
    return subject.rstrip()


def render_quote_emails(
    items: Iterable[Any],
    request: QuoteRequest,
    variant: QuoteVariant,
    branding: Branding,
) -> QuoteEmails:
    """Render the admin and customer messages for one quote request."""
    document = render_quote_html(items, request, variant, branding)
    return QuoteEmails(
        admin=RenderedEmail(subject=admin_subject(request), html=document),
        customer=RenderedEmail(
            subject=customer_subject(request, branding.store_name),
            html=document,
        ),
    )
