"""
Quote pipeline: normalize cart -> render emails -> send to admin and customer.

Sends are issued one after the other, admin first, and the first failure
stops the run.  A failed customer send after a successful admin send is
therefore possible; it is logged here but reported to the caller as a
plain delivery error, like any other failure.
"""

import logging
from typing import Optional

from quote_mailer.config import Settings, get_settings
from quote_mailer.models.quote import QuoteRequest, QuoteVariant
from quote_mailer.services.cart_normalizer import normalize_cart_items
from quote_mailer.services.email_transport import (
    EmailDeliveryError,
    EmailTransport,
    get_transport,
)
from quote_mailer.services.quote_renderer import QuoteEmails, render_quote_emails

logger = logging.getLogger(__name__)


def send_quote_emails(
    emails: QuoteEmails,
    customer_email: str,
    settings: Settings,
    transport: EmailTransport,
) -> list[str]:
    """
    Send the admin copy, then the customer copy.

    Returns the provider message ids in send order.
    Raises EmailDeliveryError on the first failure.
    """
    if not settings.from_email:
        raise EmailDeliveryError("FROM_EMAIL is not configured.")
    if not settings.admin_email:
        raise EmailDeliveryError("ADMIN_EMAIL is not configured.")

    message_ids: list[str] = []
    deliveries = (
        ("admin", settings.admin_email, emails.admin),
        ("customer", customer_email, emails.customer),
    )
    for role, recipient, email in deliveries:
        try:
            message_id = transport.send(
                to=recipient,
                from_email=settings.from_email,
                subject=email.subject,
                html=email.html,
            )
        except EmailDeliveryError:
            if message_ids:
                logger.warning(
                    "Quote email to %s failed after %d message(s) were already sent",
                    role,
                    len(message_ids),
                )
            raise
        logger.info("Quote email sent to %s (%s), id=%s", role, recipient, message_id)
        message_ids.append(message_id)

    return message_ids


def process_quote_request(
    request: QuoteRequest,
    variant: QuoteVariant,
    settings: Optional[Settings] = None,
    transport: Optional[EmailTransport] = None,
) -> list[str]:
    """
    Run the whole pipeline for a validated quote request.

    The caller is responsible for checking has_required_fields() first.
    """
    settings = settings or get_settings()
    transport = transport or get_transport(settings=settings)

    items = normalize_cart_items(request.cart_items, variant)
    logger.info(
        "Processing %s quote request with %d cart item(s)", variant.name, len(items)
    )

    emails = render_quote_emails(items, request, variant, settings.branding)
    return send_quote_emails(emails, request.email.strip(), settings, transport)
