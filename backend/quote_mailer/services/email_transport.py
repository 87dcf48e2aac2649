"""
Outbound email transports.

A transport is anything with a send(to, from_email, subject, html) method
that returns the provider's message id and raises EmailDeliveryError on
failure.  The quote pipeline only talks to that interface, so changing
provider is a matter of setting EMAIL_PROVIDER.

Supported providers:
  - resend  (default) — delivers through the Resend API
  - log     — development transport; logs the message instead of sending it

Adding a new provider:
  1. Write a transport class with a send() method.
  2. Register a factory for it in _TRANSPORTS.
  3. Set EMAIL_PROVIDER=<provider> in the environment.
"""

import logging
from typing import Callable, Optional, Protocol

import resend

from quote_mailer.config import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """
    Raised when the provider rejects or fails to deliver a message.

    str() of the error is the underlying cause so it can be reported back
    to the caller verbatim.
    """

    def __init__(self, cause: str, recipient: Optional[str] = None):
        super().__init__(cause)
        self.cause = cause
        self.recipient = recipient


class EmailTransport(Protocol):
    def send(self, to: str, from_email: str, subject: str, html: str) -> str:
        ...


# ---------------------------------------------------------------------------
# Resend
# ---------------------------------------------------------------------------

class ResendTransport:
    """Send email through the Resend API."""

    def __init__(self, api_key: str):
        self.api_key = (api_key or "").strip()
        # The SDK reads its key from module state. Only one key is ever
        # configured, so it is set here and never swapped back per send.
        if self.api_key:
            resend.api_key = self.api_key

    def send(self, to: str, from_email: str, subject: str, html: str) -> str:
        if not self.api_key:
            raise EmailDeliveryError("Resend API key is not configured.", recipient=to)

        payload = {
            "from": from_email,
            "to": [to],
            "subject": subject,
            "html": html,
        }

        try:
            response = resend.Emails.send(payload)
        except Exception as exc:
            raise EmailDeliveryError(str(exc), recipient=to) from exc

        message_id = response.get("id") if isinstance(response, dict) else None
        if not message_id:
            raise EmailDeliveryError(
                f"Unexpected Resend response: {response!r}", recipient=to
            )
        return message_id


# ---------------------------------------------------------------------------
# Log (development)
# ---------------------------------------------------------------------------

class LogTransport:
    """Log outbound messages instead of sending them. Never fails."""

    def send(self, to: str, from_email: str, subject: str, html: str) -> str:
        logger.info(
            "[log transport] to=%s from=%s subject=%r (%d bytes of HTML)",
            to,
            from_email,
            subject,
            len(html),
        )
        return "logged"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_TRANSPORTS: dict[str, Callable[[Settings], EmailTransport]] = {
    "resend": lambda settings: ResendTransport(settings.resend_api_key),
    "log": lambda settings: LogTransport(),
}


def get_transport(
    provider: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> EmailTransport:
    """
    Build the transport for provider, or for EMAIL_PROVIDER when omitted.

    Raises ValueError for unknown provider names.
    """
    settings = settings or get_settings()
    resolved = (provider or settings.email_provider or "resend").lower().strip()

    factory = _TRANSPORTS.get(resolved)
    if factory is None:
        raise ValueError(
            f"Unknown email provider {resolved!r}. "
            f"Supported providers: {sorted(_TRANSPORTS)}"
        )

    return factory(settings)
