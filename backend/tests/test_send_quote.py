"""
Send-quote endpoint tests.

Exercises /api/send-quote and /api/send-quote-simple through the FastAPI
app with the email transport replaced by a recording fake.

Coverage:
  - OPTIONS preflight, 405 for other methods, CORS headers on every response
  - 400 when name or email is missing
  - 200 on success with both emails sent
  - 500 with the provider cause when sending fails
  - cart payload shapes reaching the rendered email
"""

import json
import os
from unittest.mock import patch

import pytest

# Ensure env vars are set before importing anything that triggers app imports
os.environ.setdefault("ADMIN_EMAIL", "quotes@example.com")
os.environ.setdefault("FROM_EMAIL", "no-reply@example.com")

from fastapi.testclient import TestClient

from quote_mailer.services.email_transport import EmailDeliveryError


_CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "POST, OPTIONS",
    "access-control-allow-headers": "Content-Type",
}


class FakeTransport:
    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.sent = []

    def send(self, to, from_email, subject, html):
        if to in self.fail_for:
            raise EmailDeliveryError("The domain is not verified", recipient=to)
        self.sent.append({"to": to, "subject": subject, "html": html})
        return f"msg-{len(self.sent)}"


def _make_form(**overrides) -> dict:
    form = {
        "name": "Jane Tremblay",
        "email": "jane@example.com",
        "street": "123 Rue Saint-Jean",
        "city": "Québec",
        "province": "QC",
        "postal_code": "G1R 1N4",
        "country": "Canada",
        "preferred_contact": "Email",
        "preferred_delivery": "Pickup",
        "notes": "Call first",
        "cart_items": [
            {"title": "Organic Maple Syrup", "variant": "1 L", "quantity": 4, "price_formatted": "$39.96"},
            {"title": "Wild Blueberry Jam", "variant": "null", "quantity": 2, "price_formatted": "$17.00"},
        ],
    }
    form.update(overrides)
    return form


def _assert_cors(response):
    for header, value in _CORS.items():
        assert response.headers.get(header) == value


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def client():
    """Return a TestClient for the FastAPI app."""
    from quote_mailer.main import app
    return TestClient(app)


@pytest.fixture()
def transport(monkeypatch):
    """Replace the configured email transport with a recording fake."""
    monkeypatch.setenv("ADMIN_EMAIL", "quotes@example.com")
    monkeypatch.setenv("FROM_EMAIL", "no-reply@example.com")
    monkeypatch.setenv("STORE_NAME", "Organic Nation")
    fake = FakeTransport()
    with patch("quote_mailer.services.quote_dispatch.get_transport", return_value=fake):
        yield fake


# ===========================================================================
# HTTP method handling
# ===========================================================================

class TestMethods:

    @pytest.mark.parametrize("path", ["/api/send-quote", "/api/send-quote-simple"])
    def test_options_preflight(self, client, path):
        response = client.options(path)
        assert response.status_code == 200
        assert response.content == b""
        _assert_cors(response)

    @pytest.mark.parametrize("path", ["/api/send-quote", "/api/send-quote-simple"])
    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "TRACE", "PURGE"])
    def test_other_methods_are_405(self, client, method, path):
        response = client.request(method, path)
        assert response.status_code == 405
        assert response.json() == {"message": "Method not allowed"}
        _assert_cors(response)

    def test_unknown_path_keeps_default_404(self, client):
        response = client.get("/api/unknown")
        assert response.status_code == 404
        assert "access-control-allow-origin" not in response.headers

    def test_405_elsewhere_keeps_default_body(self, client):
        response = client.post("/health")
        assert response.status_code == 405
        assert response.json() == {"detail": "Method Not Allowed"}


# ===========================================================================
# Validation
# ===========================================================================

class TestValidation:

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": ""},
            {"email": ""},
            {"name": None},
            {"email": None},
            {"name": "   "},
            {"name": "", "email": ""},
            {"name": False},
            {"email": False},
            {"name": 0},
            {"email": 0},
        ],
    )
    def test_missing_name_or_email_is_400(self, client, transport, overrides):
        response = client.post("/api/send-quote", json=_make_form(**overrides))

        assert response.status_code == 400
        assert response.json() == {"message": "Name and Email are required"}
        _assert_cors(response)
        assert transport.sent == []

    def test_absent_fields_are_400(self, client, transport):
        form = _make_form()
        del form["email"]
        response = client.post("/api/send-quote-simple", json=form)
        assert response.status_code == 400
        assert transport.sent == []

    @pytest.mark.parametrize("body", [b"", b"not json", b"[1, 2]", b'"text"'])
    def test_unusable_body_is_400(self, client, transport, body):
        response = client.post(
            "/api/send-quote",
            content=body,
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert transport.sent == []


# ===========================================================================
# Successful sends
# ===========================================================================

class TestSendQuote:

    def test_sends_admin_and_customer_emails(self, client, transport):
        response = client.post("/api/send-quote", json=_make_form())

        assert response.status_code == 200
        assert response.json() == {"message": "Emails sent successfully!"}
        _assert_cors(response)

        admin, customer = transport.sent
        assert admin["to"] == "quotes@example.com"
        assert admin["subject"] == "New Quote Request from Jane Tremblay"
        assert customer["to"] == "jane@example.com"
        assert customer["subject"] == "Quote Request Received - Jane Tremblay Organic Nation"
        assert admin["html"] == customer["html"]

    def test_detailed_email_contents(self, client, transport):
        client.post("/api/send-quote", json=_make_form(label_city="Ville"))
        document = transport.sent[0]["html"]

        assert "Organic Maple Syrup (1 L)" in document
        assert "Wild Blueberry Jam (null)" not in document
        assert "$56.96" in document
        assert "<strong>Ville:</strong>" in document
        assert "Call first" in document

    def test_simple_email_contents(self, client, transport):
        client.post("/api/send-quote-simple", json=_make_form(label_city="Town"))
        document = transport.sent[0]["html"]

        assert "$39.96" in document
        assert "Subtotal" not in document
        assert "Town" not in document
        assert "<strong>City:</strong>" in document

    def test_json_string_cart(self, client, transport):
        cart = json.dumps([{"title": "Jam", "quantity": 1, "price": "4.50"}])
        client.post("/api/send-quote", json=_make_form(cart_items=cart))
        document = transport.sent[0]["html"]

        assert ">Jam</td>" in document
        assert ">$4.50</td>" in document

    def test_legacy_text_cart(self, client, transport):
        cart = "Widget\nQty: 4\nPrice: $9.99"
        client.post("/api/send-quote", json=_make_form(cart_items=cart))
        document = transport.sent[0]["html"]

        assert ">Widget</td>" in document
        assert 'text-align:center;">4</td>' in document

    @pytest.mark.parametrize("cart", [None, 42, {"title": "Jam"}, "", "{}"])
    def test_unusable_cart_still_sends(self, client, transport, cart):
        response = client.post("/api/send-quote", json=_make_form(cart_items=cart))

        assert response.status_code == 200
        assert len(transport.sent) == 2
        assert "$0.00" in transport.sent[0]["html"]

    def test_non_string_fields_are_accepted(self, client, transport):
        response = client.post(
            "/api/send-quote", json=_make_form(postal_code=12345, notes=None)
        )
        assert response.status_code == 200
        assert "12345" in transport.sent[0]["html"]
        assert "Notes / Instructions" not in transport.sent[0]["html"]

    def test_french_request(self, client, transport):
        client.post("/api/send-quote", json=_make_form(language="fr"))
        admin, customer = transport.sent

        assert admin["subject"] == "Nouvelle demande de devis de Jane Tremblay"
        assert customer["subject"] == "Demande de devis reçue - Jane Tremblay Organic Nation"
        assert "Merci pour votre commande!" in admin["html"]

    def test_name_is_escaped_in_email(self, client, transport):
        client.post("/api/send-quote", json=_make_form(name="<Jane & 'Co'>"))
        document = transport.sent[0]["html"]

        assert "<Jane" not in document
        assert "&lt;Jane &amp; &#x27;Co&#x27;&gt;" in document


# ===========================================================================
# Delivery failures
# ===========================================================================

class TestDeliveryFailure:

    def test_provider_failure_is_500(self, client, transport):
        transport.fail_for = {"quotes@example.com"}

        response = client.post("/api/send-quote", json=_make_form())

        assert response.status_code == 500
        assert response.json() == {
            "message": "Error sending email",
            "error": "The domain is not verified",
        }
        _assert_cors(response)

    def test_customer_failure_is_500_even_after_admin_sent(self, client, transport):
        transport.fail_for = {"jane@example.com"}

        response = client.post("/api/send-quote", json=_make_form())

        assert response.status_code == 500
        assert [s["to"] for s in transport.sent] == ["quotes@example.com"]

    def test_unknown_provider_is_500(self, client, monkeypatch):
        monkeypatch.setenv("EMAIL_PROVIDER", "pigeon")

        response = client.post("/api/send-quote", json=_make_form())

        assert response.status_code == 500
        assert "Unknown email provider" in response.json()["error"]

    def test_missing_api_key_is_500(self, client, monkeypatch):
        monkeypatch.setenv("EMAIL_PROVIDER", "resend")
        monkeypatch.setenv("RESEND_API_KEY", "")

        with patch("resend.Emails.send") as mock_send:
            response = client.post("/api/send-quote", json=_make_form())

        assert response.status_code == 500
        assert response.json()["error"] == "Resend API key is not configured."
        mock_send.assert_not_called()


# ===========================================================================
# Service routes
# ===========================================================================

class TestServiceRoutes:

    def test_root(self, client):
        assert client.get("/").json() == {"message": "Quote Mailer API", "version": "0.1.0"}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
