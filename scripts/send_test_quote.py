#!/usr/bin/env python3
"""
Dev helper: post a sample quote request to the local Quote Mailer backend.

Builds a realistic storefront form payload with the cart encoded in one of
the three shapes the backend accepts, and POST-s it to /api/send-quote (or
/api/send-quote-simple with --simple).

Usage
-----
# Array cart, English, detailed handler, targeting localhost:8000
python scripts/send_test_quote.py

# Legacy three-line text cart, French labels
python scripts/send_test_quote.py --cart legacy --language fr

# JSON-encoded cart string against the simple handler
python scripts/send_test_quote.py --cart json-string --simple

# Just print the payload
python scripts/send_test_quote.py --dry-run

Run the backend with EMAIL_PROVIDER=log to see the emails in the server log
instead of sending them.
"""

import argparse
import json
import sys
import textwrap

import httpx


# ---------------------------------------------------------------------------
# Sample cart
# ---------------------------------------------------------------------------

_SAMPLE_ITEMS = [
    {
        "title": "Organic Maple Syrup",
        "variant": "1 L",
        "quantity": 4,
        "price_formatted": "$39.96",
    },
    {
        "title": "Wild Blueberry Jam",
        "variant": "null",
        "quantity": 2,
        "price_formatted": "$17.00",
    },
    {
        "name": "Gift Box <Deluxe>",
        "quantity": 1,
        "price": "24.5",
    },
]


def _legacy_cart_text(items: list[dict]) -> str:
    """Encode items in the legacy three-lines-per-item text format."""
    blocks = []
    for item in items:
        title = item.get("title") or item.get("name") or ""
        price = item.get("price_formatted") or item.get("price") or ""
        blocks.append(f"{title}\nQty: {item.get('quantity', 0)}\nPrice: {price}")
    return "\n\n".join(blocks)


def _build_cart(shape: str):
    if shape == "array":
        return _SAMPLE_ITEMS
    if shape == "json-string":
        return json.dumps(_SAMPLE_ITEMS)
    return _legacy_cart_text(_SAMPLE_ITEMS)


def _build_payload(args: argparse.Namespace) -> dict:
    payload = {
        "name": args.name,
        "email": args.email,
        "invoice_contact": "Accounts Payable",
        "street": "123 Rue Saint-Jean",
        "city": "Québec",
        "province": "QC",
        "postal_code": "G1R 1N4",
        "country": "Canada",
        "preferred_contact": "Email",
        "preferred_delivery": "Pickup",
        "notes": "Please call before delivery.\nLoading dock at the back.",
        "cart_items": _build_cart(args.cart),
        "language": args.language,
    }
    if args.language == "fr":
        payload.update(
            {
                "label_name": "Nom",
                "label_email": "Courriel",
                "label_city": "Ville",
                "label_notes": "Notes / Instructions",
            }
        )
    return payload


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    parser = argparse.ArgumentParser(
        prog="send_test_quote.py",
        description="Send a sample quote request to the Quote Mailer backend.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_test_quote.py
              python scripts/send_test_quote.py --cart legacy --language fr
              python scripts/send_test_quote.py --simple --url http://localhost:8001
        """),
    )
    parser.add_argument(
        "--url",
        default="http://localhost:8000",
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--cart",
        default="array",
        choices=["array", "json-string", "legacy"],
        help="How to encode cart_items (default: array)",
    )
    parser.add_argument(
        "--language",
        default="en",
        choices=["en", "fr"],
        help="Email language (default: en)",
    )
    parser.add_argument(
        "--simple",
        action="store_true",
        help="Target /api/send-quote-simple instead of /api/send-quote.",
    )
    parser.add_argument("--name", default="Jane Tremblay", help="Customer name")
    parser.add_argument("--email", default="jane@example.com", help="Customer email")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the payload JSON without sending it.",
    )

    args = parser.parse_args()
    payload = _build_payload(args)

    path = "/api/send-quote-simple" if args.simple else "/api/send-quote"
    endpoint = f"{args.url.rstrip('/')}{path}"

    print(f"Endpoint : {endpoint}")
    print(f"Cart     : {args.cart} ({len(_SAMPLE_ITEMS)} items)")
    print(f"Language : {args.language}")

    if args.dry_run:
        print("\n[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    try:
        response = httpx.post(endpoint, json=payload, timeout=30.0)
    except httpx.HTTPError as exc:
        print(f"\nERROR: request failed: {exc}", file=sys.stderr)
        return 1

    symbol = "OK" if response.status_code == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)

    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
