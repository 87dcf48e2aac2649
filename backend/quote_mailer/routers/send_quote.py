"""
Send-quote router.

The storefront posts its cart-quote form here.  Two handlers are mounted
from the same router factory:

  /api/send-quote         — detailed: subtotal row, caller label overrides
  /api/send-quote-simple  — simple: raw prices, no subtotal, no overrides

Each path answers:
  OPTIONS  — CORS preflight, 200 with an empty body
  POST     — validate, render and send the quote emails
  other    — 405 {"message": "Method not allowed"} (method_not_allowed_handler)

The storefront is a third-party theme served from its own domain, so every
response (errors included) carries the permissive CORS headers below rather
than relying on the Origin-driven CORSMiddleware.
"""

import json
import logging

from fastapi import APIRouter, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quote_mailer.models.quote import DETAILED, SIMPLE, MessageResponse, QuoteRequest, QuoteVariant
from quote_mailer.services.quote_dispatch import process_quote_request

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

SEND_QUOTE_PATH = "/api/send-quote"
SEND_QUOTE_SIMPLE_PATH = "/api/send-quote-simple"


def _json(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body = MessageResponse(message=message, error=error).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=CORS_HEADERS)


async def _read_payload(request: Request) -> dict:
    """Decode the JSON body; anything that is not a JSON object counts as {}."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        logger.warning("send-quote: request body is not valid JSON")
        return {}
    return payload if isinstance(payload, dict) else {}


def build_router(variant: QuoteVariant) -> APIRouter:
    """Create the send-quote routes for one handler variant."""
    router = APIRouter()

    @router.options("", include_in_schema=False)
    async def preflight() -> Response:
        return Response(status_code=200, headers=CORS_HEADERS)

    @router.post(
        "",
        response_model=MessageResponse,
        responses={
            200: {"description": "Both emails sent"},
            400: {"description": "Name or email missing"},
            500: {"description": "Email provider failed; error holds the cause"},
        },
    )
    async def send_quote(request: Request) -> JSONResponse:
        """
        Send a quote request to the store admin and a copy to the customer.

        The body is the storefront form as JSON: customer details, an
        optional language ("fr" for French), optional label_* overrides and
        cart_items (array, JSON-encoded array or legacy text).
        """
        payload = await _read_payload(request)
        quote = QuoteRequest.model_validate(payload)

        if not quote.has_required_fields():
            logger.info("send-quote (%s): rejected, name or email missing", variant.name)
            return _json(400, "Name and Email are required")

        try:
            await run_in_threadpool(process_quote_request, quote, variant)
        except Exception as exc:
            logger.error("send-quote (%s): sending failed: %s", variant.name, exc)
            return _json(500, "Error sending email", error=str(exc))

        return _json(200, "Emails sent successfully!")

    return router


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """
    Answer any unsupported method on the send-quote paths with the JSON 405
    body and CORS headers; every other HTTP error keeps FastAPI's default.
    """
    path = request.url.path.rstrip("/")
    if exc.status_code == 405 and path in (SEND_QUOTE_PATH, SEND_QUOTE_SIMPLE_PATH):
        return _json(405, "Method not allowed")
    return await http_exception_handler(request, exc)


router = build_router(DETAILED)
simple_router = build_router(SIMPLE)
