"""
Quote Mailer API
FastAPI application that turns storefront cart-quote forms into emails.
"""

import logging
import os

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from quote_mailer.routers import send_quote

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

app = FastAPI(
    title="Quote Mailer API",
    description="Emails cart quote requests to the store and the customer",
    version=VERSION,
)

# CORS headers are set by the send-quote routes themselves (see routers/send_quote.py)
app.include_router(send_quote.router, prefix=send_quote.SEND_QUOTE_PATH, tags=["quotes"])
app.include_router(
    send_quote.simple_router, prefix=send_quote.SEND_QUOTE_SIMPLE_PATH, tags=["quotes"]
)
app.add_exception_handler(StarletteHTTPException, send_quote.method_not_allowed_handler)


@app.on_event("startup")
async def log_startup_urls() -> None:
    """
    Log where the API is reachable and which email provider is active.

    The port comes from HOST_PORT so Docker-mapped ports are reported
    correctly; defaults to 8000.
    """
    host_port = os.getenv("HOST_PORT", "8000")
    provider = os.getenv("EMAIL_PROVIDER", "resend")
    logger.info(
        "Quote Mailer API running at http://localhost:%s (email provider: %s)",
        host_port,
        provider,
    )
    if not os.getenv("RESEND_API_KEY") and provider == "resend":
        logger.warning("RESEND_API_KEY is not set; quote emails will fail to send")


@app.get("/")
async def root():
    return {"message": "Quote Mailer API", "version": VERSION}


@app.get("/health")
async def health():
    return {"status": "ok"}
