"""
Runtime configuration.

Values come from environment variables, optionally seeded from a .env file.
Settings are read on every call so tests (and long-running workers) pick up
changes to os.environ without reloading modules.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

# Defaults reproduce the store the quote form was originally built for.
_DEFAULT_LOGO_URL = "https://www.organiknation.ca/cdn/shop/files/LOGO-Footer.png"
_DEFAULT_INSTAGRAM_URL = "https://instagram.com/organik_nation_/"
_DEFAULT_INSTAGRAM_ICON_URL = (
    "https://cdn.shopify.com/s/files/1/0720/5473/5000/files/instagram.png"
)


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


@dataclass(frozen=True)
class Branding:
    """Store identity shown in the email header, body and footer."""

    store_name: str
    logo_url: str
    website_url: str
    website_display: str
    contact_email: str
    phone_tel: str
    phone_display: str
    instagram_url: str
    instagram_icon_url: str


@dataclass(frozen=True)
class Settings:
    """
    Settings consumed by the quote pipeline.

    resend_api_key, admin_email and from_email are required for delivery but
    are not validated here: a missing value surfaces as a delivery failure on
    the request that needs it, not as an import-time crash.
    """

    resend_api_key: str
    admin_email: str
    from_email: str
    email_provider: str
    branding: Branding


def get_settings() -> Settings:
    """Build Settings from the current environment."""
    branding = Branding(
        store_name=_env("STORE_NAME"),
        logo_url=_env("STORE_LOGO_URL", _DEFAULT_LOGO_URL),
        website_url=_env("STORE_WEBSITE", "https://www.organiknation.ca/"),
        website_display=_env("STORE_WEBSITE_DISPLAY", "www.organiknation.ca"),
        contact_email=_env("STORE_CONTACT_EMAIL", "info@organiknation.ca"),
        phone_tel=_env("STORE_PHONE", "14185704073"),
        phone_display=_env("STORE_PHONE_DISPLAY", "(418) 570-4073"),
        instagram_url=_env("STORE_INSTAGRAM_URL", _DEFAULT_INSTAGRAM_URL),
        instagram_icon_url=_env("STORE_INSTAGRAM_ICON_URL", _DEFAULT_INSTAGRAM_ICON_URL),
    )
    return Settings(
        resend_api_key=_env("RESEND_API_KEY"),
        admin_email=_env("ADMIN_EMAIL"),
        from_email=_env("FROM_EMAIL"),
        email_provider=_env("EMAIL_PROVIDER", "resend").lower(),
        branding=branding,
    )
