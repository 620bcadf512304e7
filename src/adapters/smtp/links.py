"""Verification link construction shared by notifier adapters."""

from urllib.parse import urlencode


def build_verification_link(base_link: str, token: str) -> str:
    """Append the token as a query parameter to the verify-email URL."""
    separator = "&" if "?" in base_link else "?"
    return f"{base_link}{separator}{urlencode({'token': token})}"
