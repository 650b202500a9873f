"""
Input Sanitization Utilities

Manifest values end up in the host's admin screens, so text is stripped of
markup and URLs are restricted to web protocols before they are exposed.
"""

import re
from typing import Optional
from urllib.parse import urlsplit

import bleach

# Allowed protocols for package and profile URLs
ALLOWED_PROTOCOLS = ["http", "https"]

_WHITESPACE = re.compile(r"\s+")


def sanitize_text_field(text: Optional[str]) -> str:
    """
    Strip all HTML and collapse runs of whitespace into single spaces.

    Args:
        text: Raw text from the manifest

    Returns:
        Plain single-line text
    """
    if text is None:
        return ""

    cleaned = bleach.clean(str(text), tags=[], strip=True)
    return _WHITESPACE.sub(" ", cleaned).strip()


def esc_url(url: Optional[str]) -> str:
    """
    Validate and clean a URL.

    Returns an empty string for anything that is not an absolute http(s) URL.
    """
    if not url:
        return ""

    url = str(url).strip().replace(" ", "%20")
    if any(ch in url for ch in "<>\"'"):
        return ""

    parts = urlsplit(url)
    if parts.scheme.lower() not in ALLOWED_PROTOCOLS or not parts.netloc:
        return ""
    return url
