# src/converter/services/url_rewrite_service.py
from __future__ import annotations

import logging
import re

from renderer.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)

PROTOCOL_RELATIVE_RE = re.compile(r"""\b((?:href|src)\s*=\s*["'])//(?=[^/"'])""", re.IGNORECASE)
ROOT_RELATIVE_RE = re.compile(r"""\b((?:href|src)\s*=\s*["'])/(?!/)""", re.IGNORECASE)
URL_ATTRIBUTE_RE = re.compile(r"""\b((?:href|src)\s*=\s*)(["'])([^"']*)\2""", re.IGNORECASE)


def rewrite_protocol_relative_urls(html: str, scheme: str = "https") -> str:
    """href="//cdn.example.com/x" -> href="https://cdn.example.com/x"."""
    return PROTOCOL_RELATIVE_RE.sub(lambda m: f"{m.group(1)}{scheme}://", html)


def rewrite_relative_urls(html: str, domain: str) -> str:
    """
    href="/about" -> href="<domain>/about". `domain` is scheme + host.
    Protocol-relative values are never matched, so run the protocol-relative
    pass first or they stay as they are.
    """
    domain = domain.rstrip("/")
    return ROOT_RELATIVE_RE.sub(lambda m: f"{m.group(1)}{domain}/", html)


def rewrite_document_relative_urls(html: str, page_url: str) -> str:
    """Resolves path-relative values like src="img/logo.png" against `page_url`."""

    def _resolve(match: re.Match) -> str:
        value = match.group(3).strip()
        if not UrlUtils.is_document_relative(value):
            return match.group(0)
        absolute = UrlUtils.normalize_url(page_url, value)
        return f"{match.group(1)}{match.group(2)}{absolute}{match.group(2)}"

    return URL_ATTRIBUTE_RE.sub(_resolve, html)
