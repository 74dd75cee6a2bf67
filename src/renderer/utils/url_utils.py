# src/renderer/utils/url_utils.py
import logging
from urllib.parse import urlparse, urljoin, urlunparse

logger = logging.getLogger(__name__)

# Attribute values that must never be resolved against the page URL.
NON_RESOLVABLE_PREFIXES = ("#", "data:", "mailto:", "tel:", "javascript:", "about:", "blob:")


class UrlUtils:
    """A collection of static methods for URL parsing and manipulation."""

    @staticmethod
    def normalize_url(base_url: str, url: str) -> str:
        """
        Creates an absolute URL from a page URL and a potentially relative URL.
        Fragments are kept, since in-page anchors still matter in the output.
        """
        if isinstance(base_url, bytes):
            base_url = base_url.decode('utf-8')
        if isinstance(url, bytes):
            url = url.decode('utf-8')

        absolute_url = urljoin(base_url, url)
        parsed_url = urlparse(absolute_url)

        # Ensure there is a path (e.g., '/' for the homepage)
        if not parsed_url.path:
            parsed_url = parsed_url._replace(path='/')

        return urlunparse(parsed_url)

    @staticmethod
    def get_base_url(url: str) -> str | None:
        """
        Extracts and returns the base URL (scheme + netloc) from a given URL.
        """
        if isinstance(url, bytes):
            url = url.decode('utf-8')

        if not url.startswith(('http://', 'https://')):
            url = 'http://' + url

        try:
            parsed_url = urlparse(url)
            if not parsed_url.scheme or not parsed_url.netloc:
                logger.debug(f"Invalid URL format: {url}")
                return None
            return f"{parsed_url.scheme}://{parsed_url.netloc}"
        except ValueError:
            logger.debug(f"Could not parse invalid URL: {url}")
            return None

    @staticmethod
    def ensure_scheme(url: str) -> str:
        """Prefixes scheme-less input ('example.com/page') with http://."""
        url = url.strip()
        if url.startswith('//'):
            return 'https:' + url
        if not url.startswith(('http://', 'https://')):
            return 'http://' + url
        return url

    @staticmethod
    def is_relative_url(url: str) -> bool:
        """
        Checks if a URL is relative.
        """
        try:
            parsed = urlparse(url)
            return not parsed.scheme and not parsed.netloc
        except ValueError:
            return False

    @staticmethod
    def is_document_relative(url: str) -> bool:
        """
        True for paths like 'img/logo.png' or '../a.html' that resolve against
        the page URL. Root-relative ('/x'), protocol-relative ('//x'), absolute
        and special-scheme values are excluded.
        """
        if not url or url.startswith('/') or url.lower().startswith(NON_RESOLVABLE_PREFIXES):
            return False
        return UrlUtils.is_relative_url(url)
