# src/converter/services/boilerplate_service.py
from __future__ import annotations

import html as html_lib
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "PLACEHOLDER_TITLE"
PLACEHOLDER_CANONICAL_URL = "PLACEHOLDER_CANONICAL_URL"
PLACEHOLDER_INLINE_CSS = "PLACEHOLDER_INLINE_CSS"

TAG_HTML = '<html amp lang="{lang}">'
TAG_HEAD = f"""<head>
<meta charset="utf-8">
<script async src="https://cdn.ampproject.org/v0.js"></script>
<title>{PLACEHOLDER_TITLE}</title>
<link rel="canonical" href="{PLACEHOLDER_CANONICAL_URL}">
<meta name="viewport" content="width=device-width,minimum-scale=1,initial-scale=1">
<style amp-boilerplate>body{{-webkit-animation:-amp-start 8s steps(1,end) 0s 1 normal both;-moz-animation:-amp-start 8s steps(1,end) 0s 1 normal both;-ms-animation:-amp-start 8s steps(1,end) 0s 1 normal both;animation:-amp-start 8s steps(1,end) 0s 1 normal both}}@-webkit-keyframes -amp-start{{from{{visibility:hidden}}to{{visibility:visible}}}}@-moz-keyframes -amp-start{{from{{visibility:hidden}}to{{visibility:visible}}}}@-ms-keyframes -amp-start{{from{{visibility:hidden}}to{{visibility:visible}}}}@-o-keyframes -amp-start{{from{{visibility:hidden}}to{{visibility:visible}}}}@keyframes -amp-start{{from{{visibility:hidden}}to{{visibility:visible}}}}</style>
<noscript>
<style amp-boilerplate>body{{-webkit-animation:none;-moz-animation:none;-ms-animation:none;animation:none}}</style>
</noscript>
<style amp-custom>{PLACEHOLDER_INLINE_CSS}</style>"""

HTML_OPEN_RE = re.compile(r"<html(?=[\s>])[^>]*>", re.IGNORECASE)
HEAD_OPEN_RE = re.compile(r"<head(?=[\s>])[^>]*>", re.IGNORECASE)
HEAD_SPAN_RE = re.compile(r"<head(?=[\s>])[^>]*>.*?</head\s*>", re.IGNORECASE | re.DOTALL)

# Elements the boilerplate head already provides.
HEAD_DUPLICATE_PATTERNS = (
    r"<title\b[^>]*>.*?</title\s*>",
    r"<meta\s+[^>]*charset\s*=[^>]*>",
    r"<meta\s+[^>]*name\s*=\s*[\"']?viewport[\"']?[^>]*>",
)


def add_amp_boilerplate(html: str, lang: str = "en") -> str:
    """
    Swaps the first <html ...> for the AMP html tag and the first <head ...>
    for the AMP head block. Each is replaced at most once.
    """
    html = HTML_OPEN_RE.sub(lambda m: TAG_HTML.format(lang=html_lib.escape(lang, quote=True)), html, count=1)
    html = HEAD_OPEN_RE.sub(lambda m: TAG_HEAD, html, count=1)
    return html


def strip_head_duplicates(html: str) -> str:
    """
    Drops the page's own <title>, charset and viewport declarations from the
    first <head> element. Titles elsewhere (e.g. inside an inline <svg>) stay.
    """
    def _strip(match: re.Match) -> str:
        head = match.group(0)
        for pattern in HEAD_DUPLICATE_PATTERNS:
            head = re.sub(pattern, "", head, flags=re.IGNORECASE | re.DOTALL)
        return head

    return HEAD_SPAN_RE.sub(_strip, html, count=1)


def fill_placeholders(html: str, title: str = "", canonical_url: str = "", css: str = "") -> str:
    """Fills the title, canonical and inline CSS slots of the boilerplate, once each."""
    html = html.replace(PLACEHOLDER_TITLE, html_lib.escape(title, quote=False), 1)
    html = html.replace(PLACEHOLDER_CANONICAL_URL, html_lib.escape(canonical_url, quote=True), 1)
    # CSS goes in last so a stylesheet mentioning a placeholder name is not rewritten
    html = html.replace(PLACEHOLDER_INLINE_CSS, css, 1)
    return html


def read_inline_css(path: Path) -> str:
    """Reads the stylesheet to inline; a missing file yields an empty stylesheet."""
    if not path.exists():
        logger.warning("Inline CSS file %s not found; <style amp-custom> will be empty.", path)
        return ""
    return path.read_text(encoding="utf-8")
