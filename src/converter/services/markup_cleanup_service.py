# src/converter/services/markup_cleanup_service.py
from __future__ import annotations

import logging
import re
from typing import Dict, Optional

from ampify.core.utils.console_logger import ConsoleLogger

logger = logging.getLogger(__name__)
console = ConsoleLogger("Cleanup")

# Whole elements AMP does not allow in author markup.
DISALLOWED_TAGS: Dict[str, str] = {
    "script": r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>",
    "style": r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>",
    "iframe": r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>",
    "link": r"<link\b[^<]*>",
}

JSON_LD_RE = re.compile(r"""type\s*=\s*["']?application/ld\+json""", re.IGNORECASE)
# A start tag; quoted attribute values may contain '<' or '>'.
TAG_RE = re.compile(r"""<([A-Za-z][^\s/<>"']*)((?:"[^"]*"|'[^']*'|[^'"<>])*)>""")
# One attribute: leading whitespace, name, optional value.
ATTRIBUTE_RE = re.compile(r"""(\s+)([^\s"'<>/=]+)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'<>`]+))?""")


def remove_regexp(html: str, pattern: str, flags: int = re.IGNORECASE) -> str:
    """Removes every match of `pattern`."""
    return re.sub(pattern, "", html, flags=flags)


def remove_disallowed_tags(
        html: str,
        tags: Optional[Dict[str, str]] = None,
        keep_json_ld: bool = True,
) -> str:
    """
    Removes script, style, iframe and link elements. JSON-LD scripts survive
    when `keep_json_ld` is set, since AMP permits structured data.
    """
    for name, pattern in (tags or DISALLOWED_TAGS).items():
        console.status(f"Removing disallowed tag: <{name}>")
        regex = re.compile(pattern, re.IGNORECASE)
        if name == "script" and keep_json_ld:
            html = regex.sub(_drop_unless_json_ld, html)
        else:
            html = regex.sub("", html)
    return html


def _drop_unless_json_ld(match: re.Match) -> str:
    block = match.group(0)
    opening = block[:block.find(">") + 1]
    return block if JSON_LD_RE.search(opening) else ""


def remove_attribute(html: str, attribute: str) -> str:
    """
    Strips `attribute` (bare, double or single quoted) from every tag.
    Only markup inside '<...>' is touched; text content and the values of
    other attributes are left alone.
    """
    name = attribute.lower()

    def _drop(match: re.Match) -> str:
        return "" if match.group(2).lower() == name else match.group(0)

    def _strip(match: re.Match) -> str:
        return f"<{match.group(1)}{ATTRIBUTE_RE.sub(_drop, match.group(2))}>"

    return TAG_RE.sub(_strip, html)


def replace_tag(html: str, tag: str, replacement_tag: str = "div") -> str:
    """
    Renames every `<tag ...>` to a bare `<replacement_tag>` and every
    `</tag>` to `</replacement_tag>`. Attributes of the old tag are dropped.
    """
    name = re.escape(tag)
    open_re = re.compile(r"""<%s(?=[\s/>])(?:"[^"]*"|'[^']*'|[^'"<>])*>""" % name, re.IGNORECASE)
    close_re = re.compile(r"</%s\s*>" % name, re.IGNORECASE)

    html = open_re.sub(f"<{replacement_tag}>", html)
    html = close_re.sub(f"</{replacement_tag}>", html)
    return html
