from __future__ import annotations

import re
from typing import Iterable, List, Set

ATTRIBUTE_RE = re.compile(r"The attribute '([^']*)'")
DISALLOWED_TAG_RE = re.compile(r"The tag '([^']*)' is disallowed\.")


def get_disallowed_attributes(messages: Iterable[str]) -> List[str]:
    """
    Collects attribute names from validator messages such as
    "The attribute 'onclick' may not appear in tag 'div'."

    Sorted descending, so 'data-foo-bar' is handled before 'data-foo'.
    """
    found: Set[str] = set()
    for message in messages:
        match = ATTRIBUTE_RE.search(message)
        if match and match.group(1):
            found.add(match.group(1))
    return sorted(found, reverse=True)


def get_disallowed_tags(messages: Iterable[str]) -> Set[str]:
    """Collects tag names from "The tag 'foo' is disallowed." messages."""
    found: Set[str] = set()
    for message in messages:
        match = DISALLOWED_TAG_RE.search(message)
        if match and match.group(1):
            found.add(match.group(1))
    return found
