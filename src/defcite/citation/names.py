"""Author-string parsing.

Author strings are free text such as ``"Smith, J. D."``, ``"John Smith"``
or ``"Lee, A. & Kim, B."``. Splitting happens on commas and ampersands; a
fragment made only of initials is re-attached to the author before it, so
``"Lee, A."`` stays one author in "Last, Initials" order.

Last-name extraction is a pluggable strategy because name order is
locale-dependent.
"""

from __future__ import annotations

import re
from typing import Protocol

AUTHOR_SPLIT = re.compile(r"[,&]")
NAME_PARTS = re.compile(r"[\s,]+")
INITIALS = re.compile(r"^(?:[A-Z]\.?\s*)+$")


def _is_initials(fragment: str) -> bool:
    return bool(INITIALS.match(fragment)) and len(fragment.replace(".", "").replace(" ", "")) <= 3


def split_authors(author: str) -> list[str]:
    """Split an author string into individual author names."""
    authors: list[str] = []
    merged: set[int] = set()
    for fragment in (f.strip() for f in AUTHOR_SPLIT.split(author)):
        if not fragment:
            continue
        last = len(authors) - 1
        if authors and last not in merged and _is_initials(fragment):
            authors[last] = f"{authors[last]}, {fragment}"
            merged.add(last)
            continue
        authors.append(fragment)
    return authors


class LastNameParser(Protocol):
    def last_name(self, author: str) -> str:
        ...


class CommaAwareLastNameParser:
    """``"Last, First"`` when a comma is present, otherwise ``"First Last"``."""

    def last_name(self, author: str) -> str:
        parts = [p for p in NAME_PARTS.split(author.strip()) if p]
        if not parts:
            return ""
        return parts[0] if "," in author else parts[-1]


class FamilyNameFirstParser:
    """Family name always written first (e.g. ``"Kim Minsu"``)."""

    def last_name(self, author: str) -> str:
        parts = [p for p in NAME_PARTS.split(author.strip()) if p]
        return parts[0] if parts else ""


DEFAULT_NAME_PARSER: LastNameParser = CommaAwareLastNameParser()


def get_last_name(author: str, parser: LastNameParser | None = None) -> str:
    return (parser or DEFAULT_NAME_PARSER).last_name(author)


def last_names(author: str, parser: LastNameParser | None = None) -> list[str]:
    parser = parser or DEFAULT_NAME_PARSER
    return [name for name in (parser.last_name(a) for a in split_authors(author)) if name]
