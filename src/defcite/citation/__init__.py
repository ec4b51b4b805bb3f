"""Citation and bibliography formatting."""

from defcite.citation.bibliography import build_bibliography, format_title
from defcite.citation.citations import build_citations
from defcite.citation.names import (
    CommaAwareLastNameParser,
    FamilyNameFirstParser,
    LastNameParser,
    get_last_name,
    split_authors,
)
from defcite.citation.selection import select_best_bibliography, select_best_citation

__all__ = [
    "build_citations",
    "build_bibliography",
    "format_title",
    "select_best_citation",
    "select_best_bibliography",
    "split_authors",
    "get_last_name",
    "LastNameParser",
    "CommaAwareLastNameParser",
    "FamilyNameFirstParser",
]
