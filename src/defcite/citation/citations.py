"""In-text citation rendering for APA, MLA and Chicago."""

from __future__ import annotations

from defcite.citation.names import LastNameParser, last_names
from defcite.config import CitationFormat
from defcite.shared.text import capitalize_first, clean_text, lowercase_first

LEAD_IN = "Menurut"
AND = "dan"
ET_AL = "et al."
ANONYMOUS = "Anonim"


def _narrative_authors(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} {AND} {names[1]}"
    return f"{names[0]} {ET_AL}"


def _parenthetical_authors(names: list[str], conjunction: str) -> str:
    if len(names) == 2:
        return f"{names[0]} {conjunction} {names[1]}"
    return _narrative_authors(names)


def build_citations(
    paraphrase: str,
    author: str,
    year: int | str,
    citation_format: str | CitationFormat = CitationFormat.APA,
    name_parser: LastNameParser | None = None,
) -> list[str]:
    """Render every in-text citation variant for the format, preferred first."""
    names = last_names(author, name_parser) or [ANONYMOUS]
    lead_in_text = lowercase_first(paraphrase)
    sentence_text = capitalize_first(paraphrase)
    narrative = f"{LEAD_IN} {_narrative_authors(names)} ({year}), {lead_in_text}"

    fmt = CitationFormat.parse(citation_format)
    if fmt is CitationFormat.APA:
        citations = [
            narrative,
            # APA separates the author group from the year with a comma
            f"{sentence_text} ({_parenthetical_authors(names, '&')}, {year}).",
        ]
    elif fmt is CitationFormat.MLA:
        citations = [f"{sentence_text} ({_parenthetical_authors(names, AND)} {year})."]
    else:
        # Chicago and unrecognized formats use the lead-in form
        citations = [narrative]

    return [clean_text(c) for c in citations]
