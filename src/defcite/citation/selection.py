"""First-match selection of the primary citation and bibliography entry."""
from defcite.citation.bibliography import ACADEMIC_DOCUMENT

PREFERRED_LEAD_INS = ("Menurut", "Berdasarkan")


def select_best_citation(citations: list[str]) -> str:
    """First citation opening with a narrative lead-in, else the first one."""
    if not citations:
        return ""
    return next((c for c in citations if c.startswith(PREFERRED_LEAD_INS)), citations[0])


def select_best_bibliography(bibliographies: list[str]) -> str:
    """First entry labelled as an academic document, else the first one."""
    if not bibliographies:
        return ""
    return next((b for b in bibliographies if ACADEMIC_DOCUMENT in b), bibliographies[0])
