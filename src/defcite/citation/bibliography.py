"""Reference-list entries built from a document title or filename."""

from __future__ import annotations

import re

from defcite.config import CitationFormat
from defcite.shared.text import clean_text

KNOWN_EXTENSIONS = re.compile(r"\.(pdf|docx|txt)$", re.IGNORECASE)
WORD_START = re.compile(r"\b\w")

ACADEMIC_DOCUMENT = "Dokumen Akademik"
COURSE_MATERIAL = "Materi Perkuliahan"
ACADEMIC_REFERENCE = "Sumber Referensi Akademik"
REFERENCE_SOURCE = "Sumber Referensi"


def format_title(filename: str) -> str:
    """``"machine_learning-intro.pdf"`` → ``"Machine Learning Intro"``."""
    title = KNOWN_EXTENSIONS.sub("", filename)
    title = re.sub(r"[-_]", " ", title)
    return WORD_START.sub(lambda m: m.group().upper(), title)


def build_bibliography(
    title: str,
    author: str,
    year: int | str,
    citation_format: str | CitationFormat = CitationFormat.APA,
) -> list[str]:
    """Render the reference-list alternatives for the format, preferred first.

    *author* and *year* are inserted verbatim.
    """
    formatted = format_title(title)
    fmt = CitationFormat.parse(citation_format)

    if fmt is CitationFormat.APA:
        entries = [
            f"{author} ({year}). {formatted}. {label}."
            for label in (ACADEMIC_DOCUMENT, COURSE_MATERIAL, ACADEMIC_REFERENCE)
        ]
    elif fmt is CitationFormat.MLA:
        entries = [
            f'{author}. "{formatted}." {label}, {year}.'
            for label in (ACADEMIC_DOCUMENT, COURSE_MATERIAL)
        ]
    elif fmt is CitationFormat.CHICAGO:
        entries = [
            f'{author}. "{formatted}." {label}, {year}.'
            for label in (ACADEMIC_DOCUMENT, REFERENCE_SOURCE)
        ]
    else:
        entries = [f"{author} ({year}). {formatted}. {ACADEMIC_DOCUMENT}."]

    return [clean_text(e) for e in entries]
