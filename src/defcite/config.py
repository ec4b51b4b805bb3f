"""Typed request options, environment settings and boundary validation.

Request options arrive either as explicit fields or bundled in an
``additionalInfo`` JSON blob (``{"sentenceCount": 3}``). Both are converted
to a :class:`ProcessingOptions` at the boundary so nothing downstream ever
handles untyped metadata.

Environment variables:
    DEFCITE_DB_PATH: SQLite database file (default: defcite.db)
    DEFCITE_LLM_MODEL: Generation model id or alias
        (default: ibm-granite/granite-3.3-8b-instruct)
    DEFCITE_LLM_TIMEOUT: Generation request timeout in seconds (default: 90)
    DEFCITE_MAX_UPLOAD_BYTES: Upload size limit (default: 5 MiB)
    REPLICATE_API_TOKEN: Token for the Replicate provider
    ANTHROPIC_API_KEY: Key for the Anthropic provider
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Mapping

from defcite.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SENTENCE_COUNT = 2
MIN_SENTENCE_COUNT = 1
MAX_SENTENCE_COUNT = 5
MIN_YEAR = 1900
MAX_YEARS_AHEAD = 5

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
SENTENCE_PUNCTUATION = re.compile(r"[.!?]")


class CitationFormat(str, Enum):
    APA = "APA"
    MLA = "MLA"
    CHICAGO = "CHICAGO"
    # unrecognized style name; rendered with the APA lead-in form only
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str | CitationFormat | None) -> CitationFormat:
        """Case-insensitive lookup; empty input is APA, unknown input is OTHER."""
        if isinstance(value, CitationFormat):
            return value
        if not value:
            return cls.APA
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            logger.debug("Unknown citation format %r, using the APA lead-in form", value)
            return cls.OTHER

    @classmethod
    def choices(cls) -> list[str]:
        """Format names a user can pick."""
        return [f.value for f in cls if f is not cls.OTHER]


def coerce_sentence_count(value: Any) -> int:
    """Read a sentence count the way a leading-integer parse would.

    ``"3"``, ``3``, ``3.9`` and ``"3 kalimat"`` all give 3. Missing,
    non-numeric and zero values give the default. Values outside the
    allowed range are returned unchanged so validation can reject them.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_SENTENCE_COUNT
    if isinstance(value, (int, float)):
        count = int(value)
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            return DEFAULT_SENTENCE_COUNT
        count = int(match.group(1))
    return count or DEFAULT_SENTENCE_COUNT


@dataclass
class ProcessingOptions:
    """Per-request options for paraphrasing and citation."""

    sentence_count: int = DEFAULT_SENTENCE_COUNT
    citation_format: CitationFormat = CitationFormat.APA

    @classmethod
    def from_additional_info(
        cls,
        raw: str | Mapping[str, Any] | None,
        citation_format: str | CitationFormat | None = None,
    ) -> ProcessingOptions:
        """Build options from an ``additionalInfo`` blob.

        Malformed JSON is logged and the default sentence count is used.
        """
        fmt = CitationFormat.parse(citation_format)
        if raw is None or raw == "":
            return cls(citation_format=fmt)

        parsed: Any = raw
        if isinstance(raw, str):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Could not parse additional info %r, using default sentence count", raw[:80])
                return cls(citation_format=fmt)

        if not isinstance(parsed, Mapping):
            logger.warning("Additional info is not an object, using default sentence count")
            return cls(citation_format=fmt)

        return cls(
            sentence_count=coerce_sentence_count(parsed.get("sentenceCount")),
            citation_format=fmt,
        )

    def to_json(self, **extra: Any) -> str:
        payload: dict[str, Any] = {"sentenceCount": self.sentence_count}
        payload.update(extra)
        return json.dumps(payload)


@dataclass
class Settings:
    """Service settings read from the environment."""

    db_path: str = "defcite.db"
    llm_model: str = "ibm-granite/granite-3.3-8b-instruct"
    llm_timeout: int = 90
    max_upload_bytes: int = 5 * 1024 * 1024
    replicate_api_token: str | None = field(default=None, repr=False)
    anthropic_api_key: str | None = field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            db_path=os.environ.get("DEFCITE_DB_PATH", "defcite.db"),
            llm_model=os.environ.get("DEFCITE_LLM_MODEL", "ibm-granite/granite-3.3-8b-instruct"),
            llm_timeout=int(os.environ.get("DEFCITE_LLM_TIMEOUT", "90")),
            max_upload_bytes=int(os.environ.get("DEFCITE_MAX_UPLOAD_BYTES", str(5 * 1024 * 1024))),
            replicate_api_token=os.environ.get("REPLICATE_API_TOKEN"),
            anthropic_api_key=os.environ.get("ANTHROPIC_API_KEY"),
        )


def _parse_year(year: Any) -> int | None:
    if isinstance(year, bool):
        return None
    if isinstance(year, int):
        return year
    try:
        value = float(str(year).strip())
    except (TypeError, ValueError):
        return None
    if not value.is_integer():
        return None
    return int(value)


def validate_request(
    keyword: str | None,
    author: str | None,
    year: Any,
    sentence_count: int,
    current_year: int | None = None,
) -> int:
    """Validate the fields every paraphrase request carries.

    Returns:
        The publication year as an int.

    Raises:
        ValidationError: naming the first offending field.
    """
    if not keyword or not keyword.strip():
        raise ValidationError("Keyword is required", field="keyword")
    if SENTENCE_PUNCTUATION.search(keyword):
        # every paraphrase sentence repeats the keyword, so it must not split sentences
        raise ValidationError("Keyword must not contain sentence punctuation (. ! ?)", field="keyword")
    if not author or not author.strip():
        raise ValidationError("Author is required", field="author")

    current_year = current_year or date.today().year
    parsed_year = _parse_year(year)
    if parsed_year is None or not MIN_YEAR <= parsed_year <= current_year + MAX_YEARS_AHEAD:
        raise ValidationError(
            f"Publication year must be between {MIN_YEAR} and {current_year + MAX_YEARS_AHEAD}",
            field="year",
        )

    if not MIN_SENTENCE_COUNT <= sentence_count <= MAX_SENTENCE_COUNT:
        raise ValidationError(
            f"Sentence count must be between {MIN_SENTENCE_COUNT} and {MAX_SENTENCE_COUNT}",
            field="sentence_count",
        )
    return parsed_year


def validate_definition_text(text: str | None) -> None:
    if not text or not text.strip():
        raise ValidationError("Definition text is required", field="original_text")
