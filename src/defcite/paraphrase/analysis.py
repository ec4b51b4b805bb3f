"""Full document analysis when no pattern-derived definition exists.

The model is asked for a keyed answer::

    STATUS_PENCARIAN: DITEMUKAN
    DEFINISI_EKSPLISIT: ...
    DEFINISI_IMPLISIT: ...
    ANALISIS_KOMPREHENSIF: ...
    TINGKAT_KEPASTIAN: SEDANG

and the response is parsed line by line, tolerating free-form answers.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from defcite.config import CitationFormat
from defcite.extraction.confidence import ConfidenceTier
from defcite.paraphrase.prompts import ANALYSIS_PROMPT
from defcite.shared.llm.base import TextGenerator, join_output
from defcite.shared.text import clean_text

logger = logging.getLogger(__name__)

ANALYSIS_MAX_TOKENS = 4000
ANALYSIS_TEMPERATURE = 0.15
ANALYSIS_TOP_P = 0.85
MAX_SEGMENTS = 8
FALLBACK_TEXT_CHARS = 3000

SEGMENT_SPLIT = re.compile(r"\n\n|\.\s+")
RESPONSE_KEYS = re.compile(
    r"STATUS_PENCARIAN:|DEFINISI_EKSPLISIT:|DEFINISI_IMPLISIT:|ANALISIS_KOMPREHENSIF:|TINGKAT_KEPASTIAN:",
    re.IGNORECASE,
)

TIER_LABELS = {
    "TINGGI": ConfidenceTier.HIGH,
    "SEDANG": ConfidenceTier.MEDIUM,
    "RENDAH": ConfidenceTier.LOW,
}


@dataclass(frozen=True)
class AnalysisResult:
    found: bool = False
    explicit_definition: str = ""
    implicit_definition: str = ""
    analysis: str = ""
    confidence: ConfidenceTier = ConfidenceTier.LOW


def relevant_text(text: str, keyword: str) -> str:
    """Up to eight segments mentioning *keyword*, else the document head."""
    keyword_lower = keyword.lower()
    segments = [s for s in SEGMENT_SPLIT.split(text) if keyword_lower in s.lower()][:MAX_SEGMENTS]
    if segments:
        return "\n\n".join(segments)
    return text[:FALLBACK_TEXT_CHARS]


def build_analysis_prompt(text: str, keyword: str, citation_format: CitationFormat) -> str:
    fmt = CitationFormat.parse(citation_format)
    if fmt is CitationFormat.OTHER:
        fmt = CitationFormat.APA
    return ANALYSIS_PROMPT.format(
        text=clean_text(relevant_text(text, keyword)),
        keyword=clean_text(keyword),
        citation_format=fmt.value,
    )


def _value(line: str, key: str) -> str:
    return re.sub(rf"{key}:\s*", "", line, flags=re.IGNORECASE).strip()


def _is_found(status: str) -> bool:
    status = status.upper()
    return "DITEMUKAN" in status and "TIDAK" not in status


def parse_analysis(response: str) -> AnalysisResult:
    """Parse a keyed analysis response; unknown confidence labels become LOW."""
    found = False
    explicit = implicit = analysis = ""
    confidence = ConfidenceTier.LOW

    for line in (line.strip() for line in response.splitlines()):
        if not line:
            continue
        if "STATUS_PENCARIAN:" in line:
            found = _is_found(_value(line, "STATUS_PENCARIAN"))
        elif "DEFINISI_EKSPLISIT:" in line:
            explicit = _value(line, "DEFINISI_EKSPLISIT")
            if "tidak ditemukan" in explicit.lower():
                explicit = ""
        elif "DEFINISI_IMPLISIT:" in line:
            implicit = _value(line, "DEFINISI_IMPLISIT")
        elif "ANALISIS_KOMPREHENSIF:" in line:
            analysis = _value(line, "ANALISIS_KOMPREHENSIF")
        elif "TINGKAT_KEPASTIAN:" in line:
            confidence = TIER_LABELS.get(_value(line, "TINGKAT_KEPASTIAN").upper(), ConfidenceTier.LOW)

    # Free-form answer: use the whole response as the analysis
    if not analysis and len(response) > 100:
        stripped = RESPONSE_KEYS.sub("", response).strip()
        if len(stripped) > 50:
            analysis = stripped
            lower = response.lower()
            found = "ditemukan" in lower and "tidak ditemukan" not in lower

    return AnalysisResult(
        found=found,
        explicit_definition=clean_text(explicit),
        implicit_definition=clean_text(implicit),
        analysis=clean_text(analysis),
        confidence=confidence,
    )


def analyze_document(
    generator: TextGenerator,
    text: str,
    keyword: str,
    citation_format: CitationFormat = CitationFormat.APA,
) -> AnalysisResult:
    """Ask the model to locate and explain *keyword* in *text*.

    A failed generation call is treated as "not found".
    """
    prompt = build_analysis_prompt(text, keyword, citation_format)
    try:
        output = generator.generate(
            prompt,
            max_tokens=ANALYSIS_MAX_TOKENS,
            temperature=ANALYSIS_TEMPERATURE,
            top_p=ANALYSIS_TOP_P,
        )
    except Exception as e:
        logger.warning("Document analysis failed for %r (%s: %s)", keyword, type(e).__name__, e)
        return AnalysisResult()
    return parse_analysis(join_output(output))
