"""Rule-based definition extraction - zero LLM cost."""

from defcite.extraction.confidence import (
    ConfidenceDecision,
    ConfidenceLevel,
    ConfidenceTier,
    Strategy,
    classify_confidence,
    select_context,
)
from defcite.extraction.indicators import calculate_sentence_score, scan_indicator_sentences
from defcite.extraction.patterns import DEFINITION_RULES, DefinitionRule, match_definition_patterns
from defcite.extraction.pipeline import ExtractionConfig, extract_definitions
from defcite.extraction.ranking import rank_candidates
from defcite.extraction.types import DefinitionCandidate, ExtractionResult
from defcite.extraction.variations import generate_keyword_variations

__all__ = [
    # Pipeline
    "extract_definitions",
    "ExtractionConfig",
    # Stages
    "generate_keyword_variations",
    "DEFINITION_RULES",
    "DefinitionRule",
    "match_definition_patterns",
    "scan_indicator_sentences",
    "calculate_sentence_score",
    "rank_candidates",
    # Confidence routing
    "classify_confidence",
    "select_context",
    "ConfidenceDecision",
    "ConfidenceLevel",
    "ConfidenceTier",
    "Strategy",
    # Types
    "DefinitionCandidate",
    "ExtractionResult",
]
