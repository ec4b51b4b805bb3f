"""Main definition extraction pipeline."""
import logging
from dataclasses import dataclass

from defcite.extraction.indicators import scan_indicator_sentences
from defcite.extraction.patterns import DEFINITION_RULES, DefinitionRule, match_definition_patterns
from defcite.extraction.ranking import rank_candidates
from defcite.extraction.types import DefinitionCandidate, ExtractionResult

logger = logging.getLogger(__name__)


@dataclass
class ExtractionConfig:
    """Configuration for extraction pipeline."""

    use_patterns: bool = True
    use_sentence_scan: bool = True
    rules: tuple[DefinitionRule, ...] = DEFINITION_RULES


def extract_definitions(
    text: str,
    keyword: str,
    config: ExtractionConfig | None = None,
) -> ExtractionResult:
    """
    Find candidate definitions of *keyword* in *text*.

    Args:
        text: Source document text
        keyword: Term to define; callers reject empty keywords
        config: Pipeline configuration

    Returns:
        ExtractionResult ranked by score, deduplicated by normalized text
    """
    config = config or ExtractionConfig()
    candidates: list[DefinitionCandidate] = []

    # Stage 1: weighted phrase rules
    if config.use_patterns:
        candidates.extend(match_definition_patterns(text, keyword, config.rules))

    # Stage 2: indicator sentences
    if config.use_sentence_scan:
        candidates.extend(scan_indicator_sentences(text, keyword))

    # Stage 3: dedup + rank
    result = rank_candidates(candidates)
    logger.debug(
        "Extracted %d candidates (%d unique) for %r, top score %s",
        len(candidates),
        len(result),
        keyword,
        result.top_score,
    )
    return result
