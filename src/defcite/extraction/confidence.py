"""Confidence scoring for routing decisions.

The top candidate's score decides both the reported tier and which context
is sent to the paraphraser:

- score >= 9        HIGH,   paraphrase with the top candidate's own context
- 7 <= score < 9    MEDIUM, paraphrase with the top candidate's own context
- score < 7         MEDIUM, paraphrase with the first two contexts combined
- no candidates     LOW,    full AI analysis of the document
"""
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from defcite.extraction.types import ExtractionResult

ConfidenceLevel = Literal["HIGH", "MEDIUM", "LOW"]

HIGH_THRESHOLD = 9
DIRECT_THRESHOLD = 7


class ConfidenceTier(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Strategy(str, Enum):
    DIRECT = "direct"                      # top candidate + its own context
    COMBINED_CONTEXT = "combined_context"  # top candidate + first two contexts
    FULL_ANALYSIS = "full_analysis"        # no candidate; ask the model


@dataclass(frozen=True)
class ConfidenceDecision:
    tier: ConfidenceTier
    strategy: Strategy
    score: float = 0

    @property
    def paraphrases_candidate(self) -> bool:
        return self.strategy is not Strategy.FULL_ANALYSIS


def classify_score(score: float) -> ConfidenceDecision:
    """Decision for a non-empty result whose top score is *score*."""
    if score >= HIGH_THRESHOLD:
        return ConfidenceDecision(ConfidenceTier.HIGH, Strategy.DIRECT, score)
    if score >= DIRECT_THRESHOLD:
        return ConfidenceDecision(ConfidenceTier.MEDIUM, Strategy.DIRECT, score)
    return ConfidenceDecision(ConfidenceTier.MEDIUM, Strategy.COMBINED_CONTEXT, score)


def classify_confidence(result: ExtractionResult) -> ConfidenceDecision:
    """Compute tier and generation strategy for a ranked extraction result."""
    if not result:
        return ConfidenceDecision(ConfidenceTier.LOW, Strategy.FULL_ANALYSIS, 0)
    return classify_score(result.top_score)


def select_context(result: ExtractionResult, decision: ConfidenceDecision) -> str:
    """Generation context for *decision*; empty for the full-analysis path."""
    if decision.strategy is Strategy.DIRECT:
        return result.contexts[0]
    if decision.strategy is Strategy.COMBINED_CONTEXT:
        return "\n\n".join(result.contexts[:2])
    return ""
