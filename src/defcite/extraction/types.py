"""Immutable value types for the definition extraction chain.

Transformation chain:
    text + keyword → DefinitionCandidate (pattern hits, indicator sentences)
                   → ExtractionResult (deduplicated, ranked)
                   → ConfidenceDecision (tier + generation strategy)
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DefinitionCandidate:
    """A span heuristically identified as possibly defining the keyword.

    ``score`` is the rule weight for pattern hits or the computed relevance
    for indicator sentences.
    """

    text: str
    context: str
    score: float
    source: str = "pattern"  # "pattern" or "sentence"


@dataclass(frozen=True)
class ExtractionResult:
    """Ranked candidates, highest score first, one per normalized text.

    ``definitions``, ``contexts`` and ``scores`` are parallel views over the
    same ordered candidates, so they always stay in lock-step.
    """

    candidates: tuple[DefinitionCandidate, ...] = field(default_factory=tuple)

    @property
    def definitions(self) -> list[str]:
        return [c.text for c in self.candidates]

    @property
    def contexts(self) -> list[str]:
        return [c.context for c in self.candidates]

    @property
    def scores(self) -> list[float]:
        return [c.score for c in self.candidates]

    @property
    def top(self) -> DefinitionCandidate | None:
        return self.candidates[0] if self.candidates else None

    @property
    def top_score(self) -> float:
        return self.candidates[0].score if self.candidates else 0

    def __len__(self) -> int:
        return len(self.candidates)

    def __bool__(self) -> bool:
        return bool(self.candidates)
