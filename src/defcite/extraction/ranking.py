"""Merge, deduplicate and rank definition candidates."""
from dataclasses import replace
from typing import Iterable

from defcite.extraction.types import DefinitionCandidate, ExtractionResult
from defcite.shared.text import normalize_key


def rank_candidates(candidates: Iterable[DefinitionCandidate]) -> ExtractionResult:
    """Keep the highest-scoring candidate per normalized text, sorted by score.

    Among equal scores the earliest candidate wins, and the sort is stable,
    so pattern hits stay ahead of indicator sentences with the same score.
    """
    best: dict[str, DefinitionCandidate] = {}
    for candidate in candidates:
        key = normalize_key(candidate.text)
        current = best.get(key)
        if current is None or current.score < candidate.score:
            if not candidate.context:
                candidate = replace(candidate, context=candidate.text)
            best[key] = candidate

    ranked = sorted(best.values(), key=lambda c: c.score, reverse=True)
    return ExtractionResult(candidates=tuple(ranked))
