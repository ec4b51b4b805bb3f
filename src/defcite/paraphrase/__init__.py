"""Paraphrase orchestration: prompts, generation, output repair, fallback."""

from defcite.paraphrase.analysis import AnalysisResult, analyze_document, parse_analysis
from defcite.paraphrase.cleanup import fallback_paraphrase, repair_sentences
from defcite.paraphrase.orchestrator import ParaphraseOrchestrator, ParaphraseRequest

__all__ = [
    "ParaphraseOrchestrator",
    "ParaphraseRequest",
    "repair_sentences",
    "fallback_paraphrase",
    "AnalysisResult",
    "analyze_document",
    "parse_analysis",
]
