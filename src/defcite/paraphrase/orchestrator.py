"""Paraphrase orchestration around the external text-generation call.

One generation attempt per request. Whatever the model returns is repaired
to the requested sentence count; if the call raises, a deterministic
template paraphrase is returned instead, so ``paraphrase`` never fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from defcite.config import DEFAULT_SENTENCE_COUNT
from defcite.paraphrase.cleanup import fallback_paraphrase, repair_sentences
from defcite.paraphrase.prompts import build_not_found_prompt, build_paraphrase_prompt
from defcite.shared.llm.base import TextGenerator, join_output
from defcite.shared.text import clean_text

logger = logging.getLogger(__name__)

TOKENS_PER_SENTENCE = 800
MAX_TOKENS = 4000
PARAPHRASE_TEMPERATURE = 0.3
PARAPHRASE_TOP_P = 0.85

NOT_FOUND_TOKENS_PER_SENTENCE = 400
NOT_FOUND_TOP_P = 0.9


@dataclass(frozen=True)
class ParaphraseRequest:
    source_text: str
    keyword: str
    context: str
    sentence_count: int = DEFAULT_SENTENCE_COUNT

    @property
    def max_tokens(self) -> int:
        return min(MAX_TOKENS, self.sentence_count * TOKENS_PER_SENTENCE)

    def prompt(self) -> str:
        return build_paraphrase_prompt(self.source_text, self.keyword, self.context, self.sentence_count)


class ParaphraseOrchestrator:
    """Builds generation requests and repairs their output.

    Args:
        generator: Text-generation collaborator; injected so tests and
            offline runs can substitute a fake.
    """

    def __init__(self, generator: TextGenerator) -> None:
        self.generator = generator

    def run(self, request: ParaphraseRequest) -> str:
        logger.info(
            "Generating %d-sentence paraphrase for %r", request.sentence_count, request.keyword
        )
        try:
            output = self.generator.generate(
                request.prompt(),
                max_tokens=request.max_tokens,
                temperature=PARAPHRASE_TEMPERATURE,
                top_p=PARAPHRASE_TOP_P,
            )
        except Exception as e:
            logger.warning(
                "Paraphrase generation failed for %r (%s: %s), using template fallback",
                request.keyword,
                type(e).__name__,
                e,
            )
            return clean_text(fallback_paraphrase(request.keyword, request.sentence_count))

        result = repair_sentences(join_output(output), request.keyword, request.sentence_count)
        return clean_text(result)

    def paraphrase(self, source_text: str, keyword: str, context: str, sentence_count: int) -> str:
        """Paraphrase *source_text* into exactly *sentence_count* sentences."""
        return self.run(ParaphraseRequest(source_text, keyword, context, sentence_count))

    def explain_not_found(self, keyword: str, filename: str, sentence_count: int) -> str:
        """Explanation, in *sentence_count* sentences, that no definition was found."""
        prompt = build_not_found_prompt(keyword, filename, sentence_count)
        try:
            output = self.generator.generate(
                prompt,
                max_tokens=sentence_count * NOT_FOUND_TOKENS_PER_SENTENCE,
                temperature=PARAPHRASE_TEMPERATURE,
                top_p=NOT_FOUND_TOP_P,
            )
        except Exception as e:
            logger.warning("Not-found explanation failed for %r (%s), using template fallback", keyword, e)
            return clean_text(fallback_paraphrase(keyword, sentence_count))
        return clean_text(repair_sentences(join_output(output), keyword, sentence_count))
