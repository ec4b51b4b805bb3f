"""Sentence-level scan for definitional indicator words.

Catches definitions the phrase rules miss (keyword not directly before the
connector, unusual punctuation) by scoring every sentence that mentions the
keyword and contains at least one indicator.
"""

from __future__ import annotations

import re
from typing import Iterator

from defcite.extraction.types import DefinitionCandidate
from defcite.extraction.variations import keyword_alternation
from defcite.shared.text import clean_text, split_sentences

MIN_SENTENCE_LENGTH = 30
MIN_KEEP_SCORE = 3

# (indicator, bonus); every indicator present adds its bonus.
INDICATOR_BONUSES: tuple[tuple[str, int], ...] = (
    ("adalah", 3),
    ("yaitu", 3),
    ("merupakan", 3),
    ("ialah", 2),
    ("didefinisikan sebagai", 4),
    ("diartikan sebagai", 4),
    ("bermakna", 2),
    ("berarti", 2),
)


def has_indicator(sentence: str) -> bool:
    lower = sentence.lower()
    return any(word in lower for word, _ in INDICATOR_BONUSES)


def calculate_sentence_score(sentence: str, keyword: str) -> int:
    """Relevance of *sentence* as a definition of *keyword*."""
    score = 0
    lower = sentence.lower()

    if keyword.lower() in lower:
        score += 3

    for word, bonus in INDICATOR_BONUSES:
        if word in lower:
            score += bonus

    length = len(sentence)
    if 50 < length < 300:
        score += 1
    if length < 30:
        score -= 2
    if length > 400:
        score -= 1

    return score


def sentence_context(sentences: list[str], index: int) -> str:
    """The sentence at *index* with one neighbour on each side."""
    start = max(0, index - 1)
    end = min(len(sentences), index + 2)
    return ". ".join(s.strip() for s in sentences[start:end]).strip()


def scan_indicator_sentences(text: str, keyword: str) -> Iterator[DefinitionCandidate]:
    """Yield candidates for qualifying sentences scoring above the threshold."""
    keyword_re = re.compile(keyword_alternation(keyword), re.IGNORECASE)
    sentences = split_sentences(text)

    for index, raw in enumerate(sentences):
        sentence = raw.strip()
        if len(sentence) <= MIN_SENTENCE_LENGTH:
            continue
        if not keyword_re.search(sentence) or not has_indicator(sentence):
            continue

        score = calculate_sentence_score(sentence, keyword)
        if score > MIN_KEEP_SCORE:
            yield DefinitionCandidate(
                text=clean_text(sentence + "."),
                context=clean_text(sentence_context(sentences, index)),
                score=score,
                source="sentence",
            )
