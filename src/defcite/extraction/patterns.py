"""Weighted definitional phrase rules.

Each rule is a regex template with a ``$keyword`` slot (filled with the
keyword alternation) and a ``$span`` slot: 20-300 characters without
sentence punctuation, closed by ``.``, ``!`` or ``?``. Rules are applied in
order over the whole text; every match of every rule is recorded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from string import Template
from typing import Iterator

from defcite.extraction.types import DefinitionCandidate
from defcite.extraction.variations import keyword_alternation
from defcite.shared.text import clean_text

SPAN = r"([^.!?;]{20,300}[.!?])"
CONTEXT_RADIUS = 200


@dataclass(frozen=True)
class DefinitionRule:
    name: str
    template: str
    weight: int

    def compile(self, keyword: str) -> re.Pattern[str]:
        pattern = Template(self.template).substitute(
            keyword=f"({keyword_alternation(keyword)})",
            span=SPAN,
        )
        return re.compile(pattern, re.IGNORECASE)


DEFINITION_RULES: tuple[DefinitionRule, ...] = (
    # "X adalah ...", "X didefinisikan sebagai ..."
    DefinitionRule(
        name="direct",
        template=(
            r"$keyword\s+(?:adalah|yaitu|merupakan|ialah|didefinisikan\s+sebagai"
            r"|diartikan\s+sebagai|bermakna)\s+$span"
        ),
        weight=10,
    ),
    # "X: ..."
    DefinitionRule(
        name="colon",
        template=r"$keyword\s*[:;]\s*$span",
        weight=9,
    ),
    # "Pengertian dari X adalah ..."
    DefinitionRule(
        name="definition_of",
        template=(
            r"(?:definisi|pengertian|arti|makna|konsep)\s+(?:dari\s+)?$keyword\s+"
            r"(?:adalah|yaitu|merupakan|ialah)\s+$span"
        ),
        weight=9,
    ),
    # "Menurut Sumber (2020), X adalah ..."
    DefinitionRule(
        name="attributed",
        template=(
            r"(?:menurut|berdasarkan|dalam\s+pandangan)\s+[^,]{1,50},\s*$keyword\s+"
            r"(?:adalah|yaitu|merupakan)\s+$span"
        ),
        weight=8,
    ),
    # "X dapat didefinisikan sebagai ..."
    DefinitionRule(
        name="academic",
        template=(
            r"$keyword\s+(?:dapat\s+didefinisikan|dapat\s+diartikan|secara\s+umum\s+dipahami)"
            r"\s+sebagai\s+$span"
        ),
        weight=8,
    ),
)


def extract_context(text: str, start: int, end: int, radius: int = CONTEXT_RADIUS) -> str:
    """Window of *radius* characters either side of ``text[start:end]``."""
    return text[max(0, start - radius):min(len(text), end + radius)].strip()


def match_definition_patterns(
    text: str,
    keyword: str,
    rules: tuple[DefinitionRule, ...] = DEFINITION_RULES,
) -> Iterator[DefinitionCandidate]:
    """Yield a candidate for every match of every rule, in rule order."""
    for rule in rules:
        for match in rule.compile(keyword).finditer(text):
            yield DefinitionCandidate(
                text=clean_text(match.group(0)),
                context=clean_text(extract_context(text, match.start(), match.end())),
                score=rule.weight,
                source="pattern",
            )
