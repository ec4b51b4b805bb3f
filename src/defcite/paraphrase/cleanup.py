"""Repair generated paraphrases so they carry exactly the requested sentence count.

Model output is untrusted: it may add meta-commentary, under- or
over-produce sentences, or drop punctuation. ``repair_sentences`` strips
known meta phrases, ranks the remaining sentences by how definitional they
are, fills any shortfall from per-position templates and normalizes
capitalization and punctuation.
"""

import logging
import re

from defcite.shared.text import finish_sentence, split_sentences

logger = logging.getLogger(__name__)

MIN_SENTENCE_LENGTH = 15
MIN_OTHER_LENGTH = 25

META_PHRASES = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"hasil parafrase",
        r"parafrase.*?kalimat",
        r"dengan.*?kalimat",
        r"saya.*?memparafrase",
        r"teknik.*?digunakan",
        r"berikut.*?hasil",
        r"ini.*?parafrase",
    )
]
FORBIDDEN_WORDS = ("parafrase", "kalimat")
DEFINITION_MARKERS = ("adalah", "merupakan", "yaitu", "didefinisikan", "dikategorikan")

# Filler for position N (1-based) when the model under-produces.
ADDITIONAL_TEMPLATES = {
    2: "Konsep {keyword} ini memiliki aplikasi yang luas dalam berbagai bidang terkait.",
    3: "Implementasi {keyword} memerlukan pemahaman mendalam tentang prinsip-prinsip dasarnya.",
    4: "Dalam konteks akademis, {keyword} sering menjadi fokus penelitian interdisipliner.",
    5: "Pengembangan {keyword} terus mengalami evolusi seiring dengan kemajuan teknologi dan metodologi.",
}
CLOSING_TEMPLATE = "Pemahaman terhadap {keyword} sangat penting dalam pengembangan ilmu pengetahuan modern."

# Deterministic paraphrase used when generation fails; the first N are taken.
FALLBACK_TEMPLATES = (
    "{keyword} dapat didefinisikan sebagai konsep yang memiliki karakteristik dan dimensi spesifik dalam konteks akademik.",
    "Konsep {keyword} mencakup berbagai aspek yang saling berkaitan dan membentuk pemahaman komprehensif.",
    "Dalam implementasinya, {keyword} memerlukan pendekatan yang sistematis dan terstruktur.",
    "Pemahaman mendalam tentang {keyword} sangat penting untuk pengembangan teoretis maupun praktis.",
    "Aplikasi {keyword} dalam berbagai domain menunjukkan relevansi dan signifikansinya dalam konteks kontemporer.",
)


def strip_meta_commentary(text: str) -> str:
    for phrase in META_PHRASES:
        text = phrase.sub("", text)
    return text


def candidate_sentences(text: str) -> list[str]:
    """Sentences long enough to keep and free of meta words."""
    sentences = []
    for raw in split_sentences(strip_meta_commentary(text.strip())):
        sentence = raw.strip()
        if len(sentence) <= MIN_SENTENCE_LENGTH:
            continue
        lower = sentence.lower()
        if any(word in lower for word in FORBIDDEN_WORDS):
            continue
        sentences.append(sentence)
    return sentences


def bucket_sentences(sentences: list[str], keyword: str) -> list[list[str]]:
    """Split sentences into priority buckets, best first.

    keyword + marker > keyword > marker > other (longer than 25 chars).
    """
    keyword_lower = keyword.lower()
    both: list[str] = []
    keyword_only: list[str] = []
    marker_only: list[str] = []
    other: list[str] = []

    for sentence in sentences:
        lower = sentence.lower()
        has_keyword = keyword_lower in lower
        has_marker = any(marker in lower for marker in DEFINITION_MARKERS)
        if has_keyword and has_marker:
            both.append(sentence)
        elif has_keyword:
            keyword_only.append(sentence)
        elif has_marker:
            marker_only.append(sentence)
        elif len(sentence) > MIN_OTHER_LENGTH:
            other.append(sentence)

    return [both, keyword_only, marker_only, other]


def additional_sentence(keyword: str, position: int) -> str:
    """Templated filler for 1-based *position*."""
    return ADDITIONAL_TEMPLATES.get(position, CLOSING_TEMPLATE).format(keyword=keyword)


def repair_sentences(text: str, keyword: str, target: int) -> str:
    """Return exactly *target* cleaned sentences joined by single spaces."""
    selected: list[str] = []
    for bucket in bucket_sentences(candidate_sentences(text), keyword):
        for sentence in bucket:
            if len(selected) >= target:
                break
            selected.append(sentence)

    generated = len(selected)
    while len(selected) < target:
        selected.append(additional_sentence(keyword, len(selected) + 1))

    if generated < target:
        logger.debug("Filled %d of %d sentences from templates for %r", target - generated, target, keyword)

    return " ".join(finish_sentence(s) for s in selected[:target])


def fallback_paraphrase(keyword: str, target: int) -> str:
    """Deterministic paraphrase from the first *target* fallback templates."""
    return " ".join(finish_sentence(t.format(keyword=keyword)) for t in FALLBACK_TEMPLATES[:target])
