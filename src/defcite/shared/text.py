"""Plain-text helpers shared by extraction, paraphrase and citation code."""
import re

SENTENCE_SPLIT = re.compile(r"[.!?]+")
SENTENCE_END = re.compile(r"[.!?]$")
WHITESPACE = re.compile(r"\s+")
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def clean_text(text: str | None) -> str:
    """Drop NUL/control characters, normalize line endings and trim."""
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return CONTROL_CHARS.sub(" ", text).strip()


def normalize_key(text: str) -> str:
    """Lowercase, collapse whitespace and trim; used as a dedup key."""
    return WHITESPACE.sub(" ", text.lower()).strip()


def split_sentences(text: str) -> list[str]:
    """Split on runs of ``.``, ``!`` and ``?``; fragments are not trimmed."""
    return SENTENCE_SPLIT.split(text)


def count_sentences(text: str) -> int:
    """Number of non-empty fragments between sentence punctuation."""
    return sum(1 for s in split_sentences(text) if s.strip())


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def lowercase_first(text: str) -> str:
    return text[:1].lower() + text[1:]


def finish_sentence(text: str) -> str:
    """Trim, capitalize the first letter and make sure it ends in punctuation."""
    text = capitalize_first(text.strip())
    if not SENTENCE_END.search(text):
        text += "."
    return text
