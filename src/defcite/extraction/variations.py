"""Keyword surface-form variants used by every matcher."""
import re


def _capitalize(keyword: str) -> str:
    return keyword[:1].upper() + keyword[1:].lower()


def generate_keyword_variations(keyword: str) -> list[str]:
    """Return regex-escaped surface forms of *keyword*, in order, without repeats.

    Forms: lowercase, capitalized, uppercase; hyphen- and underscore-joined
    when the keyword has spaces; space-joined and hyphen-stripped when it
    has hyphens.
    """
    variations = [keyword.lower(), _capitalize(keyword), keyword.upper()]

    if " " in keyword:
        variations.append(re.sub(r"\s+", "-", keyword))
        variations.append(re.sub(r"\s+", "_", keyword))

    if "-" in keyword:
        variations.append(keyword.replace("-", " "))
        variations.append(keyword.replace("-", ""))

    return [re.escape(v) for v in dict.fromkeys(variations)]


def keyword_alternation(keyword: str) -> str:
    """Regex alternation ``(?:a|b|...)`` over all variants of *keyword*."""
    return "(?:" + "|".join(generate_keyword_variations(keyword)) + ")"
