"""
Lexical helpers shared by every analysis stage: phrase matching,
significant-keyword extraction, sentence splitting and similarity.

All helpers are total: they never raise on odd input, a missing match
simply yields False / an empty list.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from typing import Iterable, Optional

from feature_analyzer.engine.keyword_tables import get_keyword_tables

_PUNCTUATION = re.compile(r"[^\w\s]")
_SENTENCE_END = re.compile(r"[.!?]+\s+")
_ABBREVIATIONS = ("e.g.", "i.e.", "etc.", "vs.")
_MIN_KEYWORD_CHARS = 4


def normalize(text: str) -> str:
    return text.lower().strip()


@lru_cache(maxsize=4096)
def _phrase_pattern(phrase: str, anchored: bool) -> re.Pattern[str]:
    prefix = r"^\s*" if anchored else r"(?<!\w)"
    return re.compile(prefix + re.escape(phrase.lower()) + r"(?:s|es|d|ed|ing)?(?!\w)")


def contains_phrase(text: str, phrase: str) -> bool:
    """True when phrase occurs in text at a word boundary (simple inflections allowed)."""
    if not phrase:
        return False
    return _phrase_pattern(phrase, False).search(text.lower()) is not None


def starts_with_phrase(text: str, phrase: str) -> bool:
    """True when text opens with phrase."""
    if not phrase:
        return False
    return _phrase_pattern(phrase, True).match(text.lower()) is not None


def find_phrase(text: str, phrase: str) -> Optional[re.Match[str]]:
    """First occurrence of phrase in the lower-cased text, or None."""
    if not phrase:
        return None
    return _phrase_pattern(phrase, False).search(text.lower())


def matching_phrases(text: str, phrases: Iterable[str]) -> list[str]:
    """Every phrase of the table that occurs in text, in table order."""
    return [p for p in phrases if contains_phrase(text, p)]


def contains_any(text: str, phrases: Iterable[str]) -> bool:
    return any(contains_phrase(text, p) for p in phrases)


def significant_keywords(text: str, stopwords: Optional[frozenset[str]] = None) -> list[str]:
    """
    Tokens of the lower-cased, punctuation-stripped text that are longer than
    three characters and not stopwords.  Unique, in first-occurrence order.
    """
    if stopwords is None:
        stopwords = get_keyword_tables().stopwords
    tokens = _PUNCTUATION.sub(" ", text.lower()).split()
    seen: dict[str, None] = {}
    for token in tokens:
        if len(token) >= _MIN_KEYWORD_CHARS and token not in stopwords:
            seen.setdefault(token, None)
    return list(seen)


def shared_keywords(a: str, b: str) -> list[str]:
    kb = set(significant_keywords(b))
    return [k for k in significant_keywords(a) if k in kb]


def similarity(a: str, b: str) -> float:
    """Jaccard similarity of the significant-keyword sets (identical text scores 1.0)."""
    na, nb = normalize(a), normalize(b)
    if na == nb:
        return 1.0
    ka, kb = set(significant_keywords(na)), set(significant_keywords(nb))
    union = ka | kb
    if not union:
        return 0.0
    return len(ka & kb) / len(union)


def split_sentences(text: str) -> list[str]:
    """
    Split after . ! or ? followed by whitespace.  Decimal points never split
    (no whitespace follows them); common abbreviations are skipped.
    Terminal punctuation is dropped from each sentence.
    """
    sentences: list[str] = []
    start = 0
    for match in _SENTENCE_END.finditer(text):
        head = text[start:match.end()].rstrip().lower()
        if _is_abbreviation(head):
            continue
        sentence = text[start:match.start()].strip()
        if sentence:
            sentences.append(sentence)
        start = match.end()

    tail = text[start:].strip().rstrip(".!?").strip()
    if tail:
        sentences.append(tail)
    return sentences


def _is_abbreviation(head: str) -> bool:
    for abbr in _ABBREVIATIONS:
        if head.endswith(abbr):
            before = head[: -len(abbr)]
            return not before or not before[-1].isalnum()
    return False


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 1) -> float:
    """Round to `digits` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
