#!/usr/bin/env python3
"""
Query model construction: normalise a free-text query into a phrase plus
an ordered, de-duplicated list of terms (tokens and their light stems).
"""

__all__ = [
    "QueryModel", "STOP_WORDS", "STEM_SUFFIXES",
    "build_query_model", "split_terms", "stem_token",
]

import re
from dataclasses import dataclass
from typing import List, Tuple

STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "code", "file", "find",
    "for", "from", "how", "in", "is", "it", "of", "on", "or", "search",
    "show", "that", "the", "this", "to", "use", "using", "what", "when",
    "where", "with", "why",
})

# Checked in order; the first suffix the token ends with wins
STEM_SUFFIXES = ("ingly", "edly", "ing", "ed", "es", "s")

_TOKEN_RE = re.compile(r"\w+")


@dataclass(frozen=True)
class QueryModel:
    phrase: str
    terms: Tuple[str, ...]


def split_terms(text: str) -> List[str]:
    """Split into lowercase runs of alphanumeric/underscore characters."""
    return [tok.lower() for tok in _TOKEN_RE.findall(text)]


def stem_token(token: str) -> str:
    """Strip one inflection suffix from an ASCII token.

    The stem must stay longer than two characters, so short words such as
    "bus" or "bed" are left alone. Non-ASCII tokens are never stemmed.
    """
    if not token.isascii():
        return token
    for suffix in STEM_SUFFIXES:
        if len(token) > len(suffix) + 2 and token.endswith(suffix):
            return token[: -len(suffix)]
    return token


def build_query_model(query: str) -> QueryModel:
    """Build the phrase/terms model for a query.

    Stopwords and single-character tokens are dropped. When nothing
    survives, the whole phrase becomes the only term so queries like
    "how to" still search for something.
    """
    phrase = query.strip().lower()
    terms: List[str] = []
    seen = set()

    def _push(item: str) -> None:
        if item not in seen:
            seen.add(item)
            terms.append(item)

    for token in split_terms(phrase):
        if len(token) < 2 or token in STOP_WORDS:
            continue
        _push(token)
        stemmed = stem_token(token)
        if stemmed != token and len(stemmed) >= 2:
            _push(stemmed)

    if not terms and phrase:
        terms.append(phrase)

    return QueryModel(phrase=phrase, terms=tuple(terms))
