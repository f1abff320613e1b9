#!/usr/bin/env python3
"""
Line and path relevance scoring.

Lines are scored with cheap substring checks against the query phrase and
terms, then adjusted for definition-looking lines, comments and very long
lines. Paths reuse the phrase/term checks with their own weights.
"""

__all__ = [
    "LineCandidate", "score_line", "score_path",
    "is_definition_line", "is_comment_line", "dedup_terms",
    "COMMENT_PREFIXES",
]

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from tersegrep.config import (
    COMMENT_FACTOR,
    DEFINITION_BOOST,
    LONG_LINE_CHARS,
    LONG_LINE_FACTOR,
    LONG_TERM_BOOST,
    LONG_TERM_MIN_LEN,
    MIN_LINE_SCORE,
    MIN_PHRASE_LEN,
    MULTI_TERM_BOOST,
    PHRASE_LINE_BOOST,
    PHRASE_PATH_BOOST,
    SHORT_TERM_BOOST,
    TERM_PATH_BOOST,
)
from tersegrep.search.query import QueryModel

_DEFINITION_RE = re.compile(
    r"^\s*(?:pub\s+)?(?:async\s+)?"
    r"(?:fn|def|class|struct|enum|trait|interface|impl|type)\s+[A-Za-z_][A-Za-z0-9_]*"
)

COMMENT_PREFIXES = ("//", "#", "*", "/*", "--")


@dataclass(frozen=True)
class LineCandidate:
    line_index: int
    score: float
    matched_terms: Tuple[str, ...]


def is_definition_line(text: str) -> bool:
    """Heuristic: does the line look like it declares a function/type?

    Not a parser. Recognises an optional ``pub``/``async`` prefix followed by
    a declaration keyword and an identifier.
    """
    return bool(_DEFINITION_RE.match(text))


def is_comment_line(text: str) -> bool:
    return text.lstrip().startswith(COMMENT_PREFIXES)


def dedup_terms(terms: Iterable[str]) -> Tuple[str, ...]:
    seen = set()
    out: List[str] = []
    for term in terms:
        if term not in seen:
            seen.add(term)
            out.append(term)
    return tuple(out)


def _term_weight(term: str) -> float:
    return LONG_TERM_BOOST if len(term) >= LONG_TERM_MIN_LEN else SHORT_TERM_BOOST


def score_line(line_index: int, line: str, query: QueryModel) -> Optional[LineCandidate]:
    """Score one line; None when it is blank, unmatched or below the floor."""
    trimmed = line.strip()
    if not trimmed:
        return None

    lower = trimmed.lower()
    score = 0.0
    matched: List[str] = []

    if len(query.phrase) >= MIN_PHRASE_LEN and query.phrase in lower:
        score += PHRASE_LINE_BOOST

    for term in query.terms:
        if term in lower:
            score += _term_weight(term)
            matched.append(term)

    unique = dedup_terms(matched)
    if not unique:
        return None

    if len(unique) > 1:
        score += MULTI_TERM_BOOST

    if is_definition_line(trimmed):
        score += DEFINITION_BOOST

    if is_comment_line(trimmed):
        score *= COMMENT_FACTOR

    if len(trimmed) > LONG_LINE_CHARS:
        score *= LONG_LINE_FACTOR

    if score < MIN_LINE_SCORE:
        return None

    return LineCandidate(line_index=line_index, score=score, matched_terms=unique)


def score_path(path: str, query: QueryModel) -> float:
    """Relevance of the displayed path itself (no multi-term/definition bonus)."""
    lower = path.lower()
    score = 0.0
    if len(query.phrase) >= MIN_PHRASE_LEN and query.phrase in lower:
        score += PHRASE_PATH_BOOST
    for term in query.terms:
        if term in lower:
            score += TERM_PATH_BOOST
    return score
