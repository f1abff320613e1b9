#!/usr/bin/env python3
"""
Per-file aggregation: turn scored lines into a SearchHit.

Candidates are ranked, a few non-overlapping anchors are picked, each anchor
becomes a context-padded snippet, and the file score combines the path
score, a log-damped candidate count and the rank-weighted anchor scores.
"""

__all__ = [
    "Snippet", "SearchHit", "analyze_file", "build_snippet",
    "select_anchors", "split_lines", "truncate_chars", "rank_weight",
]

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from tersegrep.config import MAX_SNIPPET_LINE_LEN, MIN_FILE_SCORE, RANK_WEIGHTS
from tersegrep.search.query import QueryModel
from tersegrep.search.scoring import LineCandidate, score_line, score_path


@dataclass
class Snippet:
    lines: List[Tuple[int, str]]
    matched_terms: Tuple[str, ...] = ()


@dataclass
class SearchHit:
    path: str
    score: float
    matched_lines: int
    snippets: List[Snippet] = field(default_factory=list)


def split_lines(content: str) -> List[str]:
    """Split on newlines only, dropping a trailing CR and the final empty line."""
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [ln[:-1] if ln.endswith("\r") else ln for ln in lines]


def truncate_chars(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return "..."
    return text[: max_len - 3] + "..."


def rank_weight(rank: int) -> float:
    if rank < len(RANK_WEIGHTS):
        return RANK_WEIGHTS[rank]
    return RANK_WEIGHTS[-1]


def select_anchors(
    candidates: Sequence[LineCandidate],
    context_lines: int,
    limit: int,
) -> List[LineCandidate]:
    """Greedy pick of the best candidates whose windows do not overlap.

    Two anchors overlap when they are at most 2*context_lines+1 lines apart.
    """
    ordered = sorted(candidates, key=lambda c: (-c.score, c.line_index))
    window = context_lines * 2 + 1
    selected: List[LineCandidate] = []
    for cand in ordered:
        if any(abs(s.line_index - cand.line_index) <= window for s in selected):
            continue
        selected.append(cand)
        if len(selected) >= limit:
            break
    return selected


def build_snippet(lines: Sequence[str], candidate: LineCandidate, context_lines: int) -> Snippet:
    start = max(candidate.line_index - context_lines, 0)
    end = min(candidate.line_index + context_lines + 1, len(lines))
    rows: List[Tuple[int, str]] = []
    for idx in range(start, end):
        cleaned = lines[idx].strip()
        if not cleaned:
            continue
        rows.append((idx + 1, truncate_chars(cleaned, MAX_SNIPPET_LINE_LEN)))

    if not rows:
        rows.append((candidate.line_index + 1, ""))

    return Snippet(lines=rows, matched_terms=candidate.matched_terms)


def analyze_file(
    path: str,
    content: str,
    query: QueryModel,
    context_lines: int,
    snippets_per_file: int,
) -> Optional[SearchHit]:
    """Score a file's content; None when it does not clear the file floor."""
    lines = split_lines(content)
    candidates = [
        cand
        for cand in (score_line(idx, line, query) for idx, line in enumerate(lines))
        if cand is not None
    ]

    path_score = score_path(path, query)
    if not candidates and path_score < MIN_FILE_SCORE:
        return None

    selected = select_anchors(candidates, context_lines, snippets_per_file)
    if not selected:
        return None

    snippets = [build_snippet(lines, cand, context_lines) for cand in selected]

    file_score = path_score + math.log1p(len(candidates))
    for rank, cand in enumerate(selected):
        file_score += cand.score * rank_weight(rank)

    if file_score < MIN_FILE_SCORE:
        return None

    return SearchHit(
        path=path,
        score=file_score,
        matched_lines=len(candidates),
        snippets=snippets,
    )
