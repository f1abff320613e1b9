#!/usr/bin/env python3
"""
Project scan and hit ranking.

search_project() drives the walker, applies the per-file size/binary
checks, aggregates each file and returns the hits in their final order.
"""

__all__ = [
    "SearchOutcome", "search_project", "sort_hits", "build_raw_transcript",
]

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from tersegrep.config import TRANSCRIPT_MAX_HITS
from tersegrep.logger import ContextLogger, get_logger
from tersegrep.search.aggregate import SearchHit, analyze_file
from tersegrep.search.query import QueryModel
from tersegrep.search.walker import display_path, iter_candidate_files, looks_binary

logger = get_logger(__name__)


@dataclass
class SearchOutcome:
    scanned_files: int = 0
    skipped_large: int = 0
    skipped_binary: int = 0
    skipped_unreadable: int = 0
    hits: List[SearchHit] = field(default_factory=list)
    raw_transcript: str = ""


def sort_hits(hits: List[SearchHit]) -> List[SearchHit]:
    """Highest score first; equal scores ordered by case-insensitive path."""
    return sorted(hits, key=lambda h: (-h.score, h.path.lower()))


def build_raw_transcript(hits: List[SearchHit], max_hits: int = TRANSCRIPT_MAX_HITS) -> str:
    """grep-style "path:line:text" rows used only for usage accounting."""
    rows = []
    for hit in hits[:max_hits]:
        for snippet in hit.snippets:
            for line_no, text in snippet.lines:
                rows.append(f"{hit.path}:{line_no}:{text}\n")
    return "".join(rows)


def search_project(
    query: QueryModel,
    root: Path,
    context_lines: int,
    snippets_per_file: int,
    file_type: Optional[str],
    max_file_bytes: int,
) -> SearchOutcome:
    """Scan every candidate file under root, one at a time."""
    root = Path(root)
    outcome = SearchOutcome()
    log = ContextLogger(logger, root=str(root))

    for full_path in iter_candidate_files(root, file_type):
        try:
            size = full_path.stat().st_size
        except OSError as exc:
            log.debug("stat failed", path=str(full_path), error=str(exc))
            continue
        outcome.scanned_files += 1

        if size > max_file_bytes:
            outcome.skipped_large += 1
            continue

        try:
            data = full_path.read_bytes()
        except OSError as exc:
            outcome.skipped_unreadable += 1
            log.debug("read failed", path=str(full_path), error=str(exc))
            continue

        if looks_binary(data):
            outcome.skipped_binary += 1
            continue

        content = data.decode("utf-8", errors="replace")
        hit = analyze_file(
            display_path(full_path, root),
            content,
            query,
            context_lines,
            snippets_per_file,
        )
        if hit is not None:
            outcome.hits.append(hit)

    outcome.hits = sort_hits(outcome.hits)
    outcome.raw_transcript = build_raw_transcript(outcome.hits)
    log.debug(
        "scan complete",
        scanned=outcome.scanned_files,
        hits=len(outcome.hits),
        skipped_large=outcome.skipped_large,
        skipped_binary=outcome.skipped_binary,
    )
    return outcome
