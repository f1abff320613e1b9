#!/usr/bin/env python3
"""
The search operation: validate input, scan, render, report usage.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, TextIO

from tersegrep.config import MAX_SNIPPETS_PER_FILE, MIN_FILE_BYTES
from tersegrep.logger import EmptyQueryError, InvalidInputError, RootNotFoundError, get_logger
from tersegrep.search.query import build_query_model
from tersegrep.search.ranking import search_project
from tersegrep.search.render import RenderMode, render
from tersegrep.tracking import TimedExecution, UsageSink

logger = get_logger(__name__)

PROXY_LABEL = "tersegrep search"


def run(
    query: str,
    path: str,
    max_results: int,
    context_lines: int,
    file_type: Optional[str],
    max_file_kb: int,
    json_output: bool,
    compact: bool,
    verbose: int = 0,
    sink: Optional[UsageSink] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> str:
    """Search `path` for `query`, print the report and return it.

    Raises EmptyQueryError before touching the filesystem when the query is
    blank, InvalidInputError for a negative max_results, and
    RootNotFoundError when the root does not exist.
    """
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr

    query = query.strip()
    if not query:
        raise EmptyQueryError("query cannot be empty")
    if max_results < 0:
        raise InvalidInputError(f"max results must be >= 0, got {max_results}")

    root = Path(path)
    if not root.exists():
        raise RootNotFoundError(f"path does not exist: {path}")

    timer = TimedExecution.start(sink)
    model = build_query_model(query)
    if verbose > 0:
        print(f"tersegrep: '{query}' in {path} (terms: {', '.join(model.terms)})", file=err)

    max_file_bytes = max(max_file_kb * 1024, MIN_FILE_BYTES)
    effective_context = 0 if compact else max(context_lines, 0)
    snippets_per_file = 1 if compact else MAX_SNIPPETS_PER_FILE

    outcome = search_project(
        model,
        root,
        effective_context,
        snippets_per_file,
        file_type,
        max_file_bytes,
    )

    mode = RenderMode.from_flags(json_output, compact)
    rendered = render(outcome, query, path, max_results, mode)
    out.write(rendered)

    if verbose > 0:
        print(
            f"scan stats: skipped {outcome.skipped_large} large, "
            f"{outcome.skipped_binary} binary, {outcome.skipped_unreadable} unreadable",
            file=err,
        )

    timer.track(
        f"grepai search '{query}' {path}",
        PROXY_LABEL,
        outcome.raw_transcript,
        rendered,
    )
    return rendered
