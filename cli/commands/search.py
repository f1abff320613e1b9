"""Search command: heuristic ranked code search over a directory."""
from __future__ import annotations

import argparse
import sys

from cli.core import apply_verbosity
from tersegrep.search import run


def cmd_search(args: argparse.Namespace) -> None:
    """Run a search and print the text or JSON report to stdout.

    Diagnostics requested with -v go to stderr only.
    """
    query = args.query
    if isinstance(query, (list, tuple)):
        query = " ".join(query)
    verbose = getattr(args, "verbose", 0) or 0
    apply_verbosity(verbose)

    run(
        query=query,
        path=getattr(args, "path", "."),
        max_results=args.max_results,
        context_lines=args.context_lines,
        file_type=getattr(args, "file_type", None),
        max_file_kb=args.max_file_kb,
        json_output=getattr(args, "json", False),
        compact=getattr(args, "compact", False),
        verbose=verbose,
        out=sys.stdout,
        err=sys.stderr,
    )
