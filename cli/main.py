"""CLI entry point: argparse dispatcher for all subcommands."""
from __future__ import annotations

import argparse
import json
import sys
import traceback


# ---------------------------------------------------------------------------
# Command registry: command name → (module_path, function_name)
# Lazy-imported at dispatch time to keep startup fast.
# ---------------------------------------------------------------------------
COMMANDS = {
    "search": ("cli.commands.search", "cmd_search"),
    "gain":   ("cli.commands.gain",   "cmd_gain"),
}


def _non_negative_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


# ---------------------------------------------------------------------------
# Parser builder
# ---------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    from cli._version import __version__
    from tersegrep.config import DEFAULT_CONTEXT_LINES, DEFAULT_MAX_FILE_KB, DEFAULT_MAX_RESULTS

    parser = argparse.ArgumentParser(
        prog="tersegrep",
        description="Token-frugal heuristic code search",
    )
    parser.add_argument("--debug", action="store_true", help="Show stack traces on error")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Diagnostics on stderr (repeat for more)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    # search
    p = sub.add_parser("search", help="Rank files and snippets relevant to a free-text query")
    p.add_argument("query", nargs="+", help="Search query (words are joined with spaces)")
    p.add_argument("-p", "--path", default=".", help="Root directory or file to search")
    p.add_argument("-m", "--max", dest="max_results", type=_non_negative_int, default=DEFAULT_MAX_RESULTS,
                   help="Max files to show")
    p.add_argument("-c", "--context", dest="context_lines", type=_non_negative_int, default=DEFAULT_CONTEXT_LINES,
                   help="Context lines around each snippet")
    p.add_argument("-t", "--file-type", help="Only search this type (e.g. py, ts, rust)")
    p.add_argument("--max-file-kb", type=_non_negative_int, default=DEFAULT_MAX_FILE_KB,
                   help="Skip files larger than this many KiB")
    p.add_argument("--json", action="store_true", help="JSON output")
    p.add_argument("--compact", action="store_true", help="One snippet per file, no context")

    # gain
    p = sub.add_parser("gain", help="Show token savings recorded by previous commands")
    p.add_argument("--graph", action="store_true", help="Daily savings graph (last 30 days)")
    p.add_argument("--history", action="store_true", help="Recent commands")
    p.add_argument("--quota", action="store_true", help="Savings against a monthly quota")
    p.add_argument("--tier", default="pro", choices=["pro", "5x", "20x"], help="Quota tier")
    p.add_argument("--compact", action="store_true", help="Single-line summary")

    return parser


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> None:
    from cli.core import load_env

    load_env()
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    entry = COMMANDS.get(args.command)
    if not entry:
        parser.print_help()
        sys.exit(1)

    mod_path, fn_name = entry
    try:
        import importlib
        mod = importlib.import_module(mod_path)
        fn = getattr(mod, fn_name)
        fn(args)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as exc:
        json.dump({"ok": False, "error": str(exc)}, sys.stdout)
        sys.stdout.write("\n")
        if args.debug:
            traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
