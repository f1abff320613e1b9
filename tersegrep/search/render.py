#!/usr/bin/env python3
"""
Output shaping for search results: a terse text report or a JSON document.
"""

__all__ = [
    "RenderMode", "render", "render_text", "render_json", "compact_path",
    "COMPACT_PATH_MAX",
]

import json
from enum import Enum
from typing import Any, Dict, List

from tersegrep.logger import SerializationError
from tersegrep.search.ranking import SearchOutcome

COMPACT_PATH_MAX = 58


class RenderMode(Enum):
    TEXT = "text"
    COMPACT_TEXT = "compact_text"
    JSON = "json"
    COMPACT_JSON = "compact_json"

    @classmethod
    def from_flags(cls, json_output: bool, compact: bool) -> "RenderMode":
        if json_output:
            return cls.COMPACT_JSON if compact else cls.JSON
        return cls.COMPACT_TEXT if compact else cls.TEXT

    @property
    def is_json(self) -> bool:
        return self in (RenderMode.JSON, RenderMode.COMPACT_JSON)

    @property
    def is_compact(self) -> bool:
        return self in (RenderMode.COMPACT_TEXT, RenderMode.COMPACT_JSON)


def compact_path(path: str) -> str:
    """Shorten long, deep paths to first/.../parent/name."""
    if len(path) <= COMPACT_PATH_MAX:
        return path
    parts = path.split("/")
    if len(parts) <= 3:
        return path
    return f"{parts[0]}/.../{parts[-2]}/{parts[-1]}"


def _hit_to_dict(hit) -> Dict[str, Any]:
    return {
        "path": hit.path,
        "score": hit.score,
        "matched_lines": hit.matched_lines,
        "snippets": [
            {
                "lines": [{"line": line_no, "text": text} for line_no, text in snippet.lines],
                "matched_terms": list(snippet.matched_terms),
            }
            for snippet in hit.snippets
        ],
    }


def render_json(outcome: SearchOutcome, query: str, path: str, max_results: int) -> str:
    shown = outcome.hits[:max_results]
    payload = {
        "query": query,
        "path": path,
        "total_hits": len(outcome.hits),
        "shown_hits": len(shown),
        "scanned_files": outcome.scanned_files,
        "skipped_large": outcome.skipped_large,
        "skipped_binary": outcome.skipped_binary,
        "hits": [_hit_to_dict(hit) for hit in shown],
    }
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False) + "\n"
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"failed to encode search result: {exc}") from exc


def render_text(
    outcome: SearchOutcome,
    query: str,
    max_results: int,
    compact: bool = False,
) -> str:
    if not outcome.hits:
        return f"🧠 0 for '{query}'\n"

    out: List[str] = [
        f"🧠 {len(outcome.hits)}F for '{query}' (scan {outcome.scanned_files}F)\n",
        "\n",
    ]

    for hit in outcome.hits[:max_results]:
        out.append(f"📄 {compact_path(hit.path)} [{hit.score:.1f}]\n")

        for snippet in hit.snippets:
            for line_no, text in snippet.lines:
                out.append(f"  {line_no:>4}: {text}\n")
            if not compact and snippet.matched_terms:
                out.append(f"       ~ {', '.join(snippet.matched_terms)}\n")
            out.append("\n")

        extra = hit.matched_lines - len(hit.snippets)
        if extra > 0:
            out.append(f"  +{extra} more lines\n\n")

    if len(outcome.hits) > max_results:
        out.append(f"... +{len(outcome.hits) - max_results}F\n")

    return "".join(out)


def render(
    outcome: SearchOutcome,
    query: str,
    path: str,
    max_results: int,
    mode: RenderMode,
) -> str:
    if mode.is_json:
        return render_json(outcome, query, path, max_results)
    return render_text(outcome, query, max_results, compact=mode.is_compact)
