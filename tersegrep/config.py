#!/usr/bin/env python3
"""
Configuration constants for the search engine and usage tracking.

Scoring thresholds and rank weights are empirical; they are exposed as
environment tunables with the shipped values as defaults.
"""
__all__ = [
    "_safe_int", "_safe_float", "_env_truthy", "_parse_weights",
    "MIN_LINE_SCORE", "MIN_FILE_SCORE", "RANK_WEIGHTS",
    "MAX_SNIPPETS_PER_FILE", "MAX_SNIPPET_LINE_LEN", "TRANSCRIPT_MAX_HITS",
    "PHRASE_LINE_BOOST", "LONG_TERM_BOOST", "SHORT_TERM_BOOST", "LONG_TERM_MIN_LEN",
    "MULTI_TERM_BOOST", "DEFINITION_BOOST", "COMMENT_FACTOR",
    "LONG_LINE_FACTOR", "LONG_LINE_CHARS",
    "PHRASE_PATH_BOOST", "TERM_PATH_BOOST", "MIN_PHRASE_LEN",
    "BINARY_SNIFF_BYTES", "MIN_FILE_BYTES",
    "DEFAULT_MAX_RESULTS", "DEFAULT_CONTEXT_LINES", "DEFAULT_MAX_FILE_KB",
    "tracking_enabled", "tracking_db_path", "TRACKING_RETENTION_DAYS",
]
import os
from pathlib import Path
from typing import Any, Tuple


# ---------------------------------------------------------------------------
# Helper functions for safe parsing of environment variables
# ---------------------------------------------------------------------------

def _safe_int(val: Any, default: int) -> int:
    """Safely parse an integer from a value, returning default on failure."""
    try:
        if val is None or (isinstance(val, str) and val.strip() == ""):
            return default
        return int(val)
    except (ValueError, TypeError):
        return default


def _safe_float(val: Any, default: float) -> float:
    """Safely parse a float from a value, returning default on failure."""
    try:
        if val is None or (isinstance(val, str) and val.strip() == ""):
            return default
        return float(val)
    except (ValueError, TypeError):
        return default


def _env_truthy(val: str | None, default: bool) -> bool:
    """Check if an environment variable value is truthy."""
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _parse_weights(val: str | None, default: Tuple[float, ...]) -> Tuple[float, ...]:
    """Parse a comma separated weight list; any bad entry yields the default."""
    if not val or not val.strip():
        return default
    try:
        weights = tuple(float(p) for p in val.split(",") if p.strip())
    except ValueError:
        return default
    return weights or default


# ---------------------------------------------------------------------------
# Acceptance floors and rank weights (tunable)
# ---------------------------------------------------------------------------

MIN_LINE_SCORE = _safe_float(os.environ.get("TERSEGREP_MIN_LINE_SCORE"), 1.2)
MIN_FILE_SCORE = _safe_float(os.environ.get("TERSEGREP_MIN_FILE_SCORE"), 2.4)
# Weight of the n-th selected snippet; the last entry applies to every later rank
RANK_WEIGHTS = _parse_weights(os.environ.get("TERSEGREP_RANK_WEIGHTS"), (1.0, 0.45, 0.25))

MAX_SNIPPETS_PER_FILE = _safe_int(os.environ.get("TERSEGREP_MAX_SNIPPETS_PER_FILE"), 2)
MAX_SNIPPET_LINE_LEN = _safe_int(os.environ.get("TERSEGREP_SNIPPET_LINE_LEN"), 140)
TRANSCRIPT_MAX_HITS = 60


# ---------------------------------------------------------------------------
# Line scoring weights
# ---------------------------------------------------------------------------

PHRASE_LINE_BOOST = 6.0
LONG_TERM_BOOST = 1.7
SHORT_TERM_BOOST = 1.4
LONG_TERM_MIN_LEN = 5
MULTI_TERM_BOOST = 1.2
DEFINITION_BOOST = 2.5
COMMENT_FACTOR = 0.7
LONG_LINE_FACTOR = 0.9
LONG_LINE_CHARS = 220
MIN_PHRASE_LEN = 3

# Path scoring weights
PHRASE_PATH_BOOST = 3.5
TERM_PATH_BOOST = 1.2


# ---------------------------------------------------------------------------
# Walker limits and CLI defaults
# ---------------------------------------------------------------------------

BINARY_SNIFF_BYTES = 4096
MIN_FILE_BYTES = 1024

DEFAULT_MAX_RESULTS = _safe_int(os.environ.get("TERSEGREP_MAX_RESULTS"), 8)
DEFAULT_CONTEXT_LINES = _safe_int(os.environ.get("TERSEGREP_CONTEXT_LINES"), 1)
DEFAULT_MAX_FILE_KB = _safe_int(os.environ.get("TERSEGREP_MAX_FILE_KB"), 256)


# ---------------------------------------------------------------------------
# Usage tracking
# ---------------------------------------------------------------------------

def tracking_enabled() -> bool:
    """Check if usage tracking is enabled (TERSEGREP_TRACKING, default on)."""
    return _env_truthy(os.environ.get("TERSEGREP_TRACKING"), True)


def tracking_db_path() -> Path:
    """Location of the SQLite usage history."""
    raw = os.environ.get("TERSEGREP_DB_PATH", "").strip()
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".local" / "share" / "tersegrep" / "history.db"


TRACKING_RETENTION_DAYS = _safe_int(os.environ.get("TERSEGREP_RETENTION_DAYS"), 90)
