"""Shared helpers for CLI commands."""
from __future__ import annotations

import sys
from pathlib import Path

from dotenv import load_dotenv

_env_loaded = False


def load_env(dotenv_path: str | Path | None = None) -> None:
    """Load a .env file (cwd by default) once; real environment wins."""
    global _env_loaded
    if _env_loaded:
        return
    if dotenv_path is None:
        dotenv_path = Path.cwd() / ".env"
    load_dotenv(dotenv_path, override=False)
    _env_loaded = True


def apply_verbosity(verbose: int) -> None:
    from tersegrep.logger import set_verbosity

    set_verbosity(verbose)


def output_text(text: str) -> None:
    """Write a rendered payload to stdout."""
    sys.stdout.write(text)
    sys.stdout.flush()

