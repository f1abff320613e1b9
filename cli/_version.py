"""Installed distribution version, with a fallback for source checkouts."""
from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

DIST_NAME = "tersegrep"

try:
    __version__ = version(DIST_NAME)
except PackageNotFoundError:
    __version__ = "0.1.0+local"
