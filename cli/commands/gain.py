"""Gain command: token savings recorded in the usage history."""
from __future__ import annotations

import argparse

from cli.core import output_text
from tersegrep.gain import render_gain, render_gain_compact
from tersegrep.tracking import Tracker


def cmd_gain(args: argparse.Namespace) -> None:
    tracker = Tracker()
    summary = tracker.get_summary()

    if getattr(args, "compact", False):
        output_text(render_gain_compact(summary))
        return

    history = getattr(args, "history", False)
    recent = tracker.get_recent(10) if history else []
    output_text(render_gain(
        summary,
        recent,
        graph=getattr(args, "graph", False),
        history=history,
        quota=getattr(args, "quota", False),
        tier=getattr(args, "tier", "pro"),
    ))
