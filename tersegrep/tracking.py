"""Usage tracking for tersegrep commands.

Every command reports what the wrapped tool would have printed (raw text)
next to what tersegrep actually printed, so the savings can be summarised
later by ``tersegrep gain``. Records live in a small SQLite file; token
counts are estimated at four characters per token.
"""

from __future__ import annotations

import sqlite3
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from tersegrep.config import TRACKING_RETENTION_DAYS, tracking_db_path, tracking_enabled
from tersegrep.logger import TrackingError, get_logger

logger = get_logger(__name__)

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS commands ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "timestamp TEXT NOT NULL, "
    "original_cmd TEXT NOT NULL, "
    "proxy_cmd TEXT NOT NULL, "
    "input_tokens INTEGER NOT NULL, "
    "output_tokens INTEGER NOT NULL, "
    "saved_tokens INTEGER NOT NULL, "
    "savings_pct REAL NOT NULL, "
    "exec_time_ms INTEGER NOT NULL DEFAULT 0)"
)


class UsageSink(Protocol):
    def record(self, original_label: str, proxy_label: str, raw_text: str, rendered_text: str) -> None:
        ...


def estimate_tokens(text: str) -> int:
    """Rough token estimate (~4 chars per token)."""
    return len(text) // 4


@dataclass
class UsageRecord:
    timestamp: datetime
    original_cmd: str
    proxy_cmd: str
    input_tokens: int
    output_tokens: int
    saved_tokens: int
    savings_pct: float
    exec_time_ms: int = 0


@dataclass
class GainSummary:
    total_commands: int = 0
    total_input: int = 0
    total_output: int = 0
    total_saved: int = 0
    avg_savings_pct: float = 0.0
    # (command, count, saved tokens, average savings pct)
    by_command: List[Tuple[str, int, int, float]] = field(default_factory=list)
    # (YYYY-MM-DD, saved tokens)
    by_day: List[Tuple[str, int]] = field(default_factory=list)


class Tracker:
    """SQLite-backed usage history."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path is not None else tracking_db_path()
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._connection() as conn:
                with conn:
                    conn.execute(_SCHEMA)
                    conn.execute(
                        "CREATE INDEX IF NOT EXISTS idx_commands_timestamp ON commands(timestamp)"
                    )
        except (OSError, sqlite3.Error) as exc:
            raise TrackingError(f"cannot open usage history at {self.db_path}: {exc}") from exc

    @contextmanager
    def _connection(self):
        conn = sqlite3.connect(str(self.db_path))
        try:
            yield conn
        finally:
            conn.close()

    def add(
        self,
        original_cmd: str,
        proxy_cmd: str,
        input_tokens: int,
        output_tokens: int,
        exec_time_ms: int = 0,
    ) -> UsageRecord:
        saved = max(input_tokens - output_tokens, 0)
        pct = (saved / input_tokens * 100.0) if input_tokens > 0 else 0.0
        now = datetime.now(timezone.utc)
        cutoff = now - timedelta(days=TRACKING_RETENTION_DAYS)
        try:
            with self._connection() as conn:
                with conn:
                    conn.execute(
                        "INSERT INTO commands (timestamp, original_cmd, proxy_cmd, input_tokens, "
                        "output_tokens, saved_tokens, savings_pct, exec_time_ms) "
                        "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                        (now.isoformat(), original_cmd, proxy_cmd, input_tokens,
                         output_tokens, saved, pct, exec_time_ms),
                    )
                    conn.execute("DELETE FROM commands WHERE timestamp < ?", (cutoff.isoformat(),))
        except sqlite3.Error as exc:
            raise TrackingError(f"cannot write usage history: {exc}") from exc
        return UsageRecord(now, original_cmd, proxy_cmd, input_tokens, output_tokens, saved, pct, exec_time_ms)

    def record(self, original_label: str, proxy_label: str, raw_text: str, rendered_text: str) -> None:
        self.add(original_label, proxy_label, estimate_tokens(raw_text), estimate_tokens(rendered_text))

    def get_summary(self) -> GainSummary:
        summary = GainSummary()
        with self._connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*), COALESCE(SUM(input_tokens), 0), COALESCE(SUM(output_tokens), 0), "
                "COALESCE(SUM(saved_tokens), 0), COALESCE(AVG(savings_pct), 0.0) FROM commands"
            ).fetchone()
            (summary.total_commands, summary.total_input, summary.total_output,
             summary.total_saved, summary.avg_savings_pct) = row
            summary.by_command = [
                (cmd, int(count), int(saved), float(pct))
                for cmd, count, saved, pct in conn.execute(
                    "SELECT proxy_cmd, COUNT(*), SUM(saved_tokens), AVG(savings_pct) FROM commands "
                    "GROUP BY proxy_cmd ORDER BY SUM(saved_tokens) DESC, proxy_cmd ASC LIMIT 10"
                )
            ]
            day_cutoff = (datetime.now(timezone.utc) - timedelta(days=30)).isoformat()
            summary.by_day = [
                (day, int(saved))
                for day, saved in conn.execute(
                    "SELECT substr(timestamp, 1, 10) AS day, SUM(saved_tokens) FROM commands "
                    "WHERE timestamp >= ? GROUP BY day ORDER BY day ASC",
                    (day_cutoff,),
                )
            ]
        return summary

    def get_recent(self, limit: int = 10) -> List[UsageRecord]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT timestamp, original_cmd, proxy_cmd, input_tokens, output_tokens, "
                "saved_tokens, savings_pct, exec_time_ms FROM commands "
                "ORDER BY timestamp DESC, id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [
            UsageRecord(datetime.fromisoformat(ts), *rest)
            for ts, *rest in rows
        ]


class NullSink:
    """Sink used when tracking is disabled."""

    def record(self, original_label: str, proxy_label: str, raw_text: str, rendered_text: str) -> None:
        return None


class TimedExecution:
    """Measures a command's wall time and reports it with its usage record."""

    def __init__(self, sink: Optional[UsageSink] = None):
        self.sink = sink if sink is not None else default_sink()
        self.started = time.perf_counter()

    @classmethod
    def start(cls, sink: Optional[UsageSink] = None) -> "TimedExecution":
        return cls(sink)

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started) * 1000)

    def track(self, original_label: str, proxy_label: str, raw_text: str, rendered_text: str) -> None:
        """Report one invocation; history write failures are logged, not raised."""
        try:
            if isinstance(self.sink, Tracker):
                self.sink.add(
                    original_label,
                    proxy_label,
                    estimate_tokens(raw_text),
                    estimate_tokens(rendered_text),
                    exec_time_ms=self.elapsed_ms(),
                )
            else:
                self.sink.record(original_label, proxy_label, raw_text, rendered_text)
        except TrackingError as exc:
            logger.warning(f"usage tracking skipped: {exc}")


def default_sink() -> UsageSink:
    if not tracking_enabled():
        return NullSink()
    try:
        return Tracker()
    except TrackingError as exc:
        logger.warning(f"usage tracking disabled: {exc}")
        return NullSink()
