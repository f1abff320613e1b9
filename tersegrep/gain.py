"""Token savings report built from the usage history."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from tersegrep.tracking import GainSummary, UsageRecord

# ~44K tokens per 5h window, 6 windows a day, 30 days
ESTIMATED_PRO_MONTHLY = 6_000_000

QUOTA_TIERS = {
    "pro": (ESTIMATED_PRO_MONTHLY, "Pro ($20/mo)"),
    "5x": (ESTIMATED_PRO_MONTHLY * 5, "Max 5x ($100/mo)"),
    "20x": (ESTIMATED_PRO_MONTHLY * 20, "Max 20x ($200/mo)"),
}

GRAPH_WIDTH = 40
RULE = "─" * 40


def format_tokens(n: int) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def _shorten(text: str, limit: int, keep: int) -> str:
    return f"{text[:keep]}..." if len(text) > limit else text


def render_graph(by_day: Sequence[Tuple[str, int]]) -> List[str]:
    if not by_day:
        return []
    max_val = max(value for _, value in by_day) or 1
    rows = []
    for day, value in by_day:
        label = day[5:10] if len(day) >= 10 else day
        bar_len = int(value / max_val * GRAPH_WIDTH)
        bar = "█" * bar_len + " " * (GRAPH_WIDTH - bar_len)
        rows.append(f"{label} │{bar} {format_tokens(value)}")
    return rows


def render_gain(
    summary: GainSummary,
    recent: Sequence[UsageRecord] = (),
    graph: bool = False,
    history: bool = False,
    quota: bool = False,
    tier: str = "pro",
) -> str:
    if summary.total_commands == 0:
        return "No tracking data yet.\nRun some tersegrep commands to start tracking savings.\n"

    out = [
        "📊 tersegrep Token Savings",
        "═" * 40,
        "",
        f"Total commands:    {summary.total_commands}",
        f"Input tokens:      {format_tokens(summary.total_input)}",
        f"Output tokens:     {format_tokens(summary.total_output)}",
        f"Tokens saved:      {format_tokens(summary.total_saved)} ({summary.avg_savings_pct:.1f}%)",
        "",
    ]

    if summary.by_command:
        out += ["By Command:", RULE, f"{'Command':<20} {'Count':>6} {'Saved':>10} {'Avg%':>8}"]
        for cmd, count, saved, pct in summary.by_command:
            out.append(f"{_shorten(cmd, 18, 15):<20} {count:>6} {format_tokens(saved):>10} {pct:>7.1f}%")
        out.append("")

    if graph and summary.by_day:
        out += ["Daily Savings (last 30 days):", RULE]
        out += render_graph(summary.by_day)
        out.append("")

    if history and recent:
        out += ["Recent Commands:", RULE]
        for rec in recent:
            out.append(
                f"{rec.timestamp.strftime('%m-%d %H:%M')} {_shorten(rec.proxy_cmd, 25, 22):<25} "
                f"-{rec.savings_pct:.0f}% ({format_tokens(rec.saved_tokens)})"
            )
        out.append("")

    if quota:
        quota_tokens, tier_name = QUOTA_TIERS.get(tier, QUOTA_TIERS["pro"])
        quota_pct = summary.total_saved / quota_tokens * 100.0
        out += [
            "Monthly Quota Analysis:",
            RULE,
            f"Subscription tier:        {tier_name}",
            f"Estimated monthly quota:  {format_tokens(quota_tokens)}",
            f"Tokens saved (lifetime):  {format_tokens(summary.total_saved)}",
            f"Quota preserved:          {quota_pct:.1f}%",
            "",
            "Note: Heuristic estimate based on ~44K tokens/5h (Pro baseline)",
            "      Actual limits use rolling 5-hour windows, not monthly caps.",
        ]

    return "\n".join(out).rstrip("\n") + "\n"


def render_gain_compact(summary: GainSummary) -> str:
    if summary.total_commands == 0:
        return "0 cmds tracked\n"
    return (
        f"{summary.total_commands}cmds {format_tokens(summary.total_input)}in "
        f"{format_tokens(summary.total_output)}out {format_tokens(summary.total_saved)}saved "
        f"({summary.avg_savings_pct:.0f}%)\n"
    )
