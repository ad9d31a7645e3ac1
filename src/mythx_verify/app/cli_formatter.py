"""CLI output formatting utilities for human-readable display."""

from __future__ import annotations

from datetime import datetime, timezone

from ..core.domain.exceptions import UnitPipelineError
from ..core.domain.models import AnalysisHandle, RecentAnalysis, UnitOutcome
from .formatters import Renderer


def _age(submitted_at: str, now: datetime) -> str:
    """Describe how long ago ``submitted_at`` (ISO 8601) was, e.g. ``3 hours ago``."""
    try:
        ts = datetime.fromisoformat(submitted_at.replace("Z", "+00:00"))
    except ValueError:
        return submitted_at or "N/A"
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)

    seconds = max(int((now - ts).total_seconds()), 0)
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            n = seconds // size
            return f"{n} {unit}{'' if n == 1 else 's'} ago"
    return "less than a minute ago"


def format_recent_analyses(analyses: list[RecentAnalysis], now: datetime | None = None) -> str:
    """Format the list of past analyses as a table.

    Args:
        analyses: Recent analyses as returned by the service
        now: Reference time for relative ages (defaults to current UTC time)

    Returns:
        Formatted string for display
    """
    if not analyses:
        return "No past analyses found."

    now = now or datetime.now(timezone.utc)
    header = ("Mode", "Contract", "Vulnerabilities", "Submitted", "UUID")
    rows = [header]
    for a in analyses:
        counts = ", ".join(f"{level}: {num}" for level, num in a.vulnerability_counts.items())
        rows.append((a.mode, a.main_source, counts, _age(a.submitted_at, now), a.uuid))

    widths = [max(len(row[i]) for row in rows) for i in range(len(header))]
    sep = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    title = "Past analyses"

    lines = [sep, "| " + title.center(len(sep) - 4) + " |", sep]
    for idx, row in enumerate(rows):
        lines.append("| " + " | ".join(cell.ljust(w) for cell, w in zip(row, widths)) + " |")
        if idx == 0:
            lines.append(sep)
    lines.append(sep)
    return "\n".join(lines)


def format_status(handle: AnalysisHandle) -> str:
    return f"Analysis {handle.uuid}: {handle.status.value}"


def format_outcome(outcome: UnitOutcome, render: Renderer) -> str:
    """Format one unit's outcome: the rendered report, a clean bill, or the error."""
    if not outcome.ok:
        if isinstance(outcome.error, UnitPipelineError):
            return f"✗ {outcome.error}"
        return f"✗ Error analyzing contract {outcome.contract_name}: {outcome.error}"
    if not any(d.messages for d in outcome.diagnostics):
        return f"✔ No errors/warnings found for contract: {outcome.contract_name}"
    return render(outcome.diagnostics)
