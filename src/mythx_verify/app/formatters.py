"""Renderers for normalized diagnostics.

A closed registry of output formats; each renderer turns a list of
diagnostics into a single string.
"""

from __future__ import annotations

import html
import json
from typing import Callable, Sequence

from ..core.domain.exceptions import ValidationError
from ..core.domain.models import Diagnostic, Message, OutputFormat
from ..shared.to_jsonable import to_jsonable


Renderer = Callable[[Sequence[Diagnostic]], str]


def _kind(message: Message) -> str:
    return "error" if message.is_error else "warning"


def _line_col(message: Message) -> tuple[str, str]:
    if message.start is None:
        return "?", "?"
    return str(message.start.line), str(message.start.column)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" + ("" if n == 1 else "s")


def _summary(diagnostics: Sequence[Diagnostic]) -> str:
    errors = sum(d.error_count for d in diagnostics)
    warnings = sum(d.warning_count for d in diagnostics)
    return (
        f"{_plural(errors + warnings, 'problem')} "
        f"({_plural(errors, 'error')}, {_plural(warnings, 'warning')})"
    )


def render_stylish(diagnostics: Sequence[Diagnostic]) -> str:
    lines: list[str] = []
    for diagnostic in diagnostics:
        if not diagnostic.messages:
            continue
        lines.append(diagnostic.file_path)
        for m in diagnostic.messages:
            line, col = _line_col(m)
            lines.append(f"  {line}:{col}  {_kind(m):<7}  {m.text}  {m.rule_id}")
        lines.append("")
    if lines:
        lines.append(f"✖ {_summary(diagnostics)}")
    return "\n".join(lines)


def render_compact(diagnostics: Sequence[Diagnostic]) -> str:
    lines: list[str] = []
    for diagnostic in diagnostics:
        for m in diagnostic.messages:
            line, col = _line_col(m)
            lines.append(
                f"{diagnostic.file_path}: line {line}, col {col}, "
                f"{_kind(m).capitalize()} - {m.text} ({m.rule_id})"
            )
    if lines:
        lines.append("")
        lines.append(_summary(diagnostics))
    return "\n".join(lines)


def render_table(diagnostics: Sequence[Diagnostic]) -> str:
    header = ("Line", "Column", "Type", "Message", "Rule ID")
    blocks: list[str] = []
    for diagnostic in diagnostics:
        if not diagnostic.messages:
            continue
        rows = [header] + [
            (*_line_col(m), _kind(m), m.text, m.rule_id) for m in diagnostic.messages
        ]
        widths = [max(len(row[i]) for row in rows) for i in range(len(header))]
        sep = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
        table = [diagnostic.file_path, sep]
        for idx, row in enumerate(rows):
            table.append("| " + " | ".join(cell.ljust(w) for cell, w in zip(row, widths)) + " |")
            if idx == 0:
                table.append(sep)
        table.append(sep)
        blocks.append("\n".join(table))
    if blocks:
        blocks.append(_summary(diagnostics))
    return "\n\n".join(blocks)


def render_text(diagnostics: Sequence[Diagnostic]) -> str:
    blocks: list[str] = []
    for diagnostic in diagnostics:
        for m in diagnostic.messages:
            finding = m.finding
            lines = [
                f"==== {finding.swc_title or m.text} ====",
                f"Severity: {finding.severity or 'Unknown'}",
                f"File: {diagnostic.file_path}",
                f"Link: {m.rule_id}",
                "-" * 52,
                m.text,
            ]
            if finding.tail:
                lines.append(finding.tail)
            lines.append("-" * 52)
            if m.start is not None and m.end is not None:
                lines.append(f"Location: from line {m.start.line} to {m.end.line}")
            else:
                lines.append("Location: unknown")
            if m.source_snippet:
                lines.append("")
                lines.append(m.source_snippet)
            blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def render_html(diagnostics: Sequence[Diagnostic]) -> str:
    esc = html.escape
    parts = [
        "<!DOCTYPE html>",
        "<html><head><meta charset=\"utf-8\"><title>MythX report</title></head><body>",
        f"<h1>MythX report</h1><p>{esc(_summary(diagnostics))}</p>",
    ]
    for diagnostic in diagnostics:
        if not diagnostic.messages:
            continue
        parts.append(f"<h2>{esc(diagnostic.file_path)}</h2>")
        parts.append("<table><tr><th>Line</th><th>Column</th><th>Type</th><th>Message</th><th>Rule ID</th></tr>")
        for m in diagnostic.messages:
            line, col = _line_col(m)
            rule = esc(m.rule_id)
            link = f"<a href=\"{rule}\">{rule}</a>" if m.rule_id.startswith("http") else rule
            parts.append(
                f"<tr class=\"{_kind(m)}\"><td>{line}</td><td>{col}</td><td>{_kind(m)}</td>"
                f"<td>{esc(m.text)}</td><td>{link}</td></tr>"
            )
        parts.append("</table>")
    parts.append("</body></html>")
    return "\n".join(parts)


def render_json(diagnostics: Sequence[Diagnostic]) -> str:
    return json.dumps(to_jsonable(list(diagnostics)), ensure_ascii=False, indent=2)


FORMATTERS: dict[OutputFormat, Renderer] = {
    OutputFormat.TEXT: render_text,
    OutputFormat.STYLISH: render_stylish,
    OutputFormat.COMPACT: render_compact,
    OutputFormat.TABLE: render_table,
    OutputFormat.HTML: render_html,
    OutputFormat.JSON: render_json,
}


def get_formatter(name: str) -> Renderer:
    """Look up the renderer for an output format name."""
    try:
        return FORMATTERS[OutputFormat(name)]
    except ValueError:
        formats = ", ".join(f.value for f in OutputFormat)
        raise ValidationError(f"Invalid output format. Available formats: {formats}.") from None
