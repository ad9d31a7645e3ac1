from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Mapping, Sequence

from ...shared.to_jsonable import to_jsonable
from ..domain.models import Diagnostic, IssueReport, Message, Position, RawFinding
from ..domain.source_map import (
    linebreak_positions,
    offset_to_line_column,
    parse_source_entry,
    source_index,
)


UNKNOWN_PATH = "<unknown>"
SWC_REGISTRY_URL = "https://swcregistry.io/docs/"

_SEVERITY = {"high": 2, "medium": 1}


def severity_ordinal(severity: str | None) -> int:
    return _SEVERITY.get((severity or "").lower(), 1)


def _snippet(source: str, start: Position | None, end: Position | None) -> str:
    if start is None or not source:
        return ""
    lines = source.splitlines()
    last = end.line if end is not None else start.line
    return "\n".join(lines[start.line - 1:last])


@dataclass
class _Group:
    file_path: str
    source_code: str
    messages: list[Message] = field(default_factory=list)


class ReportNormalizer:
    """Domain service converting raw MythX findings into deduplicated diagnostics.

    Only the first text location of a finding is decoded; further locations
    are kept as evidence but do not produce positions. File indexes are
    resolved positionally against the keys of ``sources``; an index that is
    out of range (sources changed since submission) degrades to the
    ``<unknown>`` path with empty source text.
    """

    def normalize(
        self,
        reports: Sequence[IssueReport],
        sources: Mapping[str, str],
        function_hashes: Mapping[str, str] | None = None,
    ) -> list[Diagnostic]:
        """Normalize all issues of ``reports``.

        Args:
            reports: Reports as returned by the service
            sources: Source path to content, ordered like the submitted source list
            function_hashes: Selector to signature index attached to every diagnostic

        Returns:
            One diagnostic per file, in order of first appearance
        """
        paths = list(sources)
        groups: dict[str, _Group] = {}

        for report in reports:
            for finding in report.issues:
                locations = tuple(loc for loc in finding.locations if loc.is_text)
                location = locations[0] if locations else None

                file_path, source_code = UNKNOWN_PATH, ""
                if location is not None:
                    idx = source_index(location.source_map)
                    if 0 <= idx < len(paths):
                        file_path = paths[idx]
                        source_code = sources[file_path]

                group = groups.get(file_path)
                if group is None:
                    group = groups[file_path] = _Group(file_path=file_path, source_code=source_code)
                group.messages.append(self._to_message(finding, source_code, locations))

        hashes = dict(function_hashes or {})
        return [
            self._deduplicate(
                Diagnostic(
                    file_path=group.file_path,
                    source_code=group.source_code,
                    messages=tuple(group.messages),
                    function_hashes=hashes,
                )
            )
            for group in groups.values()
        ]

    def _to_message(self, finding: RawFinding, source_code: str, locations: tuple) -> Message:
        start = end = None
        if locations:
            offset, length, _ = parse_source_entry(locations[0].source_map)
            start, end = offset_to_line_column(offset, length, linebreak_positions(source_code))

        return Message(
            start=start,
            end=end,
            severity=severity_ordinal(finding.severity),
            text=finding.head,
            rule_id=SWC_REGISTRY_URL + finding.swc_id if finding.swc_id else "N/A",
            finding=finding,
            text_locations=locations,
            source_snippet=_snippet(source_code, start, end),
            fatal=False,
        )

    @staticmethod
    def _deduplicate(diagnostic: Diagnostic) -> Diagnostic:
        seen: set[str] = set()
        unique: list[Message] = []
        for message in diagnostic.messages:
            key = json.dumps(to_jsonable(message), sort_keys=True)
            if key in seen:
                continue
            seen.add(key)
            unique.append(message)

        errors = sum(1 for m in unique if m.is_error)
        return replace(
            diagnostic,
            messages=tuple(unique),
            error_count=errors,
            warning_count=len(unique) - errors,
        )
