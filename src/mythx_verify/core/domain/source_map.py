"""Decode solc byte-offset spans into line/column positions.

Offsets in solc source maps are byte offsets into the UTF-8 encoded source,
so linebreaks are located in the encoded bytes as well. Lookups use a
binary search over the sorted linebreak offsets (O(log n) per lookup).
"""

from __future__ import annotations

import re
from bisect import bisect_left
from typing import Sequence

from .models import Position


_SOURCE_ENTRY = re.compile(r"(\d+):(\d+):(\d+)")


def linebreak_positions(source: str) -> list[int]:
    """Return the ascending byte offsets of every newline in ``source``."""
    data = source.encode("utf-8")
    positions = []
    idx = data.find(b"\n")
    while idx != -1:
        positions.append(idx)
        idx = data.find(b"\n", idx + 1)
    return positions


def _char_position(pos: int, linebreaks: Sequence[int]) -> Position:
    # A newline byte belongs to the line it terminates.
    line = bisect_left(linebreaks, pos)
    begin = linebreaks[line - 1] + 1 if line > 0 else 0
    return Position(line=line + 1, column=pos - begin)


def offset_to_line_column(
    offset: int,
    length: int,
    linebreaks: Sequence[int],
) -> tuple[Position | None, Position | None]:
    """Convert an ``offset``/``length`` span to 1-based line, 0-based column positions.

    Negative offsets mark compiler-generated code and decode to ``(None, None)``.
    """
    if offset < 0 or length < 0:
        return None, None
    return _char_position(offset, linebreaks), _char_position(offset + length, linebreaks)


def parse_source_entry(entry: str) -> tuple[int, int, int]:
    """Split a single ``offset:length:fileIndex`` source-map entry into integers.

    Missing parts default to ``-1`` so the span decodes as unknown.
    """
    parts = entry.split(":")
    values = []
    for idx in range(3):
        try:
            values.append(int(parts[idx]))
        except (IndexError, ValueError):
            values.append(-1)
    return values[0], values[1], values[2]


def source_index(entry: str) -> int:
    """Return the file index of a source-map entry, 0 when it cannot be read.

    Compiler-generated code carries a ``-1`` index, which does not match and
    therefore falls back to 0 as well.
    """
    match = _SOURCE_ENTRY.search(entry)
    return int(match.group(3)) if match else 0
