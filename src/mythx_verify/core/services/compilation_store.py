from __future__ import annotations

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class CompilationSnapshot:
    """Immutable view of the compiled inputs taken at the start of a run."""
    inputs: Mapping[str, str] = field(default_factory=dict)
    result: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.inputs


class CompilationStore:
    """Accumulates compilation results delivered as separate compile events.

    Each ``ingest`` merges the event's contracts, sources and file contents
    into the store; later events win for the same path. ``snapshot`` copies
    the current state so a running analysis never observes later events.
    """

    def __init__(self) -> None:
        self._inputs: dict[str, str] = {}
        self._contracts: dict[str, Any] = {}
        self._sources: dict[str, Any] = {}

    def ingest(self, result: Mapping[str, Any], inputs: Mapping[str, str]) -> None:
        """Merge one compile event.

        Args:
            result: solc standard-JSON output of the event
            inputs: Source path to content for the event's sources
        """
        self._contracts.update(result.get("contracts") or {})
        self._sources.update(result.get("sources") or {})
        self._inputs.update(inputs)

    def snapshot(self) -> CompilationSnapshot:
        result = {
            "contracts": copy.deepcopy(self._contracts),
            "sources": copy.deepcopy(self._sources),
        }
        return CompilationSnapshot(
            inputs=MappingProxyType(dict(self._inputs)),
            result=MappingProxyType(result),
        )
