from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..domain.models import (
    AnalysisUnit,
    ContractBytecode,
    MultipleContractsWarning,
    SourceEntry,
)


@dataclass
class SplitResult:
    units: list[AnalysisUnit] = field(default_factory=list)
    warnings: list[MultipleContractsWarning] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def _bytecode(evm: Mapping[str, Any], key: str) -> ContractBytecode:
    raw = evm.get(key) or {}
    return ContractBytecode(
        object=raw.get("object") or "",
        source_map=raw.get("sourceMap") or "",
    )


class CompilationSplitter:
    """Domain service that groups solc output into one analysis unit per source file.

    The primary contract of a file is the one with the longest deployed
    bytecode; on equal length the first one encountered is kept. Files that
    were already pulled into an earlier unit (for example through an import)
    do not produce a unit of their own.
    """

    def split(
        self,
        inputs: Mapping[str, str],
        compilation_result: Mapping[str, Any],
    ) -> SplitResult:
        """Split a compilation result into analysis units.

        Args:
            inputs: Source path to file content, in compilation input order
            compilation_result: solc standard-JSON output (``contracts`` and ``sources``)

        Returns:
            SplitResult with units in input order, multi-contract warnings and
            the input paths that had no contract table entry
        """
        contracts_by_file: Mapping[str, Any] = compilation_result.get("contracts") or {}
        source_table: Mapping[str, Any] = compilation_result.get("sources") or {}

        result = SplitResult()
        for file_path in inputs:
            if any(file_path in unit.sources for unit in result.units):
                continue

            contract_list = contracts_by_file.get(file_path)
            if not contract_list:
                result.skipped.append(file_path)
                continue

            sources: dict[str, SourceEntry] = {}
            primary_name: str | None = None
            primary: Mapping[str, Any] | None = None
            primary_len = -1

            for name, contract in contract_list.items():
                metadata = json.loads(contract.get("metadata") or "{}")
                wanted = set((metadata.get("sources") or {}).keys())
                for key, compiled in source_table.items():
                    ast = compiled.get("ast") or {}
                    if ast.get("absolutePath") in wanted:
                        sources[key] = SourceEntry(content=inputs.get(key, ""), ast=ast)

                deployed = ((contract.get("evm") or {}).get("deployedBytecode") or {}).get("object") or ""
                if primary is None or len(deployed) > primary_len:
                    primary_name, primary, primary_len = name, contract, len(deployed)

            if len(contract_list) > 1:
                result.warnings.append(
                    MultipleContractsWarning(file_path=file_path, contract_names=tuple(contract_list))
                )

            evm = (primary or {}).get("evm") or {}
            result.units.append(
                AnalysisUnit(
                    contract_name=primary_name or "",
                    file_path=file_path,
                    bytecode=_bytecode(evm, "bytecode"),
                    deployed_bytecode=_bytecode(evm, "deployedBytecode"),
                    sources=sources,
                    method_identifiers=dict(evm.get("methodIdentifiers") or {}),
                )
            )

        return result
