from __future__ import annotations

import posixpath

from ..domain.bytecode import normalize
from ..domain.models import AnalysisUnit, RunOptions, SubmissionRequest


def build_request(unit: AnalysisUnit, options: RunOptions) -> SubmissionRequest:
    """Project an analysis unit and run options into the MythX request shape.

    Source files are keyed by base name; ``sourceList`` follows the unit's
    source order so issue file indexes can be mapped back.
    """
    source_list: list[str] = []
    sources: dict[str, dict] = {}
    for path, entry in unit.sources.items():
        name = posixpath.basename(path)
        source_list.append(name)
        sources[name] = {"ast": entry.ast, "source": entry.content}

    return SubmissionRequest(
        contract_name=unit.contract_name,
        bytecode=normalize(unit.bytecode.object) or "",
        source_map=unit.bytecode.source_map,
        deployed_bytecode=normalize(unit.deployed_bytecode.object) or "",
        deployed_source_map=unit.deployed_bytecode.source_map,
        main_source=posixpath.basename(unit.file_path),
        source_list=source_list,
        sources=sources,
        analysis_mode=options.mode,
        tool_name=options.tool_name,
        no_cache_lookup=options.no_cache_lookup,
    )
