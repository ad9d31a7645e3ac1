from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Sequence

from .config import AppConfig
from .container import Container
from ..core.domain.models import (
    ALL_CONTRACTS,
    AnalysisHandle,
    Diagnostic,
    RecentAnalysis,
    UnitOutcome,
)


def _create_container(config: AppConfig | None = None) -> Container:
    """Create and initialize a container.

    Args:
        config: Optional config. If None, loads from environment variables.

    Returns:
        Initialized container instance
    """
    container = Container()

    if config is None:
        config = AppConfig()

    container.config.from_pydantic(config)
    container.init_resources()

    return container


def _warn_empty_compilation(container: Container, output_path: Path) -> None:
    container.logger().warning(
        "empty_compilation",
        type="empty_compilation",
        output=str(output_path),
        hint="The compiler output lists no sources; findings cannot be located.",
    )


def analyze(
    output_path: Path,
    *,
    input_path: Path | None = None,
    contracts: Sequence[str] | None = None,
    mode: str | None = None,
    output_format: str | None = None,
    limit: int | None = None,
    timeout: float | None = None,
    no_cache_lookup: bool | None = None,
    debug: bool = False,
    on_outcome: Callable[[UnitOutcome], None] | None = None,
    config: AppConfig | None = None,
) -> list[UnitOutcome]:
    """Submit the contracts of a solc compilation to MythX and collect the findings.

    Args:
        output_path: solc standard-JSON output file
        input_path: solc standard-JSON input file (source contents); sources are read from disk if omitted
        contracts: Contract names to analyze (default: all)
        mode: Analysis mode override
        output_format: Output format override (validated before submission)
        limit: Maximum number of concurrent analyses
        timeout: Seconds to wait for each analysis (overrides the mode default)
        no_cache_lookup: Deactivate MythX cache lookups
        debug: Log request bodies
        on_outcome: Callback invoked as each contract completes
        config: Optional config for testing. If None, loads from env vars.

    Returns:
        One outcome per analyzed contract

    Raises:
        AuthenticationError: If credentials are missing or rejected
        ValidationError: If options or compiler files are invalid
    """
    config = config or AppConfig()
    container = _create_container(config)
    try:
        container.solc_artifacts().load(output_path, input_path)
        snapshot = container.compilation_store().snapshot()
        if snapshot.is_empty:
            _warn_empty_compilation(container, output_path)

        options = config.run_options(
            mode=mode,
            output_format=output_format,
            limit=limit,
            timeout=timeout,
            no_cache_lookup=no_cache_lookup,
            debug=debug,
            contracts=tuple(contracts) if contracts else (ALL_CONTRACTS,),
        )

        uc = container.analyze_uc()
        return asyncio.run(uc.execute(snapshot=snapshot, options=options, emit=on_outcome))
    finally:
        container.shutdown_resources()


def status(uuid: str, config: AppConfig | None = None) -> AnalysisHandle:
    """Return the current status of a submitted analysis."""
    container = _create_container(config)
    try:
        return asyncio.run(container.status_uc().execute(uuid))
    finally:
        container.shutdown_resources()


def report(
    uuid: str,
    *,
    output_path: Path | None = None,
    input_path: Path | None = None,
    config: AppConfig | None = None,
) -> list[Diagnostic]:
    """Fetch and normalize the report of a past analysis.

    Findings are located against the given compilation (if any); without it
    every finding resolves to the unknown path.
    """
    container = _create_container(config)
    try:
        snapshot = None
        if output_path is not None:
            container.solc_artifacts().load(output_path, input_path)
            snapshot = container.compilation_store().snapshot()
            if snapshot.is_empty:
                _warn_empty_compilation(container, output_path)
        inputs = snapshot.inputs if snapshot is not None else {}
        return asyncio.run(container.report_uc().execute(uuid, inputs))
    finally:
        container.shutdown_resources()


def list_analyses(config: AppConfig | None = None) -> list[RecentAnalysis]:
    """List recently submitted analyses."""
    container = _create_container(config)
    try:
        return asyncio.run(container.list_uc().execute())
    finally:
        container.shutdown_resources()
