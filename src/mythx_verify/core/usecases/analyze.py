from __future__ import annotations

from ..domain.models import RunOptions, UnitOutcome
from ..services import AnalysisOrchestrator, CompilationSnapshot
from ..services.analysis_orchestrator import Emit


class AnalyzeUseCase:
    """Use case for verifying the compiled contracts of a snapshot.

    Thin orchestration layer that delegates to AnalysisOrchestrator.
    """

    def __init__(self, *, orchestrator: AnalysisOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def execute(
        self,
        *,
        snapshot: CompilationSnapshot,
        options: RunOptions,
        emit: Emit | None = None,
    ) -> list[UnitOutcome]:
        """Execute the verification workflow.

        Args:
            snapshot: Compiled inputs frozen at run start
            options: Run options (mode, format, concurrency limit, ...)
            emit: Optional callback invoked as each unit completes

        Returns:
            One outcome per analyzed unit
        """
        return await self._orchestrator.run_all(snapshot, options, emit)
