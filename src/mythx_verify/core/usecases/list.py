from __future__ import annotations

from ..domain.models import RecentAnalysis
from ..ports import AnalysisServicePort, LoggerPort


class ListUseCase:
    """Use case for listing recently submitted analyses."""

    def __init__(self, *, service: AnalysisServicePort, logger: LoggerPort) -> None:
        self._service = service
        self._logger = logger

    async def execute(self) -> list[RecentAnalysis]:
        self._logger.info("authenticating", type="authenticating")
        await self._service.authenticate()
        return await self._service.list_recent()
