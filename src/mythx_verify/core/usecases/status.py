from __future__ import annotations

from ..domain.exceptions import ValidationError
from ..domain.models import AnalysisHandle
from ..ports import AnalysisServicePort, LoggerPort


class StatusUseCase:
    """Use case for reading the status of an already submitted analysis."""

    def __init__(self, *, service: AnalysisServicePort, logger: LoggerPort) -> None:
        self._service = service
        self._logger = logger

    async def execute(self, uuid: str) -> AnalysisHandle:
        if not uuid:
            raise ValidationError("Argument 'uuid' must be provided.")
        uuid = uuid.lower()

        self._logger.info("authenticating", type="authenticating")
        await self._service.authenticate()

        status = await self._service.check_status(uuid)
        self._logger.info("status_checked", type="status_checked", uuid=uuid, status=status.value)
        return AnalysisHandle(uuid=uuid, status=status)
