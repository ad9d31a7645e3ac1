from __future__ import annotations

from typing import Mapping

from ..domain.exceptions import ValidationError
from ..domain.models import Diagnostic
from ..ports import AnalysisServicePort, LoggerPort
from ..services import ReportNormalizer


class ReportUseCase:
    """Use case for fetching and normalizing the report of a past analysis.

    The report is resolved against the current compilation inputs, which may
    have changed since submission; unresolvable file indexes degrade to the
    unknown path rather than failing.
    """

    def __init__(
        self,
        *,
        service: AnalysisServicePort,
        normalizer: ReportNormalizer,
        logger: LoggerPort,
    ) -> None:
        self._service = service
        self._normalizer = normalizer
        self._logger = logger

    async def execute(
        self,
        uuid: str,
        inputs: Mapping[str, str],
    ) -> list[Diagnostic]:
        """Fetch and normalize the findings of ``uuid``.

        Args:
            uuid: Analysis job identifier
            inputs: Source path to content used to locate findings

        Raises:
            ValidationError: If ``uuid`` is empty
        """
        if not uuid:
            raise ValidationError("Argument 'uuid' must be provided.")
        uuid = uuid.lower()

        self._logger.info("authenticating", type="authenticating")
        await self._service.authenticate()

        reports = await self._service.fetch_findings(uuid)
        diagnostics = self._normalizer.normalize(reports, inputs)
        self._logger.info(
            "report_rendered",
            type="report_rendered",
            uuid=uuid,
            files=len(diagnostics),
            issues=sum(len(d.messages) for d in diagnostics),
        )
        return diagnostics
