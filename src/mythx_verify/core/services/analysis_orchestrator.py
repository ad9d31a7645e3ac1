from __future__ import annotations

import asyncio
from typing import Callable, Iterable, Mapping

from ...shared.to_jsonable import to_jsonable
from ..domain.exceptions import (
    AnalysisTimeoutError,
    MythXVerifyError,
    PollExhaustedError,
    UnitPipelineError,
    ValidationError,
)
from ..domain.models import (
    AnalysisUnit,
    Mode,
    OutputFormat,
    PollTiming,
    RunOptions,
    UnitOutcome,
)
from ..ports import AnalysisServicePort, LoggerPort
from .compilation_splitter import CompilationSplitter
from .compilation_store import CompilationSnapshot
from .function_hashes import build_index
from .poll_scheduler import PollScheduler
from .report_normalizer import ReportNormalizer
from .submission import build_request


Emit = Callable[[UnitOutcome], None]


def validate_options(options: RunOptions) -> None:
    """Raise ValidationError for an unknown mode/format or a non-positive limit."""
    if options.mode not in {m.value for m in Mode}:
        raise ValidationError("Invalid analysis mode. Available modes: quick, standard, deep.")
    if options.output_format not in {f.value for f in OutputFormat}:
        formats = ", ".join(f.value for f in OutputFormat)
        raise ValidationError(f"Invalid output format. Available formats: {formats}.")
    if options.limit < 1:
        raise ValidationError("Concurrency limit must be at least 1.")


def select_timing(
    mode: str,
    timings: Mapping[str, PollTiming],
    timeout: float | None = None,
) -> PollTiming:
    """Pick the mode's poll timing; unrecognized modes use the deep timing.

    An explicit ``timeout`` always overrides the mode default.
    """
    timing = timings.get(mode) or timings[Mode.DEEP.value]
    if timeout:
        return PollTiming(initial_delay=timing.initial_delay, timeout=timeout)
    return timing


class AnalysisOrchestrator:
    """Drives a verification run across all analysis units.

    Units run concurrently up to ``options.limit``; within one unit the
    submit, poll, fetch and normalize steps run in sequence. A failure in one
    unit is logged and reported on its outcome without affecting siblings.
    """

    def __init__(
        self,
        *,
        service: AnalysisServicePort,
        logger: LoggerPort,
        splitter: CompilationSplitter,
        normalizer: ReportNormalizer,
        timings: Mapping[str, PollTiming],
        ignore: Iterable[str] = (),
        dashboard_url: str = "https://dashboard.mythx.io/#/console/analyses/",
        scheduler_factory: Callable[..., PollScheduler] = PollScheduler,
    ) -> None:
        self._service = service
        self._logger = logger
        self._splitter = splitter
        self._normalizer = normalizer
        self._timings = timings
        self._ignore = frozenset(ignore)
        self._dashboard_url = dashboard_url
        self._scheduler_factory = scheduler_factory

    async def run_all(
        self,
        snapshot: CompilationSnapshot,
        options: RunOptions,
        emit: Emit | None = None,
    ) -> list[UnitOutcome]:
        """Analyze every selected unit of ``snapshot``.

        Raises:
            ValidationError: invalid options (before any remote call)
            AuthenticationError: login failed (before any unit work)
        """
        validate_options(options)

        self._logger.info("authenticating", type="authenticating")
        await self._service.authenticate()

        self._logger.info("run_started", type="run_started", mode=options.mode, limit=options.limit)
        units = self.select_units(snapshot, options)
        if not units:
            self._logger.warning(
                "no_contracts",
                type="no_contracts",
                hint="Check the contract filter and the configured ignore list.",
            )
            return []

        gate = asyncio.Semaphore(options.limit)

        async def bounded(unit: AnalysisUnit) -> UnitOutcome:
            async with gate:
                outcome = await self.run_unit(unit, options, snapshot.inputs)
            if emit is not None:
                emit(outcome)
            return outcome

        outcomes = await asyncio.gather(*(bounded(unit) for unit in units))

        failed = sum(1 for o in outcomes if not o.ok)
        self._logger.info("run_finished", type="run_finished", total=len(outcomes), failed=failed)
        return list(outcomes)

    def select_units(self, snapshot: CompilationSnapshot, options: RunOptions) -> list[AnalysisUnit]:
        """Split the snapshot and apply the ignore list and contract selection."""
        split = self._splitter.split(snapshot.inputs, snapshot.result)

        for warning in split.warnings:
            self._logger.warning(
                "multiple_contracts",
                type="multiple_contracts",
                detail=warning.describe(),
                file_path=warning.file_path,
                contracts=list(warning.contract_names),
            )
        for path in split.skipped:
            self._logger.warning("unit_skipped", type="unit_skipped", file_path=path, reason="no compiled contracts")

        selected: list[AnalysisUnit] = []
        for unit in split.units:
            if unit.contract_name in self._ignore:
                self._logger.info("unit_ignored", type="unit_ignored", contract=unit.contract_name)
                continue
            if not options.selects_all and unit.contract_name not in options.contracts:
                self._logger.info("unit_not_selected", type="unit_not_selected", contract=unit.contract_name)
                continue
            selected.append(unit)
        return selected

    async def run_unit(
        self,
        unit: AnalysisUnit,
        options: RunOptions,
        inputs: Mapping[str, str],
    ) -> UnitOutcome:
        """Run one unit's pipeline; never raises.

        ``inputs`` is the whole compilation's source table. Finding file
        indexes are solc's global source ids, so they resolve against it,
        not against the unit's own subset.
        """
        outcome = UnitOutcome(contract_name=unit.contract_name)
        try:
            request = build_request(unit, options)
            if options.debug:
                self._logger.info("request_body", type="request_body", body=to_jsonable(request.to_payload()))

            handle = await self._service.submit(request)
            outcome.uuid = handle.uuid
            self._logger.info(
                "unit_submitted",
                type="unit_submitted",
                contract=unit.contract_name,
                uuid=handle.uuid,
                url=self._dashboard_url + handle.uuid,
                mode=options.mode,
            )

            timing = select_timing(options.mode, self._timings, options.timeout)
            scheduler = self._scheduler_factory(check_status=self._service.check_status, logger=self._logger)
            outcome.status = await scheduler.await_terminal(handle, timing.initial_delay, timing.timeout)

            self._logger.info("unit_fetching", type="unit_fetching", contract=unit.contract_name, uuid=handle.uuid)
            reports = await self._service.fetch_findings(handle.uuid)

            outcome.diagnostics = self._normalizer.normalize(
                reports,
                inputs,
                build_index(unit.method_identifiers),
            )
            self._logger.info(
                "unit_finished",
                type="unit_finished",
                contract=unit.contract_name,
                uuid=handle.uuid,
                files=len(outcome.diagnostics),
                issues=sum(len(d.messages) for d in outcome.diagnostics),
            )
        except (AnalysisTimeoutError, PollExhaustedError) as e:
            outcome.status = e.status
            outcome.error = e
            self._logger.error("unit_failed", type="unit_failed", contract=unit.contract_name, error=str(e))
        except Exception as e:
            outcome.error = e if isinstance(e, UnitPipelineError) else UnitPipelineError(unit.contract_name, e)
            self._logger.error(
                "unit_failed",
                exc_info=not isinstance(e, MythXVerifyError),
                type="unit_failed",
                contract=unit.contract_name,
                error=str(outcome.error),
            )
        return outcome
