from __future__ import annotations

from dependency_injector import containers, providers

from .config import AppConfig, timings_from_dict
from ..core.services import (
    AnalysisOrchestrator,
    CompilationSplitter,
    CompilationStore,
    ReportNormalizer,
)
from ..core.usecases.analyze import AnalyzeUseCase
from ..core.usecases.list import ListUseCase
from ..core.usecases.report import ReportUseCase
from ..core.usecases.status import StatusUseCase
from ..infra.logging import RunLogger
from ..infra.mythx_client import MythXClient
from ..infra.solc_artifacts import SolcArtifacts


class Container(containers.DeclarativeContainer):
    """DI container with Pydantic BaseSettings support."""

    config = providers.Configuration(pydantic_settings=[AppConfig()])

    # Logger (Resource: manages lifecycle with init/shutdown)
    logger = providers.Resource(
        RunLogger,
        run_id=config.runtime.run_id,
        logs_dir=config.directories.logs_dir,
        logger_name=config.logging.logger_name,
        console_output=config.logging.console_output,
        level=config.logging.level,
    )

    # Remote analysis service; one client per process, one HTTP session per worker thread
    service = providers.Singleton(
        MythXClient,
        api_url=config.service.api_url,
        api_key=config.service.api_key,
        username=config.service.username,
        password=config.service.password,
        request_timeout=config.service.request_timeout,
        logger=logger,
    )

    # Compiled inputs accumulated from compile events
    compilation_store = providers.Singleton(CompilationStore)

    solc_artifacts = providers.Factory(
        SolcArtifacts,
        store=compilation_store,
    )

    # Domain services
    splitter = providers.Singleton(CompilationSplitter)
    normalizer = providers.Singleton(ReportNormalizer)
    timings = providers.Callable(timings_from_dict, config.timings)

    analysis_orchestrator = providers.Factory(
        AnalysisOrchestrator,
        service=service,
        logger=logger,
        splitter=splitter,
        normalizer=normalizer,
        timings=timings,
        ignore=config.analysis.ignore,
        dashboard_url=config.service.dashboard_url,
    )

    # Use cases
    analyze_uc = providers.Factory(
        AnalyzeUseCase,
        orchestrator=analysis_orchestrator,
    )

    status_uc = providers.Factory(
        StatusUseCase,
        service=service,
        logger=logger,
    )

    report_uc = providers.Factory(
        ReportUseCase,
        service=service,
        normalizer=normalizer,
        logger=logger,
    )

    list_uc = providers.Factory(
        ListUseCase,
        service=service,
        logger=logger,
    )
