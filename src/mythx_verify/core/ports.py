from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol

from .domain.models import (
    AnalysisHandle,
    AnalysisStatus,
    IssueReport,
    RecentAnalysis,
    SubmissionRequest,
)


class AnalysisServicePort(Protocol):
    """Port for the remote security-analysis service.

    Injected into whichever component needs it (orchestrator, status, report
    and list use cases). ``authenticate`` must succeed before any other call
    in a run.

    Raises:
        AuthenticationError: credentials missing or rejected
        ServiceError: unexpected or malformed response
    """

    async def authenticate(self) -> None:
        ...

    async def submit(self, request: SubmissionRequest) -> AnalysisHandle:
        """Submit a request and return the new job's handle."""
        ...

    async def check_status(self, uuid: str) -> AnalysisStatus:
        ...

    async def fetch_findings(self, uuid: str) -> list[IssueReport]:
        """Fetch one report per originating contract of a finished job."""
        ...

    async def list_recent(self) -> list[RecentAnalysis]:
        ...


StatusCheck = Callable[[str], Awaitable[AnalysisStatus]]
Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


class LoggerPort(Protocol):
    """Port for structured logging.

    Messages are short event names; structured data goes in keyword fields.
    """

    def debug(self, message: str, **kwargs: Any) -> None:
        ...

    def info(self, message: str, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, **kwargs: Any) -> None:
        ...

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        ...

    def exception(self, message: str, **kwargs: Any) -> None:
        ...
