"""Domain exceptions for mythx_verify."""

from __future__ import annotations

from .models import AnalysisStatus


class MythXVerifyError(Exception):
    """Base class for all errors raised by mythx_verify."""


class AuthenticationError(MythXVerifyError):
    """Raised when credentials are missing or rejected by the service.

    Fatal to the whole run; never retried.
    """


class ValidationError(MythXVerifyError):
    """Raised for invalid mode/format selections or missing required arguments."""


class ServiceError(MythXVerifyError):
    """Raised when the remote service returns an unexpected or malformed response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class _PollError(MythXVerifyError):
    def __init__(self, reason: str, status: AnalysisStatus) -> None:
        self.status = status
        super().__init__(
            f"{reason} The analysis job state is {status.value.lower()} "
            "and the result may become available later."
        )


class AnalysisTimeoutError(_PollError):
    """The remote job did not reach a terminal state within the deadline."""

    def __init__(self, timeout: float, status: AnalysisStatus) -> None:
        self.timeout = timeout
        super().__init__(f"User or default timeout reached after {timeout:g} sec(s).", status)


class PollExhaustedError(_PollError):
    """The allowed number of status checks elapsed without a terminal state."""

    def __init__(self, max_requests: int, status: AnalysisStatus) -> None:
        self.max_requests = max_requests
        super().__init__(f"Allowed number ({max_requests}) of requests was reached.", status)


class UnitPipelineError(MythXVerifyError):
    """Any other failure while processing one analysis unit."""

    def __init__(self, contract_name: str, cause: BaseException) -> None:
        self.contract_name = contract_name
        self.cause = cause
        super().__init__(f"Error analyzing contract {contract_name}: {cause}")
