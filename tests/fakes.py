"""Shared fakes and compiler-output builders for mythx_verify tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from mythx_verify.core.domain.exceptions import AuthenticationError
from mythx_verify.core.domain.models import (
    AnalysisHandle,
    AnalysisStatus,
    IssueReport,
    Location,
    RawFinding,
    RecentAnalysis,
    SubmissionRequest,
)


class FakeLogger:
    def __init__(self):
        self.records: list[tuple[str, str, dict]] = []

    def _log(self, level: str, message: str, **kwargs) -> None:
        self.records.append((level, message, kwargs))

    def debug(self, message: str, **kwargs) -> None:
        self._log("debug", message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log("info", message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log("warning", message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        self._log("error", message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        self._log("error", message, **kwargs)

    def events(self, name: str) -> list[dict]:
        return [kwargs for _, message, kwargs in self.records if message == name]


class FakeService:
    """In-memory analysis service.

    Each submitted contract gets the uuid ``uuid-<contract>``; status checks
    return FINISHED unless ``statuses`` says otherwise, and findings come
    from ``findings`` keyed by contract name (case-insensitive).
    """

    def __init__(
        self,
        *,
        findings: dict[str, list[IssueReport]] | None = None,
        statuses: dict[str, AnalysisStatus] | None = None,
        fail_submit: set[str] | None = None,
        auth_error: bool = False,
        recent: list[RecentAnalysis] | None = None,
        submit_delay: float = 0.0,
    ):
        self.findings = {k.lower(): v for k, v in (findings or {}).items()}
        self.statuses = statuses or {}
        self.fail_submit = fail_submit or set()
        self.auth_error = auth_error
        self.recent = recent or []
        self.submit_delay = submit_delay

        self.auth_calls = 0
        self.submitted: list[SubmissionRequest] = []
        self.status_checks: list[str] = []
        self.fetched: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def authenticate(self) -> None:
        self.auth_calls += 1
        if self.auth_error:
            raise AuthenticationError("No authentication credentials could be found.")

    async def submit(self, request: SubmissionRequest) -> AnalysisHandle:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.submit_delay)
            if request.contract_name in self.fail_submit:
                raise ConnectionError("connection reset by peer")
            self.submitted.append(request)
            return AnalysisHandle(uuid=f"uuid-{request.contract_name}")
        finally:
            self.in_flight -= 1

    async def check_status(self, uuid: str) -> AnalysisStatus:
        self.status_checks.append(uuid)
        return self.statuses.get(uuid, AnalysisStatus.FINISHED)

    async def fetch_findings(self, uuid: str) -> list[IssueReport]:
        self.fetched.append(uuid)
        return self.findings.get(uuid.lower().removeprefix("uuid-"), [])

    async def list_recent(self) -> list[RecentAnalysis]:
        return list(self.recent)


def finding(
    source_map: str = "0:5:0",
    severity: str = "High",
    head: str = "Integer overflow",
    swc_id: str | None = "101",
) -> RawFinding:
    return RawFinding(
        severity=severity,
        head=head,
        tail="Arithmetic may overflow.",
        swc_id=swc_id,
        swc_title="Integer Overflow and Underflow",
        locations=(Location(source_map=source_map),),
    )


def solc_contract(
    *,
    deployed: str = "6080604052",
    bytecode: str = "6080604052",
    sources: tuple[str, ...] = (),
    method_identifiers: dict[str, str] | None = None,
) -> dict[str, Any]:
    return {
        "metadata": json.dumps({"sources": {path: {} for path in sources}}),
        "evm": {
            "bytecode": {"object": bytecode, "sourceMap": "0:10:0"},
            "deployedBytecode": {"object": deployed, "sourceMap": "0:8:0"},
            "methodIdentifiers": method_identifiers or {},
        },
    }


def solc_output(contracts: dict[str, dict[str, Any]], paths: list[str]) -> dict[str, Any]:
    """Build a solc standard-JSON output with a source table for ``paths``."""
    return {
        "contracts": contracts,
        "sources": {
            path: {"id": idx, "ast": {"absolutePath": path, "nodeType": "SourceUnit"}}
            for idx, path in enumerate(paths)
        },
    }
