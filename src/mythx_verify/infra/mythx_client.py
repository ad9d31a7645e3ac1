from __future__ import annotations

import asyncio
import threading
from typing import Any, Callable, Mapping

import requests

from ..core.domain.exceptions import AuthenticationError, ServiceError
from ..core.domain.models import (
    AnalysisHandle,
    AnalysisStatus,
    IssueReport,
    Location,
    RawFinding,
    RecentAnalysis,
    SubmissionRequest,
)
from ..core.ports import LoggerPort


_STATUS = {
    "queued": AnalysisStatus.PENDING,
    "pending": AnalysisStatus.PENDING,
    "in progress": AnalysisStatus.IN_PROGRESS,
    "inprogress": AnalysisStatus.IN_PROGRESS,
    "running": AnalysisStatus.IN_PROGRESS,
    "finished": AnalysisStatus.FINISHED,
    "error": AnalysisStatus.ERROR,
}


def parse_status(raw: str | None) -> AnalysisStatus:
    try:
        return _STATUS[(raw or "").strip().lower()]
    except KeyError:
        raise ServiceError(f"Unknown analysis status: {raw!r}") from None


def parse_finding(raw: Mapping[str, Any]) -> RawFinding:
    description = raw.get("description") or {}
    locations = tuple(
        Location(
            source_map=str(loc.get("sourceMap") or ""),
            source_type=str(loc.get("sourceType") or ""),
            source_format=str(loc.get("sourceFormat") or ""),
        )
        for loc in raw.get("locations") or ()
    )
    return RawFinding(
        severity=str(raw.get("severity") or ""),
        head=str(description.get("head") or ""),
        tail=str(description.get("tail") or ""),
        swc_id=raw.get("swcID") or None,
        swc_title=raw.get("swcTitle") or None,
        locations=locations,
    )


def parse_report(raw: Mapping[str, Any]) -> IssueReport:
    return IssueReport(
        issues=tuple(parse_finding(issue) for issue in raw.get("issues") or ()),
    )


def parse_recent(raw: Mapping[str, Any]) -> RecentAnalysis:
    return RecentAnalysis(
        uuid=raw["uuid"],
        mode=str(raw.get("analysisMode") or ""),
        main_source=str(raw.get("mainSource") or ""),
        vulnerability_counts=dict(raw.get("numVulnerabilities") or {}),
        submitted_at=str(raw.get("submittedAt") or ""),
    )


class MythXClient:
    """Adapter for the MythX v1 REST API.

    HTTP calls are blocking ``requests`` calls executed off the event loop
    with ``asyncio.to_thread``, each worker thread on its own session from
    ``session_factory``. An API key is used directly as the bearer
    token; username/password fall back to ``POST /v1/auth/login``.
    """

    def __init__(
        self,
        *,
        api_url: str,
        logger: LoggerPort,
        api_key: str | None = None,
        username: str | None = None,
        password: str | None = None,
        request_timeout: float = 30.0,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._logger = logger
        self._api_key = api_key
        self._username = username
        self._password = password
        self._request_timeout = request_timeout
        self._session_factory = session_factory
        self._local = threading.local()
        self._token: str | None = None

    async def authenticate(self) -> None:
        await asyncio.to_thread(self._login)

    async def submit(self, request: SubmissionRequest) -> AnalysisHandle:
        data = await asyncio.to_thread(self._request, "POST", "/v1/analyses", request.to_payload())
        try:
            return AnalysisHandle(uuid=data["uuid"], status=parse_status(data.get("status")))
        except (KeyError, TypeError) as e:
            raise ServiceError(f"Malformed submission response: {e}") from e

    async def check_status(self, uuid: str) -> AnalysisStatus:
        data = await asyncio.to_thread(self._request, "GET", f"/v1/analyses/{uuid}")
        if not isinstance(data, dict):
            raise ServiceError("Malformed status response")
        return parse_status(data.get("status"))

    async def fetch_findings(self, uuid: str) -> list[IssueReport]:
        data = await asyncio.to_thread(self._request, "GET", f"/v1/analyses/{uuid}/issues")
        if not isinstance(data, list):
            raise ServiceError("Malformed issues response")
        return [parse_report(report) for report in data]

    async def list_recent(self) -> list[RecentAnalysis]:
        data = await asyncio.to_thread(self._request, "GET", "/v1/analyses")
        try:
            return [parse_recent(item) for item in data["analyses"]]
        except (KeyError, TypeError) as e:
            raise ServiceError(f"Malformed analyses list: {e}") from e

    def _login(self) -> None:
        if self._api_key:
            self._token = self._api_key
        elif self._username and self._password:
            data = self._send(
                "POST",
                "/v1/auth/login",
                {"username": self._username, "password": self._password},
                authorized=False,
            )
            try:
                self._token = data["jwtTokens"]["access"]
            except (KeyError, TypeError) as e:
                raise AuthenticationError("Login response did not contain an access token.") from e
        else:
            raise AuthenticationError(
                "No authentication credentials could be found. "
                "Set MYTHX_VERIFY_SERVICE__API_KEY to authenticate with MythX."
            )
        self._logger.info("authenticated", type="authenticated", api_url=self._api_url)

    def _request(self, method: str, path: str, body: Any = None) -> Any:
        if self._token is None:
            raise AuthenticationError("Not authenticated. Call authenticate() first.")
        return self._send(method, path, body, authorized=True)

    def _session(self) -> requests.Session:
        # requests.Session is not documented as thread-safe; one per to_thread worker.
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = self._session_factory()
        return session

    def _send(self, method: str, path: str, body: Any, *, authorized: bool) -> Any:
        headers = {"Accept": "application/json"}
        if authorized:
            headers["Authorization"] = f"Bearer {self._token}"

        self._logger.debug("http_request", type="http_request", method=method, path=path)
        try:
            resp = self._session().request(
                method,
                self._api_url + path,
                json=body,
                headers=headers,
                timeout=self._request_timeout,
            )
        except requests.RequestException as e:
            raise ServiceError(f"{method} {path} failed: {e}") from e

        if resp.status_code in (401, 403):
            raise AuthenticationError(f"MythX rejected the credentials ({resp.status_code}).")
        if not resp.ok:
            raise ServiceError(f"{method} {path} returned {resp.status_code}: {resp.text}", resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise ServiceError(f"{method} {path} returned invalid JSON") from e
