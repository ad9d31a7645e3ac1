from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs
from pydantic import BaseModel, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.domain.models import Mode, PollTiming, RunOptions


APP_NAME = "mythx_verify"


def _default_home() -> Path:
    """Get default home directory using platformdirs."""
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_cache_dir)


# Sections are plain models: only AppConfig reads the environment, so
# unprefixed variables such as HOME never leak into a section.
class DirectoryConfig(BaseModel):
    """Directory configuration with computed paths."""

    home: Path = Field(
        default_factory=_default_home,
        description="Base directory for all mythx_verify data",
    )

    @computed_field
    @property
    def logs_dir(self) -> Path:
        """Logs directory for per-run JSONL logs."""
        path = self.home / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path


class ServiceConfig(BaseModel):
    """MythX API connection and credentials."""

    api_key: str | None = Field(default=None, description="MythX API key (used as bearer token)")
    username: str | None = Field(default=None, description="MythX username (legacy login)")
    password: str | None = Field(default=None, description="MythX password (legacy login)")
    api_url: str = Field(default="https://api.mythx.io", description="MythX API base URL")
    dashboard_url: str = Field(
        default="https://dashboard.mythx.io/#/console/analyses/",
        description="Prefix for links to submitted analyses",
    )
    request_timeout: float = Field(default=30.0, description="Per-request HTTP timeout in seconds")


class AnalysisConfig(BaseModel):
    """Defaults for verification runs; CLI options override them."""

    mode: str = Field(default=Mode.QUICK.value, description="Analysis mode (quick, standard, deep)")
    output_format: str = Field(default="stylish", description="Report format")
    limit: int = Field(default=10, description="Maximum number of concurrent analyses")
    timeout: float | None = Field(default=None, description="Seconds to wait for each analysis (overrides mode default)")
    no_cache_lookup: bool = Field(default=False, description="Deactivate MythX cache lookups")
    tool_name: str = Field(default="mythx-verify", description="Client tool name reported to MythX")
    ignore: list[str] = Field(default_factory=list, description="Contract names never submitted")


class TimingEntry(BaseModel):
    initial_delay: float
    timeout: float


class TimingConfig(BaseModel):
    """Per-mode poll timings in seconds: (initial delay, overall timeout)."""

    quick: TimingEntry = TimingEntry(initial_delay=20, timeout=180)
    standard: TimingEntry = TimingEntry(initial_delay=900, timeout=1800)
    full: TimingEntry = TimingEntry(initial_delay=900, timeout=1800)
    deep: TimingEntry = TimingEntry(initial_delay=2700, timeout=5400)

    def as_timings(self) -> dict[str, PollTiming]:
        return timings_from_dict(self.model_dump())


def timings_from_dict(raw: dict[str, dict[str, float]]) -> dict[str, PollTiming]:
    """Convert the dumped timings section into ``{mode: PollTiming}``."""
    return {
        mode: PollTiming(initial_delay=entry["initial_delay"], timeout=entry["timeout"])
        for mode, entry in raw.items()
    }


class LoggingConfig(BaseModel):
    logger_name: str = Field(default=APP_NAME)
    level: str = Field(default="INFO")
    console_output: bool = Field(default=False)


class RuntimeConfig(BaseModel):
    run_id: str | None = Field(default=None, description="Run identifier naming the JSONL log file")


class AppConfig(BaseSettings):
    """Root application configuration.

    All configuration is loaded from environment variables with MYTHX_VERIFY_ prefix.
    Use double underscore for nested config: MYTHX_VERIFY_SERVICE__API_KEY

    Example env vars:
        # Required
        export MYTHX_VERIFY_SERVICE__API_KEY=eyJhbGciOi...

        # Optional (with defaults)
        export MYTHX_VERIFY_SERVICE__API_URL=https://api.mythx.io
        export MYTHX_VERIFY_ANALYSIS__MODE=standard
        export MYTHX_VERIFY_ANALYSIS__LIMIT=4
        export MYTHX_VERIFY_ANALYSIS__IGNORE='["Migrations"]'
        export MYTHX_VERIFY_TIMINGS__QUICK__INITIAL_DELAY=10
        export MYTHX_VERIFY_TIMINGS__QUICK__TIMEOUT=120
        export MYTHX_VERIFY_DIRECTORIES__HOME=/custom/path
    """

    model_config = SettingsConfigDict(
        env_prefix="MYTHX_VERIFY_",
        env_nested_delimiter="__",
        frozen=True,
        extra="forbid",
    )

    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    timings: TimingConfig = Field(default_factory=TimingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)

    def run_options(self, **overrides: object) -> RunOptions:
        """Build RunOptions from the analysis section, applying non-None overrides."""
        values: dict[str, object] = {
            "mode": self.analysis.mode,
            "output_format": self.analysis.output_format,
            "no_cache_lookup": self.analysis.no_cache_lookup,
            "limit": self.analysis.limit,
            "timeout": self.analysis.timeout,
            "tool_name": self.analysis.tool_name,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return RunOptions(**values)  # type: ignore[arg-type]
