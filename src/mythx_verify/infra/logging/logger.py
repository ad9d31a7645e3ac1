from __future__ import annotations

import logging
from pathlib import Path

from dependency_injector.resources import Resource

from .formatters import HumanReadableFormatter, JSONFormatter


def _run_log_handler(logs_dir: Path, run_id: str, level: int) -> logging.Handler:
    """Append-mode JSONL handler for ``{logs_dir}/{run_id}.jsonl``."""
    logs_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(logs_dir / f"{run_id}.jsonl", encoding="utf-8", mode="a")
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(HumanReadableFormatter())
    return handler


class RunLogger(Resource):
    """Structured logger for verification runs.

    Messages are event names (``unit_submitted``, ``poll_status``, ...) with
    structured fields. Writes a JSONL file per run when ``run_id`` is given
    and optionally mirrors events to the console.
    """

    def init(
        self,
        *,
        run_id: str | None = None,
        logs_dir: Path,
        logger_name: str = "mythx_verify",
        console_output: bool = False,
        level: str = "INFO",
    ) -> "RunLogger":
        """Configure handlers for this run.

        Args:
            run_id: Run identifier; when set, logs go to ``{logs_dir}/{run_id}.jsonl``
            logs_dir: Directory to store log files
            logger_name: Logger name
            console_output: Whether to enable console output
            level: Logging level (DEBUG, INFO, WARNING, ERROR)

        Returns:
            Self for dependency_injector Resource pattern
        """
        numeric = getattr(logging, level.upper())
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(numeric)
        self._logger.propagate = False

        self._logger.handlers.clear()
        self._handlers: list[logging.Handler] = []

        if run_id:
            file_handler = _run_log_handler(logs_dir, run_id, numeric)
            self._logger.addHandler(file_handler)
            self._handlers.append(file_handler)

        if console_output:
            console_handler = _console_handler(numeric)
            self._logger.addHandler(console_handler)
            self._handlers.append(console_handler)

        return self

    def shutdown(self, resource: "RunLogger") -> None:
        """Flush and close handlers so log files are released."""
        for handler in self._handlers:
            handler.flush()
            handler.close()
        self._logger.handlers.clear()

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(message, extra=kwargs or None)

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(message, extra=kwargs or None)

    def warning(self, message: str, **kwargs) -> None:
        self._logger.warning(message, extra=kwargs or None)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        self._logger.error(message, extra=kwargs or None, exc_info=exc_info)

    def exception(self, message: str, **kwargs) -> None:
        self._logger.exception(message, extra=kwargs or None)
