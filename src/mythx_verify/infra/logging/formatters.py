from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter


# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(JsonFormatter):
    """JSON-lines formatter for run logs.

    Structured fields passed as logging ``extra`` are emitted at top level
    next to level, logger and message.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['message'] = record.getMessage()


class HumanReadableFormatter(logging.Formatter):
    """Console formatter: timestamp, level, event name and its fields."""

    def __init__(self) -> None:
        super().__init__(
            fmt='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {
            k: v for k, v in vars(record).items()
            if k not in _RECORD_ATTRS and k != "type"
        }
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line
