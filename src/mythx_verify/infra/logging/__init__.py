from __future__ import annotations

from .logger import RunLogger
from .formatters import JSONFormatter, HumanReadableFormatter

__all__ = [
    "RunLogger",
    "JSONFormatter",
    "HumanReadableFormatter",
]
