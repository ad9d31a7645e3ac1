from .app.main import analyze, status, report, list_analyses

__all__ = [
    "analyze",
    "status",
    "report",
    "list_analyses",
]

# stdlib logging defaults: attach NullHandler to prevent 'No handler' warnings
import logging
_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())
