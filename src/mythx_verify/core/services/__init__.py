from __future__ import annotations

from .compilation_splitter import CompilationSplitter, SplitResult
from .compilation_store import CompilationSnapshot, CompilationStore
from .function_hashes import build_index
from .poll_scheduler import PollScheduler
from .report_normalizer import ReportNormalizer
from .analysis_orchestrator import AnalysisOrchestrator, select_timing, validate_options

__all__ = [
    "CompilationSplitter",
    "SplitResult",
    "CompilationSnapshot",
    "CompilationStore",
    "build_index",
    "PollScheduler",
    "ReportNormalizer",
    "AnalysisOrchestrator",
    "select_timing",
    "validate_options",
]
