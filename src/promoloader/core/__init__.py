"""
Core extraction engine: filter, sort, merge and pipeline orchestrator.

This package contains the performance-critical foundation of promoloader:
- LineFilterImpl: streams one gzip source and keeps lines of valid code length
- FilterStageImpl: runs the filter over all sources with a bounded worker pool
- ExternalSorter / NativeSorter + SortStageImpl: sequential sorting of filtered files
- MergeStageImpl: k-way merge emitting codes held by two or more cursors at once
- PromoPipelineImpl: filter → sort → merge with fail-fast error handling
- Models: jobs, cursors, params, statistics and configuration constants

All components are plain Python with blocking I/O: suitable for CLI and batch usage.
"""

from .errors import (
    PromoLoaderError, ArgumentError, StageIOError, LineTooLongError,
    ExternalToolError, CancellationError)
from .models import (
    Stage, PipelineConfig, FilterJob, FilterResult, MergeResult, MergeCursor,
    Deadline, PipelineStats, PipelineParams)
from .filter import LineFilterImpl
from .orchestrator import FilterStageImpl
from .sorter import ExternalSorter, NativeSorter, SortStageImpl
from .merger import MergeStageImpl
from .hasher import FileDigestImpl, XXHashAlgorithmImpl
from .pipeline import PromoPipelineImpl

__all__ = [
    "PromoLoaderError",
    "ArgumentError",
    "StageIOError",
    "LineTooLongError",
    "ExternalToolError",
    "CancellationError",
    "Stage",
    "PipelineConfig",
    "FilterJob",
    "FilterResult",
    "MergeResult",
    "MergeCursor",
    "Deadline",
    "PipelineStats",
    "PipelineParams",
    "LineFilterImpl",
    "FilterStageImpl",
    "ExternalSorter",
    "NativeSorter",
    "SortStageImpl",
    "MergeStageImpl",
    "FileDigestImpl",
    "XXHashAlgorithmImpl",
    "PromoPipelineImpl"
]
