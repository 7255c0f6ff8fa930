"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the extraction pipeline.
These protocols enforce structural typing using Python's `typing.Protocol` so that
stages can be swapped (e.g. an external `sort` binary vs. an in-process sorter)
without touching the orchestration code.

Key Components:
---------------
- HashAlgorithm: Standardized interface for incremental hash functions.
- LineFilter: Filters one compressed source into one plain filtered file.
- Sorter: Narrow capability that sorts one file into another.
- FilterStage / SortStage / MergeStage: Interfaces for the three pipeline stages.
- Pipeline: Interface for the engine coordinating all stages.
"""

from typing import Protocol, List, Optional, Callable, Tuple
from promoloader.core.models import (
    FilterJob,
    FilterResult,
    MergeResult,
    PipelineParams,
    PipelineStats,
)


# ===== Interfaces =====

class HashAlgorithm(Protocol):
    """
    Interface for incremental hash algorithms.

    `new()` returns a state object exposing `update(bytes)` and `hexdigest()`.
    """

    @staticmethod
    def new():
        ...


class LineFilter(Protocol):
    """
    Interface for filtering one gzip source by line length.
    Returns (total_lines, kept_lines).
    """
    def filter_file(
        self,
        input_path: str,
        output_path: str,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[int, int]:
        ...


class Sorter(Protocol):
    """
    Interface for the sorting collaborator.

    Writes the lines of `input_path` to `output_path` in ascending order.
    Raises ExternalToolError or StageIOError on failure.
    """
    def sort(self, input_path: str, output_path: str) -> None:
        ...


# =============================
# Stage Interfaces
# =============================

class FilterStage(Protocol):
    """
    Interface for the first stage: filter every source with a bounded worker pool.
    """
    def process(
        self,
        jobs: List[FilterJob],
        parallelism: int,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[FilterResult]:
        ...


class SortStage(Protocol):
    """
    Interface for the second stage: sort every filtered file, one at a time.
    """
    def process(
        self,
        raw_paths: List[str],
        sorted_paths: List[str],
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[str]:
        ...


class MergeStage(Protocol):
    """
    Interface for the last stage: k-way merge with multiplicity filtering.
    """
    def process(
        self,
        sorted_paths: List[str],
        output_path: str,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> MergeResult:
        ...


class Pipeline(Protocol):
    """
    Interface for the engine running filter → sort → merge.
    """
    def run(
        self,
        params: PipelineParams,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> PipelineStats:
        ...
