"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and configuration for the promo code extraction pipeline.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union, Callable, BinaryIO
from enum import Enum
import logging
import time

from promoloader.core.errors import ArgumentError
from promoloader.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


# =============================
# Enums
# =============================

class Stage(str, Enum):
    FILTER = "filter"
    SORT = "sort"
    MERGE = "merge"

    @classmethod
    def get_all(cls):
        return [cls.FILTER, cls.SORT, cls.MERGE]


# =============================
# Configuration
# =============================

class PipelineConfig:
    MIN_LENGTH = 8  # Shortest valid code, in bytes
    MAX_LENGTH = 10  # Longest valid code, in bytes
    MAX_LINE_BYTES = 1 << 20  # Line content + terminator must fit
    WRITE_BUFFER_BYTES = 1 << 20
    PROGRESS_EVERY = 1_000_000  # Lines scanned / merge rounds between progress reports

    DEFAULT_PARALLELISM = 3
    DEFAULT_TMP_DIR = "./tmp/promo"
    DEFAULT_OUTPUT = "./valid_promo_codes.txt"
    DEFAULT_SORT_BIN = "sort"

    @staticmethod
    def raw_name(index: int) -> str:
        return f"file_{index}.raw"

    @staticmethod
    def sorted_name(index: int) -> str:
        return f"file_{index}.sorted"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FilterJob:
    """One source file paired with the filtered file it produces."""
    index: int  # 1-based position in the input list
    input_path: str
    output_path: str


@dataclass
class FilterResult:
    job: FilterJob
    total_lines: int = 0
    kept_lines: int = 0
    duration: float = 0.0

    def __repr__(self):
        return f"<FilterResult file={self.job.input_path}, total={self.total_lines}, kept={self.kept_lines}>"


@dataclass
class MergeResult:
    rounds: int = 0
    valid_codes: int = 0


@dataclass
class MergeCursor:
    """
    Read pointer over one sorted file.
    Primed with the first line on creation; exhausted once the file has no more lines.
    """
    stream: BinaryIO
    path: str = ""
    current: bytes = b""
    exhausted: bool = False

    def __post_init__(self):
        self.advance()

    def advance(self) -> None:
        """Moves to the next line, or marks the cursor exhausted at end of file."""
        line = self.stream.readline()
        if not line:
            self.current = b""
            self.exhausted = True
            return
        if line.endswith(b"\n"):
            line = line[:-1]
        if line.endswith(b"\r"):
            line = line[:-1]
        self.current = line

    def __repr__(self):
        return f"<MergeCursor path={self.path}, current={self.current!r}, exhausted={self.exhausted}>"


class Deadline:
    """
    Monotonic deadline for the whole run.
    A non-positive timeout never expires. `expired` is used as a stopped_flag.
    """

    def __init__(self, timeout_seconds: float = 0.0, clock: Callable[[], float] = time.monotonic):
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._deadline = clock() + timeout_seconds if timeout_seconds > 0 else None

    def expired(self) -> bool:
        if self._deadline is None:
            return False
        return self._clock() >= self._deadline

    def __repr__(self):
        return f"<Deadline timeout={self.timeout_seconds}s>"


@dataclass
class PipelineStats:
    """
    Statistics collected during one pipeline run.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self.valid_codes: int = 0
        self.merge_rounds: int = 0
        self.output_path: Optional[str] = None
        self.output_digest: Optional[str] = None
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            items: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "items": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["items"] += items
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            try:
                listener(stage_name, self.stage_stats[stage_name])
            except Exception:
                logger.exception("Error in stats event handler")

    def notify_stage_start(self, stage_name: str):
        """Notifies listeners that a new stage has started."""
        for listener in self._listeners:
            try:
                listener(stage_name, {"status": "started"})
            except Exception:
                logger.exception("Error in stats event handler")

    def print_summary(self) -> str:
        labels = {
            Stage.FILTER.value: "🧹 Filter (kept lines)",
            Stage.SORT.value: "🔤 Sort (files)",
            Stage.MERGE.value: "🔀 Merge (rounds)",
        }

        lines = [
            "📊 Extraction Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: ITEMS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage, stage.title())
            lines.append(f"{label}: {data['items']} / {data['files']} / {data['time']:.3f}s")

        lines.append(f"\nValid codes: {self.valid_codes}")
        if self.output_digest:
            lines.append(f"Output xxh64: {self.output_digest}")

        return "\n".join(lines)


"""
DTO for pipeline parameters with built-in validation.
Interface-agnostic: used by the CLI and by library callers.
"""

@dataclass
class PipelineParams:
    """Parameters for one extraction run with validation."""
    files: List[str]
    tmp_dir: str = PipelineConfig.DEFAULT_TMP_DIR
    output: str = PipelineConfig.DEFAULT_OUTPUT
    sort_bin: str = PipelineConfig.DEFAULT_SORT_BIN
    parallelism: int = PipelineConfig.DEFAULT_PARALLELISM
    timeout_seconds: float = 0.0
    sort_env: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        self.files = [f.strip() for f in self.files if f and f.strip()]
        if not self.files:
            raise ArgumentError("no input files provided")

        if not self.tmp_dir:
            raise ArgumentError("tmpDir is empty")

        if not self.output:
            raise ArgumentError("output path is empty")

        if not self.sort_bin:
            self.sort_bin = PipelineConfig.DEFAULT_SORT_BIN

        if self.parallelism <= 0:
            self.parallelism = 1

        # A negative timeout disables the deadline, like 0s
        if self.timeout_seconds < 0:
            self.timeout_seconds = 0.0

    def build_deadline(self) -> Deadline:
        return Deadline(self.timeout_seconds)

    @staticmethod
    def from_human_readable(
            files_str: str,
            tmp_dir: str = PipelineConfig.DEFAULT_TMP_DIR,
            output: str = PipelineConfig.DEFAULT_OUTPUT,
            sort_bin: str = PipelineConfig.DEFAULT_SORT_BIN,
            parallelism: int = PipelineConfig.DEFAULT_PARALLELISM,
            timeout_str: str = "0s",
    ) -> 'PipelineParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing.
        """
        files = [item.strip() for item in files_str.split(",") if item.strip()] if files_str else []
        try:
            timeout = ConvertUtils.duration_to_seconds(timeout_str)
        except ValueError as e:
            raise ArgumentError(f"invalid timeout: {e}") from e

        return PipelineParams(
            files=files,
            tmp_dir=tmp_dir,
            output=output,
            sort_bin=sort_bin,
            parallelism=parallelism,
            timeout_seconds=timeout,
        )
