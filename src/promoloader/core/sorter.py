"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Sorting collaborators and the sequential sort stage.

ExternalSorter delegates to a `sort`-compatible binary: one path argument, sorted lines
on stdout. Its collation (byte order vs. locale) is whatever the binary uses; the merge
stage compares bytes, so pass env={"LC_ALL": "C"} when the locale is not already C.
NativeSorter sorts one file in-process in byte order.
"""
import os
import subprocess
import time
import logging
from typing import Dict, List, Optional, Callable

from promoloader.core.errors import ExternalToolError, StageIOError
from promoloader.core.interfaces import Sorter, SortStage
from promoloader.core.models import PipelineConfig, Stage

logger = logging.getLogger(__name__)


class ExternalSorter(Sorter):
    """
    Runs `<sort_bin> <input_path>` with stdout redirected into output_path.
    """

    def __init__(self, sort_bin: str = PipelineConfig.DEFAULT_SORT_BIN, env: Optional[Dict[str, str]] = None):
        self.sort_bin = sort_bin or PipelineConfig.DEFAULT_SORT_BIN
        self.env = dict(env) if env else {}

    def sort(self, input_path: str, output_path: str) -> None:
        try:
            out_file = open(output_path, 'wb')
        except OSError as e:
            raise StageIOError(f"create sort output: {e}") from e

        env = None
        if self.env:
            env = os.environ.copy()
            env.update(self.env)

        with out_file:
            try:
                completed = subprocess.run(
                    [self.sort_bin, input_path],
                    stdout=out_file,
                    stderr=None,  # inherit the process stderr
                    env=env,
                )
            except OSError as e:
                raise ExternalToolError(f"sort failed: {e}") from e

        if completed.returncode != 0:
            raise ExternalToolError(
                f"sort failed: {self.sort_bin} exited with status {completed.returncode}",
                returncode=completed.returncode,
            )

    def __repr__(self):
        return f"<ExternalSorter bin={self.sort_bin}>"


class NativeSorter(Sorter):
    """
    Sorts one file in memory by byte order.
    Suitable when filtered files fit in memory or no sort binary is available.
    """

    def sort(self, input_path: str, output_path: str) -> None:
        try:
            with open(input_path, 'rb') as f:
                lines = f.read().split(b"\n")
        except OSError as e:
            raise StageIOError(f"open sort input: {e}") from e

        # Only \n terminates a line; a trailing terminator leaves one empty item
        if lines[-1] == b"":
            lines.pop()
        lines.sort()

        try:
            with open(output_path, 'wb', buffering=PipelineConfig.WRITE_BUFFER_BYTES) as out:
                for line in lines:
                    out.write(line + b"\n")
        except OSError as e:
            raise StageIOError(f"create sort output: {e}") from e


class SortStageImpl(SortStage):
    """
    Sorts filtered files one at a time, in input order.
    The first failure stops the stage.
    """

    def __init__(self, sorter: Sorter = None):
        self.sorter = sorter or ExternalSorter()

    def process(
            self,
            raw_paths: List[str],
            sorted_paths: List[str],
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[str]:
        if len(raw_paths) != len(sorted_paths):
            raise ValueError("raw_paths and sorted_paths must have the same length")

        total = len(raw_paths)
        for processed, (raw, sorted_path) in enumerate(zip(raw_paths, sorted_paths), 1):
            logger.info(f"[SORT] Sorting {os.path.basename(raw)} → {os.path.basename(sorted_path)}")
            start_time = time.time()

            self.sorter.sort(raw, sorted_path)

            logger.info(
                f"[SORT] Done sorting {os.path.basename(raw)} ({time.time() - start_time:.2f}s)"
            )
            if progress_callback:
                progress_callback(Stage.SORT.value, processed, total)

        return list(sorted_paths)
