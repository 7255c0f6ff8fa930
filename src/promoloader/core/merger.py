"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/merger.py
K-way merge of sorted files with multiplicity filtering.

ROUND
-----
  1. min = smallest current line among open cursors (byte order)
  2. every open cursor holding min counts once and advances
  3. min is written once when the count is 2 or more

Only k lines are held in memory at a time. Output is ascending as long as every input is
sorted in byte order.

Counting is per cursor per round, not per distinct file. A code repeated inside one file is
consumed over several rounds: on its own it never reaches the threshold, and when two files
both repeat it, it is written once for every round in which both cursors still hold it.
"""
import time
import logging
from contextlib import ExitStack
from typing import List, Optional, Callable

from promoloader.core.errors import StageIOError
from promoloader.core.interfaces import MergeStage
from promoloader.core.models import MergeCursor, MergeResult, PipelineConfig, Stage

logger = logging.getLogger(__name__)


class MergeStageImpl(MergeStage):
    def __init__(self, min_occurrences: int = 2, progress_every: int = PipelineConfig.PROGRESS_EVERY):
        self.min_occurrences = min_occurrences
        self.progress_every = progress_every

    def process(
            self,
            sorted_paths: List[str],
            output_path: str,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> MergeResult:
        logger.info(f"[MERGE] Starting merge of {len(sorted_paths)} files")
        start_time = time.time()

        with ExitStack() as stack:
            cursors = []
            for path in sorted_paths:
                try:
                    stream = stack.enter_context(open(path, "rb"))
                    cursors.append(MergeCursor(stream=stream, path=path))
                except OSError as e:
                    raise StageIOError(f"open {path}: {e}") from e

            try:
                out = stack.enter_context(
                    open(output_path, 'wb', buffering=PipelineConfig.WRITE_BUFFER_BYTES)
                )
            except OSError as e:
                raise StageIOError(f"create output: {e}") from e

            try:
                result = self._merge(cursors, out, progress_callback)
                stack.close()  # flush the writer inside the try
            except OSError as e:
                raise StageIOError(f"write: {e}") from e

        logger.info(
            f"[MERGE] Completed merge → valid codes: {result.valid_codes} "
            f"({time.time() - start_time:.2f}s)"
        )
        return result

    def _merge(self, cursors: List[MergeCursor], out,
               progress_callback: Optional[Callable[[str, int, object], None]]) -> MergeResult:
        result = MergeResult()
        open_cursors = [c for c in cursors if not c.exhausted]

        while open_cursors:
            smallest = min(c.current for c in open_cursors)

            count = 0
            for cursor in open_cursors:
                if cursor.current == smallest:
                    count += 1
                    cursor.advance()

            result.rounds += 1
            if result.rounds % self.progress_every == 0:
                logger.info(f"[MERGE] processed {result.rounds} merge steps...")
                if progress_callback:
                    progress_callback(Stage.MERGE.value, result.rounds, None)

            if count >= self.min_occurrences:
                result.valid_codes += 1
                out.write(smallest + b"\n")

            open_cursors = [c for c in open_cursors if not c.exhausted]

        return result

