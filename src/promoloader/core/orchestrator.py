"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/orchestrator.py
Runs the filter stage over all sources with a bounded pool of worker threads.

WORKER CONTRACT
---------------
  • Workers pull jobs from one shared queue; every job is claimed exactly once
  • stopped_flag is consulted after claiming a job and before starting it;
    a file in progress is never interrupted
  • A worker that fails reports one error and stops claiming jobs; peers keep
    draining the queue
  • The error queue holds one slot per worker, so reporting never blocks
  • After all workers are joined the first reported error is raised
  • Files already written stay on disk whatever the outcome
"""

import queue
import threading
import time
import logging
from typing import List, Optional, Callable

from promoloader.core.errors import CancellationError, PromoLoaderError, StageIOError
from promoloader.core.filter import LineFilterImpl
from promoloader.core.interfaces import FilterStage, LineFilter
from promoloader.core.models import FilterJob, FilterResult, Stage

logger = logging.getLogger(__name__)


class FilterStageImpl(FilterStage):
    """
    Parallel filter orchestrator.
    Uses an injected LineFilter for flexibility and testability.
    """

    def __init__(self, line_filter: LineFilter = None):
        self.line_filter = line_filter or LineFilterImpl()

    def process(
        self,
        jobs: List[FilterJob],
        parallelism: int,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[FilterResult]:
        """
        Filters every job with `parallelism` workers.
        Returns results ordered by job index, or raises the first worker error.
        """
        if parallelism <= 0:
            parallelism = 1

        jobs_queue: "queue.Queue[FilterJob]" = queue.Queue()
        for job in jobs:
            jobs_queue.put(job)

        errors: "queue.Queue[PromoLoaderError]" = queue.Queue(maxsize=parallelism)
        results: List[FilterResult] = []
        lock = threading.Lock()
        finished = [0]

        def worker() -> None:
            while True:
                try:
                    job = jobs_queue.get_nowait()
                except queue.Empty:
                    return

                if stopped_flag and stopped_flag():
                    logger.warning(f"[FILTER] Deadline exceeded before {job.input_path}")
                    errors.put_nowait(CancellationError("context deadline exceeded"))
                    return

                start_time = time.time()
                try:
                    total, kept = self.line_filter.filter_file(
                        job.input_path, job.output_path, progress_callback=progress_callback
                    )
                except PromoLoaderError as e:
                    logger.error(f"[FILTER] {job.input_path} failed: {e}")
                    errors.put_nowait(e.add_context(f"filter {job.input_path}"))
                    return
                except Exception as e:
                    logger.exception(f"[FILTER] Unexpected error on {job.input_path}")
                    errors.put_nowait(StageIOError(f"filter {job.input_path}: {e}"))
                    return

                result = FilterResult(
                    job=job,
                    total_lines=total,
                    kept_lines=kept,
                    duration=time.time() - start_time,
                )
                with lock:
                    results.append(result)
                    finished[0] += 1
                    done = finished[0]
                if progress_callback:
                    progress_callback(Stage.FILTER.value, done, len(jobs))

        threads = [
            threading.Thread(target=worker, name=f"filter-worker-{i + 1}", daemon=True)
            for i in range(parallelism)
        ]
        logger.debug(f"Starting {len(threads)} filter workers for {len(jobs)} jobs")
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # First error by receive order wins
        if not errors.empty():
            raise errors.get_nowait()

        results.sort(key=lambda r: r.job.index)
        return results
