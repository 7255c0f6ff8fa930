"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

pipeline.py
Implements the staged extraction pipeline:
    filter (parallel) → sort (sequential) → merge (k-way, multiplicity >= 2)

Each stage starts only after the previous one finished successfully. The first error
aborts the run; intermediate files stay in the temporary directory.
"""
import time
import logging
from typing import Dict, List, Optional, Callable

from promoloader.core.errors import PromoLoaderError
from promoloader.core.hasher import FileDigestImpl
from promoloader.core.interfaces import Pipeline, FilterStage, SortStage, MergeStage
from promoloader.core.merger import MergeStageImpl
from promoloader.core.models import PipelineParams, PipelineStats, Stage
from promoloader.core.orchestrator import FilterStageImpl
from promoloader.core.sorter import ExternalSorter, SortStageImpl
from promoloader.services.artifact_service import ArtifactService

logger = logging.getLogger(__name__)


# =============================
# Main Pipeline Class
# =============================
class PromoPipelineImpl(Pipeline):
    """
    Runs the three stages in order and collects statistics.
    Stages are injectable; the sort stage defaults to the binary named in the params.
    """
    def __init__(
        self,
        filter_stage: FilterStage = None,
        sort_stage: SortStage = None,
        merge_stage: MergeStage = None,
        digest: FileDigestImpl = None,
        listeners: Optional[List[Callable[[str, Dict], None]]] = None
    ):
        self.filter_stage = filter_stage or FilterStageImpl()
        self.sort_stage = sort_stage
        self.merge_stage = merge_stage or MergeStageImpl()
        self.digest = digest or FileDigestImpl()
        self.listeners = list(listeners or [])

    def run(
        self,
        params: PipelineParams,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> PipelineStats:
        """
        Main extraction pipeline.
        Args:
            params: Validated pipeline parameters
            stopped_flag: Returns True once the run should stop; only checked between filter jobs.
            progress_callback: (stage, current, total) progress reports.
        Returns:
            PipelineStats
        Raises:
            PromoLoaderError subclasses, prefixed with the failing stage name
        """
        stats = PipelineStats()
        for listener in self.listeners:
            stats.add_listener(listener)
        total_start_time = time.time()

        ArtifactService.ensure_dir(params.tmp_dir)

        # 1) Filter each gzip file into tmp raw files
        jobs = ArtifactService.build_filter_jobs(params.files, params.tmp_dir)
        stats.notify_stage_start(Stage.FILTER.value)
        start_time = time.time()
        try:
            results = self.filter_stage.process(
                jobs,
                params.parallelism,
                stopped_flag=stopped_flag,
                progress_callback=progress_callback
            )
        except PromoLoaderError as e:
            raise e.add_context("filter stage")
        stats.update_stage(
            Stage.FILTER.value,
            items=sum(r.kept_lines for r in results),
            files_processed=len(results),
            duration=time.time() - start_time
        )

        # 2) Sort each raw file, one at a time
        raw_paths = [job.output_path for job in jobs]
        sorted_paths = ArtifactService.sorted_paths(params.tmp_dir, len(jobs))
        sort_stage = self.sort_stage or SortStageImpl(ExternalSorter(params.sort_bin, params.sort_env))
        stats.notify_stage_start(Stage.SORT.value)
        start_time = time.time()
        try:
            sort_stage.process(raw_paths, sorted_paths, progress_callback=progress_callback)
        except PromoLoaderError as e:
            raise e.add_context("sort stage")
        stats.update_stage(
            Stage.SORT.value,
            items=len(sorted_paths),
            files_processed=len(sorted_paths),
            duration=time.time() - start_time
        )

        # 3) Merge sorted files, keeping codes that appear in >= 2 files
        stats.notify_stage_start(Stage.MERGE.value)
        start_time = time.time()
        try:
            merge_result = self.merge_stage.process(
                sorted_paths,
                params.output,
                progress_callback=progress_callback
            )
        except PromoLoaderError as e:
            raise e.add_context("merge stage")
        stats.update_stage(
            Stage.MERGE.value,
            items=merge_result.rounds,
            files_processed=len(sorted_paths),
            duration=time.time() - start_time
        )

        stats.valid_codes = merge_result.valid_codes
        stats.merge_rounds = merge_result.rounds
        stats.output_path = params.output
        stats.output_digest = self.digest.hexdigest(params.output)
        stats.total_time = time.time() - total_start_time

        logger.info(f"Pipeline finished: {stats.valid_codes} valid codes in {stats.total_time:.2f}s")
        return stats

    @staticmethod
    def artifacts(params: PipelineParams) -> List[str]:
        """Intermediate files currently present for this run's tmp_dir."""
        return ArtifactService.list_artifacts(params.tmp_dir)
