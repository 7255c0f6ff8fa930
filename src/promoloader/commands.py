"""
Unified command orchestrator for promo code extraction.
This is the SINGLE source of truth for business logic: used by the CLI and library callers.
"""
from typing import List, Optional, Callable
from promoloader.core.models import PipelineParams, PipelineStats
from promoloader.core.pipeline import PromoPipelineImpl


class ExtractionCommand:
    """
    Orchestrates the entire extraction workflow:
    1. Build the run deadline from params.timeout_seconds
    2. Run filter → sort → merge
    3. Return statistics for the finished run

    Usage:
        params = PipelineParams.from_human_readable("a.gz,b.gz", timeout_str="30m")
        command = ExtractionCommand()
        stats = command.execute(
            params,
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )
    """

    def __init__(self, pipeline: PromoPipelineImpl = None):
        self._pipeline = pipeline or PromoPipelineImpl()
        self._params: Optional[PipelineParams] = None

    def execute(
            self,
            params: PipelineParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> PipelineStats:
        """
        Execute the extraction with given parameters.

        Args:
            params: Validated pipeline parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool, checked together with the params deadline

        Returns:
            PipelineStats of the finished run

        Raises:
            PromoLoaderError: If any stage fails (the run is aborted)
        """
        self._params = params
        deadline = params.build_deadline()

        def should_stop() -> bool:
            if deadline.expired():
                return True
            return bool(stopped_flag and stopped_flag())

        return self._pipeline.run(
            params,
            stopped_flag=should_stop,
            progress_callback=progress_callback
        )

    def get_artifacts(self) -> List[str]:
        """Intermediate files left by the last execution."""
        if self._params is None:
            return []
        return self._pipeline.artifacts(self._params)
