"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/artifact_service.py
Layout of intermediate artifacts inside the temporary directory.

    <tmp_dir>/file_<n>.raw     filtered lines of source n (source order)
    <tmp_dir>/file_<n>.sorted  the same lines, sorted

n runs from 1 to N in input order. Artifacts are never deleted by the pipeline.
"""
import os
import re
from pathlib import Path
from typing import List

from promoloader.core.errors import StageIOError
from promoloader.core.models import FilterJob, PipelineConfig

_ARTIFACT_NAME = re.compile(r"^file_(\d+)\.(raw|sorted)$")


class ArtifactService:
    """
    Path helpers for the temporary directory.
    """

    @staticmethod
    def ensure_dir(tmp_dir: str) -> Path:
        """Creates tmp_dir (and parents) if it does not exist."""
        path = Path(tmp_dir)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StageIOError(f"create tmp dir: {e}") from e
        return path

    @staticmethod
    def build_filter_jobs(files: List[str], tmp_dir: str) -> List[FilterJob]:
        """One job per source; the output name is derived from the input position."""
        return [
            FilterJob(
                index=i,
                input_path=src,
                output_path=os.path.join(tmp_dir, PipelineConfig.raw_name(i)),
            )
            for i, src in enumerate(files, 1)
        ]

    @staticmethod
    def sorted_paths(tmp_dir: str, count: int) -> List[str]:
        return [os.path.join(tmp_dir, PipelineConfig.sorted_name(i)) for i in range(1, count + 1)]

    @staticmethod
    def list_artifacts(tmp_dir: str) -> List[str]:
        """
        Returns the artifact paths found in tmp_dir, ordered by index then kind (raw before sorted).
        Unrelated files are ignored.
        """
        root = Path(tmp_dir)
        if not root.is_dir():
            return []

        found = []
        for entry in root.iterdir():
            match = _ARTIFACT_NAME.match(entry.name)
            if match and entry.is_file():
                kind_order = 0 if match.group(2) == "raw" else 1
                found.append((int(match.group(1)), kind_order, str(entry)))

        found.sort()
        return [path for _, _, path in found]
