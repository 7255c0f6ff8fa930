"""
promoloader: finds promo codes present in at least two of N large gzip sources.

Core features:
- Parallel streaming filter of gzip sources by code length (8-10 bytes)
- Sorting delegated to an external `sort` binary (or an in-process sorter)
- K-way merge keeping codes seen by two or more sources, without loading data into memory
- CLI interface for batch/server usage
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("promoloader")
except Exception:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli

    try:
        with open("pyproject.toml", "rb") as f:
            __version__ = tomllib.load(f)["project"]["version"]
    except OSError:
        __version__ = "0.0.0"

# Public API: only what users should import directly
from promoloader.commands import ExtractionCommand
from promoloader.core import (
    PipelineParams, PipelineStats, PipelineConfig, Deadline, PromoLoaderError,
    ExternalSorter, NativeSorter)
from promoloader.utils.convert_utils import ConvertUtils
from promoloader.services import ArtifactService

__all__ = [
    "ExtractionCommand",
    "PipelineParams",
    "PipelineStats",
    "PipelineConfig",
    "Deadline",
    "PromoLoaderError",
    "ExternalSorter",
    "NativeSorter",
    "ConvertUtils",
    "ArtifactService",
    "__version__",
]
