"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy for the extraction pipeline.

Every error is fatal for the run: nothing is skipped and nothing is retried.
"""
from typing import List, Optional


class PromoLoaderError(RuntimeError):
    """
    Base class for all pipeline errors.
    Callers prepend context while the error travels up (e.g. "filter stage: filter a.gz: ...").
    """

    def __init__(self, *args):
        super().__init__(*args)
        self.context: List[str] = []

    def add_context(self, prefix: str) -> "PromoLoaderError":
        self.context.insert(0, prefix)
        return self

    def __str__(self) -> str:
        return ": ".join(self.context + [super().__str__()])


class ArgumentError(PromoLoaderError, ValueError):
    """Malformed or missing input parameters."""


class StageIOError(PromoLoaderError):
    """Open, create, write, decompression or scan failure."""


class LineTooLongError(StageIOError):
    """A single source line does not fit into the line buffer."""

    def __init__(self, path: str, limit: int, line_number: int):
        self.path = path
        self.limit = limit
        self.line_number = line_number
        super().__init__(
            f"scan: line {line_number} of {path} exceeds {limit} bytes (line too long)"
        )


class ExternalToolError(PromoLoaderError):
    """The external sorter could not be launched or exited with a non-zero code."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        self.returncode = returncode
        super().__init__(message)


class CancellationError(PromoLoaderError):
    """The deadline expired before the next filter job was claimed."""
