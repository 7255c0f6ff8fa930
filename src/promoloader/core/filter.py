"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/filter.py
Streams one gzip-compressed source and keeps only lines of valid code length.
Features:
- Never holds more than one line in memory (bounded by a 1 MiB line buffer)
- Preserves source order in the filtered file
- Writes through a 1 MiB buffered writer
- Reports progress every million scanned lines
"""

import gzip
import os
import time
import zlib
import logging
from typing import Optional, Callable, Tuple

logger = logging.getLogger(__name__)

# Local imports
from promoloader.core.errors import StageIOError, LineTooLongError
from promoloader.core.interfaces import LineFilter
from promoloader.core.models import PipelineConfig, Stage


class LineFilterImpl(LineFilter):
    """
    Filters a newline-delimited gzip source by line length.

    Attributes:
        min_length: Shortest line kept, in bytes (inclusive)
        max_length: Longest line kept, in bytes (inclusive)
        max_line_bytes: Line buffer ceiling; longer lines abort the file
    """

    def __init__(
        self,
        min_length: int = PipelineConfig.MIN_LENGTH,
        max_length: int = PipelineConfig.MAX_LENGTH,
        max_line_bytes: int = PipelineConfig.MAX_LINE_BYTES,
        progress_every: int = PipelineConfig.PROGRESS_EVERY
    ):
        self.min_length = min_length
        self.max_length = max_length
        self.max_line_bytes = max_line_bytes
        self.progress_every = progress_every

    def filter_file(self,
                    input_path: str,
                    output_path: str,
                    progress_callback: Optional[Callable[[str, int, object], None]] = None) -> Tuple[int, int]:
        """
        Reads a .gz file, keeps lines whose length is in [min_length, max_length]
        and writes them, newline-terminated, to output_path.
        Returns (total_lines, kept_lines).
        Raises StageIOError on any open/decompress/scan/write failure.
        """
        logger.info(f"[FILTER] Start processing {input_path}")
        start_time = time.time()

        try:
            source = open(input_path, 'rb')
        except OSError as e:
            raise StageIOError(f"open input: {e}") from e

        with source, gzip.GzipFile(fileobj=source, mode='rb') as gz:
            if os.fstat(source.fileno()).st_size == 0:
                raise StageIOError("gzip reader: EOF (empty input)")

            # Header is validated before the output file exists
            try:
                gz.peek(1)
            except (OSError, EOFError, zlib.error) as e:
                raise StageIOError(f"gzip reader: {e}") from e

            try:
                parent = os.path.dirname(output_path)
                if parent:
                    os.makedirs(parent, exist_ok=True)
            except OSError as e:
                raise StageIOError(f"mkdir: {e}") from e

            try:
                sink = open(output_path, 'wb', buffering=PipelineConfig.WRITE_BUFFER_BYTES)
            except OSError as e:
                raise StageIOError(f"create output: {e}") from e

            try:
                with sink:
                    total, kept = self._copy_valid_lines(gz, sink, input_path, progress_callback)
            except OSError as e:
                # Buffered data is flushed when the sink closes
                raise StageIOError(f"write: {e}") from e

        elapsed_time = time.time() - start_time
        logger.info(
            f"[FILTER] Done {os.path.basename(input_path)} → total={total} kept={kept} "
            f"({elapsed_time:.2f}s)"
        )
        return total, kept

    def _copy_valid_lines(self, gz, sink, input_path: str,
                          progress_callback: Optional[Callable[[str, int, object], None]]) -> Tuple[int, int]:
        total = 0
        kept = 0
        name = os.path.basename(input_path)

        while True:
            try:
                line = gz.readline(self.max_line_bytes)
            except (OSError, EOFError, zlib.error) as e:
                # BadGzipFile is an OSError; a truncated stream raises EOFError
                raise StageIOError(f"scan: {e}") from e

            if not line:
                break

            if line.endswith(b"\n"):
                line = line[:-1]
            elif len(line) >= self.max_line_bytes:
                raise LineTooLongError(input_path, self.max_line_bytes, total + 1)
            if line.endswith(b"\r"):
                line = line[:-1]

            total += 1
            if total % self.progress_every == 0:
                logger.info(f"[FILTER] {name} processed {total} lines")
                if progress_callback:
                    progress_callback(Stage.FILTER.value, total, None)

            if self._length_passes(line):
                try:
                    sink.write(line + b"\n")
                except OSError as e:
                    raise StageIOError(f"write: {e}") from e
                kept += 1

        return total, kept

    def _length_passes(self, line: bytes) -> bool:
        """
        Check if line length is within configured limits.
        Args:
            line: Line content without terminator
        Returns:
            True if the line is a valid code candidate
        """
        return self.min_length <= len(line) <= self.max_length
