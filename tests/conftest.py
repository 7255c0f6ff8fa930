"""
Shared fixtures for extraction pipeline tests.
Creates isolated temporary directories with controlled gzip sources and sorted files.
"""
import gzip
import pytest
import tempfile
from pathlib import Path
from typing import Callable, Iterable
import sys

# Add src/ to sys.path so 'promoloader' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_gz(temp_dir) -> Callable[..., Path]:
    """
    Factory writing a gzip source with one line per item.
    Items may be str or bytes; a trailing newline is added to every line.
    """
    def _make(name: str, lines: Iterable, newline: bytes = b"\n") -> Path:
        path = temp_dir / name
        payload = b"".join(
            (line.encode() if isinstance(line, str) else line) + newline
            for line in lines
        )
        with gzip.open(path, "wb") as f:
            f.write(payload)
        return path
    return _make


@pytest.fixture
def make_sorted(temp_dir) -> Callable[..., Path]:
    """Factory writing a plain file with the given lines, as the sort stage would."""
    def _make(name: str, lines: Iterable[str]) -> Path:
        path = temp_dir / name
        path.write_bytes(b"".join(line.encode() + b"\n" for line in lines))
        return path
    return _make


@pytest.fixture
def read_lines() -> Callable[[Path], list]:
    """Reads a produced file back as a list of str lines."""
    def _read(path) -> list:
        return Path(path).read_bytes().decode().splitlines()
    return _read


@pytest.fixture
def promo_sources(make_gz):
    """
    Five sources with overlapping codes:
    - "SHARED01" in all files
    - "PAIR0001" in files 1 and 2 only
    - "PAIR0405" in files 4 and 5 only
    - "ONLY0003" in file 3 only
    - short/long noise lines that must be filtered out
    """
    contents = [
        ["SHARED01", "PAIR0001", "short", "WAYTOOLONGCODE", "UNIQUE01"],
        ["PAIR0001", "SHARED01", "UNIQUE02"],
        ["ONLY0003", "SHARED01", "1234567"],
        ["SHARED01", "PAIR0405", "12345678901"],
        ["PAIR0405", "SHARED01", "ABCDEFGHIJ"],
    ]
    return [make_gz(f"src_{i}.gz", lines) for i, lines in enumerate(contents, 1)]
