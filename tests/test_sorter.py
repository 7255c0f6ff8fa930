"""
Unit tests for sorters and the sequential sort stage.
External sorting uses the system `sort` binary with LC_ALL=C and is skipped when absent.
"""
import shutil
import sys
import pytest
from unittest import mock
from promoloader.core.sorter import ExternalSorter, NativeSorter, SortStageImpl
from promoloader.core.errors import ExternalToolError, StageIOError

SORT_BIN = shutil.which("sort")
needs_sort = pytest.mark.skipif(SORT_BIN is None, reason="sort binary not available")


@pytest.fixture
def unsorted_file(temp_dir):
    path = temp_dir / "file_1.raw"
    path.write_bytes(b"CCCCCCCC\nAAAAAAAA\nbbbbbbbb\nBBBBBBBB\nAAAAAAAA\n")
    return path


EXPECTED_BYTE_ORDER = [b"AAAAAAAA", b"AAAAAAAA", b"BBBBBBBB", b"CCCCCCCC", b"bbbbbbbb"]


class TestNativeSorter:

    def test_sorts_by_byte_order_and_keeps_duplicates(self, unsorted_file, temp_dir):
        out = temp_dir / "file_1.sorted"

        NativeSorter().sort(str(unsorted_file), str(out))

        assert out.read_bytes().splitlines() == EXPECTED_BYTE_ORDER

    def test_empty_file(self, temp_dir):
        src = temp_dir / "empty.raw"
        src.write_bytes(b"")
        out = temp_dir / "empty.sorted"

        NativeSorter().sort(str(src), str(out))

        assert out.read_bytes() == b""

    def test_carriage_return_inside_line_is_data(self, temp_dir):
        """Only \\n ends a line: the sorted file keeps the same lines as its input."""
        src = temp_dir / "file_1.raw"
        src.write_bytes(b"ZZZZZZZZ\nABC\rDEFGH\n")
        out = temp_dir / "file_1.sorted"

        NativeSorter().sort(str(src), str(out))

        assert out.read_bytes() == b"ABC\rDEFGH\nZZZZZZZZ\n"

    def test_last_line_without_newline(self, temp_dir):
        src = temp_dir / "file_1.raw"
        src.write_bytes(b"BBBBBBBB\nAAAAAAAA")
        out = temp_dir / "file_1.sorted"

        NativeSorter().sort(str(src), str(out))

        assert out.read_bytes() == b"AAAAAAAA\nBBBBBBBB\n"

    def test_missing_input_raises(self, temp_dir):
        with pytest.raises(StageIOError):
            NativeSorter().sort(str(temp_dir / "absent.raw"), str(temp_dir / "out.sorted"))


class TestExternalSorter:

    @needs_sort
    def test_sorts_with_c_locale(self, unsorted_file, temp_dir):
        out = temp_dir / "file_1.sorted"

        ExternalSorter(SORT_BIN, env={"LC_ALL": "C"}).sort(str(unsorted_file), str(out))

        assert out.read_bytes().splitlines() == EXPECTED_BYTE_ORDER

    def test_missing_binary_raises_external_tool_error(self, unsorted_file, temp_dir):
        sorter = ExternalSorter("definitely-not-a-sort-binary-xyz")

        with pytest.raises(ExternalToolError, match="sort failed"):
            sorter.sort(str(unsorted_file), str(temp_dir / "out.sorted"))

    @needs_sort
    def test_non_zero_exit_raises_with_returncode(self, temp_dir):
        sorter = ExternalSorter(SORT_BIN, env={"LC_ALL": "C"})

        with pytest.raises(ExternalToolError) as exc_info:
            sorter.sort(str(temp_dir / "absent.raw"), str(temp_dir / "out.sorted"))

        assert exc_info.value.returncode not in (None, 0)

    def test_uncreatable_destination_raises_stage_io_error(self, unsorted_file, temp_dir):
        with pytest.raises(StageIOError, match="create sort output"):
            ExternalSorter("sort").sort(str(unsorted_file), str(temp_dir / "no" / "such" / "dir" / "out"))

    def test_env_overrides_are_merged(self, unsorted_file, temp_dir, monkeypatch):
        monkeypatch.setenv("PROMO_INHERITED", "yes")
        completed = mock.Mock(returncode=0)
        with mock.patch("promoloader.core.sorter.subprocess.run", return_value=completed) as run:
            ExternalSorter("mysort", env={"LC_ALL": "C"}).sort(str(unsorted_file), str(temp_dir / "o"))

        args, kwargs = run.call_args
        assert args[0] == ["mysort", str(unsorted_file)]
        assert kwargs["env"]["LC_ALL"] == "C"
        assert kwargs["env"]["PROMO_INHERITED"] == "yes"

    def test_no_env_inherits_environment(self, unsorted_file, temp_dir):
        completed = mock.Mock(returncode=0)
        with mock.patch("promoloader.core.sorter.subprocess.run", return_value=completed) as run:
            ExternalSorter("mysort").sort(str(unsorted_file), str(temp_dir / "o"))

        assert run.call_args.kwargs["env"] is None

    def test_empty_binary_name_defaults_to_sort(self):
        assert ExternalSorter("").sort_bin == "sort"

    @pytest.mark.skipif(sys.platform == "win32", reason="shell wrapper requires a POSIX shell")
    def test_python_as_sorter_collaborator(self, unsorted_file, temp_dir):
        """Any executable honouring the one-argument contract can act as the sorter."""
        script = temp_dir / "pysort.py"
        script.write_text(
            "import sys\n"
            "data = open(sys.argv[1], 'rb').read().splitlines()\n"
            "sys.stdout.buffer.write(b''.join(l + b'\\n' for l in sorted(data)))\n"
        )
        wrapper = temp_dir / "pysort"
        wrapper.write_text(f"#!/bin/sh\nexec \"{sys.executable}\" \"{script}\" \"$1\"\n")
        wrapper.chmod(0o755)

        out = temp_dir / "file_1.sorted"
        ExternalSorter(str(wrapper)).sort(str(unsorted_file), str(out))

        assert out.read_bytes().splitlines() == EXPECTED_BYTE_ORDER


class TestSortStageImpl:

    def test_sorts_sequentially_in_input_order(self, temp_dir):
        order = []

        class RecordingSorter:
            def sort(self, input_path, output_path):
                order.append((input_path, output_path))

        raw = [str(temp_dir / f"file_{i}.raw") for i in (1, 2, 3)]
        sorted_paths = [str(temp_dir / f"file_{i}.sorted") for i in (1, 2, 3)]

        result = SortStageImpl(RecordingSorter()).process(raw, sorted_paths)

        assert order == list(zip(raw, sorted_paths))
        assert result == sorted_paths

    def test_first_failure_stops_the_stage(self, temp_dir):
        calls = []

        class FailingSorter:
            def sort(self, input_path, output_path):
                calls.append(input_path)
                if input_path.endswith("file_2.raw"):
                    raise ExternalToolError("sort failed: exit status 2", returncode=2)

        raw = [str(temp_dir / f"file_{i}.raw") for i in (1, 2, 3)]
        sorted_paths = [str(temp_dir / f"file_{i}.sorted") for i in (1, 2, 3)]

        with pytest.raises(ExternalToolError):
            SortStageImpl(FailingSorter()).process(raw, sorted_paths)

        assert len(calls) == 2

    def test_progress_callback(self, unsorted_file, temp_dir):
        calls = []
        SortStageImpl(NativeSorter()).process(
            [str(unsorted_file)], [str(temp_dir / "file_1.sorted")],
            progress_callback=lambda *a: calls.append(a)
        )
        assert calls == [("sort", 1, 1)]

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(ValueError):
            SortStageImpl(NativeSorter()).process(["a"], [])
