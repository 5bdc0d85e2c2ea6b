"""Tests for the ordered assembler and the scratch area."""

from __future__ import annotations

import asyncio

import pytest

from hls_cli.core.assembler import OrderedAssembler
from hls_cli.exceptions import FilesystemError, MissingSegmentError
from hls_cli.storage.scratch import ScratchArea


def _write_blobs(directory, blobs: dict[str, bytes]) -> None:
    for name, data in blobs.items():
        (directory / name).write_bytes(data)


class TestOrderedAssembler:
    def test_concatenates_in_index_order(self, tmp_path) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        # Written out of order on purpose.
        _write_blobs(scratch, {"00002.ts": b"C", "00000.ts": b"A", "00001.ts": b"B"})
        output = tmp_path / "out.ts"

        written = OrderedAssembler().assemble(scratch, output, expected_count=3)

        assert output.read_bytes() == b"ABC"
        assert written == 3

    def test_truncates_existing_output(self, tmp_path) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        _write_blobs(scratch, {"00000.ts": b"new"})
        output = tmp_path / "out.ts"
        output.write_bytes(b"old content that is longer")

        OrderedAssembler().assemble(scratch, output)

        assert output.read_bytes() == b"new"

    def test_ignores_files_with_other_extensions(self, tmp_path) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        _write_blobs(scratch, {"00000.ts": b"A", "00000.ts.part": b"X", "notes.txt": b"Y"})
        output = tmp_path / "out.ts"

        OrderedAssembler().assemble(scratch, output, expected_count=1)

        assert output.read_bytes() == b"A"

    def test_missing_index_fails_instead_of_skipping(self, tmp_path) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        _write_blobs(scratch, {"00000.ts": b"A", "00002.ts": b"C"})
        output = tmp_path / "out.ts"

        with pytest.raises(MissingSegmentError, match="indices 1"):
            OrderedAssembler().assemble(scratch, output, expected_count=3)

        assert not output.exists()

    def test_extra_blob_fails(self, tmp_path) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        _write_blobs(scratch, {"00000.ts": b"A", "00001.ts": b"B"})

        with pytest.raises(MissingSegmentError):
            OrderedAssembler().assemble(scratch, tmp_path / "out.ts", expected_count=1)

    def test_missing_segment_is_a_filesystem_error(self) -> None:
        assert issubclass(MissingSegmentError, FilesystemError)

    def test_unwritable_output_raises_filesystem_error(self, tmp_path) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        _write_blobs(scratch, {"00000.ts": b"A"})

        with pytest.raises(FilesystemError):
            OrderedAssembler().assemble(scratch, tmp_path / "no-such-dir" / "out.ts")

    def test_missing_scratch_dir_raises_filesystem_error(self, tmp_path) -> None:
        with pytest.raises(FilesystemError):
            OrderedAssembler().assemble(tmp_path / "gone", tmp_path / "out.ts")


class TestScratchArea:
    def test_directory_is_removed_on_exit(self, tmp_path) -> None:
        with ScratchArea(tmp_path) as scratch:
            path = scratch.path
            asyncio.run(scratch.write_segment(0, b"data"))
            assert (path / "00000.ts").read_bytes() == b"data"

        assert not path.exists()

    def test_directory_is_removed_when_the_run_fails(self, tmp_path) -> None:
        with pytest.raises(RuntimeError):
            with ScratchArea(tmp_path) as scratch:
                path = scratch.path
                raise RuntimeError("boom")

        assert not path.exists()

    def test_directories_are_private_per_run(self, tmp_path) -> None:
        with ScratchArea(tmp_path) as first, ScratchArea(tmp_path) as second:
            assert first.path != second.path
            assert first.path.parent == tmp_path

    def test_names_are_zero_padded(self, tmp_path) -> None:
        with ScratchArea(tmp_path) as scratch:
            scratch.configure(12)
            assert scratch.segment_path(7).name == "00007.ts"

    def test_width_grows_with_large_playlists(self, tmp_path) -> None:
        with ScratchArea(tmp_path) as scratch:
            scratch.configure(123456)
            assert scratch.segment_name(42) == "000042.ts"
            assert scratch.segment_name(123455) == "123455.ts"

    def test_lexicographic_order_matches_numeric_order(self, tmp_path) -> None:
        with ScratchArea(tmp_path) as scratch:
            scratch.configure(100001)
            names = [scratch.segment_name(i) for i in (100000, 9, 99999, 10)]
            assert sorted(names) == [
                scratch.segment_name(i) for i in (9, 10, 99999, 100000)
            ]

    def test_writing_outside_an_open_area_fails(self, tmp_path) -> None:
        scratch = ScratchArea(tmp_path)

        with pytest.raises(FilesystemError):
            asyncio.run(scratch.write_segment(0, b"data"))
