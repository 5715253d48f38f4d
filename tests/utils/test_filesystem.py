# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for atomic writes.

The target either holds the full new content or its previous content; a
failed write never leaves a partial file or a stray temp file.
"""

from collections.abc import Iterator
from pathlib import Path

import pytest

from sparsefm.utils.filesystem import atomic_open, atomic_path, atomic_write_lines


class TestAtomicWriteLines:
    def test_writes_one_line_per_item(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        count = atomic_write_lines(target, (str(i) for i in range(3)))

        assert count == 3
        assert target.read_text(encoding="utf-8") == "0\n1\n2\n"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "deep" / "out.txt"
        atomic_write_lines(target, ["x"])
        assert target.read_text(encoding="utf-8") == "x\n"

    def test_empty_iterable_writes_empty_file(self, tmp_path: Path) -> None:
        target = tmp_path / "empty.txt"
        assert atomic_write_lines(target, []) == 0
        assert target.read_text(encoding="utf-8") == ""


class TestFailure:
    def test_failed_write_keeps_previous_content(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        target.write_text("old\n", encoding="utf-8")

        def lines() -> Iterator[str]:
            yield "new"
            raise RuntimeError("disk full")

        with pytest.raises(RuntimeError):
            atomic_write_lines(target, lines())

        assert target.read_text(encoding="utf-8") == "old\n"
        assert list(tmp_path.glob(".sparsefm_tmp_*")) == []

    def test_atomic_path_cleans_up_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "model.bin"
        with pytest.raises(ValueError):
            with atomic_path(target) as temp_path:
                temp_path.write_bytes(b"partial")
                raise ValueError("bad payload")

        assert not target.exists()
        assert list(tmp_path.iterdir()) == []

    def test_atomic_open_replaces_on_success(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        target.write_text("old", encoding="utf-8")
        with atomic_open(target) as handle:
            handle.write("new")
        assert target.read_text(encoding="utf-8") == "new"
