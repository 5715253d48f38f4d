# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for the k-fold file splitter."""

from collections.abc import Callable
from pathlib import Path

import pytest

from sparsefm.data.splitter import fold_filenames, fold_sizes, split_file


class TestFoldLayout:
    def test_fold_names(self, tmp_path: Path) -> None:
        source = tmp_path / "train.txt"
        assert fold_filenames(source, 3) == [
            Path(f"{source}_0"),
            Path(f"{source}_1"),
            Path(f"{source}_2"),
        ]

    def test_fold_names_need_one_fold(self) -> None:
        with pytest.raises(ValueError):
            fold_filenames("train.txt", 0)

    @pytest.mark.parametrize(
        ("num_lines", "num_folds", "expected"),
        [(10, 3, [4, 3, 3]), (9, 3, [3, 3, 3]), (2, 3, [1, 1, 0]), (0, 2, [0, 0])],
    )
    def test_fold_sizes(self, num_lines: int, num_folds: int, expected: list[int]) -> None:
        assert fold_sizes(num_lines, num_folds) == expected


class TestSplitFile:
    def test_contiguous_partitions(self, write_file: Callable[[str, str], Path]) -> None:
        lines = [f"{i} {i + 1}:1" for i in range(7)]
        source = write_file("data.txt", "\n".join(lines))

        folds = split_file(source, 3)

        contents = [fold.read_text(encoding="utf-8").splitlines() for fold in folds]
        assert contents == [lines[0:3], lines[3:5], lines[5:7]]
        assert folds == fold_filenames(source, 3)

    def test_blank_lines_are_dropped(self, write_file: Callable[[str, str], Path]) -> None:
        source = write_file("data.txt", "a\n\nb\n   \nc\n")
        folds = split_file(source, 2)
        assert [f.read_text(encoding="utf-8") for f in folds] == ["a\nb\n", "c\n"]

    def test_more_folds_than_lines_leaves_empty_folds(
        self, write_file: Callable[[str, str], Path]
    ) -> None:
        source = write_file("data.txt", "a\n")
        folds = split_file(source, 3)
        assert [f.read_text(encoding="utf-8") for f in folds] == ["a\n", "", ""]

    def test_existing_folds_are_overwritten(self, write_file: Callable[[str, str], Path]) -> None:
        source = write_file("data.txt", "a\nb\n")
        Path(f"{source}_0").write_text("stale\n", encoding="utf-8")
        split_file(source, 2)
        assert Path(f"{source}_0").read_text(encoding="utf-8") == "a\n"

    def test_missing_source_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            split_file(tmp_path / "missing.txt", 2)

    def test_zero_folds_raise(self, write_file: Callable[[str, str], Path]) -> None:
        source = write_file("data.txt", "a\n")
        with pytest.raises(ValueError):
            split_file(source, 0)

    def test_no_temp_files_left_behind(
        self, tmp_path: Path, write_file: Callable[[str, str], Path]
    ) -> None:
        source = write_file("data.txt", "a\nb\nc\n")
        split_file(source, 2)
        assert list(tmp_path.glob(".sparsefm_tmp_*")) == []
