# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for the libsvm, libffm and csv parsers."""

import pytest

from sparsefm.data.parser import CSVParser, LibFFMParser, LibSVMParser
from sparsefm.solver.exceptions import ParseError


class TestLibSVMParser:
    def test_parses_label_and_pairs(self) -> None:
        row = LibSVMParser().parse("1 3:0.5 10:2\n")
        assert row.label == 1.0
        assert row.indices == (3, 10)
        assert row.values == (0.5, 2.0)
        assert row.fields is None

    def test_any_whitespace_separates_tokens(self) -> None:
        row = LibSVMParser().parse("-1\t2:1.5   4:1")
        assert row.label == -1.0
        assert row.indices == (2, 4)

    def test_label_only_row(self) -> None:
        row = LibSVMParser().parse("0")
        assert len(row) == 0

    @pytest.mark.parametrize(
        "line",
        ["abc 1:1", "1 0:1.0", "1 -2:1.0", "1 3", "1 x:1", "1 3:y", ""],
    )
    def test_malformed_lines_raise(self, line: str) -> None:
        with pytest.raises(ParseError):
            LibSVMParser().parse(line)

    def test_parse_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError, match="bias slot"):
            LibSVMParser().parse("1 0:1.0")

    def test_not_field_aware(self) -> None:
        assert LibSVMParser.field_aware is False


class TestLibFFMParser:
    def test_parses_field_index_value(self) -> None:
        row = LibFFMParser().parse("0 2:5:1.5 1:3:1")
        assert row.label == 0.0
        assert row.fields == (2, 1)
        assert row.indices == (5, 3)
        assert row.values == (1.5, 1.0)

    @pytest.mark.parametrize("line", ["1 5:1.0", "1 1:2:3:4", "1 0:1:1.0", "1 1:0:1.0"])
    def test_malformed_lines_raise(self, line: str) -> None:
        with pytest.raises(ParseError):
            LibFFMParser().parse(line)

    def test_field_aware(self) -> None:
        assert LibFFMParser.field_aware is True


class TestCSVParser:
    def test_columns_become_one_based_indices(self) -> None:
        row = CSVParser().parse("1,0,2.5,,3\n")
        assert row.label == 1.0
        assert row.indices == (2, 4)
        assert row.values == (2.5, 3.0)

    def test_spaces_around_cells_are_ignored(self) -> None:
        row = CSVParser().parse(" 0 , 1.5 , 0 ")
        assert row.indices == (1,)

    @pytest.mark.parametrize("line", [",1,2", "x,1", "1,abc"])
    def test_malformed_lines_raise(self, line: str) -> None:
        with pytest.raises(ParseError):
            CSVParser().parse(line)
