# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
libsvm format: ``label idx:val idx:val ...``

Indices are 1-based. Whitespace of any width separates tokens.
"""

from sparsefm.data.matrix import SparseRow
from sparsefm.solver.exceptions import ParseError
from sparsefm.solver.interfaces import Parser
from sparsefm.solver.registry import parser_registry


def parse_label(token: str, line: str) -> float:
    try:
        return float(token)
    except ValueError as err:
        raise ParseError(f"Bad label {token!r} in line: {line!r}") from err


def parse_index(token: str, what: str, line: str) -> int:
    """Parse a 1-based feature index or field id."""
    try:
        value = int(token)
    except ValueError as err:
        raise ParseError(f"Bad {what} {token!r} in line: {line!r}") from err
    if value < 1:
        raise ParseError(
            f"{what.capitalize()} must be >= 1 (0 is the bias slot), "
            f"got {value} in line: {line!r}"
        )
    return value


def parse_value(token: str, line: str) -> float:
    try:
        return float(token)
    except ValueError as err:
        raise ParseError(f"Bad value {token!r} in line: {line!r}") from err


class LibSVMParser(Parser):
    """Parses ``label idx:val ...`` lines."""

    def parse(self, line: str) -> SparseRow:
        tokens = line.split()
        if not tokens:
            raise ParseError("Cannot parse an empty line")

        label = parse_label(tokens[0], line)
        indices: list[int] = []
        values: list[float] = []
        for token in tokens[1:]:
            idx, sep, val = token.partition(":")
            if not sep:
                raise ParseError(f"Expected idx:val, got {token!r} in line: {line!r}")
            indices.append(parse_index(idx, "feature index", line))
            values.append(parse_value(val, line))

        return SparseRow(label=label, indices=tuple(indices), values=tuple(values))


parser_registry.register("libsvm", LibSVMParser)
