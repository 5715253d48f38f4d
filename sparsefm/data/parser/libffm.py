# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
libffm format: ``label field:idx:val field:idx:val ...``

Both field ids and feature indices are 1-based.
"""

from sparsefm.data.matrix import SparseRow
from sparsefm.data.parser.libsvm import parse_index, parse_label, parse_value
from sparsefm.solver.exceptions import ParseError
from sparsefm.solver.interfaces import Parser
from sparsefm.solver.registry import parser_registry


class LibFFMParser(Parser):
    """Parses ``label field:idx:val ...`` lines into field-aware rows."""

    field_aware = True

    def parse(self, line: str) -> SparseRow:
        tokens = line.split()
        if not tokens:
            raise ParseError("Cannot parse an empty line")

        label = parse_label(tokens[0], line)
        fields: list[int] = []
        indices: list[int] = []
        values: list[float] = []
        for token in tokens[1:]:
            parts = token.split(":")
            if len(parts) != 3:
                raise ParseError(f"Expected field:idx:val, got {token!r} in line: {line!r}")
            fields.append(parse_index(parts[0], "field id", line))
            indices.append(parse_index(parts[1], "feature index", line))
            values.append(parse_value(parts[2], line))

        return SparseRow(
            label=label,
            indices=tuple(indices),
            values=tuple(values),
            fields=tuple(fields),
        )


parser_registry.register("libffm", LibFFMParser)
