# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Dense CSV: ``label,v1,v2,...``

Column ``j`` (1-based, after the label) becomes feature index ``j``. Zero
and empty cells are skipped so the row stays sparse.
"""

from sparsefm.data.matrix import SparseRow
from sparsefm.data.parser.libsvm import parse_label, parse_value
from sparsefm.solver.exceptions import ParseError
from sparsefm.solver.interfaces import Parser
from sparsefm.solver.registry import parser_registry


class CSVParser(Parser):
    """Parses comma-separated dense rows with the label first."""

    def parse(self, line: str) -> SparseRow:
        cells = [cell.strip() for cell in line.strip().split(",")]
        if not cells or not cells[0]:
            raise ParseError(f"Missing label in line: {line!r}")

        label = parse_label(cells[0], line)
        indices: list[int] = []
        values: list[float] = []
        for column, cell in enumerate(cells[1:], start=1):
            if not cell:
                continue
            value = parse_value(cell, line)
            if value == 0.0:
                continue
            indices.append(column)
            values.append(value)

        return SparseRow(label=label, indices=tuple(indices), values=tuple(values))


parser_registry.register("csv", CSVParser)
