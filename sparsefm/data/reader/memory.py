# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
In-memory reader.

Parses the whole file once when initialized and serves batches as slices of
the cached row list. Rewinding is just resetting the cursor, so every pass is
trivially identical and costs no I/O.
"""

import logging
from pathlib import Path

from sparsefm.data.matrix import SparseBatch, SparseRow
from sparsefm.logging.logger import get_logger
from sparsefm.solver.exceptions import ParseError
from sparsefm.solver.interfaces import Parser, Reader
from sparsefm.solver.registry import reader_registry

logger: logging.Logger = get_logger(__name__)


def parse_line(parser: Parser, raw: bytes, path: Path, line_no: int) -> SparseRow:
    """Decode and parse one line, prefixing any error with its file position."""
    try:
        return parser.parse(raw.decode("utf-8"))
    except UnicodeDecodeError as err:
        raise ParseError(f"{path}:{line_no}: line is not valid UTF-8 ({err.reason})") from err
    except ParseError as err:
        raise ParseError(f"{path}:{line_no}: {err}") from err


class InMemoryReader(Reader):
    """Holds every row of the file in memory."""

    def __init__(self) -> None:
        super().__init__()
        self._rows: list[SparseRow] = []
        self._cursor = 0

    def _open(self) -> None:
        path, parser = self._source()
        rows: list[SparseRow] = []
        # Binary, so a bad byte is reported on its own line.
        with open(path, "rb") as handle:
            for line_no, raw in enumerate(handle, start=1):
                if not raw.strip():
                    continue
                rows.append(parse_line(parser, raw, path, line_no))
        self._rows = rows
        self._cursor = 0
        logger.info("Loaded file into memory", extra={"path": str(path), "rows": len(rows)})

    def samples(self) -> SparseBatch:
        start = self._cursor
        end = min(start + self.batch_size, len(self._rows))
        self._cursor = end
        return SparseBatch(rows=self._rows[start:end])

    def reset(self) -> None:
        self._cursor = 0

    def close(self) -> None:
        self._rows = []
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._rows)


reader_registry.register("memory", InMemoryReader)
