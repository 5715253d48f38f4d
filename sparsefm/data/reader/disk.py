# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
On-disk reader.

Streams ``batch_size`` lines per call from an open file handle, so memory
use stays flat no matter how big the file is. ``reset`` seeks back to byte
zero; since the file is re-read in the same order, every pass matches the
first.
"""

import logging
from typing import BinaryIO, Optional

from sparsefm.data.matrix import SparseBatch, SparseRow
from sparsefm.data.reader.memory import parse_line
from sparsefm.logging.logger import get_logger
from sparsefm.solver.interfaces import Reader
from sparsefm.solver.registry import reader_registry

logger: logging.Logger = get_logger(__name__)


class OnDiskReader(Reader):
    """Reads the file lazily, one batch at a time."""

    def __init__(self) -> None:
        super().__init__()
        self._handle: Optional[BinaryIO] = None
        self._line_no = 0

    def _open(self) -> None:
        path, _ = self._source()
        self.close()
        self._handle = open(path, "rb")
        self._line_no = 0
        logger.debug("Opened file for streaming", extra={"path": str(path)})

    def samples(self) -> SparseBatch:
        if self._handle is None:
            raise RuntimeError("OnDiskReader used before initialize() or after close()")
        path, parser = self._source()

        rows: list[SparseRow] = []
        while len(rows) < self.batch_size:
            line = self._handle.readline()
            if not line:
                break
            self._line_no += 1
            if not line.strip():
                continue
            rows.append(parse_line(parser, line, path, self._line_no))
        return SparseBatch(rows=rows)

    def reset(self) -> None:
        if self._handle is None:
            raise RuntimeError("OnDiskReader used before initialize() or after close()")
        self._handle.seek(0)
        self._line_no = 0

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


reader_registry.register("disk", OnDiskReader)
