# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Dimension pre-scan.

The parameter vector's length is fixed when the model is built and cannot
grow afterwards, so before training every configured file is read once to
find the largest feature index (and, for field-aware families, the largest
field id).

The maxima are one running value across all readers (train, test and every
fold together), not one per reader: train, test and folds share a single
index space so a weight means the same thing whichever subset is scored.

Each reader is rewound after its pass; the training loop starts from the
first batch. Cost is linear in the total number of non-zero entries.
"""

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from sparsefm.logging.logger import get_logger
from sparsefm.solver.exceptions import SolverError
from sparsefm.solver.interfaces import Reader

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class Dimensions:
    """Largest feature index and field id seen across all scanned readers."""

    max_feature: int = 0
    max_field: int = 0


class ScanInterrupted(SolverError):
    """The stop event was set while the pre-scan was running."""


def scan_dimensions(
    readers: Sequence[Reader],
    field_aware: bool,
    stop: Optional[threading.Event] = None,
) -> Dimensions:
    """
    Read every reader to the end, fold in its maxima, then rewind it.

    Args:
        readers: Readers to scan, in order.
        field_aware: Whether to track field ids at all.
        stop: Optional event checked between batches.

    Returns:
        The cumulative maxima.

    Raises:
        ScanInterrupted: If ``stop`` was set mid-scan. The reader being
            scanned is rewound before raising.
    """
    max_feature = 0
    max_field = 0

    for position, reader in enumerate(readers):
        rows = 0
        try:
            while True:
                if stop is not None and stop.is_set():
                    raise ScanInterrupted(f"Pre-scan interrupted at reader {position}")
                batch = reader.samples()
                if not batch:
                    break
                rows += len(batch)
                max_feature = max(max_feature, batch.max_feature())
                if field_aware:
                    max_field = max(max_field, batch.max_field())
        finally:
            reader.reset()

        logger.debug(
            "Scanned reader",
            extra={
                "reader": position,
                "path": str(reader.path),
                "rows": rows,
                "max_feature": max_feature,
                "max_field": max_field,
            },
        )

    dims = Dimensions(max_feature=max_feature, max_field=max_field)
    logger.info(
        "Pre-scan complete",
        extra={"readers": len(readers), "max_feature": max_feature, "max_field": max_field},
    )
    return dims
