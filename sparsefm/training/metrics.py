# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Loss bookkeeping for the loops.

Batch losses are means over the batch, and the last batch of a pass is
usually short, so pass-level losses are weighted by row count rather than
averaged per batch.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from sparsefm.logging.logger import get_logger

logger: logging.Logger = get_logger(__name__)


@dataclass
class LossMeter:
    """Row-weighted running mean of batch losses."""

    total: float = 0.0
    rows: int = 0

    def add(self, batch_loss: float, batch_rows: int) -> None:
        self.total += batch_loss * batch_rows
        self.rows += batch_rows

    @property
    def mean(self) -> float:
        return self.total / self.rows if self.rows > 0 else 0.0


@dataclass(frozen=True)
class EpochMetrics:
    """One epoch of one training run (or one fold of a cross validation)."""

    epoch: int
    train_loss: float
    rows: int
    seconds: float
    test_loss: Optional[float] = None
    fold: Optional[int] = None


@dataclass
class EpochTimer:
    """Times an epoch and emits its structured log record."""

    _started: float = field(default=0.0, init=False)

    def start(self) -> None:
        self._started = time.monotonic()

    def finish(
        self,
        epoch: int,
        train: LossMeter,
        test_loss: Optional[float] = None,
        fold: Optional[int] = None,
    ) -> EpochMetrics:
        metrics = EpochMetrics(
            epoch=epoch,
            train_loss=train.mean,
            rows=train.rows,
            seconds=time.monotonic() - self._started,
            test_loss=test_loss,
            fold=fold,
        )
        log_data: dict[str, object] = {
            "epoch": metrics.epoch,
            "train_loss": round(metrics.train_loss, 6),
            "rows": metrics.rows,
            "seconds": round(metrics.seconds, 3),
        }
        if test_loss is not None:
            log_data["test_loss"] = round(test_loss, 6)
        if fold is not None:
            log_data["fold"] = fold
        logger.info("Epoch complete", extra=log_data)
        return metrics
