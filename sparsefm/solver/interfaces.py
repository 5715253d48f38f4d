# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Abstract base classes for the five pluggable component families.

The solver never knows which concrete algorithm sits in a slot. It only
relies on the contracts below:

- Parser:  raw line -> SparseRow
- Reader:  file + batch size + Parser -> rewindable sequence of batches,
           an empty batch marking the end of a pass
- Updater: gradient + parameter vector -> in-place parameter update
- Score:   batch + parameter vector -> predictions
- Loss:    predictions + labels -> scalar loss; composes a Score to go
           straight from a batch to a loss and its gradient

Every implementation subclasses one of these and registers itself with
``sparsefm.solver.registry`` under its config string.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Iterator, Optional

import torch

from sparsefm.config.schema import SolverConfig
from sparsefm.data.matrix import BatchTensors, SparseBatch, SparseRow


class Parser(ABC):
    """Turns one line of a data file into a ``SparseRow``."""

    field_aware: ClassVar[bool] = False

    @abstractmethod
    def parse(self, line: str) -> SparseRow:
        """
        Parse one non-empty line.

        Raises:
            ParseError: If the line does not match the format.
        """
        ...


class Reader(ABC):
    """
    Rewindable, lazy producer of batches from one file.

    Contract:
        - ``samples()`` returns the next batch; an empty batch ends the pass
        - ``reset()`` returns to the exact first-batch state, idempotently
        - every pass yields identical content
    """

    def __init__(self) -> None:
        self.path: Optional[Path] = None
        self.batch_size: int = 0
        self.parser: Optional[Parser] = None

    def initialize(self, path: Path, batch_size: int, parser: Parser) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.path = Path(path)
        self.batch_size = batch_size
        self.parser = parser
        self._open()

    def _source(self) -> tuple[Path, Parser]:
        """The bound file and parser, once ``initialize`` has run."""
        if self.path is None or self.parser is None:
            raise RuntimeError(f"{type(self).__name__} used before initialize()")
        return self.path, self.parser

    @abstractmethod
    def _open(self) -> None:
        """Acquire whatever the reader needs to serve the first batch."""
        ...

    @abstractmethod
    def samples(self) -> SparseBatch:
        """Return the next batch, or an empty batch at the end of the pass."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Rewind to the start of the file."""
        ...

    def close(self) -> None:
        """Release file handles and cached rows. Safe to call twice."""

    def __iter__(self) -> Iterator[SparseBatch]:
        """Yield the remaining batches of the current pass. Does not rewind."""
        while True:
            batch = self.samples()
            if not batch:
                return
            yield batch


class Updater(ABC):
    """In-place parameter update rule."""

    def initialize(self, config: SolverConfig) -> None:
        self.learning_rate = config.learning_rate
        self.regu_lambda = config.regu_lambda
        self.num_param = config.num_param

    @abstractmethod
    def update(self, param: torch.Tensor, grad: torch.Tensor) -> None:
        """Apply one step to ``param`` given its gradient."""
        ...

    def reset(self) -> None:
        """Forget accumulated state (between cross-validation folds)."""


class Score(ABC):
    """Maps a batch and the parameter vector to one prediction per row."""

    field_aware: ClassVar[bool] = False

    def initialize(self, config: SolverConfig) -> None:
        self.num_feature = config.num_feature
        self.num_field = config.num_field
        self.num_K = config.num_K

    def pack(self, batch: SparseBatch) -> BatchTensors:
        """Pack a batch, dropping entries beyond the model's dimensions."""
        return batch.to_tensors(
            num_feature=self.num_feature,
            num_field=self.num_field,
            field_aware=self.field_aware,
        )

    @abstractmethod
    def forward(self, batch: BatchTensors, param: torch.Tensor) -> torch.Tensor:
        """
        Compute raw predictions.

        Returns:
            Tensor of shape (batch.num_rows,).
        """
        ...


class Loss(ABC):
    """Scalar loss over predictions; composes the Score it was given."""

    def __init__(self) -> None:
        self.score: Optional[Score] = None

    def initialize(self, score: Score) -> None:
        self.score = score

    @abstractmethod
    def forward(self, preds: torch.Tensor, labels: torch.Tensor) -> torch.Tensor:
        """Mean loss over the batch as a 0-dim tensor."""
        ...

    def transform(self, preds: torch.Tensor) -> torch.Tensor:
        """Map raw scores to the values emitted at inference time."""
        return preds

    def _require_score(self) -> Score:
        if self.score is None:
            raise RuntimeError(f"{type(self).__name__} used before initialize(score)")
        return self.score

    def evaluate(self, batch: SparseBatch, param: torch.Tensor) -> tuple[float, torch.Tensor]:
        """Loss and transformed predictions for a batch, without gradients."""
        score = self._require_score()
        tensors = score.pack(batch)
        with torch.no_grad():
            preds = score.forward(tensors, param)
            loss = self.forward(preds, tensors.labels)
        return float(loss.item()), self.transform(preds)

    def gradient(self, batch: SparseBatch, param: torch.Tensor) -> tuple[float, torch.Tensor]:
        """Loss and its gradient with respect to ``param``."""
        score = self._require_score()
        tensors = score.pack(batch)
        leaf = param.detach().requires_grad_(True)
        loss = self.forward(score.forward(tensors, leaf), tensors.labels)
        (grad,) = torch.autograd.grad(loss, leaf)
        return float(loss.item()), grad
