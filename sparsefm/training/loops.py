# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Default train and inference loops.

Per epoch, the training loop is explicit:
  1. Rewind the training reader(s)
  2. For every batch: score -> loss -> autograd gradient -> updater step
  3. Evaluate the held-out reader, if any
  4. Log the epoch record

Cross validation runs that loop once per fold. Before each fold the model
goes back to its initial parameters and the updater forgets its state, so
every fold trains from the same starting point. Cross validation reports the
mean held-out loss and does not write a checkpoint.

Both loops check the pipeline's stop event between batches.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import torch

from sparsefm.logging.logger import get_logger
from sparsefm.solver.core import Pipeline
from sparsefm.solver.exceptions import SolverError, SolverStateError
from sparsefm.solver.interfaces import Reader, Updater
from sparsefm.training.metrics import EpochMetrics, EpochTimer, LossMeter
from sparsefm.utils.filesystem import atomic_write_lines

logger: logging.Logger = get_logger(__name__)


class LoopInterrupted(SolverError):
    """The stop event was set while a loop was running."""


@dataclass(frozen=True)
class TrainingResult:
    """Final result of a training run or a cross validation."""

    epochs: int
    train_loss: float
    test_loss: Optional[float] = None
    fold_losses: tuple[float, ...] = ()
    checkpoint_path: str = ""
    history: tuple[EpochMetrics, ...] = field(default=(), repr=False)

    @property
    def cv_loss(self) -> Optional[float]:
        """Mean held-out loss over the folds, or None outside cross validation."""
        if not self.fold_losses:
            return None
        return sum(self.fold_losses) / len(self.fold_losses)


@dataclass(frozen=True)
class InferenceResult:
    """Predictions for every row of the inference file, in file order."""

    predictions: torch.Tensor
    output_file: str = ""
    loss: Optional[float] = None

    @property
    def num_predictions(self) -> int:
        return int(self.predictions.numel())


def _check_stop(pipeline: Pipeline, where: str) -> None:
    if pipeline.stop.is_set():
        raise LoopInterrupted(f"Interrupted during {where}")


def _require_updater(pipeline: Pipeline) -> Updater:
    if pipeline.updater is None:
        raise SolverStateError("Training pipeline has no updater")
    return pipeline.updater


def train_pass(pipeline: Pipeline, readers: Sequence[Reader]) -> LossMeter:
    """One full pass of gradient steps over ``readers``, in order."""
    updater = _require_updater(pipeline)
    param = pipeline.model.param
    meter = LossMeter()
    for reader in readers:
        reader.reset()
        for batch in reader:
            _check_stop(pipeline, "training")
            batch_loss, grad = pipeline.loss.gradient(batch, param)
            updater.update(param, grad)
            meter.add(batch_loss, len(batch))
    return meter


def evaluate_pass(pipeline: Pipeline, reader: Reader) -> LossMeter:
    """Row-weighted loss of the current parameters over ``reader``."""
    meter = LossMeter()
    reader.reset()
    for batch in reader:
        _check_stop(pipeline, "evaluation")
        batch_loss, _ = pipeline.loss.evaluate(batch, pipeline.model.param)
        meter.add(batch_loss, len(batch))
    return meter


class SGDTrainLoop:
    """Mini-batch gradient descent over the pipeline's readers."""

    def run(self, pipeline: Pipeline) -> TrainingResult:
        config = pipeline.config
        if config.cross_validation:
            return self._cross_validate(pipeline)

        train_reader = pipeline.readers[0]
        test_reader = pipeline.readers[1] if len(pipeline.readers) > 1 else None

        history = self._fit(pipeline, [train_reader], test_reader)
        last = history[-1]

        checkpoint_path = ""
        if config.model_checkpoint_file:
            checkpoint_path = str(pipeline.model.save(Path(config.model_checkpoint_file)))

        logger.info(
            "Training complete",
            extra={
                "epochs": len(history),
                "train_loss": last.train_loss,
                "test_loss": last.test_loss,
                "checkpoint": checkpoint_path or None,
            },
        )
        return TrainingResult(
            epochs=len(history),
            train_loss=last.train_loss,
            test_loss=last.test_loss,
            checkpoint_path=checkpoint_path,
            history=tuple(history),
        )

    def teardown(self, pipeline: Pipeline) -> None:
        if pipeline.updater is not None:
            pipeline.updater.reset()

    def _fit(
        self,
        pipeline: Pipeline,
        train_readers: Sequence[Reader],
        test_reader: Optional[Reader],
        fold: Optional[int] = None,
    ) -> list[EpochMetrics]:
        history: list[EpochMetrics] = []
        timer = EpochTimer()
        for epoch in range(pipeline.config.num_epochs):
            timer.start()
            train = train_pass(pipeline, train_readers)
            test_loss = evaluate_pass(pipeline, test_reader).mean if test_reader else None
            history.append(timer.finish(epoch, train, test_loss=test_loss, fold=fold))
        return history

    def _cross_validate(self, pipeline: Pipeline) -> TrainingResult:
        updater = _require_updater(pipeline)
        readers = pipeline.readers
        if len(readers) < 2:
            raise SolverError(
                f"Cross validation needs at least two folds, got {len(readers)}"
            )
        if pipeline.config.model_checkpoint_file:
            logger.warning(
                "Cross validation does not write a model checkpoint",
                extra={"model_checkpoint_file": pipeline.config.model_checkpoint_file},
            )

        initial = pipeline.model.snapshot()
        history: list[EpochMetrics] = []
        fold_losses: list[float] = []
        train_losses: list[float] = []
        for fold, held_out in enumerate(readers):
            pipeline.model.restore(initial)
            updater.reset()
            train_readers = [r for i, r in enumerate(readers) if i != fold]
            fold_history = self._fit(pipeline, train_readers, held_out, fold=fold)
            history.extend(fold_history)
            last = fold_history[-1]
            train_losses.append(last.train_loss)
            fold_losses.append(last.test_loss if last.test_loss is not None else 0.0)
            logger.info("Fold complete", extra={"fold": fold, "held_out_loss": fold_losses[-1]})

        result = TrainingResult(
            epochs=pipeline.config.num_epochs,
            train_loss=sum(train_losses) / len(train_losses),
            fold_losses=tuple(fold_losses),
            history=tuple(history),
        )
        logger.info(
            "Cross validation complete",
            extra={"folds": len(fold_losses), "cv_loss": result.cv_loss},
        )
        return result


class PredictLoop:
    """Streams the inference reader and emits one transformed prediction per row."""

    def run(self, pipeline: Pipeline) -> InferenceResult:
        config = pipeline.config
        reader = pipeline.readers[0]
        chunks: list[torch.Tensor] = []
        meter = LossMeter()

        reader.reset()
        for batch in reader:
            _check_stop(pipeline, "inference")
            batch_loss, preds = pipeline.loss.evaluate(batch, pipeline.model.param)
            meter.add(batch_loss, len(batch))
            chunks.append(preds)

        predictions = torch.cat(chunks) if chunks else torch.zeros(0)

        output_file = ""
        if config.output_file:
            lines = (f"{value:.6f}" for value in predictions.tolist())
            atomic_write_lines(Path(config.output_file), lines)
            output_file = config.output_file

        logger.info(
            "Inference complete",
            extra={
                "rows": predictions.numel(),
                "loss": meter.mean,
                "output_file": output_file or None,
            },
        )
        return InferenceResult(
            predictions=predictions,
            output_file=output_file,
            loss=meter.mean if meter.rows else None,
        )

    def teardown(self, pipeline: Pipeline) -> None:
        pipeline.readers[0].reset()
