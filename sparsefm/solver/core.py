# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The lifecycle controller.

``Solver`` turns a validated ``SolverConfig`` into a ready-to-run pipeline
and hands it to a training or inference loop. The two modes assemble
different things:

Train:
  1. Check every component key the run needs against the registries
  2. Split the training file into folds when cross-validating
  3. Build one reader per fold, or train (+ optional test) readers, all
     sharing a single parser
  4. Pre-scan all readers for the largest feature index / field id
  5. Size the parameter vector from the family table, build the model
  6. Build updater, score and loss (loss composes the score), in that order

Inference:
  1. Check the parser, reader and loss keys
  2. Build the parser and one reader over the inference file
  3. Load the model checkpoint
  4. Reconcile the config from the model's metadata (one explicit step)
  5. Build score and loss

The solver never contains the training or prediction loop itself. It calls
whatever ``TrainLoop`` / ``InferenceLoop`` it was given with the assembled
``Pipeline``.

Failure anywhere in ``initialize`` releases everything acquired so far and
re-raises. No half-built pipeline survives a failed initialize.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Optional, Protocol, TypeVar

from sparsefm.config.schema import SolverConfig
from sparsefm.data.splitter import split_file
from sparsefm.logging.logger import get_logger
from sparsefm.model.core import Model
from sparsefm.model.sizing import FamilySpec, get_family
from sparsefm.solver.exceptions import InitializationError, SolverStateError
from sparsefm.solver.interfaces import Loss, Parser, Reader, Score, Updater
from sparsefm.solver.prescan import scan_dimensions
from sparsefm.solver.registry import (
    Registry,
    loss_registry,
    parser_registry,
    reader_key,
    reader_registry,
    score_registry,
    updater_registry,
)

logger: logging.Logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Pipeline:
    """
    The assembled components, as handed to a loop.

    The solver keeps ownership. Loops may use these for the duration of
    ``run`` / ``teardown`` and must not keep references afterwards.
    ``updater`` is None in inference mode.
    """

    config: SolverConfig
    readers: tuple[Reader, ...]
    model: Model
    score: Score
    loss: Loss
    updater: Optional[Updater]
    stop: threading.Event


class TrainLoop(Protocol):
    """Consumes a train pipeline and produces a trained model."""

    def run(self, pipeline: Pipeline) -> object: ...

    def teardown(self, pipeline: Pipeline) -> None: ...


class InferenceLoop(Protocol):
    """Consumes an inference pipeline and emits predictions."""

    def run(self, pipeline: Pipeline) -> object: ...

    def teardown(self, pipeline: Pipeline) -> None: ...


def _require(condition: object, message: str) -> None:
    if not condition:
        raise InitializationError(message)


def _create(registry: Registry[T], name: str) -> T:
    return registry.create(name).unwrap()


_DERIVED_FIELDS = ("num_feature", "num_field", "num_param")


def discard_derived(config: SolverConfig) -> SolverConfig:
    """
    Return ``config`` with the derived dimensions back at zero.

    Training always derives them from the data, so values a caller put in
    the config are dropped with a warning.
    """
    supplied = {key: getattr(config, key) for key in _DERIVED_FIELDS if getattr(config, key)}
    if not supplied:
        return config
    logger.warning(
        "Derived dimensions are recomputed from the data; supplied values ignored",
        extra={"ignored": supplied},
    )
    return config.model_copy(update=dict.fromkeys(_DERIVED_FIELDS, 0))


def reconcile_with_model(config: SolverConfig, model: Model) -> SolverConfig:
    """
    Return ``config`` with family and dimensions taken from ``model``.

    The model always wins: its family, ``num_feature`` and ``num_param``,
    its ``num_K`` when the family is latent and its ``num_field`` when the
    family is field-aware replace whatever the caller supplied. Explicitly
    supplied values that get overridden are logged as a warning.
    """
    update: dict[str, object] = {
        "score_func": model.score_func,
        "num_feature": model.num_feature,
        "num_param": model.num_param,
    }
    if model.spec.latent:
        update["num_K"] = model.num_K
    if model.spec.field_aware:
        update["num_field"] = model.num_field

    overridden = {
        key: {"given": getattr(config, key), "model": value}
        for key, value in update.items()
        if key in config.model_fields_set and getattr(config, key) != value
    }
    if overridden:
        logger.warning(
            "Config values overridden by the loaded model",
            extra={"overridden": overridden},
        )

    return config.model_copy(update=update)


class Solver:
    """
    Assembles, runs and tears down one train or inference pipeline.

    Usage:
        with Solver() as solver:
            solver.initialize(config)
            result = solver.start_work()

    Args:
        train_loop: Training extension point; defaults to ``SGDTrainLoop``.
        inference_loop: Inference extension point; defaults to ``PredictLoop``.
    """

    def __init__(
        self,
        train_loop: Optional[TrainLoop] = None,
        inference_loop: Optional[InferenceLoop] = None,
    ) -> None:
        if train_loop is None or inference_loop is None:
            from sparsefm.training.loops import PredictLoop, SGDTrainLoop

            train_loop = train_loop or SGDTrainLoop()
            inference_loop = inference_loop or PredictLoop()

        self.train_loop: TrainLoop = train_loop
        self.inference_loop: InferenceLoop = inference_loop
        self.stop = threading.Event()

        self.config: Optional[SolverConfig] = None
        self.parser: Optional[Parser] = None
        self.readers: list[Reader] = []
        self.model: Optional[Model] = None
        self.updater: Optional[Updater] = None
        self.score: Optional[Score] = None
        self.loss: Optional[Loss] = None
        self._initialized = False

    # ── Lifecycle ──

    def initialize(self, config: SolverConfig) -> None:
        """
        Assemble the pipeline for ``config.mode``.

        Raises:
            SolverStateError: If already initialized.
            UnknownComponentError: If a component key is not registered.
            InitializationError: If a fatal precondition fails.
            ScanInterrupted: If ``interrupt()`` was called during the pre-scan.
            FileNotFoundError, ParseError, ModelLoadError: From the data and
                model collaborators.
        """
        if self._initialized:
            raise SolverStateError("Solver is already initialized; call finalize() first")

        logger.info(
            "Initializing solver",
            extra={
                "mode": config.mode,
                "score_func": config.score_func,
                "loss_func": config.loss_func,
                "file_format": config.file_format,
                "reader": reader_key(config.on_disk),
            },
        )

        self.stop.clear()
        try:
            self.config = config
            if config.is_train:
                config = self._initialize_train(config)
            else:
                config = self._initialize_inference(config)
        except BaseException:
            self._release()
            raise

        self._initialized = True
        logger.info(
            "Solver ready",
            extra={
                "mode": config.mode,
                "readers": len(self.readers),
                "num_feature": config.num_feature,
                "num_field": config.num_field,
                "num_param": config.num_param,
            },
        )

    def start_work(self) -> object:
        """
        Run the training or inference loop over the assembled pipeline.

        Returns:
            Whatever the loop returns (``TrainingResult`` / ``InferenceResult``
            for the built-in loops).
        """
        pipeline = self.pipeline()
        if pipeline.config.is_train:
            return self.train_loop.run(pipeline)
        return self.inference_loop.run(pipeline)

    def finalize(self) -> None:
        """Run the mode's teardown and release every owned component. Idempotent."""
        if not self._initialized:
            return
        pipeline = self.pipeline()
        try:
            if pipeline.config.is_train:
                self.train_loop.teardown(pipeline)
            else:
                self.inference_loop.teardown(pipeline)
        finally:
            self._release()
            logger.info("Solver finalized", extra={"mode": pipeline.config.mode})

    def interrupt(self) -> None:
        """Ask a running pre-scan or loop to stop at the next batch boundary."""
        self.stop.set()

    def pipeline(self) -> Pipeline:
        """
        The assembled components.

        Raises:
            SolverStateError: If ``initialize`` has not completed.
        """
        if (
            not self._initialized
            or self.config is None
            or self.model is None
            or self.score is None
            or self.loss is None
        ):
            raise SolverStateError("Solver is not initialized; call initialize() first")
        return Pipeline(
            config=self.config,
            readers=tuple(self.readers),
            model=self.model,
            score=self.score,
            loss=self.loss,
            updater=self.updater,
            stop=self.stop,
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    def __enter__(self) -> "Solver":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.finalize()

    # ── Train path ──

    def _initialize_train(self, config: SolverConfig) -> SolverConfig:
        # Fail on bad keys before any file is touched.
        parser_registry.get(config.file_format)
        reader_registry.get(reader_key(config.on_disk))
        updater_registry.get(config.updater_type)
        score_registry.get(config.score_func)
        loss_registry.get(config.loss_func)
        family = get_family(config.score_func)
        config = discard_derived(config)

        if config.cross_validation:
            _require(config.train_set_file, "Cross validation needs a non-empty train_set_file")
            _require(config.num_folds > 0, f"num_folds must be positive, got {config.num_folds}")
            file_list = split_file(config.train_set_file, config.num_folds)
        else:
            _require(config.train_set_file, "Training needs a non-empty train_set_file")
            file_list = [Path(config.train_set_file)]
            if config.test_set_file:
                file_list.append(Path(config.test_set_file))

        parser = _create(parser_registry, config.file_format)
        self.parser = parser
        self._check_parser(family, parser, config.file_format)
        for path in file_list:
            self._add_reader(config, path, parser)

        dims = scan_dimensions(self.readers, family.field_aware, self.stop)
        num_field = dims.max_field if family.field_aware else 0
        num_param = family.num_param(dims.max_feature, num_field, config.num_K)
        config = config.with_dimensions(dims.max_feature, num_field, num_param)
        self.config = config

        self.model = Model.create(config)

        self.updater = _create(updater_registry, config.updater_type)
        self.updater.initialize(config)

        self.score = _create(score_registry, config.score_func)
        self.score.initialize(config)

        self.loss = _create(loss_registry, config.loss_func)
        self.loss.initialize(self.score)
        return config

    # ── Inference path ──

    def _initialize_inference(self, config: SolverConfig) -> SolverConfig:
        parser_registry.get(config.file_format)
        reader_registry.get(reader_key(config.on_disk))
        loss_registry.get(config.loss_func)

        _require(config.inference_file, "Inference needs a non-empty inference_file")
        _require(config.model_checkpoint_file, "Inference needs a non-empty model_checkpoint_file")

        parser = _create(parser_registry, config.file_format)
        self.parser = parser
        self._add_reader(config, Path(config.inference_file), parser)

        self.model = Model.load(Path(config.model_checkpoint_file))
        config = reconcile_with_model(config, self.model)
        self.config = config
        self._check_parser(self.model.spec, parser, config.file_format)

        self.score = _create(score_registry, config.score_func)
        self.score.initialize(config)

        self.loss = _create(loss_registry, config.loss_func)
        self.loss.initialize(self.score)
        return config

    # ── Helpers ──

    def _add_reader(self, config: SolverConfig, path: Path, parser: Parser) -> Reader:
        """Create a reader bound to ``path`` with the shared parser."""
        reader = _create(reader_registry, reader_key(config.on_disk))
        # Owned as soon as it exists, so a failing initialize still closes it.
        self.readers.append(reader)
        reader.initialize(path, config.batch_size, parser)
        return reader

    @staticmethod
    def _check_parser(family: FamilySpec, parser: Parser, file_format: str) -> None:
        if family.field_aware and not parser.field_aware:
            raise InitializationError(
                f"Model family '{family.name}' needs field ids, "
                f"but file format '{file_format}' has none"
            )

    def _release(self) -> None:
        for reader in self.readers:
            reader.close()
        self.readers = []
        self.parser = None
        self.model = None
        self.updater = None
        self.score = None
        self.loss = None
        self.config = None
        self._initialized = False
