# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the sparsefm CLI.

Each handler loads the config (file, then ``--set`` pairs, then shortcuts),
bootstraps the process, runs one Solver and maps the outcome to an exit
code:

  ConfigError                                -> CONFIG_ERROR
  UnknownComponentError, InitializationError -> VALIDATION_ERROR
  anything else                              -> RUNTIME_ERROR

No print() calls. Everything goes through the structured logger.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional

from sparsefm.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, VALIDATION_ERROR
from sparsefm.config.exceptions import ConfigError
from sparsefm.config.loader import load_config, parse_overrides
from sparsefm.config.schema import SolverConfig
from sparsefm.logging.logger import get_logger
from sparsefm.runtime.bootstrap import bootstrap
from sparsefm.solver.core import Solver
from sparsefm.solver.exceptions import InitializationError, UnknownComponentError
from sparsefm.training.loops import InferenceResult, TrainingResult

SHORTCUT_FIELDS: tuple[str, ...] = (
    "train_set_file",
    "test_set_file",
    "inference_file",
    "model_checkpoint_file",
    "output_file",
    "cross_validation",
    "num_folds",
    "score_func",
    "loss_func",
    "updater_type",
    "file_format",
    "on_disk",
    "num_K",
    "num_epochs",
    "learning_rate",
    "regu_lambda",
    "batch_size",
    "log_level",
)


def collect_overrides(args: argparse.Namespace, mode: str) -> dict[str, object]:
    """
    Merge ``--set`` pairs and shortcut flags into one override mapping.

    Shortcuts win over ``--set`` for the same field; the subcommand always
    sets ``mode``.
    """
    overrides: dict[str, object] = dict(parse_overrides(getattr(args, "overrides", None) or []))
    for name in SHORTCUT_FIELDS:
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = value
    overrides["mode"] = mode
    return overrides


def _load_and_bootstrap(
    args: argparse.Namespace,
    mode: str,
) -> tuple[int, Optional[SolverConfig], logging.Logger]:
    """
    The shared setup both commands need: load config, run bootstrap.

    Returns (exit_code, config, logger). A non-SUCCESS code means the caller
    should return it immediately.
    """
    logger = get_logger(f"sparsefm.cli.{mode}", log_level=args.log_level or "INFO")

    try:
        config_path = Path(args.config) if args.config is not None else None
        config = load_config(config_path, collect_overrides(args, mode))
    except ConfigError as err:
        logger.error("Configuration error", extra={"command": mode, "error": str(err)})
        return CONFIG_ERROR, None, logger

    bootstrap(config)
    return SUCCESS, config, logger


def _run(config: SolverConfig, logger: logging.Logger) -> tuple[int, object]:
    try:
        with Solver() as solver:
            solver.initialize(config)
            result = solver.start_work()
    except (UnknownComponentError, InitializationError) as err:
        logger.error("Validation error", extra={"mode": config.mode, "error": str(err)})
        return VALIDATION_ERROR, None
    except Exception as err:
        logger.error(
            "Runtime error",
            extra={"mode": config.mode, "error": str(err)},
            exc_info=True,
        )
        return RUNTIME_ERROR, None
    return SUCCESS, result


def handle_train(args: argparse.Namespace) -> int:
    """Train (or cross-validate) a model."""
    exit_code, config, logger = _load_and_bootstrap(args, "train")
    if exit_code != SUCCESS or config is None:
        return exit_code

    exit_code, result = _run(config, logger)
    if isinstance(result, TrainingResult):
        logger.info(
            "Command completed",
            extra={
                "command": "train",
                "train_loss": result.train_loss,
                "test_loss": result.test_loss,
                "cv_loss": result.cv_loss,
                "checkpoint": result.checkpoint_path or None,
            },
        )
    return exit_code


def handle_predict(args: argparse.Namespace) -> int:
    """Predict every row of the inference file with a saved model."""
    exit_code, config, logger = _load_and_bootstrap(args, "inference")
    if exit_code != SUCCESS or config is None:
        return exit_code

    exit_code, result = _run(config, logger)
    if isinstance(result, InferenceResult):
        logger.info(
            "Command completed",
            extra={
                "command": "predict",
                "rows": result.num_predictions,
                "output_file": result.output_file or None,
            },
        )
    return exit_code
