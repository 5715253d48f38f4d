# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for sparsefm.

The sequence, run once per command before the solver is built:
  1. Check the interpreter version
  2. Seed every source of randomness from the config
  3. Apply the configured log level (and log file) to all package loggers
"""

import os
import platform
import random
import sys
from pathlib import Path

import torch

from sparsefm.config.schema import SolverConfig
from sparsefm.logging.logger import get_logger, set_package_log_level

MINIMUM_PYTHON = (3, 11)


def check_minimum_python() -> None:
    """
    Raises:
        RuntimeError: If the interpreter is older than 3.11.
    """
    if sys.version_info[:2] < MINIMUM_PYTHON:
        major, minor = sys.version_info[:2]
        raise RuntimeError(
            f"sparsefm requires Python >= {MINIMUM_PYTHON[0]}.{MINIMUM_PYTHON[1]}, "
            f"running {major}.{minor}"
        )


def set_deterministic_seed(seed: int) -> None:
    """Seed Python's ``random``, hash randomization and torch."""
    random.seed(seed)
    os.environ["PYTHONHASHSEED"] = str(seed)
    torch.manual_seed(seed)


def bootstrap(config: SolverConfig) -> None:
    """Put the process into a known state for one run of ``config``."""
    check_minimum_python()
    set_deterministic_seed(config.seed)

    log_file = Path(config.log_file) if config.log_file else None
    logger = get_logger("sparsefm.runtime", log_level=config.log_level)
    set_package_log_level(config.log_level, log_file)

    logger.info(
        "Bootstrap complete",
        extra={
            "mode": config.mode,
            "seed": config.seed,
            "python_version": platform.python_version(),
            "torch_version": torch.__version__,
            "platform": platform.system(),
        },
    )
