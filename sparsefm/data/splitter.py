# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
K-fold file splitter for cross validation.

The source file is cut into ``num_folds`` contiguous partitions named
``<source>_0`` ... ``<source>_<k-1>``. With ``n`` data lines, the first
``n % k`` folds get ``n // k + 1`` lines and the rest get ``n // k``, so fold
sizes never differ by more than one. Blank lines are dropped.

The file is streamed twice (once to count, once to copy) so the split never
holds the dataset in memory.
"""

import logging
from pathlib import Path

from sparsefm.logging.logger import get_logger
from sparsefm.utils.filesystem import atomic_open

logger: logging.Logger = get_logger(__name__)


def fold_filenames(source: str | Path, num_folds: int) -> list[Path]:
    """Names of the fold files for ``source``: ``<source>_<i>``."""
    if num_folds < 1:
        raise ValueError(f"num_folds must be >= 1, got {num_folds}")
    return [Path(f"{source}_{i}") for i in range(num_folds)]


def fold_sizes(num_lines: int, num_folds: int) -> list[int]:
    """Line count of every fold for a file of ``num_lines`` lines."""
    base, extra = divmod(num_lines, num_folds)
    return [base + 1 if i < extra else base for i in range(num_folds)]


def _count_lines(path: Path) -> int:
    with open(path, "r", encoding="utf-8") as handle:
        return sum(1 for line in handle if line.strip())


def split_file(source: str | Path, num_folds: int) -> list[Path]:
    """
    Split ``source`` into ``num_folds`` fold files.

    Existing fold files are overwritten. Each fold is written atomically.

    Args:
        source: The file to split.
        num_folds: Number of folds, at least 1.

    Returns:
        The fold paths in fold order.

    Raises:
        ValueError: If ``num_folds`` < 1.
        FileNotFoundError: If ``source`` does not exist.
    """
    source_path = Path(source)
    targets = fold_filenames(source_path, num_folds)
    if not source_path.is_file():
        raise FileNotFoundError(f"Cannot split missing file: {source_path}")

    sizes = fold_sizes(_count_lines(source_path), num_folds)

    with open(source_path, "r", encoding="utf-8") as src:
        data_lines = (line if line.endswith("\n") else line + "\n" for line in src if line.strip())
        for target, size in zip(targets, sizes):
            with atomic_open(target) as out:
                for _ in range(size):
                    out.write(next(data_lines))

    logger.info(
        "Split file into folds",
        extra={"source": str(source_path), "num_folds": num_folds, "fold_sizes": sizes},
    )
    return targets
