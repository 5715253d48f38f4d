# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Atomic file writes for sparsefm.

Fold files, prediction files and model checkpoints are all written the same
way: into a temporary file in the target's directory, then renamed over the
target. Rename within one filesystem is atomic on POSIX, so a crash leaves a
stray temp file behind rather than a half-written artifact.
"""

import os
import tempfile
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

_TMP_PREFIX = ".sparsefm_tmp_"


@contextmanager
def atomic_path(target_path: Path) -> Iterator[Path]:
    """
    Yield a temp path next to ``target_path``; rename it into place on a
    clean exit, delete it if the block raises.

    For writers that want a path rather than a handle (``torch.save``).
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(dir=str(target_path.parent), prefix=_TMP_PREFIX, suffix=".tmp")
    os.close(fd)
    temp_path = Path(name)
    try:
        yield temp_path
        os.replace(temp_path, target_path)
    except BaseException:
        if temp_path.exists():
            temp_path.unlink()
        raise


@contextmanager
def atomic_open(target_path: Path, encoding: str = "utf-8") -> Iterator[IO[str]]:
    """Text-mode handle whose content only appears at ``target_path`` on success."""
    with atomic_path(target_path) as temp_path:
        with open(temp_path, "w", encoding=encoding) as handle:
            yield handle


def atomic_write_lines(target_path: Path, lines: Iterable[str], encoding: str = "utf-8") -> int:
    """
    Write one line per item atomically. Returns the number of lines written.

    Items must not carry their own trailing newline.
    """
    count = 0
    with atomic_open(target_path, encoding=encoding) as handle:
        for line in lines:
            handle.write(line)
            handle.write("\n")
            count += 1
    return count
