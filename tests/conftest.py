# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for sparsefm tests.

The datasets are tiny on purpose: small enough that every expected maximum
and fold size can be checked by eye.
"""

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from sparsefm.config.schema import SolverConfig

# max_feature = 7
LIBSVM_TRAIN = textwrap.dedent("""\
    1 1:0.5 3:1.0
    0 2:1.0 7:0.25
    1 1:1.0 5:2.0
    0 4:0.5
    1 3:1.0 6:1.5
    0 2:0.5 7:1.0
""")

# max_feature = 9
LIBSVM_TEST = textwrap.dedent("""\
    1 2:1.0 9:1.0
    0 1:0.5
""")

# max_feature = 7, max_field = 3
LIBFFM_TRAIN = textwrap.dedent("""\
    1 1:1:0.5 2:3:1.0
    0 1:2:1.0 3:7:0.25
    1 2:1:1.0 3:5:2.0
    0 1:4:0.5
""")


@pytest.fixture()
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing ``content`` to ``tmp_path / name``."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def libsvm_train(write_file: Callable[[str, str], Path]) -> Path:
    return write_file("train.libsvm", LIBSVM_TRAIN)


@pytest.fixture()
def libsvm_test(write_file: Callable[[str, str], Path]) -> Path:
    return write_file("test.libsvm", LIBSVM_TEST)


@pytest.fixture()
def libffm_train(write_file: Callable[[str, str], Path]) -> Path:
    return write_file("train.libffm", LIBFFM_TRAIN)


@pytest.fixture()
def make_config() -> Callable[..., SolverConfig]:
    """Factory for validated configs; keyword arguments are field values."""

    def _make(**fields: object) -> SolverConfig:
        return SolverConfig.model_validate(fields)

    return _make
