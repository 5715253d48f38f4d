# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for Solver.initialize in inference mode.

The loaded model is authoritative: family and dimensions come from its
metadata, whatever the caller put in the config.
"""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest
import torch

from sparsefm.config.schema import SolverConfig
from sparsefm.model.core import Model
from sparsefm.model.score import FFMScore, FMScore
from sparsefm.model.sizing import compute_num_param
from sparsefm.solver.core import Solver, reconcile_with_model
from sparsefm.solver.exceptions import InitializationError, UnknownComponentError

ConfigFactory = Callable[..., SolverConfig]


def _save_model(path: Path, score_func: str, num_feature: int, num_field: int, k: int) -> Path:
    size = compute_num_param(score_func, num_feature, num_field, k)
    model = Model(score_func, num_feature, k, num_field, torch.randn(size))
    return model.save(path)


@pytest.fixture()
def fm_model(tmp_path: Path) -> Path:
    return _save_model(tmp_path / "fm.pt", "fm", num_feature=9, num_field=0, k=3)


@pytest.fixture()
def ffm_model(tmp_path: Path) -> Path:
    return _save_model(tmp_path / "ffm.pt", "ffm", num_feature=7, num_field=3, k=2)


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


class TestInferenceAssembly:
    def test_model_overrides_caller_values(
        self, make_config: ConfigFactory, libsvm_test: Path, fm_model: Path
    ) -> None:
        config = make_config(
            mode="inference",
            inference_file=str(libsvm_test),
            model_checkpoint_file=str(fm_model),
            score_func="linear",
            num_K=16,
            num_feature=1,
        )
        with Solver() as solver:
            solver.initialize(config)

            assert solver.config is not None
            assert solver.config.score_func == "fm"
            assert solver.config.num_feature == 9
            assert solver.config.num_K == 3
            assert solver.config.num_param == 9 + 1 + 9 * 3
            assert isinstance(solver.score, FMScore)
            assert solver.score.num_K == 3

    def test_one_reader_and_no_updater(
        self, make_config: ConfigFactory, libsvm_test: Path, fm_model: Path
    ) -> None:
        config = make_config(
            mode="inference",
            inference_file=str(libsvm_test),
            model_checkpoint_file=str(fm_model),
            updater_type="not-checked-in-inference",
        )
        with Solver() as solver:
            solver.initialize(config)
            assert len(solver.readers) == 1
            assert solver.updater is None
            assert solver.pipeline().updater is None

    def test_ffm_reconciles_fields(
        self, make_config: ConfigFactory, libffm_train: Path, ffm_model: Path
    ) -> None:
        config = make_config(
            mode="inference",
            inference_file=str(libffm_train),
            model_checkpoint_file=str(ffm_model),
            file_format="libffm",
        )
        with Solver() as solver:
            solver.initialize(config)
            assert solver.config is not None
            assert solver.config.score_func == "ffm"
            assert solver.config.num_field == 3
            assert solver.config.num_K == 2
            assert isinstance(solver.score, FFMScore)

    def test_ffm_model_needs_field_aware_format(
        self, make_config: ConfigFactory, libsvm_test: Path, ffm_model: Path
    ) -> None:
        config = make_config(
            mode="inference",
            inference_file=str(libsvm_test),
            model_checkpoint_file=str(ffm_model),
        )
        solver = Solver()
        with pytest.raises(InitializationError):
            solver.initialize(config)
        assert solver.readers == []


class TestInferencePreconditions:
    def test_empty_inference_file(self, make_config: ConfigFactory, fm_model: Path) -> None:
        config = make_config(mode="inference", model_checkpoint_file=str(fm_model))
        with pytest.raises(InitializationError, match="inference_file"):
            Solver().initialize(config)

    def test_empty_model_file(self, make_config: ConfigFactory, libsvm_test: Path) -> None:
        config = make_config(mode="inference", inference_file=str(libsvm_test))
        with pytest.raises(InitializationError, match="model_checkpoint_file"):
            Solver().initialize(config)

    def test_missing_model_file(
        self, make_config: ConfigFactory, libsvm_test: Path, tmp_path: Path
    ) -> None:
        config = make_config(
            mode="inference",
            inference_file=str(libsvm_test),
            model_checkpoint_file=str(tmp_path / "missing.pt"),
        )
        solver = Solver()
        with pytest.raises(FileNotFoundError):
            solver.initialize(config)
        assert solver.readers == []

    def test_unknown_loss(self, make_config: ConfigFactory, fm_model: Path) -> None:
        config = make_config(
            mode="inference",
            inference_file="/nonexistent.txt",
            model_checkpoint_file=str(fm_model),
            loss_func="nope",
        )
        with pytest.raises(UnknownComponentError):
            Solver().initialize(config)


class TestReconcileWithModel:
    def test_linear_model_keeps_caller_k(self, make_config: ConfigFactory) -> None:
        model = Model("linear", num_feature=4, num_K=1, num_field=0, param=torch.zeros(5))
        config = reconcile_with_model(make_config(score_func="fm", num_K=6), model)

        assert config.score_func == "linear"
        assert config.num_feature == 4
        assert config.num_param == 5
        assert config.num_K == 6

    def test_overridden_values_are_warned(self, make_config: ConfigFactory) -> None:
        model = Model("fm", num_feature=2, num_K=2, num_field=0, param=torch.zeros(7))
        handler = _ListHandler()
        logger = logging.getLogger("sparsefm.solver.core")
        logger.addHandler(handler)
        try:
            reconcile_with_model(make_config(num_K=5, learning_rate=0.5), model)
        finally:
            logger.removeHandler(handler)

        warnings = [r for r in handler.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        overridden = warnings[0].overridden  # type: ignore[attr-defined]
        assert overridden == {"num_K": {"given": 5, "model": 2}}

    def test_defaults_are_not_warned(self) -> None:
        model = Model("fm", num_feature=2, num_K=2, num_field=0, param=torch.zeros(7))
        handler = _ListHandler()
        logger = logging.getLogger("sparsefm.solver.core")
        logger.addHandler(handler)
        try:
            reconcile_with_model(SolverConfig(mode="inference"), model)
        finally:
            logger.removeHandler(handler)

        assert [r for r in handler.records if r.levelno == logging.WARNING] == []
