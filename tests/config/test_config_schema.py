# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for SolverConfig: immutability and the write-once derived fields."""

import pytest
from pydantic import ValidationError

from sparsefm.config.schema import SolverConfig


class TestImmutability:
    def test_fields_cannot_be_assigned(self) -> None:
        config = SolverConfig()
        with pytest.raises(ValidationError):
            config.num_K = 10  # type: ignore[misc]

    def test_unknown_field_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SolverConfig.model_validate({"numK": 4})

    def test_mode_is_restricted(self) -> None:
        with pytest.raises(ValidationError):
            SolverConfig(mode="serve")  # type: ignore[arg-type]


class TestDerivedDimensions:
    def test_with_dimensions_returns_new_copy(self) -> None:
        config = SolverConfig(score_func="fm")
        derived = config.with_dimensions(num_feature=100, num_field=0, num_param=501)

        assert derived is not config
        assert (derived.num_feature, derived.num_field, derived.num_param) == (100, 0, 501)
        assert config.num_param == 0
        assert derived.score_func == "fm"

    def test_with_dimensions_is_write_once(self) -> None:
        derived = SolverConfig().with_dimensions(num_feature=7, num_field=0, num_param=8)
        with pytest.raises(ValueError, match="write-once"):
            derived.with_dimensions(num_feature=9, num_field=0, num_param=10)

    def test_is_train(self) -> None:
        assert SolverConfig().is_train
        assert not SolverConfig(mode="inference").is_train
