# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the config loader.

We test:
  1. Valid YAML loads into a frozen config
  2. Command line overrides win over the file, None overrides are ignored
  3. Unknown fields and bad values raise ConfigValidationError
  4. Broken or non-mapping YAML raises ConfigLoadError
"""

import textwrap
from pathlib import Path

import pytest

from sparsefm.config.exceptions import ConfigError, ConfigLoadError, ConfigValidationError
from sparsefm.config.loader import load_config, parse_overrides


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        train_set_file: data/train.txt
        score_func: fm
        num_K: 8
        learning_rate: 0.05
        cross_validation: true
        num_folds: 3
    """)
    path = tmp_path / "run.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadValidConfig:
    def test_loads_values_from_file(self, config_file: Path) -> None:
        config = load_config(config_file)
        assert config.train_set_file == "data/train.txt"
        assert config.score_func == "fm"
        assert config.num_K == 8
        assert config.learning_rate == 0.05
        assert config.cross_validation is True
        assert config.num_folds == 3

    def test_unset_fields_take_defaults(self, config_file: Path) -> None:
        config = load_config(config_file)
        assert config.mode == "train"
        assert config.loss_func == "squared"
        assert config.num_param == 0

    def test_empty_file_is_all_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        config = load_config(path)
        assert config.score_func == "linear"

    def test_no_file_and_no_overrides(self) -> None:
        config = load_config()
        assert config.batch_size == 256


class TestOverrides:
    def test_override_wins_over_file(self, config_file: Path) -> None:
        config = load_config(config_file, {"num_K": 2, "score_func": "ffm"})
        assert config.num_K == 2
        assert config.score_func == "ffm"

    def test_none_override_is_ignored(self, config_file: Path) -> None:
        config = load_config(config_file, {"num_K": None})
        assert config.num_K == 8

    def test_string_overrides_are_coerced(self) -> None:
        config = load_config(overrides=parse_overrides(["num_epochs=3", "on_disk=true"]))
        assert config.num_epochs == 3
        assert config.on_disk is True

    def test_parse_overrides_splits_on_first_equals(self) -> None:
        assert parse_overrides(["output_file=a=b.txt"]) == {"output_file": "a=b.txt"}

    @pytest.mark.parametrize("pair", ["num_K", "=3", "  =x"])
    def test_malformed_override_raises(self, pair: str) -> None:
        with pytest.raises(ConfigLoadError):
            parse_overrides([pair])


class TestLoadInvalidConfig:
    def test_unknown_field_raises_validation_error(self, tmp_path: Path) -> None:
        path = tmp_path / "extra.yaml"
        path.write_text("not_a_field: 1\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError):
            load_config(path)

    def test_out_of_range_value_raises_validation_error(self) -> None:
        with pytest.raises(ConfigValidationError):
            load_config(overrides={"batch_size": 0})

    def test_bad_log_level_raises_validation_error(self) -> None:
        with pytest.raises(ConfigValidationError):
            load_config(overrides={"log_level": "LOUD"})

    def test_missing_file_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_directory_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not a file"):
            load_config(tmp_path)

    def test_broken_yaml_raises_load_error(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("{{not: yaml: at: all:::", encoding="utf-8")
        with pytest.raises(ConfigLoadError):
            load_config(path)

    def test_non_mapping_raises_load_error(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="mapping"):
            load_config(path)

    def test_all_config_errors_share_a_base(self) -> None:
        assert issubclass(ConfigLoadError, ConfigError)
        assert issubclass(ConfigValidationError, ConfigError)
