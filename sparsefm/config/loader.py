# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: YAML file + command line overrides -> frozen SolverConfig.

The pipeline is linear:
  1. Read and parse the YAML file, if one was given
  2. Layer the command line overrides on top (command line wins)
  3. Hand the merged dict to pydantic for validation
  4. Return the frozen config

Anything that goes wrong stops the run here with a clear error. There is no
fallback to defaults for a broken file.
"""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from sparsefm.config.exceptions import ConfigLoadError, ConfigValidationError
from sparsefm.config.schema import SolverConfig


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed mapping.

    Raises:
        ConfigLoadError: Missing file, unreadable file, invalid YAML, or a
            document that is not a mapping.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    # An empty file is a valid "all defaults" config.
    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def parse_overrides(pairs: Iterable[str]) -> dict[str, str]:
    """
    Turn ``key=value`` strings into a dict.

    Values stay strings; pydantic coerces them to the field types during
    validation ("10" -> 10, "true" -> True).

    Raises:
        ConfigLoadError: If an entry has no ``=`` or an empty key.
    """
    overrides: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigLoadError(f"Override must look like key=value, got: {pair!r}")
        overrides[key] = value.strip()
    return overrides


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, object]] = None,
) -> SolverConfig:
    """
    Load, merge, validate and freeze a run configuration.

    Args:
        config_path: Optional YAML file.
        overrides: Field values that take precedence over the file. ``None``
            values are ignored so argparse defaults don't clobber the file.

    Returns:
        A validated, frozen ``SolverConfig``.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations.
    """
    raw_data: dict[str, Any] = {}
    if config_path is not None:
        raw_data = _read_yaml_file(config_path)

    if overrides:
        raw_data.update({key: value for key, value in overrides.items() if value is not None})

    source = str(config_path) if config_path is not None else "<command line>"
    try:
        config = SolverConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(f"Config validation failed for {source}:\n{err}") from err

    return config
