# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the configuration system.

Kept apart from the schema so the CLI can catch config failures without
importing pydantic.
"""


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when the merged file + command line values fail schema validation:
    missing or unknown fields, type mismatches, out-of-range values.
    """
