# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions raised while assembling or running a pipeline.

The CLI maps these onto exit codes, so every failure a user can cause ends
up as one of the classes below rather than a bare ``RuntimeError``.
"""


class SolverError(Exception):
    """Base for all pipeline errors."""


class InitializationError(SolverError):
    """
    A fatal precondition failed while assembling the pipeline: a required
    file path is empty, the fold count is not positive, and the like.
    """


class UnknownComponentError(SolverError, KeyError):
    """A config string names no registered component."""

    def __init__(self, family: str, name: str, available: list[str]) -> None:
        self.family = family
        self.name = name
        self.available = available
        super().__init__(f"Cannot create {family} '{name}'. Available: {available}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0])


class SolverStateError(SolverError):
    """The solver was driven out of order (start before initialize, etc.)."""


class ParseError(SolverError, ValueError):
    """A data line does not match the configured file format."""


class ModelLoadError(SolverError):
    """A model checkpoint exists but cannot be turned back into a Model."""
