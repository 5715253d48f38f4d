# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Component registries for sparsefm.

Each pluggable family (parser, reader, updater, score, loss) has its own
``Registry`` so a class can never be registered under the wrong family.
The config string alone selects the implementation: the solver asks the
registry, the registry maps the string to the class and builds a fresh
instance. No if/else chains anywhere else.

The registries are populated once, by ``_register_builtins()`` at import
time; third-party code can call ``register`` for extra keys.

``create`` returns a ``Created`` result rather than ``None`` on a miss, so
a caller cannot forget a null check: ``unwrap()`` either hands back the
instance or raises the descriptive ``UnknownComponentError``.
"""

import logging
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from sparsefm.logging.logger import get_logger
from sparsefm.solver.exceptions import UnknownComponentError
from sparsefm.solver.interfaces import Loss, Parser, Reader, Score, Updater

logger: logging.Logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Created(Generic[T]):
    """Outcome of ``Registry.create``: exactly one of the two fields is set."""

    component: Optional[T] = None
    error: Optional[UnknownComponentError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        if self.component is None:
            raise RuntimeError("Created holds neither a component nor an error")
        return self.component


class Registry(Generic[T]):
    """Maps config strings to implementations of one component family."""

    def __init__(self, family: str, base: type[T]) -> None:
        self.family = family
        self.base = base
        self._classes: dict[str, type[T]] = {}

    def register(self, name: str, cls: type[T]) -> None:
        """
        Register ``cls`` under ``name``.

        Raises:
            TypeError: If ``cls`` does not implement the family's base class.
            ValueError: If ``name`` is already taken.
        """
        if not (isinstance(cls, type) and issubclass(cls, self.base)):
            raise TypeError(
                f"{self.family} '{name}' must subclass {self.base.__name__}, got {cls!r}"
            )
        if name in self._classes:
            raise ValueError(
                f"{self.family.capitalize()} type '{name}' is already registered "
                f"to {self._classes[name].__name__}"
            )
        self._classes[name] = cls
        logger.debug("registered_component", extra={"family": self.family, "name": name})

    def get(self, name: str) -> type[T]:
        """
        Look up the class registered under ``name``.

        Raises:
            UnknownComponentError: If ``name`` is not registered.
        """
        if name not in self._classes:
            raise UnknownComponentError(self.family, name, self.names())
        return self._classes[name]

    def create(self, name: str) -> Created[T]:
        """Build a fresh, exclusively owned instance."""
        try:
            cls = self.get(name)
        except UnknownComponentError as err:
            logger.error(
                "Cannot create component",
                extra={"family": self.family, "name": name, "available": err.available},
            )
            return Created(error=err)
        return Created(component=cls())

    def names(self) -> list[str]:
        """Sorted list of registered keys."""
        return sorted(self._classes)

    def __contains__(self, name: object) -> bool:
        return name in self._classes


parser_registry: Registry[Parser] = Registry("parser", Parser)
reader_registry: Registry[Reader] = Registry("reader", Reader)
updater_registry: Registry[Updater] = Registry("updater", Updater)
score_registry: Registry[Score] = Registry("score", Score)
loss_registry: Registry[Loss] = Registry("loss", Loss)


def reader_key(on_disk: bool) -> str:
    """Reader registry key for the configured storage mode."""
    return "disk" if on_disk else "memory"


# ── Builtin Registration ───────────────────────────────────────────────────

_BUILTINS_REGISTERED: bool = False


def _register_builtins() -> None:
    """
    Register all built-in components.

    Importing the implementation packages triggers their ``register`` calls.
    Idempotent.
    """
    global _BUILTINS_REGISTERED
    if _BUILTINS_REGISTERED:
        return
    _BUILTINS_REGISTERED = True

    import sparsefm.data.parser  # noqa: F401
    import sparsefm.data.reader  # noqa: F401
    import sparsefm.model.loss  # noqa: F401
    import sparsefm.model.score  # noqa: F401
    import sparsefm.model.updater  # noqa: F401

    logger.debug(
        "builtins_registered",
        extra={
            "parsers": parser_registry.names(),
            "readers": reader_registry.names(),
            "updaters": updater_registry.names(),
            "scores": score_registry.names(),
            "losses": loss_registry.names(),
        },
    )


_register_builtins()
