# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Parameter-sizing policy.

The length of a model's parameter vector is fixed when the model is built,
so it has to be derived up front from the dimensions the pre-scan found:

  | family | num_param                                      |
  |--------|------------------------------------------------|
  | linear | max_feature + 1                                |
  | fm     | max_feature + 1 + max_feature * K              |
  | ffm    | max_feature + 1 + max_feature * max_field * K  |

The ``+ 1`` is the bias slot at index 0. Each row of the table is a
``FamilySpec``; the solver reads the traits it needs (field-aware? latent?
zero init?) from the spec instead of comparing family names. A new family is
one ``register_family`` call.
"""

from dataclasses import dataclass
from typing import Callable

from sparsefm.solver.exceptions import UnknownComponentError


@dataclass(frozen=True)
class FamilySpec:
    """One model family and the traits the solver needs from it."""

    name: str
    field_aware: bool
    latent: bool
    zero_init: bool
    size: Callable[[int, int, int], int]

    def num_param(self, max_feature: int, max_field: int, num_K: int) -> int:
        if max_feature < 0 or max_field < 0 or num_K < 0:
            raise ValueError(
                f"Dimensions must be non-negative, got max_feature={max_feature}, "
                f"max_field={max_field}, K={num_K}"
            )
        return self.size(max_feature, max_field, num_K)


_FAMILIES: dict[str, FamilySpec] = {}


def register_family(spec: FamilySpec) -> None:
    if spec.name in _FAMILIES:
        raise ValueError(f"Model family '{spec.name}' is already registered")
    _FAMILIES[spec.name] = spec


def get_family(name: str) -> FamilySpec:
    """
    Look up a family.

    Raises:
        UnknownComponentError: If ``name`` is not in the table.
    """
    if name not in _FAMILIES:
        raise UnknownComponentError("model family", name, sorted(_FAMILIES))
    return _FAMILIES[name]


def list_families() -> list[str]:
    return sorted(_FAMILIES)


def compute_num_param(family: str, max_feature: int, max_field: int, num_K: int) -> int:
    """Parameter-vector length for ``family`` at the given dimensions."""
    return get_family(family).num_param(max_feature, max_field, num_K)


register_family(
    FamilySpec(
        name="linear",
        field_aware=False,
        latent=False,
        zero_init=True,
        size=lambda feat, field, k: feat + 1,
    )
)
register_family(
    FamilySpec(
        name="fm",
        field_aware=False,
        latent=True,
        zero_init=False,
        size=lambda feat, field, k: feat + 1 + feat * k,
    )
)
register_family(
    FamilySpec(
        name="ffm",
        field_aware=True,
        latent=True,
        zero_init=False,
        size=lambda feat, field, k: feat + 1 + feat * field * k,
    )
)
