# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The parameter model: one flat parameter vector plus the metadata needed to
interpret it.

A Model is created exactly once per run, in one of two ways:

  - ``Model.create(config)`` for training: sized by ``config.num_param``,
    all zeros for families flagged ``zero_init`` (linear), Gaussian noise
    with ``config.init_std`` otherwise. Seeded, so two runs with the same
    config start from the same vector.
  - ``Model.load(path)`` for inference: read back from a checkpoint.

Checkpoint layout (a single ``torch.save`` payload):

  {"format_version": 1,
   "param": <float32 tensor [num_param]>,
   "metadata": {"score_func", "num_feature", "num_K", "num_field", "num_param"}}

Saves are atomic (temp file + rename). The solver only depends on the
accessors below, never on this layout.
"""

import logging
from pathlib import Path
from typing import Any

import torch

from sparsefm.config.schema import SolverConfig
from sparsefm.logging.logger import get_logger
from sparsefm.model.sizing import FamilySpec, get_family
from sparsefm.solver.exceptions import ModelLoadError, UnknownComponentError
from sparsefm.utils.filesystem import atomic_path

logger: logging.Logger = get_logger(__name__)

CHECKPOINT_FORMAT_VERSION = 1


class Model:
    """Owned parameter vector plus family and dimension metadata."""

    def __init__(
        self,
        score_func: str,
        num_feature: int,
        num_K: int,
        num_field: int,
        param: torch.Tensor,
    ) -> None:
        self._spec: FamilySpec = get_family(score_func)
        expected = self._spec.num_param(num_feature, num_field, num_K)
        if param.dim() != 1 or param.numel() != expected:
            raise ValueError(
                f"{score_func} model with num_feature={num_feature}, num_field={num_field}, "
                f"K={num_K} needs {expected} parameters, got shape {tuple(param.shape)}"
            )
        self._num_feature = num_feature
        self._num_K = num_K
        self._num_field = num_field
        self.param = param

    # ── Construction ──

    @classmethod
    def create(cls, config: SolverConfig) -> "Model":
        """
        Build a fresh model sized from the derived config fields.

        Raises:
            UnknownComponentError: If ``config.score_func`` is not a family.
            ValueError: If ``config.num_param`` disagrees with the sizing table.
        """
        spec = get_family(config.score_func)
        if spec.zero_init:
            param = torch.zeros(config.num_param, dtype=torch.float32)
        else:
            generator = torch.Generator()
            generator.manual_seed(config.seed)
            param = torch.randn(config.num_param, generator=generator, dtype=torch.float32)
            param.mul_(config.init_std)

        model = cls(
            score_func=config.score_func,
            num_feature=config.num_feature,
            num_K=config.num_K,
            num_field=config.num_field,
            param=param,
        )
        logger.info(
            "Model created",
            extra={
                "score_func": config.score_func,
                "num_param": config.num_param,
                "init": "zero" if spec.zero_init else "gaussian",
            },
        )
        return model

    @classmethod
    def load(cls, path: Path) -> "Model":
        """
        Load a model checkpoint.

        Raises:
            FileNotFoundError: If ``path`` is not a file.
            ModelLoadError: If the payload is unreadable or inconsistent.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Model checkpoint not found: {path}")

        try:
            payload: Any = torch.load(path, map_location="cpu", weights_only=True)
        except Exception as err:
            raise ModelLoadError(f"Cannot read model checkpoint {path}: {err}") from err

        if not isinstance(payload, dict) or "param" not in payload or "metadata" not in payload:
            raise ModelLoadError(f"{path} is not a sparsefm model checkpoint")
        version = payload.get("format_version")
        if version != CHECKPOINT_FORMAT_VERSION:
            raise ModelLoadError(
                f"Unsupported checkpoint format {version!r} in {path}, "
                f"expected {CHECKPOINT_FORMAT_VERSION}"
            )

        meta = payload["metadata"]
        param = payload["param"]
        if not isinstance(meta, dict) or not isinstance(param, torch.Tensor):
            raise ModelLoadError(
                f"{path} holds metadata of type {type(meta).__name__} and param of type "
                f"{type(param).__name__}; expected a dict and a tensor"
            )
        try:
            model = cls(
                score_func=meta["score_func"],
                num_feature=int(meta["num_feature"]),
                num_K=int(meta["num_K"]),
                num_field=int(meta["num_field"]),
                param=param.to(torch.float32),
            )
        except (KeyError, TypeError, ValueError, UnknownComponentError) as err:
            raise ModelLoadError(f"Inconsistent model checkpoint {path}: {err}") from err

        logger.info("Model loaded", extra={"path": str(path), **model.metadata()})
        return model

    def save(self, path: Path) -> Path:
        """Write the checkpoint atomically and return its path."""
        path = Path(path)
        payload = {
            "format_version": CHECKPOINT_FORMAT_VERSION,
            "param": self.param.detach().clone(),
            "metadata": self.metadata(),
        }
        with atomic_path(path) as temp_path:
            torch.save(payload, temp_path)
        logger.info("Model saved", extra={"path": str(path), "num_param": self.num_param})
        return path

    # ── Accessors ──

    @property
    def score_func(self) -> str:
        return self._spec.name

    @property
    def spec(self) -> FamilySpec:
        return self._spec

    @property
    def num_feature(self) -> int:
        return self._num_feature

    @property
    def num_K(self) -> int:
        return self._num_K

    @property
    def num_field(self) -> int:
        return self._num_field

    @property
    def num_param(self) -> int:
        return self.param.numel()

    def metadata(self) -> dict[str, object]:
        return {
            "score_func": self.score_func,
            "num_feature": self._num_feature,
            "num_K": self._num_K,
            "num_field": self._num_field,
            "num_param": self.num_param,
        }

    # ── State for cross validation ──

    def snapshot(self) -> torch.Tensor:
        """Copy of the current parameters."""
        return self.param.detach().clone()

    def restore(self, snapshot: torch.Tensor) -> None:
        """Overwrite the parameters in place with a snapshot."""
        if snapshot.shape != self.param.shape:
            raise ValueError(
                f"Snapshot shape {tuple(snapshot.shape)} does not match {tuple(self.param.shape)}"
            )
        with torch.no_grad():
            self.param.copy_(snapshot)
