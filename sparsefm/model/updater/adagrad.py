# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
AdaGrad: per-coordinate step sizes from the running sum of squared
gradients.

  G <- G + g^2
  w <- w - lr * g / (sqrt(G) + eps)
"""

from typing import Optional

import torch

from sparsefm.config.schema import SolverConfig
from sparsefm.model.updater.sgd import regularized
from sparsefm.solver.interfaces import Updater
from sparsefm.solver.registry import updater_registry

_EPS = 1e-8


class AdaGradUpdater(Updater):
    """AdaGrad with L2 regularisation."""

    def __init__(self) -> None:
        self._accum: Optional[torch.Tensor] = None

    def initialize(self, config: SolverConfig) -> None:
        super().initialize(config)
        self._accum = torch.zeros(config.num_param, dtype=torch.float32)

    def update(self, param: torch.Tensor, grad: torch.Tensor) -> None:
        if self._accum is None:
            raise RuntimeError("AdaGradUpdater used before initialize()")
        with torch.no_grad():
            g = regularized(param, grad, self.regu_lambda)
            self._accum.add_(g * g)
            param.sub_(self.learning_rate * g / (self._accum.sqrt() + _EPS))

    def reset(self) -> None:
        if self._accum is not None:
            self._accum.zero_()


updater_registry.register("adagrad", AdaGradUpdater)
