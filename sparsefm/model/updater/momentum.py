# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Heavy-ball momentum:

  v <- mu * v + g
  w <- w - lr * v
"""

from typing import Optional

import torch

from sparsefm.config.schema import SolverConfig
from sparsefm.model.updater.sgd import regularized
from sparsefm.solver.interfaces import Updater
from sparsefm.solver.registry import updater_registry


class MomentumUpdater(Updater):
    """SGD with a velocity term."""

    def __init__(self) -> None:
        self._velocity: Optional[torch.Tensor] = None

    def initialize(self, config: SolverConfig) -> None:
        super().initialize(config)
        self.momentum = config.momentum
        self._velocity = torch.zeros(config.num_param, dtype=torch.float32)

    def update(self, param: torch.Tensor, grad: torch.Tensor) -> None:
        if self._velocity is None:
            raise RuntimeError("MomentumUpdater used before initialize()")
        with torch.no_grad():
            self._velocity.mul_(self.momentum).add_(regularized(param, grad, self.regu_lambda))
            param.sub_(self.learning_rate * self._velocity)

    def reset(self) -> None:
        if self._velocity is not None:
            self._velocity.zero_()


updater_registry.register("momentum", MomentumUpdater)
