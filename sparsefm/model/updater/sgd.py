# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Plain stochastic gradient descent with L2 regularisation:

  w <- w - lr * (g + lambda * w)
"""

import torch

from sparsefm.solver.interfaces import Updater
from sparsefm.solver.registry import updater_registry


def regularized(param: torch.Tensor, grad: torch.Tensor, regu_lambda: float) -> torch.Tensor:
    """Gradient with the L2 term folded in."""
    if regu_lambda == 0.0:
        return grad
    return grad + regu_lambda * param


class SGDUpdater(Updater):
    """Fixed learning rate SGD."""

    def update(self, param: torch.Tensor, grad: torch.Tensor) -> None:
        with torch.no_grad():
            param.sub_(self.learning_rate * regularized(param, grad, self.regu_lambda))


updater_registry.register("sgd", SGDUpdater)
