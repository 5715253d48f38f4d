# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Squared error for regression."""

import torch
import torch.nn.functional as F

from sparsefm.solver.interfaces import Loss
from sparsefm.solver.registry import loss_registry


class SquaredLoss(Loss):
    """Mean squared error between raw scores and labels."""

    def forward(self, preds: torch.Tensor, labels: torch.Tensor) -> torch.Tensor:
        return F.mse_loss(preds, labels)


loss_registry.register("squared", SquaredLoss)
