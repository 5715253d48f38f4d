# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Hinge loss for binary classification: ``max(0, 1 - y * score)``.

Labels > 0 count as +1, everything else as -1.
"""

import torch

from sparsefm.solver.interfaces import Loss
from sparsefm.solver.registry import loss_registry


class HingeLoss(Loss):
    """Mean hinge loss over the batch."""

    def forward(self, preds: torch.Tensor, labels: torch.Tensor) -> torch.Tensor:
        signs = torch.where(labels > 0, 1.0, -1.0).to(preds.dtype)
        return torch.clamp(1.0 - signs * preds, min=0.0).mean()


loss_registry.register("hinge", HingeLoss)
