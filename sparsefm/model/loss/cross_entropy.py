# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Logistic loss for binary classification.

Labels may be written as {0, 1} or {-1, +1}; anything > 0 is the positive
class. Inference emits sigmoid probabilities.
"""

import torch
import torch.nn.functional as F

from sparsefm.solver.interfaces import Loss
from sparsefm.solver.registry import loss_registry


def binary_targets(labels: torch.Tensor) -> torch.Tensor:
    """Map any label encoding onto {0.0, 1.0}."""
    return (labels > 0).to(labels.dtype)


class CrossEntropyLoss(Loss):
    """Binary cross entropy on logits."""

    def forward(self, preds: torch.Tensor, labels: torch.Tensor) -> torch.Tensor:
        return F.binary_cross_entropy_with_logits(preds, binary_targets(labels))

    def transform(self, preds: torch.Tensor) -> torch.Tensor:
        return torch.sigmoid(preds)


loss_registry.register("cross_entropy", CrossEntropyLoss)
