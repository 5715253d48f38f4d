# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Linear score: ``y = b + sum_j w_j x_j``.

The bias lives at ``param[0]`` and the weight of feature ``j`` at
``param[j]``.
"""

import torch

from sparsefm.data.matrix import BatchTensors
from sparsefm.solver.interfaces import Score
from sparsefm.solver.registry import score_registry


def linear_term(batch: BatchTensors, param: torch.Tensor) -> torch.Tensor:
    """Bias plus weighted feature sum for every row. Shared by fm and ffm."""
    weighted = param[batch.feature_ids] * batch.values
    sums = torch.zeros(batch.num_rows, dtype=param.dtype).index_add(0, batch.row_ids, weighted)
    return sums + param[0]


class LinearScore(Score):
    """Plain linear model."""

    def forward(self, batch: BatchTensors, param: torch.Tensor) -> torch.Tensor:
        return linear_term(batch, param)


score_registry.register("linear", LinearScore)
