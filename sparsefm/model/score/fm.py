# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Factorization Machine score.

  y = linear + sum_{i<j} <v_i, v_j> x_i x_j

computed in O(nnz * K) with the usual identity

  sum_{i<j} <v_i, v_j> x_i x_j = 1/2 sum_k [ (sum_i v_ik x_i)^2 - sum_i v_ik^2 x_i^2 ]

Latent vector ``v_j`` of feature ``j`` occupies
``param[F + 1 + (j - 1) * K : F + 1 + j * K]``.
"""

import torch

from sparsefm.data.matrix import BatchTensors
from sparsefm.model.score.linear import linear_term
from sparsefm.solver.interfaces import Score
from sparsefm.solver.registry import score_registry


class FMScore(Score):
    """Second-order factorization machine."""

    def latent(self, param: torch.Tensor) -> torch.Tensor:
        """View of the latent block as (num_feature, K)."""
        offset = self.num_feature + 1
        return param[offset:].view(self.num_feature, self.num_K)

    def forward(self, batch: BatchTensors, param: torch.Tensor) -> torch.Tensor:
        linear = linear_term(batch, param)

        vx = self.latent(param)[batch.feature_ids - 1] * batch.values.unsqueeze(1)
        shape = (batch.num_rows, self.num_K)
        sum_vx = torch.zeros(shape, dtype=param.dtype).index_add(0, batch.row_ids, vx)
        sum_sq = torch.zeros(shape, dtype=param.dtype).index_add(0, batch.row_ids, vx * vx)
        pairwise = 0.5 * (sum_vx * sum_vx - sum_sq).sum(dim=1)

        return linear + pairwise


score_registry.register("fm", FMScore)
