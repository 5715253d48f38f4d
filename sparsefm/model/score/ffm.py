# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Field-aware Factorization Machine score.

  y = linear + sum_{i<j} <v_{i, f_j}, v_{j, f_i}> x_i x_j

Each feature keeps one latent vector per field. Vector ``v_{j, f}`` occupies
``param[F + 1 + ((j - 1) * num_field + (f - 1)) * K]`` onward, K wide.

There is no O(nK) shortcut here: the pairs of every row are enumerated
explicitly, but the dot products for the whole batch go through torch in
one shot.
"""

import torch

from sparsefm.data.matrix import BatchTensors
from sparsefm.model.score.linear import linear_term
from sparsefm.solver.interfaces import Score
from sparsefm.solver.registry import score_registry


def row_pairs(row_ids: torch.Tensor, num_rows: int) -> tuple[torch.Tensor, torch.Tensor]:
    """
    Entry index pairs (a, b), a < b, for entries sharing a row.

    ``row_ids`` must be grouped by row, which ``SparseBatch.to_tensors``
    guarantees.
    """
    counts = torch.bincount(row_ids, minlength=num_rows).tolist()
    firsts: list[torch.Tensor] = []
    seconds: list[torch.Tensor] = []
    start = 0
    for count in counts:
        if count >= 2:
            pairs = torch.triu_indices(count, count, offset=1) + start
            firsts.append(pairs[0])
            seconds.append(pairs[1])
        start += count
    if not firsts:
        empty = torch.zeros(0, dtype=torch.long)
        return empty, empty
    return torch.cat(firsts), torch.cat(seconds)


class FFMScore(Score):
    """Field-aware factorization machine."""

    field_aware = True

    def latent(self, param: torch.Tensor) -> torch.Tensor:
        """View of the latent block as (num_feature, num_field, K)."""
        offset = self.num_feature + 1
        return param[offset:].view(self.num_feature, self.num_field, self.num_K)

    def forward(self, batch: BatchTensors, param: torch.Tensor) -> torch.Tensor:
        if batch.field_ids is None:
            raise ValueError("FFMScore needs field ids; use a field-aware file format")
        linear = linear_term(batch, param)

        first, second = row_pairs(batch.row_ids, batch.num_rows)
        if first.numel() == 0:
            return linear

        latent = self.latent(param)
        feats = batch.feature_ids - 1
        fields = batch.field_ids - 1
        v_first = latent[feats[first], fields[second]]
        v_second = latent[feats[second], fields[first]]
        products = (v_first * v_second).sum(dim=1) * batch.values[first] * batch.values[second]
        pairwise = torch.zeros(batch.num_rows, dtype=param.dtype).index_add(
            0, batch.row_ids[first], products
        )
        return linear + pairwise


score_registry.register("ffm", FFMScore)
