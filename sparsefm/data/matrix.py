# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Sparse rows and batches.

A ``SparseRow`` is one example: a label and an ordered list of
(feature index, value) pairs, with a field id per pair for field-aware data.
Feature indices and field ids are 1-based; slot 0 of every parameter vector
is the bias.

A ``SparseBatch`` is what readers hand out. An empty batch is the
end-of-stream sentinel.

Score functions never look at rows directly. They consume ``BatchTensors``,
the flat COO packing of a batch produced by ``SparseBatch.to_tensors``.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

import torch


@dataclass(frozen=True)
class SparseRow:
    """One sparse example."""

    label: float
    indices: tuple[int, ...]
    values: tuple[float, ...]
    fields: Optional[tuple[int, ...]] = None

    def __post_init__(self) -> None:
        if len(self.indices) != len(self.values):
            raise ValueError(
                f"Row has {len(self.indices)} indices but {len(self.values)} values"
            )
        if self.fields is not None and len(self.fields) != len(self.indices):
            raise ValueError(
                f"Row has {len(self.indices)} indices but {len(self.fields)} fields"
            )

    def __len__(self) -> int:
        return len(self.indices)

    def max_feature(self) -> int:
        return max(self.indices, default=0)

    def max_field(self) -> int:
        if self.fields is None:
            return 0
        return max(self.fields, default=0)


@dataclass(frozen=True)
class BatchTensors:
    """
    COO packing of a batch.

    Entry ``i`` says: row ``row_ids[i]`` has value ``values[i]`` at feature
    ``feature_ids[i]`` (in field ``field_ids[i]`` when field-aware).
    """

    num_rows: int
    row_ids: torch.Tensor
    feature_ids: torch.Tensor
    values: torch.Tensor
    labels: torch.Tensor
    field_ids: Optional[torch.Tensor] = None


@dataclass
class SparseBatch:
    """An ordered block of rows pulled from a reader."""

    rows: list[SparseRow] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[SparseRow]:
        return iter(self.rows)

    def __bool__(self) -> bool:
        return bool(self.rows)

    def max_feature(self) -> int:
        """Largest feature index across all rows, 0 for an empty batch."""
        return max((row.max_feature() for row in self.rows), default=0)

    def max_field(self) -> int:
        """Largest field id across all rows, 0 when nothing is field-aware."""
        return max((row.max_field() for row in self.rows), default=0)

    def to_tensors(
        self,
        num_feature: Optional[int] = None,
        num_field: Optional[int] = None,
        field_aware: bool = False,
    ) -> BatchTensors:
        """
        Pack the batch into flat tensors.

        Entries whose feature index exceeds ``num_feature`` (or whose field
        exceeds ``num_field``) are dropped. That happens in inference when
        the data holds features the model never saw.

        Args:
            num_feature: Largest feature index the model has weights for.
            num_field: Largest field id the model has latent blocks for.
            field_aware: Whether to emit ``field_ids``.

        Raises:
            ValueError: If ``field_aware`` is set and a row has no fields.
        """
        row_ids: list[int] = []
        feature_ids: list[int] = []
        field_ids: list[int] = []
        values: list[float] = []
        labels: list[float] = []

        for row_idx, row in enumerate(self.rows):
            labels.append(row.label)
            if field_aware and row.fields is None:
                raise ValueError(
                    f"Row {row_idx} has no field ids but the model is field-aware"
                )
            for pos, (index, value) in enumerate(zip(row.indices, row.values)):
                if num_feature is not None and index > num_feature:
                    continue
                if field_aware:
                    field_id = row.fields[pos]  # type: ignore[index]
                    if num_field is not None and field_id > num_field:
                        continue
                    field_ids.append(field_id)
                row_ids.append(row_idx)
                feature_ids.append(index)
                values.append(value)

        return BatchTensors(
            num_rows=len(self.rows),
            row_ids=torch.tensor(row_ids, dtype=torch.long),
            feature_ids=torch.tensor(feature_ids, dtype=torch.long),
            values=torch.tensor(values, dtype=torch.float32),
            labels=torch.tensor(labels, dtype=torch.float32),
            field_ids=torch.tensor(field_ids, dtype=torch.long) if field_aware else None,
        )
