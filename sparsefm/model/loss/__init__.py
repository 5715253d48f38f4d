# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Loss functions.

Importing this package registers "squared", "cross_entropy" and "hinge"
with the loss registry.
"""

from sparsefm.model.loss.cross_entropy import CrossEntropyLoss
from sparsefm.model.loss.hinge import HingeLoss
from sparsefm.model.loss.squared import SquaredLoss

__all__ = ["CrossEntropyLoss", "HingeLoss", "SquaredLoss"]
