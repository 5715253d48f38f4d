# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Score functions.

Importing this package registers "linear", "fm" and "ffm" with the score
registry. Each key matches the model family of the same name in
``sparsefm.model.sizing``.
"""

from sparsefm.model.score.ffm import FFMScore
from sparsefm.model.score.fm import FMScore
from sparsefm.model.score.linear import LinearScore

__all__ = ["FFMScore", "FMScore", "LinearScore"]
