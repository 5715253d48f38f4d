# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Parameter update rules.

Importing this package registers "sgd", "adagrad" and "momentum" with the
updater registry.
"""

from sparsefm.model.updater.adagrad import AdaGradUpdater
from sparsefm.model.updater.momentum import MomentumUpdater
from sparsefm.model.updater.sgd import SGDUpdater

__all__ = ["AdaGradUpdater", "MomentumUpdater", "SGDUpdater"]
