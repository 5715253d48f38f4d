# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Training and inference loops plugged into the solver's extension points.

Subsystems:
  - metrics: row-weighted loss averaging and structured epoch records
  - loops: SGDTrainLoop (train / cross validation) and PredictLoop
"""
