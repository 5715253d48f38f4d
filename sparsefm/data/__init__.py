# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data side of sparsefm.

Subsystems:
  - matrix: sparse rows, batches and their tensor packing
  - parser: text line -> SparseRow (libsvm, libffm, csv)
  - reader: rewindable batch producers (memory, disk)
  - splitter: k-fold file splitting for cross validation
"""
