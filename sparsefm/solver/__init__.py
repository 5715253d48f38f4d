# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The sparsefm lifecycle controller and its contracts.

  - interfaces: abstract bases for the five pluggable component families
  - registry: string-keyed lookup of those components
  - prescan: the mandatory dimensionality pass over the data
  - core: ``Solver``, which assembles and runs the pipeline
  - exceptions: the error hierarchy the solver raises
"""
