# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
sparsefm: linear, FM and FFM predictors over sparse tabular data.

The entry point for programmatic use is ``sparsefm.solver.core.Solver``, which
turns a validated ``SolverConfig`` into an assembled train or inference
pipeline. The command line front end lives in ``sparsefm.cli``.
"""

__version__ = "0.1.0"
