# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Line parsers.

Importing this package registers all built-in file formats with the parser
registry.
"""

from sparsefm.data.parser.csv_format import CSVParser
from sparsefm.data.parser.libffm import LibFFMParser
from sparsefm.data.parser.libsvm import LibSVMParser

__all__ = ["CSVParser", "LibFFMParser", "LibSVMParser"]
