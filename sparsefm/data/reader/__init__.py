# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Batch readers.

Importing this package registers the built-in storage modes ("memory" and
"disk") with the reader registry.
"""

from sparsefm.data.reader.disk import OnDiskReader
from sparsefm.data.reader.memory import InMemoryReader

__all__ = ["InMemoryReader", "OnDiskReader"]
