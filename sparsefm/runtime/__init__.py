# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""One-time process setup run before every CLI command."""
