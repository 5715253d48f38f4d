# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Small shared helpers."""
