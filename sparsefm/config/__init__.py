# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Run configuration: frozen schema, YAML loader and config exceptions."""
