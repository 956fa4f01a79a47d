# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI exit codes. These are the only codes centralpack exits with.

A bundle full of placeholders still exits SUCCESS; only a staging failure
(RUNTIME_ERROR) or a failed `verify` (VALIDATION_ERROR) is non-zero.
"""

SUCCESS: int = 0
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3
VALIDATION_ERROR: int = 4
