# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
centralpack: release bundle assembly for Maven-style repositories.

Takes build outputs, lays them out in repository form, checksums and signs
every artifact, and zips the result for manual upload.
"""

__version__ = "0.1.0"
