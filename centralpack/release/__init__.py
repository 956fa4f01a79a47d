# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release bundle subsystem.

Stages, in the order the packager runs them:
resolve build outputs → lay them out in repository form → checksum →
sign → archive → report. Every stage substitutes placeholders rather than
failing; only an unusable staging directory aborts a run.
"""
