# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Errors raised out of the release pipeline."""


class BundleError(Exception):
    """Base for release-bundle errors that reach the caller."""


class StagingError(BundleError):
    """
    The staging directory could not be cleared or created. Nothing downstream
    has anywhere to write, so this is the one condition that aborts a run.
    """
