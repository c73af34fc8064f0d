"""
ignore_hub.errors - Exceptions Raised by the I/O Layers
=======================================================

The merge engine and the query resolver never raise; they report problems
as data. The layers around them (network, cache, pipeline) raise the
exceptions below, and the CLI turns any :class:`IgnoreHubError` into a
red one-line message and exit code 1.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from ignore_hub.models import ResolutionIssue


class IgnoreHubError(RuntimeError):
    """Base class for every error ignore-hub reports to the user."""


class UsageError(IgnoreHubError):
    """Options that cannot work together (e.g. ``--no-interactive`` alone)."""


class IndexLoadError(IgnoreHubError):
    """No template index could be loaded from the network or the cache."""


class TemplateFetchError(IgnoreHubError):
    """
    One or more template bodies could not be downloaded.

    Attributes
    ----------
    failures : list[str]
        Names of the templates that failed, empty for single-request errors.
    """

    def __init__(self, message: str, failures: list[str] | None = None) -> None:
        super().__init__(message)
        self.failures = failures or []


class ResolutionError(IgnoreHubError):
    """
    Some template queries were ambiguous or unknown.

    The message lists every issue at once.
    """

    def __init__(self, issues: list[ResolutionIssue]) -> None:
        from ignore_hub.resolver import render_resolution_message

        super().__init__(render_resolution_message(issues))
        self.issues = issues
