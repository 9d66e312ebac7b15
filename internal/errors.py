# internal/errors.py

from __future__ import annotations


class VolyardError(Exception):
    """Base class for every failure surfaced to the operator."""


class ConfigConflict(VolyardError):
    """Mutually exclusive options were given together."""


class TargetError(VolyardError):
    """The target (API URL, team, token) could not be resolved."""


class FetchFailure(VolyardError):
    """A call to the API failed: transport, auth or server error."""


class DescriptorDepthExceeded(VolyardError):
    """Resource type nesting is deeper than we are willing to follow."""

    def __init__(self, limit: int):
        super().__init__(f"resource type nesting exceeds {limit} levels (cyclic configuration?)")
        self.limit = limit
