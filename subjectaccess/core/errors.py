"""Error taxonomy for discovery and probing.

Only `DiscoveryUnavailable` is meant to reach callers of the catalog builder. The other
errors are raised by providers and absorbed by the core (logged, or recorded as a status).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from subjectaccess.providers.discovery_provider import APIResourceList


class SubjectAccessError(Exception):
    """Base class for all errors raised by this package."""


class DiscoveryUnavailable(SubjectAccessError):
    """Discovery failed and returned nothing usable."""


class GroupDiscoveryFailed(SubjectAccessError):
    """
    One or more group-versions could not be discovered.

    `resources` holds whatever was fetched successfully (possibly empty); large clusters
    routinely have a few aggregated APIs that are temporarily unreachable.
    """

    def __init__(
        self,
        failed: Dict[str, Exception],
        resources: Optional[List["APIResourceList"]] = None,
    ) -> None:
        self.failed = dict(failed)
        self.resources = list(resources or [])
        groups = ", ".join(sorted(self.failed)) or "<all>"
        super().__init__(f"unable to retrieve the complete list of server APIs: {groups}")


class GroupVersionParseError(SubjectAccessError, ValueError):
    """Malformed group/version string (more than one '/')."""


class ProbeTransportError(SubjectAccessError):
    """A single access review request failed before an authorization decision was made."""
