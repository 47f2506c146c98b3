"""Which verbs may the current identity perform on each API resource of a cluster?

Build a catalog from discovery, then probe it with access reviews:

    resources = build_catalog(get_discovery_provider(), "default")
    table = build_access_table(threading.Event(), get_access_review_provider(), resources)
    table.allowed(Resource.from_ref("v1/Pod", namespace="default"), "get")
"""

from subjectaccess.access import AccessTable, build_access_table
from subjectaccess.catalog import build_catalog
from subjectaccess.core.errors import (
    DiscoveryUnavailable,
    GroupDiscoveryFailed,
    GroupVersionParseError,
    ProbeTransportError,
    SubjectAccessError,
)
from subjectaccess.core.models import API_VERBS, AccessStatus, Resource

__all__ = [
    "API_VERBS",
    "AccessStatus",
    "AccessTable",
    "DiscoveryUnavailable",
    "GroupDiscoveryFailed",
    "GroupVersionParseError",
    "ProbeTransportError",
    "Resource",
    "SubjectAccessError",
    "build_access_table",
    "build_catalog",
]
