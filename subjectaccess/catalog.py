"""Resource catalog: discovery response -> list of probe-able `Resource` entities."""

from __future__ import annotations

import logging
from typing import List

from subjectaccess.core.errors import DiscoveryUnavailable, GroupDiscoveryFailed, GroupVersionParseError
from subjectaccess.core.group_version import parse_group_version
from subjectaccess.core.models import Resource
from subjectaccess.providers.discovery_provider import APIResourceList, DiscoveryProvider

logger = logging.getLogger(__name__)


def _fetch_resource_lists(discovery: DiscoveryProvider, namespace: str) -> List[APIResourceList]:
    if namespace:
        fetch = discovery.server_preferred_namespaced_resources
    else:
        fetch = discovery.server_preferred_resources

    try:
        return list(fetch() or [])
    except GroupDiscoveryFailed as e:
        if not e.resources:
            raise DiscoveryUnavailable(f"get preferred resources: {e}") from e
        logger.warning("Unable to get full resource list: %s", e)
        return list(e.resources)
    except Exception as e:
        raise DiscoveryUnavailable(f"get preferred resources: {e}") from e


def build_catalog(discovery: DiscoveryProvider, namespace: str = "") -> List[Resource]:
    """
    Build the list of resources to probe for one scope.

    An empty namespace asks for cluster-wide preferred resources; otherwise only resources
    visible within that namespace are returned, each tagged with the namespace.

    Raises DiscoveryUnavailable only when discovery produced no usable data. Malformed
    group-versions and resources without verbs are skipped.
    """
    namespace = namespace or ""
    resource_lists = _fetch_resource_lists(discovery, namespace)

    result: List[Resource] = []
    for rl in resource_lists:
        if not rl.resources:
            continue

        try:
            group, version = parse_group_version(rl.group_version)
        except GroupVersionParseError as e:
            logger.warning("Unable to parse groupVersion: %s", e)
            continue

        for r in rl.resources:
            if not r.verbs:
                continue
            result.append(
                Resource(
                    group=group,
                    version=version,
                    kind=r.kind,
                    namespace=namespace,
                    name=r.name,
                    namespaced=r.namespaced,
                    verbs=frozenset(r.verbs),
                )
            )

    logger.info("Discovered %d resources (scope=%s)", len(result), namespace or "cluster")
    return result
