"""Kubernetes discovery: server preferred resources (read-only)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Set, runtime_checkable

from subjectaccess.core.errors import GroupDiscoveryFailed
from subjectaccess.providers import kube_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceDescriptor:
    name: str
    kind: str
    namespaced: bool = False
    verbs: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class APIResourceList:
    group_version: str
    resources: List[ResourceDescriptor] = field(default_factory=list)


@runtime_checkable
class DiscoveryProvider(Protocol):
    def server_preferred_resources(self) -> List[APIResourceList]: ...

    def server_preferred_namespaced_resources(self) -> List[APIResourceList]: ...


class DefaultDiscoveryProvider:
    def __init__(self, *, request_timeout: Optional[float] = None) -> None:
        self.request_timeout = request_timeout

    def server_preferred_resources(self) -> List[APIResourceList]:
        return server_preferred_resources(request_timeout=self.request_timeout)

    def server_preferred_namespaced_resources(self) -> List[APIResourceList]:
        return server_preferred_namespaced_resources(request_timeout=self.request_timeout)


def get_discovery_provider(*, request_timeout: Optional[float] = None) -> DiscoveryProvider:
    return DefaultDiscoveryProvider(request_timeout=request_timeout)


def _descriptor_from_api(r: Any) -> ResourceDescriptor:
    return ResourceDescriptor(
        name=str(getattr(r, "name", "") or ""),
        kind=str(getattr(r, "kind", "") or ""),
        namespaced=bool(getattr(r, "namespaced", False)),
        verbs=[str(v) for v in (getattr(r, "verbs", None) or [])],
    )


def _resource_list_from_api(group_version: str, api_list: Any) -> APIResourceList:
    out: List[ResourceDescriptor] = []
    for r in getattr(api_list, "resources", None) or []:
        d = _descriptor_from_api(r)
        # Subresources (pods/log, deployments/scale, ...) are not addressable resource types.
        if not d.name or "/" in d.name:
            continue
        out.append(d)
    gv = getattr(api_list, "group_version", None) or group_version
    return APIResourceList(group_version=str(gv), resources=out)


def _fetch_group_version(group_version: str, *, request_timeout: Optional[float]) -> Any:
    api_client = kube_client.get_api_client()
    return api_client.call_api(
        f"/apis/{group_version}",
        "GET",
        header_params={"Accept": "application/json"},
        response_type="V1APIResourceList",
        auth_settings=["BearerToken"],
        _return_http_data_only=True,
        _request_timeout=request_timeout,
    )


def _group_versions(*, request_timeout: Optional[float]) -> List[List[str]]:
    """Served group-versions per named group, preferred version first."""
    group_list = kube_client.get_apis_api().get_api_versions(_request_timeout=request_timeout)
    out: List[List[str]] = []
    for g in getattr(group_list, "groups", None) or []:
        versions = getattr(g, "versions", None) or []
        served = [str(v.group_version) for v in versions if getattr(v, "group_version", None)]
        preferred = getattr(g, "preferred_version", None)
        gv = getattr(preferred, "group_version", None) if preferred is not None else None
        if gv:
            ordered = [str(gv)] + [s for s in served if s != gv]
        else:
            ordered = served
        if ordered:
            out.append(ordered)
    return out


def server_preferred_resources(*, request_timeout: Optional[float] = None) -> List[APIResourceList]:
    """
    Return the preferred version of every resource the server exposes.

    Mirrors the behavior of client-go's ServerPreferredResources:
    - core group: "v1"
    - named groups: every served version is read, preferred version first; a resource
      from a later version is kept only if no earlier version of the group served it
    - subresources are dropped

    Raises GroupDiscoveryFailed when some (or all) group-versions could not be fetched;
    the exception carries whatever was discovered successfully.
    """
    results: List[APIResourceList] = []
    failed: Dict[str, Exception] = {}

    try:
        core = kube_client.get_core_v1().get_api_resources(_request_timeout=request_timeout)
        results.append(_resource_list_from_api("v1", core))
    except Exception as e:
        logger.debug("discovery failed for v1: %s", kube_client.describe_api_error(e))
        failed["v1"] = e

    try:
        groups = _group_versions(request_timeout=request_timeout)
    except Exception as e:
        logger.debug("discovery failed for /apis: %s", kube_client.describe_api_error(e))
        failed["/apis"] = e
        groups = []

    for versions in groups:
        seen: Set[str] = set()
        for gv in versions:
            try:
                api_list = _fetch_group_version(gv, request_timeout=request_timeout)
            except Exception as e:
                logger.debug("discovery failed for %s: %s", gv, kube_client.describe_api_error(e))
                failed[gv] = e
                continue
            rl = _resource_list_from_api(gv, api_list)
            kept = [r for r in rl.resources if r.name not in seen]
            seen.update(r.name for r in kept)
            if kept:
                results.append(APIResourceList(group_version=rl.group_version, resources=kept))

    if failed:
        raise GroupDiscoveryFailed(failed, resources=results)
    return results


def _only_namespaced(lists: List[APIResourceList]) -> List[APIResourceList]:
    out: List[APIResourceList] = []
    for rl in lists:
        kept = [r for r in rl.resources if r.namespaced]
        if kept:
            out.append(APIResourceList(group_version=rl.group_version, resources=kept))
    return out


def server_preferred_namespaced_resources(*, request_timeout: Optional[float] = None) -> List[APIResourceList]:
    """Same as server_preferred_resources, restricted to namespaced resources."""
    try:
        lists = server_preferred_resources(request_timeout=request_timeout)
    except GroupDiscoveryFailed as e:
        raise GroupDiscoveryFailed(e.failed, resources=_only_namespaced(e.resources)) from e
    return _only_namespaced(lists)
