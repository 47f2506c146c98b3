"""Tests for building the resource catalog from discovery."""

from __future__ import annotations

import logging

import pytest

from subjectaccess.catalog import build_catalog
from subjectaccess.core.errors import DiscoveryUnavailable, GroupDiscoveryFailed
from subjectaccess.providers.discovery_provider import APIResourceList, ResourceDescriptor


class _MockDiscovery:
    def __init__(self, lists=None, error=None):
        self.lists = lists or []
        self.error = error
        self.calls = []

    def server_preferred_resources(self):
        self.calls.append("cluster")
        if self.error is not None:
            raise self.error
        return self.lists

    def server_preferred_namespaced_resources(self):
        self.calls.append("namespaced")
        if self.error is not None:
            raise self.error
        return self.lists


def _pods() -> APIResourceList:
    return APIResourceList(
        group_version="v1",
        resources=[
            ResourceDescriptor(name="pods", kind="Pod", namespaced=True, verbs=["get", "list", "watch"]),
            ResourceDescriptor(name="namespaces", kind="Namespace", namespaced=False, verbs=["get", "delete"]),
        ],
    )


def _deployments() -> APIResourceList:
    return APIResourceList(
        group_version="apps/v1",
        resources=[ResourceDescriptor(name="deployments", kind="Deployment", namespaced=True, verbs=["get"])],
    )


def test_empty_namespace_uses_cluster_wide_discovery() -> None:
    discovery = _MockDiscovery(lists=[_pods()])

    resources = build_catalog(discovery, "")

    assert discovery.calls == ["cluster"]
    assert [r.key for r in resources] == ["v1/Pod", "v1/Namespace"]


def test_namespace_uses_namespaced_discovery_and_tags_resources() -> None:
    discovery = _MockDiscovery(lists=[_pods(), _deployments()])

    resources = build_catalog(discovery, "default")

    assert discovery.calls == ["namespaced"]
    assert {r.key for r in resources} == {"default/v1/Pod", "default/v1/Namespace", "default/apps/v1/Deployment"}
    assert all(r.namespace == "default" for r in resources)


def test_resource_fields_carried_from_descriptor() -> None:
    resources = build_catalog(_MockDiscovery(lists=[_deployments()]), "")

    assert len(resources) == 1
    d = resources[0]
    assert (d.group, d.version, d.kind, d.name) == ("apps", "v1", "Deployment", "deployments")
    assert d.namespaced is True
    assert d.verbs == frozenset({"get"})


def test_malformed_group_version_skipped(caplog: pytest.LogCaptureFixture) -> None:
    bad = APIResourceList(
        group_version="broken/group/v1",
        resources=[ResourceDescriptor(name="things", kind="Thing", namespaced=True, verbs=["get"])],
    )
    discovery = _MockDiscovery(lists=[_deployments(), bad, _pods()])

    with caplog.at_level(logging.WARNING, logger="subjectaccess.catalog"):
        resources = build_catalog(discovery, "")

    assert {r.kind for r in resources} == {"Deployment", "Pod", "Namespace"}
    assert "Unable to parse groupVersion" in caplog.text


def test_resources_without_verbs_and_empty_lists_skipped() -> None:
    lists = [
        APIResourceList(group_version="metrics.k8s.io/v1beta1", resources=[]),
        APIResourceList(
            group_version="v1",
            resources=[
                ResourceDescriptor(name="bindings", kind="Binding", namespaced=True, verbs=[]),
                ResourceDescriptor(name="pods", kind="Pod", namespaced=True, verbs=["get"]),
            ],
        ),
    ]

    resources = build_catalog(_MockDiscovery(lists=lists), "")

    assert [r.kind for r in resources] == ["Pod"]


def test_partial_discovery_failure_uses_partial_data(caplog: pytest.LogCaptureFixture) -> None:
    err = GroupDiscoveryFailed({"metrics.k8s.io/v1beta1": RuntimeError("503")}, resources=[_pods()])

    with caplog.at_level(logging.WARNING, logger="subjectaccess.catalog"):
        resources = build_catalog(_MockDiscovery(error=err), "")

    assert {r.kind for r in resources} == {"Pod", "Namespace"}
    assert "Unable to get full resource list" in caplog.text
    assert "metrics.k8s.io/v1beta1" in caplog.text


def test_discovery_failure_without_data_raises() -> None:
    err = GroupDiscoveryFailed({"v1": RuntimeError("connection refused")}, resources=[])

    with pytest.raises(DiscoveryUnavailable) as exc:
        build_catalog(_MockDiscovery(error=err), "default")

    assert exc.value.__cause__ is err


def test_unexpected_discovery_error_wrapped() -> None:
    cause = ConnectionError("no route to host")

    with pytest.raises(DiscoveryUnavailable) as exc:
        build_catalog(_MockDiscovery(error=cause), "")

    assert exc.value.__cause__ is cause
    assert "no route to host" in str(exc.value)
