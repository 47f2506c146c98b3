"""SelfSubjectAccessReview client: can the current identity perform a verb on a resource?"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from subjectaccess.core.errors import ProbeTransportError
from subjectaccess.providers import kube_client


@runtime_checkable
class AccessReviewProvider(Protocol):
    def create_review(self, *, verb: str, resource: str, group: str, namespace: str) -> bool: ...


class DefaultAccessReviewProvider:
    def __init__(self, *, request_timeout: Optional[float] = None) -> None:
        self.request_timeout = request_timeout

    def create_review(self, *, verb: str, resource: str, group: str, namespace: str) -> bool:
        return create_self_subject_access_review(
            verb=verb,
            resource=resource,
            group=group,
            namespace=namespace,
            request_timeout=self.request_timeout,
        )


def get_access_review_provider(*, request_timeout: Optional[float] = None) -> AccessReviewProvider:
    return DefaultAccessReviewProvider(request_timeout=request_timeout)


def create_self_subject_access_review(
    *,
    verb: str,
    resource: str,
    group: str = "",
    namespace: str = "",
    request_timeout: Optional[float] = None,
) -> bool:
    """
    Issue one SelfSubjectAccessReview and return `status.allowed`.

    An empty namespace asks about the cluster-wide (all namespaces) permission.
    Raises ProbeTransportError when the request itself fails; a negative decision is
    returned as False, never raised.
    """
    try:
        from kubernetes import client
    except Exception as import_err:
        raise ProbeTransportError(f"Kubernetes client not available: {import_err}")

    body = client.V1SelfSubjectAccessReview(
        spec=client.V1SelfSubjectAccessReviewSpec(
            resource_attributes=client.V1ResourceAttributes(
                verb=verb,
                resource=resource,
                group=group or "",
                namespace=namespace or "",
            )
        )
    )
    try:
        api = kube_client.get_authorization_v1()
        result = api.create_self_subject_access_review(body=body, _request_timeout=request_timeout)
    except Exception as e:
        raise ProbeTransportError(
            f"access review {verb} {resource} (group={group!r}, namespace={namespace!r}) failed: "
            f"{kube_client.describe_api_error(e)}"
        ) from e

    status = getattr(result, "status", None)
    return bool(getattr(status, "allowed", False))
