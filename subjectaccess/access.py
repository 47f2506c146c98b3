"""Access probe engine.

Issues one access review per (resource, verb) pair, one worker task per resource, and
aggregates the outcomes into an `AccessTable`. Results are a point-in-time snapshot.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from subjectaccess.core.models import (
    API_VERBS,
    AccessStatus,
    Resource,
    ResourceIdentity,
    format_key,
    status_counts,
)
from subjectaccess.providers.access_review_provider import AccessReviewProvider

logger = logging.getLogger(__name__)

AccessKey = Tuple[ResourceIdentity, str]


def access_key(resource: Resource, verb: str) -> AccessKey:
    return (resource.identity, verb)


class AccessTable:
    """
    Insert-only map of (resource identity, verb) -> AccessStatus.

    Workers write through `_store` while the table is being built; each key has exactly
    one writer. After `build_access_table` returns, the table is only read.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._access: Dict[AccessKey, AccessStatus] = {}

    def _store(self, resource: Resource, verb: str, status: AccessStatus) -> None:
        with self._lock:
            self._access[access_key(resource, verb)] = status

    def status(self, resource: Resource, verb: str) -> Optional[AccessStatus]:
        """Recorded status, or None when the pair was never determined."""
        with self._lock:
            return self._access.get(access_key(resource, verb))

    def allowed(self, resource: Resource, verb: str) -> bool:
        s = self.status(resource, verb)
        if s is None:
            logger.warning("verb %s not found for %s", verb, resource)
            return False
        return s is AccessStatus.ALLOWED

    def allowed_all(self, resource: Resource, verbs: Iterable[str]) -> bool:
        return all(self.allowed(resource, v) for v in verbs)

    def allowed_any(self, resource: Resource, verbs: Iterable[str]) -> bool:
        return any(self.allowed(resource, v) for v in verbs)

    def entries(self) -> List[Tuple[str, str, AccessStatus]]:
        with self._lock:
            items = list(self._access.items())
        return [(format_key(identity), verb, status) for (identity, verb), status in items]

    def counts(self) -> Dict[str, int]:
        return status_counts(s for _, _, s in self.entries())

    def dump(self) -> str:
        return "".join(f"{key}.{verb}: {status.name}\n" for key, verb, status in self.entries())

    def __len__(self) -> int:
        with self._lock:
            return len(self._access)

    def __str__(self) -> str:
        return self.dump()


def _probe_resource(
    table: AccessTable,
    cancel: threading.Event,
    client: AccessReviewProvider,
    resource: Resource,
) -> None:
    if cancel.is_set():
        return

    # Cluster-scoped resources can't be reviewed per namespace.
    namespace = resource.namespace if resource.namespaced else ""

    for verb in API_VERBS:
        if cancel.is_set():
            return

        if not resource.supports(verb):
            table._store(resource, verb, AccessStatus.UNUSED)
            continue

        try:
            allowed = client.create_review(verb=verb, resource=resource.name, group=resource.group, namespace=namespace)
        except Exception as e:
            logger.debug("access review failed for %s %s: %s", verb, resource, e)
            table._store(resource, verb, AccessStatus.ERROR)
            continue

        table._store(resource, verb, AccessStatus.ALLOWED if allowed else AccessStatus.DENIED)


def build_access_table(
    cancel: threading.Event,
    client: AccessReviewProvider,
    resources: Sequence[Resource],
    *,
    max_workers: Optional[int] = None,
) -> AccessTable:
    """
    Probe every resource/verb pair and return the populated table.

    Blocks until every resource task has finished or stopped on `cancel`. Pairs not
    reached before cancellation are absent from the table.
    """
    table = AccessTable()
    if not resources:
        return table

    workers = max(1, min(max_workers or len(resources), len(resources)))
    started = time.monotonic()

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="access-probe") as executor:
        futures: List[Future[None]] = [
            executor.submit(_probe_resource, table, cancel, client, resource) for resource in resources
        ]
        for f in futures:
            try:
                f.result()
            except Exception:
                logger.exception("access probe task crashed")

    logger.info(
        "Probed %d resources: %d entries in %.2fs%s",
        len(resources),
        len(table),
        time.monotonic() - started,
        " (cancelled)" if cancel.is_set() else "",
    )
    return table
