"""
Pytest config.

Local imports like `import subjectaccess` rely on the repo root being on
sys.path. When invoking a global `pytest` entrypoint that doesn't happen reliably during
collection, so we pin it here.
"""

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()

from subjectaccess.core.errors import ProbeTransportError  # noqa: E402


class FakeAccessReviewProvider:
    """
    In-memory access review service.

    `allow` holds (verb, resource) pairs that are allowed; `fail` holds pairs whose request
    raises. Every call is recorded (thread-safe) so tests can assert on what was sent.
    """

    def __init__(
        self,
        allow: Optional[Set[Tuple[str, str]]] = None,
        fail: Optional[Set[Tuple[str, str]]] = None,
    ) -> None:
        self.allow = set(allow or ())
        self.fail = set(fail or ())
        self.calls: List[Dict[str, str]] = []
        self._lock = threading.Lock()

    def create_review(self, *, verb: str, resource: str, group: str, namespace: str) -> bool:
        with self._lock:
            self.calls.append({"verb": verb, "resource": resource, "group": group, "namespace": namespace})
        if (verb, resource) in self.fail:
            raise ProbeTransportError(f"boom: {verb} {resource}")
        return (verb, resource) in self.allow


@pytest.fixture
def make_reviews():
    """Factory for FakeAccessReviewProvider instances."""

    def _make(allow=None, fail=None) -> FakeAccessReviewProvider:
        return FakeAccessReviewProvider(allow=allow, fail=fail)

    return _make
