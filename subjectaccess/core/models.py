"""Domain models shared by the catalog builder, the probe engine and the reports.

`Resource` is a frozen dataclass rather than a pydantic model: it is used as a lookup
handle, so equality must cover only the identity fields (group/version/kind/namespace).
The JSON-facing views (`AccessEntry`, `AccessReport`) are pydantic, like the rest of
the serialized payloads.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from subjectaccess.core.group_version import format_group_version, parse_group_version

# (namespace, group, version, kind)
ResourceIdentity = Tuple[str, str, str, str]


def format_key(identity: ResourceIdentity) -> str:
    """Display form of an identity; empty namespace/group segments are omitted."""
    namespace, group, version, kind = identity
    parts = [p for p in (namespace, group) if p]
    parts.extend([version, kind])
    return "/".join(parts)


API_VERBS = (
    "create",
    "get",
    "list",
    "watch",
    "update",
    "patch",
    "delete",
    "deletecollection",
)


class AccessStatus(enum.Enum):
    DENIED = "denied"
    ALLOWED = "allowed"
    # Resource does not declare the verb; no review was issued.
    UNUSED = "unused"
    # The review request itself failed.
    ERROR = "error"


@dataclass(frozen=True)
class Resource:
    """One addressable API resource type within one scope."""

    group: str
    version: str
    kind: str
    namespace: str = ""
    # Plural resource name used in access reviews (e.g. "deployments").
    name: str = field(default="", compare=False)
    namespaced: bool = field(default=False, compare=False)
    verbs: FrozenSet[str] = field(default_factory=frozenset, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.verbs, frozenset):
            object.__setattr__(self, "verbs", frozenset(self.verbs or ()))

    @property
    def identity(self) -> ResourceIdentity:
        return (self.namespace, self.group, self.version, self.kind)

    @property
    def key(self) -> str:
        return format_key(self.identity)

    @property
    def group_version(self) -> str:
        return format_group_version(self.group, self.version)

    @property
    def gvk(self) -> str:
        return f"{self.group_version}, Kind={self.kind}"

    def supports(self, verb: str) -> bool:
        return verb in self.verbs

    def __str__(self) -> str:
        return self.key

    @classmethod
    def from_ref(cls, ref: str, namespace: str = "") -> "Resource":
        """
        Build a lookup handle from a `[group/]version/Kind` reference.

        Examples: "v1/Pod", "apps/v1/Deployment".
        """
        raw = (ref or "").strip()
        gv, sep, kind = raw.rpartition("/")
        if not sep or not gv or not kind:
            raise ValueError(f"invalid resource reference {ref!r} (expected [group/]version/Kind)")
        group, version = parse_group_version(gv)
        if not version:
            raise ValueError(f"invalid resource reference {ref!r} (missing version)")
        return cls(group=group, version=version, kind=kind, namespace=namespace or "")


class AccessEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str
    verb: str
    status: AccessStatus


class AccessReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    verbs: List[str] = Field(default_factory=lambda: list(API_VERBS))
    entries: List[AccessEntry] = Field(default_factory=list)
    counts: Dict[str, int] = Field(default_factory=dict)


def status_counts(statuses: Iterable[AccessStatus]) -> Dict[str, int]:
    out: Dict[str, int] = {s.value: 0 for s in AccessStatus}
    for s in statuses:
        out[s.value] += 1
    return out
