"""Plain-text verb matrix for the CLI."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from subjectaccess.access import AccessTable
from subjectaccess.core.models import API_VERBS, AccessStatus, Resource

_CELL: Dict[Optional[AccessStatus], str] = {
    AccessStatus.ALLOWED: "yes",
    AccessStatus.DENIED: "no",
    AccessStatus.UNUSED: "-",
    AccessStatus.ERROR: "err",
    None: "?",
}


def render_matrix(table: AccessTable, resources: Sequence[Resource], *, verbs: Sequence[str] = API_VERBS) -> str:
    """
    One row per resource, one column per verb.

    Cells: yes / no / - (verb not declared) / err (review failed) / ? (not determined).
    Rows are sorted by resource key; duplicate resources are listed once.
    """
    unique: Dict[str, Resource] = {}
    for r in resources:
        unique.setdefault(r.key, r)
    rows = [unique[k] for k in sorted(unique)]

    header = ["RESOURCE", *verbs]
    lines: List[List[str]] = [header]
    for r in rows:
        lines.append([r.key, *(_CELL[table.status(r, v)] for v in verbs)])

    widths = [max(len(line[i]) for line in lines) for i in range(len(header))]
    out = []
    for line in lines:
        out.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(line)).rstrip())
    return "\n".join(out) + "\n"
