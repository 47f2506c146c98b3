"""JSON dump helpers (CLI-friendly, testable).

We keep CLI printing logic out of core modules; this returns plain dicts.
"""

from __future__ import annotations

from typing import Any, Dict

from subjectaccess.access import AccessTable
from subjectaccess.core.models import AccessEntry, AccessReport


def table_to_report(table: AccessTable) -> AccessReport:
    entries = sorted(table.entries(), key=lambda e: (e[0], e[1]))
    return AccessReport(
        entries=[AccessEntry(key=key, verb=verb, status=status) for key, verb, status in entries],
        counts=table.counts(),
    )


def table_to_json_dict(table: AccessTable) -> Dict[str, Any]:
    return table_to_report(table).model_dump(mode="json")
