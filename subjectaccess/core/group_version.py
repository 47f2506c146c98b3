"""Kubernetes group/version string parsing."""

from __future__ import annotations

from typing import Tuple

from subjectaccess.core.errors import GroupVersionParseError


def parse_group_version(gv: str) -> Tuple[str, str]:
    """
    Split a discovery `groupVersion` into (group, version).

    - "" and "/" parse to ("", "") (legacy internal version)
    - "v1" is the core group: ("", "v1")
    - "apps/v1" -> ("apps", "v1")
    """
    gv = gv or ""
    if gv in ("", "/"):
        return "", ""
    slashes = gv.count("/")
    if slashes == 0:
        return "", gv
    if slashes == 1:
        group, version = gv.split("/", 1)
        return group, version
    raise GroupVersionParseError(f"unexpected GroupVersion string: {gv}")


def format_group_version(group: str, version: str) -> str:
    if not group:
        return version
    return f"{group}/{version}"
