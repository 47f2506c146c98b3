"""Runtime configuration (env / ConfigMap driven)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env_str(name: str) -> Optional[str]:
    return (os.getenv(name) or "").strip() or None


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except Exception:
        return default


@dataclass(frozen=True)
class ProbeConfig:
    # Kubernetes credentials (in-cluster config is tried first when kubeconfig is unset)
    kubeconfig: Optional[str] = None
    context: Optional[str] = None

    # Namespace scope used by the CLI when none is given
    namespace: str = "default"

    # Worker pool size for access reviews (one task per resource, bounded by this)
    max_workers: int = 32

    # Per-request timeout passed to the kubernetes client
    request_timeout_seconds: float = 10.0

    # Overall probe deadline; 0 disables it
    deadline_seconds: float = 0.0

    log_level: str = "INFO"


def load_probe_config() -> ProbeConfig:
    """
    Load probe settings from env.

    Recommended vars:
    - SUBJECTACCESS_KUBECONFIG=/path/to/kubeconfig (KUBECONFIG is honored by the client itself)
    - KUBE_CONTEXT=my-cluster
    - SUBJECTACCESS_NAMESPACE=default
    - SUBJECTACCESS_MAX_WORKERS=32
    - SUBJECTACCESS_REQUEST_TIMEOUT_SECONDS=10
    - SUBJECTACCESS_DEADLINE_SECONDS=0
    - LOG_LEVEL=INFO
    """
    return ProbeConfig(
        kubeconfig=_env_str("SUBJECTACCESS_KUBECONFIG"),
        context=_env_str("KUBE_CONTEXT"),
        namespace=_env_str("SUBJECTACCESS_NAMESPACE") or "default",
        max_workers=max(1, min(_env_int("SUBJECTACCESS_MAX_WORKERS", 32), 256)),
        request_timeout_seconds=max(1.0, min(_env_float("SUBJECTACCESS_REQUEST_TIMEOUT_SECONDS", 10.0), 300.0)),
        deadline_seconds=max(0.0, min(_env_float("SUBJECTACCESS_DEADLINE_SECONDS", 0.0), 3600.0)),
        log_level=(_env_str("LOG_LEVEL") or "INFO").upper(),
    )
