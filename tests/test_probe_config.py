from __future__ import annotations

import pytest

_VARS = [
    "SUBJECTACCESS_KUBECONFIG",
    "KUBE_CONTEXT",
    "SUBJECTACCESS_NAMESPACE",
    "SUBJECTACCESS_MAX_WORKERS",
    "SUBJECTACCESS_REQUEST_TIMEOUT_SECONDS",
    "SUBJECTACCESS_DEADLINE_SECONDS",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_probe_config_defaults() -> None:
    from subjectaccess.config import load_probe_config

    cfg = load_probe_config()
    assert cfg.kubeconfig is None
    assert cfg.context is None
    assert cfg.namespace == "default"
    assert cfg.max_workers == 32
    assert cfg.request_timeout_seconds == 10.0
    assert cfg.deadline_seconds == 0.0
    assert cfg.log_level == "INFO"


def test_load_probe_config_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    from subjectaccess.config import load_probe_config

    monkeypatch.setenv("SUBJECTACCESS_KUBECONFIG", "/tmp/kubeconfig")
    monkeypatch.setenv("KUBE_CONTEXT", "staging")
    monkeypatch.setenv("SUBJECTACCESS_NAMESPACE", "payments")
    monkeypatch.setenv("SUBJECTACCESS_MAX_WORKERS", "8")
    monkeypatch.setenv("SUBJECTACCESS_DEADLINE_SECONDS", "30")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = load_probe_config()
    assert cfg.kubeconfig == "/tmp/kubeconfig"
    assert cfg.context == "staging"
    assert cfg.namespace == "payments"
    assert cfg.max_workers == 8
    assert cfg.deadline_seconds == 30.0
    assert cfg.log_level == "DEBUG"


def test_load_probe_config_clamps_and_ignores_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    from subjectaccess.config import load_probe_config

    monkeypatch.setenv("SUBJECTACCESS_MAX_WORKERS", "100000")
    monkeypatch.setenv("SUBJECTACCESS_REQUEST_TIMEOUT_SECONDS", "not-a-number")
    monkeypatch.setenv("SUBJECTACCESS_DEADLINE_SECONDS", "-5")

    cfg = load_probe_config()
    assert cfg.max_workers == 256
    assert cfg.request_timeout_seconds == 10.0
    assert cfg.deadline_seconds == 0.0
