"""Lazily initialized, process-wide Kubernetes API clients."""

import threading
from typing import Optional

_api_client = None
_core_v1_api = None
_apis_api = None
_authorization_v1_api = None
_config_loaded = False
_init_lock = threading.Lock()


def _load_config_locked(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> None:
    global _config_loaded

    if _config_loaded:
        return

    # Import lazily so modules that only consume the core (and their tests) don't need
    # the kubernetes client and its transitive deps at import time.
    try:
        from kubernetes import config
    except Exception as import_err:
        raise Exception(f"Kubernetes client not available: {import_err}")

    if kubeconfig or context:
        config.load_kube_config(config_file=kubeconfig, context=context)
    else:
        try:
            config.load_incluster_config()
        except config.ConfigException:
            config.load_kube_config()
    _config_loaded = True


def init_kube_client(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> None:
    """
    Load credentials once, ahead of the first API call.

    An explicit kubeconfig/context skips in-cluster detection. Calling this after the
    clients were initialized is a no-op.
    """
    if _config_loaded:
        return
    with _init_lock:
        _load_config_locked(kubeconfig, context)


def get_api_client():
    """Return the shared ApiClient (thread-safe lazy init)."""
    global _api_client
    if _api_client is not None:
        return _api_client

    with _init_lock:
        if _api_client is not None:
            return _api_client
        _load_config_locked()
        from kubernetes import client

        _api_client = client.ApiClient()
        return _api_client


def get_core_v1():
    """Return a cached CoreV1Api client."""
    global _core_v1_api
    if _core_v1_api is not None:
        return _core_v1_api
    api_client = get_api_client()
    from kubernetes import client

    with _init_lock:
        if _core_v1_api is None:
            _core_v1_api = client.CoreV1Api(api_client=api_client)
        return _core_v1_api


def get_apis_api():
    """Return a cached ApisApi client (lists API groups and their preferred versions)."""
    global _apis_api
    if _apis_api is not None:
        return _apis_api
    api_client = get_api_client()
    from kubernetes import client

    with _init_lock:
        if _apis_api is None:
            _apis_api = client.ApisApi(api_client=api_client)
        return _apis_api


def get_authorization_v1():
    """Return a cached AuthorizationV1Api client."""
    global _authorization_v1_api
    if _authorization_v1_api is not None:
        return _authorization_v1_api
    api_client = get_api_client()
    from kubernetes import client

    with _init_lock:
        if _authorization_v1_api is None:
            _authorization_v1_api = client.AuthorizationV1Api(api_client=api_client)
        return _authorization_v1_api


def describe_api_error(e: Exception) -> str:
    """Render an ApiException with status/reason when available, else str(e)."""
    status = getattr(e, "status", None)
    reason = getattr(e, "reason", None)
    if status is not None or reason is not None:
        return f"{status} {reason}".strip()
    return str(e) or e.__class__.__name__
