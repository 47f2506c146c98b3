"""
Subject Access - which verbs can the current identity perform on each cluster resource?
Diagnostic snapshot built from discovery + SelfSubjectAccessReview probes.
"""

import argparse
import logging
import sys
import threading
import time
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


def _split_verbs(raw: str) -> List[str]:
    return [v.strip() for v in (raw or "").split(",") if v.strip()]


def run_checks(table, checks: Sequence[Sequence[str]], namespace: str) -> List[str]:
    """
    Answer `--check REF VERBS` queries against a built table.

    VERBS may be a comma-separated list; all of them must be allowed.
    """
    from subjectaccess.core.models import Resource

    lines = []
    for ref, raw_verbs in checks:
        resource = Resource.from_ref(ref, namespace=namespace)
        verbs = _split_verbs(raw_verbs)
        if not verbs:
            raise ValueError(f"no verbs given for {ref!r}")
        if len(verbs) == 1:
            ok = table.allowed(resource, verbs[0])
        else:
            ok = table.allowed_all(resource, verbs)
        lines.append(f"Can {'/'.join(verbs)} {ref}? {ok}")
    return lines


def probe(
    *,
    namespace: str,
    checks: Sequence[Sequence[str]],
    dump_json: bool,
    matrix: bool,
    max_workers: int,
    request_timeout: float,
    deadline: float,
) -> int:
    import json

    from subjectaccess.access import build_access_table
    from subjectaccess.catalog import build_catalog
    from subjectaccess.core.errors import DiscoveryUnavailable
    from subjectaccess.dump import table_to_json_dict
    from subjectaccess.providers.access_review_provider import get_access_review_provider
    from subjectaccess.providers.discovery_provider import get_discovery_provider
    from subjectaccess.report import render_matrix

    discovery = get_discovery_provider(request_timeout=request_timeout)

    started = time.monotonic()
    try:
        resources = build_catalog(discovery, namespace)
    except DiscoveryUnavailable as e:
        print(f"Discovery unavailable: {e}", file=sys.stderr)
        return 1
    scope = f"ns: {namespace}" if namespace else "cluster"
    print(f"Took ({scope}): {time.monotonic() - started:.3f}s", file=sys.stderr)

    cancel = threading.Event()
    timer: Optional[threading.Timer] = None
    if deadline > 0:
        timer = threading.Timer(deadline, cancel.set)
        timer.daemon = True
        timer.start()
    try:
        table = build_access_table(
            cancel, get_access_review_provider(request_timeout=request_timeout), resources, max_workers=max_workers
        )
    finally:
        if timer is not None:
            timer.cancel()

    if cancel.is_set():
        logger.warning("Deadline of %.1fs reached; some resource/verb pairs were not probed", deadline)

    if dump_json:
        print(json.dumps(table_to_json_dict(table), indent=2, sort_keys=False))
        return 0

    for line in run_checks(table, checks, namespace):
        print(line)

    if matrix or not checks:
        print(render_matrix(table, resources), end="")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    from subjectaccess.config import load_probe_config
    from subjectaccess.core.models import Resource

    cfg = load_probe_config()

    parser = argparse.ArgumentParser(
        description="Report which API verbs the current identity may perform, per resource",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Verb matrix for every resource visible in namespace "default"
  subjectaccess -n default

  # Cluster-wide scope
  subjectaccess --cluster

  # Targeted checks (all listed verbs must be allowed)
  subjectaccess -n default --check v1/Pod get --check apps/v1/Deployment get,list,watch
        """,
    )
    parser.add_argument(
        "--kubeconfig",
        default=cfg.kubeconfig,
        help="Path to a kubeconfig file (default: in-cluster, then ~/.kube/config)",
    )
    parser.add_argument("--context", default=cfg.context, help="Kubeconfig context to use")
    parser.add_argument(
        "--namespace", "-n", default=cfg.namespace, help=f"Namespace scope to probe (default: {cfg.namespace})"
    )
    parser.add_argument(
        "--cluster", action="store_true", help="Probe cluster-wide permissions instead of a single namespace"
    )
    parser.add_argument(
        "--check",
        nargs=2,
        action="append",
        default=[],
        metavar=("REF", "VERBS"),
        help="Check a [group/]version/Kind for comma-separated verbs (repeatable)",
    )
    parser.add_argument("--matrix", action="store_true", help="Print the verb matrix (default when no --check given)")
    parser.add_argument("--dump-json", action="store_true", help="Print the access table as JSON to stdout")
    parser.add_argument(
        "--deadline",
        type=float,
        default=cfg.deadline_seconds,
        help="Stop probing after this many seconds; unprobed pairs are reported as undetermined (default: none)",
    )
    parser.add_argument(
        "--workers", type=int, default=cfg.max_workers, help=f"Max concurrent probes (default: {cfg.max_workers})"
    )

    args = parser.parse_args(argv)

    for ref, raw_verbs in args.check:
        try:
            Resource.from_ref(ref)
        except ValueError as e:
            parser.error(f"--check {ref}: {e}")
        if not _split_verbs(raw_verbs):
            parser.error(f"--check {ref}: no verbs given in {raw_verbs!r}")

    # Configure logging
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", stream=sys.stderr
    )
    logging.getLogger().setLevel(getattr(logging, cfg.log_level, logging.INFO))

    try:
        from subjectaccess.providers.kube_client import init_kube_client

        init_kube_client(kubeconfig=args.kubeconfig, context=args.context)

        return probe(
            namespace="" if args.cluster else (args.namespace or ""),
            checks=args.check,
            dump_json=args.dump_json,
            matrix=args.matrix,
            max_workers=max(1, args.workers),
            request_timeout=cfg.request_timeout_seconds,
            deadline=max(0.0, args.deadline or 0.0),
        )
    except Exception as e:
        print(f"Error during access probe: {e}", file=sys.stderr)
        raise


if __name__ == "__main__":
    sys.exit(main())
