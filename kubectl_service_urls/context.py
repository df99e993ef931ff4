import os
import sys
from typing import Any

from kubectl_service_urls.model import (
    EndpointsRecord,
    ServiceRecord,
    get_name,
    load_json,
    normalize_items,
    parse_endpoints,
    parse_service,
)
from kubectl_service_urls.snapshot import NamespaceSnapshot


def _load_objects(path: str) -> list[dict[str, Any]]:
    """
    Load Kubernetes objects from a JSON file, or from every *.json file
    in a directory (sorted by file name).
    """
    if os.path.isdir(path):
        objects: list[dict[str, Any]] = []
        for f in sorted(os.listdir(path)):
            if f.endswith(".json"):
                objects.extend(normalize_items(load_json(os.path.join(path, f))))
        return objects
    return normalize_items(load_json(path))


def _named(objects: list[dict[str, Any]], kind: str, verbose: bool) -> list[dict[str, Any]]:
    named = []
    for obj in objects:
        if not get_name(obj):
            if verbose:
                print(f"[DEBUG] Skipping {kind} without metadata.name", file=sys.stderr)
            continue
        named.append(obj)
    return named


def _namespace_of(objects: list[dict[str, Any]]) -> str | None:
    for obj in objects:
        ns = (obj.get("metadata") or {}).get("namespace")
        if ns:
            return ns
    return None


def build_snapshot(
    services_path: str,
    endpoints_path: str | None = None,
    namespace: str | None = None,
    verbose: bool = False,
) -> NamespaceSnapshot:
    """
    Build a snapshot from exported JSON, e.g. the output of
    ``kubectl get svc -o json`` and ``kubectl get endpoints -o json``.

    The namespace falls back to the first object's metadata.namespace, then "default".
    """
    raw_services = _named(_load_objects(services_path), "Service", verbose)
    raw_endpoints: list[dict[str, Any]] = []
    if endpoints_path:
        raw_endpoints = _named(_load_objects(endpoints_path), "Endpoints", verbose)

    namespace = namespace or _namespace_of(raw_services) or "default"

    services: list[ServiceRecord] = [parse_service(s) for s in raw_services]
    endpoints: list[EndpointsRecord] = [parse_endpoints(e) for e in raw_endpoints]

    if verbose:
        print(
            f"[DEBUG] Loaded {len(services)} services and "
            f"{len(endpoints)} endpoints for namespace '{namespace}'",
            file=sys.stderr,
        )

    return NamespaceSnapshot(namespace, services, endpoints)
