import re
import sys
from typing import Any

from kubernetes import client, config
from kubernetes.client import ApiException
from kubernetes.config import ConfigException
from urllib3.exceptions import HTTPError

from kubectl_service_urls.model import EndpointsRecord, parse_endpoints, parse_service
from kubectl_service_urls.snapshot import NamespaceSnapshot


class ClusterAccessError(RuntimeError):
    """
    The cluster could not be reached, or Services could not be listed.
    """


# ----------------------------
# Client construction
# ----------------------------


def load_client(
    kubeconfig: str | None = None,
    context: str | None = None,
) -> client.CoreV1Api:
    """
    An explicit kubeconfig wins; otherwise the default kubeconfig
    (honoring $KUBECONFIG), then the in-cluster service account.
    """
    try:
        if kubeconfig:
            config.load_kube_config(config_file=kubeconfig, context=context)
        else:
            try:
                config.load_kube_config(context=context)
            except (ConfigException, OSError):
                if context:
                    raise
                config.load_incluster_config()
    except (ConfigException, OSError) as e:
        source = kubeconfig or "default kubeconfig / in-cluster config"
        raise ClusterAccessError(f"Failed to load Kubernetes config from {source}: {e}") from e

    return client.CoreV1Api()


# ----------------------------
# Fetching
# ----------------------------


def _call_kwargs(request_timeout: float | None) -> dict[str, Any]:
    return {"_request_timeout": request_timeout} if request_timeout else {}


def fetch_endpoints(
    v1: client.CoreV1Api,
    name: str,
    namespace: str,
    request_timeout: float | None = None,
    verbose: bool = False,
) -> EndpointsRecord | None:
    """
    Read the Endpoints object backing a Service.
    Any API or transport failure (404, timeouts included) means "no Endpoints".
    """
    try:
        ep = v1.read_namespaced_endpoints(name, namespace, **_call_kwargs(request_timeout))
    except ApiException as e:
        if verbose:
            print(
                f"[DEBUG] No endpoints for '{name}' (status={e.status}, reason={e.reason})",
                file=sys.stderr,
            )
        return None
    except HTTPError as e:
        if verbose:
            print(f"[DEBUG] No endpoints for '{name}' ({e})", file=sys.stderr)
        return None
    return parse_endpoints(v1.api_client.sanitize_for_serialization(ep))


def fetch_snapshot(
    v1: client.CoreV1Api,
    namespace: str,
    name_filter: re.Pattern[str] | None = None,
    request_timeout: float | None = None,
    verbose: bool = False,
) -> NamespaceSnapshot:
    """
    List the Services of a namespace and read the Endpoints of each one.
    Endpoints are not fetched for Services the name filter rejects.
    """
    try:
        svc_list = v1.list_namespaced_service(namespace, **_call_kwargs(request_timeout))
    except ApiException as e:
        raise ClusterAccessError(
            f"Failed to list services in namespace '{namespace}': "
            f"{e.status} {e.reason}"
        ) from e
    except HTTPError as e:
        raise ClusterAccessError(
            f"Failed to list services in namespace '{namespace}': {e}"
        ) from e

    services = [
        parse_service(v1.api_client.sanitize_for_serialization(s))
        for s in svc_list.items or []
    ]
    if verbose:
        print(
            f"[DEBUG] Listed {len(services)} services in namespace '{namespace}'",
            file=sys.stderr,
        )

    endpoints = []
    for svc in services:
        if name_filter is not None and not name_filter.search(svc.name):
            continue
        ep = fetch_endpoints(v1, svc.name, namespace, request_timeout, verbose)
        if ep is not None:
            endpoints.append(ep)

    return NamespaceSnapshot(namespace, services, endpoints)
