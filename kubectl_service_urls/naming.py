CLUSTER_DOMAIN = "svc.cluster.local"


def service_dns(service_name: str, namespace: str) -> str:
    return f"{service_name}.{namespace}.{CLUSTER_DOMAIN}"


def pod_dns(pod_name: str, service_name: str, namespace: str) -> str:
    """
    Per-Pod DNS name. Only published by the cluster for headless Services;
    no topology check is made here.
    """
    return f"{pod_name}.{service_name}.{namespace}.{CLUSTER_DOMAIN}"


def scheme_for(protocol: str) -> str:
    """
    URL scheme hint for a transport protocol label.
    TCP is assumed to speak HTTP; anything other than TCP/UDP passes through lower-cased.
    """
    proto = protocol.lower()
    if proto == "tcp":
        return "http"
    if proto == "udp":
        return "udp"
    return proto
