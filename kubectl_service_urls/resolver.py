import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from kubectl_service_urls.model import (
    UNKNOWN_POD,
    AddressKind,
    ClusterIP,
    EndpointsRecord,
    Headless,
    PortSpec,
    ResolvedAddress,
    ServiceRecord,
    Topology,
)
from kubectl_service_urls.naming import pod_dns, scheme_for, service_dns
from kubectl_service_urls.snapshot import NamespaceSnapshot


@dataclass(frozen=True)
class ServiceReport:
    """
    Everything resolved for a single Service.
    """

    service: ServiceRecord
    dns: str
    addresses: tuple[ResolvedAddress, ...]

    @property
    def name(self) -> str:
        return self.service.name

    @property
    def topology(self) -> Topology:
        return self.service.topology

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "dns": self.dns,
            "type": self.topology.label,
            "addresses": [a.to_dict() for a in self.addresses],
        }


# ----------------------------
# Single Service resolution
# ----------------------------


def _address(
    kind: AddressKind, host: str, port: PortSpec, pod_name: str | None = None
) -> ResolvedAddress:
    return ResolvedAddress(
        kind=kind,
        scheme=scheme_for(port.protocol),
        host=host,
        port=port.port,
        pod_name=pod_name,
        port_name=port.name,
    )


def resolve_service(
    service: ServiceRecord,
    namespace: str,
    endpoints: EndpointsRecord | None = None,
) -> list[ResolvedAddress]:
    """
    Derive every address through which a Service and its Pods are reachable.

    Order:
    - ClusterIP then ServiceDNS, per port (ClusterIP-backed Services only)
    - external IP / hostname, per ingress entry and port
    - Pod IP (and Pod DNS for headless Services), per subset, address and port
    """
    svc_dns = service_dns(service.name, namespace)
    topology = service.topology
    addresses: list[ResolvedAddress] = []

    if isinstance(topology, ClusterIP):
        for port in service.ports:
            addresses.append(_address(AddressKind.CLUSTER_IP, topology.ip, port))
            addresses.append(_address(AddressKind.SERVICE_DNS, svc_dns, port))

    for ingress in service.ingress:
        if ingress.ip:
            for port in service.ports:
                addresses.append(_address(AddressKind.EXTERNAL_IP, ingress.ip, port))
        if ingress.hostname:
            for port in service.ports:
                addresses.append(
                    _address(AddressKind.EXTERNAL_HOSTNAME, ingress.hostname, port)
                )

    if endpoints is None or endpoints.name != service.name:
        return addresses

    headless = isinstance(topology, Headless)
    for subset in endpoints.subsets:
        for addr in subset.addresses:
            pod_name = addr.pod_name or UNKNOWN_POD
            dns = pod_dns(pod_name, service.name, namespace) if headless else None
            for port in subset.ports:
                addresses.append(_address(AddressKind.POD_IP, addr.ip, port, pod_name))
                if dns:
                    addresses.append(_address(AddressKind.POD_DNS, dns, port, pod_name))

    return addresses


# ----------------------------
# Namespace-wide resolution
# ----------------------------


def compile_name_filter(pattern: str | None) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid regex pattern {pattern!r}: {e}") from e


def resolve_namespace(
    snapshot: NamespaceSnapshot,
    name_filter: re.Pattern[str] | None = None,
) -> Iterator[ServiceReport]:
    """
    Resolve every Service in the snapshot, in list order.
    Services whose name the filter does not match are skipped entirely.
    """
    for service in snapshot.services:
        if name_filter is not None and not name_filter.search(service.name):
            continue
        yield ServiceReport(
            service=service,
            dns=service_dns(service.name, snapshot.namespace),
            addresses=tuple(
                resolve_service(
                    service,
                    snapshot.namespace,
                    snapshot.endpoints_for(service.name),
                )
            ),
        )
