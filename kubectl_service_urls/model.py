import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_PROTOCOL = "TCP"
DEFAULT_PORT_NAME = "default"
UNKNOWN_POD = "unknown"

# Sentinel clusterIP value Kubernetes uses for headless Services
HEADLESS_CLUSTER_IP = "None"


# ----------------------------
# Service topology
# ----------------------------


@dataclass(frozen=True)
class Unassigned:
    """
    No cluster IP allocated (yet).
    """

    label = "Unassigned"


@dataclass(frozen=True)
class Headless:
    """
    clusterIP is the literal "None": DNS resolves straight to the Pods.
    """

    label = "Headless"


@dataclass(frozen=True)
class ClusterIP:
    ip: str

    label = "ClusterIP"


Topology = Unassigned | Headless | ClusterIP


def classify_topology(cluster_ip: str | None) -> Topology:
    if cluster_ip is None:
        return Unassigned()
    if cluster_ip == HEADLESS_CLUSTER_IP:
        return Headless()
    return ClusterIP(cluster_ip)


# ----------------------------
# Records
# ----------------------------


@dataclass(frozen=True)
class PortSpec:
    port: int
    name: str = DEFAULT_PORT_NAME
    protocol: str = DEFAULT_PROTOCOL


@dataclass(frozen=True)
class Ingress:
    ip: str | None = None
    hostname: str | None = None


@dataclass(frozen=True)
class ServiceRecord:
    name: str
    topology: Topology = field(default_factory=Unassigned)
    ports: tuple[PortSpec, ...] = ()
    ingress: tuple[Ingress, ...] = ()


@dataclass(frozen=True)
class EndpointAddress:
    ip: str
    pod_name: str | None = None


@dataclass(frozen=True)
class EndpointSubset:
    addresses: tuple[EndpointAddress, ...] = ()
    ports: tuple[PortSpec, ...] = ()


@dataclass(frozen=True)
class EndpointsRecord:
    name: str
    subsets: tuple[EndpointSubset, ...] = ()


class AddressKind(str, Enum):
    CLUSTER_IP = "ClusterIP"
    SERVICE_DNS = "ServiceDNS"
    EXTERNAL_IP = "ExternalIP"
    EXTERNAL_HOSTNAME = "ExternalHostname"
    POD_IP = "PodIP"
    POD_DNS = "PodDNS"

    @property
    def is_pod(self) -> bool:
        return self in (AddressKind.POD_IP, AddressKind.POD_DNS)

    @property
    def is_external(self) -> bool:
        return self in (AddressKind.EXTERNAL_IP, AddressKind.EXTERNAL_HOSTNAME)


@dataclass(frozen=True)
class ResolvedAddress:
    kind: AddressKind
    scheme: str
    host: str
    port: int
    pod_name: str | None = None
    # display only
    port_name: str = field(default=DEFAULT_PORT_NAME, compare=False)

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "scheme": self.scheme,
            "host": self.host,
            "port": self.port,
            "port_name": self.port_name,
            "url": self.url,
        }
        if self.pod_name is not None:
            data["pod"] = self.pod_name
        return data


# ----------------------------
# Parsing utilities
# ----------------------------


def load_json(path: str) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def normalize_items(doc: Any) -> list[dict[str, Any]]:
    """
    Accept a bare list, a single object, or a ``kind: *List`` document.
    """
    if doc is None:
        return []
    if isinstance(doc, list):
        items = doc
    elif not isinstance(doc, dict):
        raise ValueError(f"Expected a Kubernetes object or list, got {type(doc).__name__}")
    elif "items" in doc and str(doc.get("kind", "List")).endswith("List"):
        items = doc.get("items") or []
    else:
        items = [doc]

    for item in items:
        if not isinstance(item, dict):
            raise ValueError(f"Expected a Kubernetes object, got {type(item).__name__}")
    return items


def get_name(obj: dict[str, Any]) -> str | None:
    return (obj.get("metadata") or {}).get("name")


def parse_port(raw: dict[str, Any]) -> PortSpec:
    return PortSpec(
        port=int(raw["port"]),
        name=raw.get("name") or DEFAULT_PORT_NAME,
        protocol=raw.get("protocol") or DEFAULT_PROTOCOL,
    )


def parse_service(obj: dict[str, Any]) -> ServiceRecord:
    name = get_name(obj)
    if not name:
        raise ValueError("Service object has no metadata.name")

    spec = obj.get("spec") or {}
    status = obj.get("status") or {}
    load_balancer = status.get("loadBalancer") or {}

    return ServiceRecord(
        name=name,
        topology=classify_topology(spec.get("clusterIP")),
        ports=tuple(parse_port(p) for p in spec.get("ports") or []),
        ingress=tuple(
            Ingress(ip=i.get("ip") or None, hostname=i.get("hostname") or None)
            for i in load_balancer.get("ingress") or []
        ),
    )


def parse_endpoints(obj: dict[str, Any]) -> EndpointsRecord:
    name = get_name(obj)
    if not name:
        raise ValueError("Endpoints object has no metadata.name")

    subsets = []
    for s in obj.get("subsets") or []:
        addresses = tuple(
            EndpointAddress(
                ip=a["ip"],
                pod_name=(a.get("targetRef") or {}).get("name"),
            )
            for a in s.get("addresses") or []
        )
        ports = tuple(parse_port(p) for p in s.get("ports") or [])
        subsets.append(EndpointSubset(addresses=addresses, ports=ports))

    return EndpointsRecord(name=name, subsets=tuple(subsets))
