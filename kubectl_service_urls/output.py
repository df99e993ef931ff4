import json
from collections.abc import Iterable
from typing import Any

import yaml

from kubectl_service_urls.model import AddressKind, ClusterIP, Headless
from kubectl_service_urls.resolver import ServiceReport

# ----------------------------
# Output formatting
# ----------------------------


def build_document(
    namespace: str,
    reports: Iterable[ServiceReport],
    name_filter: str | None = None,
) -> dict[str, Any]:
    return {
        "namespace": namespace,
        "filter": name_filter,
        "services": [r.to_dict() for r in reports],
    }


def _topology_line(report: ServiceReport) -> str | None:
    if isinstance(report.topology, ClusterIP):
        return "Type: ClusterIP Service"
    if isinstance(report.topology, Headless):
        return "Type: Headless Service"
    return None


def render_service(report: ServiceReport) -> list[str]:
    lines = [f"Service: {report.name}", f"Service DNS: {report.dns}"]

    topology = _topology_line(report)
    if topology:
        lines.append(topology)

    labels = {
        AddressKind.CLUSTER_IP: "ClusterIP URL",
        AddressKind.SERVICE_DNS: "DNS URL",
    }
    for a in report.addresses:
        if a.kind in labels:
            lines.append(f"  {labels[a.kind]}: {a.url} ({a.port_name})")

    external = [a for a in report.addresses if a.kind.is_external]
    if external:
        lines.append("External endpoints:")
        for a in external:
            if a.kind == AddressKind.EXTERNAL_IP:
                lines.append(f"  External IP URL: {a.url}")
            else:
                lines.append(f"  External Hostname: {a.url}")

    pod_addresses = [a for a in report.addresses if a.kind.is_pod]
    if pod_addresses:
        lines.append("Pod endpoints:")
        for a in pod_addresses:
            # A Pod DNS entry always follows the Pod IP entry for the same port
            if a.kind == AddressKind.POD_IP:
                lines.append(f"  Pod: {a.pod_name}")
                lines.append(f"    IP URL: {a.url}")
            else:
                lines.append(f"    DNS URL: {a.url}")

    return lines


def render_text(
    namespace: str,
    reports: Iterable[ServiceReport],
    name_filter: str | None = None,
) -> str:
    lines = [f"=== Namespace: {namespace} ==="]
    if name_filter:
        lines.append(f"Name filter: {name_filter}")

    for report in reports:
        lines.append("")
        lines.extend(render_service(report))

    return "\n".join(lines)


def output_result(
    namespace: str,
    reports: Iterable[ServiceReport],
    fmt: str = "text",
    name_filter: str | None = None,
) -> None:
    """
    Print resolved Service addresses.
    - text: one block per Service, in the order Services were listed
    - json / yaml: a single document with every address and its URL
    """
    reports = list(reports)

    if fmt == "json":
        print(json.dumps(build_document(namespace, reports, name_filter), indent=2))
        return

    if fmt == "yaml":
        print(
            yaml.safe_dump(
                build_document(namespace, reports, name_filter), sort_keys=False
            ),
            end="",
        )
        return

    print(render_text(namespace, reports, name_filter))
