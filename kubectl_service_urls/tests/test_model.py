import pytest

from kubectl_service_urls.model import (
    AddressKind,
    ClusterIP,
    Headless,
    PortSpec,
    ResolvedAddress,
    Unassigned,
    classify_topology,
    normalize_items,
    parse_endpoints,
    parse_service,
)


class TestTopology:
    def test_absent_cluster_ip_is_unassigned(self):
        assert classify_topology(None) == Unassigned()

    def test_any_other_value_is_cluster_ip(self):
        """
        Only a missing clusterIP means unassigned; an empty string is still a value.
        """
        assert classify_topology("") == ClusterIP("")

    def test_none_sentinel_is_headless(self):
        assert classify_topology("None") == Headless()

    def test_concrete_ip_is_cluster_ip(self):
        assert classify_topology("10.0.0.5") == ClusterIP("10.0.0.5")


class TestParseService:
    def test_port_defaults_applied_once(self):
        """
        Missing protocol defaults to TCP, missing name to "default".
        """
        svc = parse_service(
            {"metadata": {"name": "db"}, "spec": {"clusterIP": "None", "ports": [{"port": 5432}]}}
        )
        assert svc.ports == (PortSpec(port=5432, name="default", protocol="TCP"),)
        assert svc.topology == Headless()

    def test_load_balancer_ingress(self):
        svc = parse_service(
            {
                "metadata": {"name": "edge"},
                "spec": {"clusterIP": "10.0.0.9", "ports": [{"port": 443}]},
                "status": {
                    "loadBalancer": {
                        "ingress": [{"ip": "203.0.113.7"}, {"hostname": "lb.example.com"}]
                    }
                },
            }
        )
        assert [(i.ip, i.hostname) for i in svc.ingress] == [
            ("203.0.113.7", None),
            (None, "lb.example.com"),
        ]

    def test_missing_spec_is_not_an_error(self):
        svc = parse_service({"metadata": {"name": "bare"}})
        assert svc.topology == Unassigned()
        assert svc.ports == ()
        assert svc.ingress == ()

    def test_missing_name_is_rejected(self):
        with pytest.raises(ValueError):
            parse_service({"spec": {}})


class TestParseEndpoints:
    def test_target_ref_name_becomes_pod_name(self):
        ep = parse_endpoints(
            {
                "metadata": {"name": "web"},
                "subsets": [
                    {
                        "addresses": [
                            {"ip": "10.1.0.11", "targetRef": {"name": "web-1"}},
                            {"ip": "10.1.0.12"},
                        ],
                        "ports": [{"port": 8080, "protocol": "UDP"}],
                    }
                ],
            }
        )
        subset = ep.subsets[0]
        assert [(a.ip, a.pod_name) for a in subset.addresses] == [
            ("10.1.0.11", "web-1"),
            ("10.1.0.12", None),
        ]
        assert subset.ports == (PortSpec(port=8080, protocol="UDP"),)

    def test_no_subsets(self):
        ep = parse_endpoints({"metadata": {"name": "web"}, "subsets": None})
        assert ep.subsets == ()


class TestNormalizeItems:
    def test_list_document(self):
        doc = {"kind": "ServiceList", "items": [{"metadata": {"name": "a"}}]}
        assert normalize_items(doc) == [{"metadata": {"name": "a"}}]

    def test_single_object(self):
        obj = {"kind": "Service", "metadata": {"name": "a"}}
        assert normalize_items(obj) == [obj]

    def test_bare_list(self):
        assert normalize_items([{"metadata": {"name": "a"}}]) == [{"metadata": {"name": "a"}}]

    def test_non_object_items_are_rejected(self):
        """
        A list holding anything but objects is bad input, reported as ValueError.
        """
        with pytest.raises(ValueError, match="Expected a Kubernetes object"):
            normalize_items([1])
        with pytest.raises(ValueError, match="Expected a Kubernetes object"):
            normalize_items({"kind": "List", "items": ["web"]})


class TestResolvedAddress:
    def test_url(self):
        a = ResolvedAddress(AddressKind.CLUSTER_IP, "http", "10.0.0.5", 80)
        assert a.url == "http://10.0.0.5:80"

    def test_port_name_is_not_part_of_identity(self):
        a = ResolvedAddress(AddressKind.CLUSTER_IP, "http", "10.0.0.5", 80, port_name="http")
        b = ResolvedAddress(AddressKind.CLUSTER_IP, "http", "10.0.0.5", 80, port_name="web")
        assert a == b

    def test_to_dict_includes_pod_only_for_pod_entries(self):
        svc = ResolvedAddress(AddressKind.SERVICE_DNS, "http", "web.shop.svc.cluster.local", 80)
        pod = ResolvedAddress(AddressKind.POD_IP, "http", "10.1.0.11", 8080, pod_name="web-1")
        assert "pod" not in svc.to_dict()
        assert pod.to_dict()["pod"] == "web-1"
        assert pod.to_dict()["kind"] == "PodIP"
