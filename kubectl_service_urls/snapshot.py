from kubectl_service_urls.model import EndpointsRecord, ServiceRecord


class NamespaceSnapshot:
    """
    Read-only view of the Services and Endpoints of one namespace,
    fetched once per run.
    """

    def __init__(
        self,
        namespace: str,
        services: list[ServiceRecord],
        endpoints: list[EndpointsRecord] | None = None,
    ):
        self.namespace = namespace
        self.services: tuple[ServiceRecord, ...] = tuple(services)
        self.endpoints: dict[str, EndpointsRecord] = {
            ep.name: ep for ep in endpoints or []
        }

    def endpoints_for(self, service_name: str) -> EndpointsRecord | None:
        return self.endpoints.get(service_name)

    @property
    def service_names(self) -> list[str]:
        return [s.name for s in self.services]
