"""Shared fixtures for controller tests."""

from unittest.mock import MagicMock

import pytest

from config import ControllerConfig
from kubernetes_client import KubernetesClient
from models import IngressRef, ServiceDescriptor, ServicePort


def make_service(
    name: str = "api",
    namespace: str = "ns1",
    labels: dict[str, str] | None = None,
    ports: tuple[int, ...] = (8080,),
) -> ServiceDescriptor:
    return ServiceDescriptor(
        name=name,
        namespace=namespace,
        labels=labels if labels is not None else {"public": "true"},
        ports=tuple(ServicePort(port=p) for p in ports),
    )


@pytest.fixture
def config() -> ControllerConfig:
    return ControllerConfig(wildcard_domain="example.com", tls_secret="tls-default")


@pytest.fixture
def client() -> MagicMock:
    """Cluster client whose create call echoes the requested Ingress."""
    client = MagicMock(spec=KubernetesClient)
    client.list_services.return_value = []
    client.list_ingresses.return_value = []
    client.create_ingress.side_effect = lambda spec: IngressRef(
        namespace=spec.namespace,
        name=spec.name,
        backend_services=(spec.backend.service_name,),
    )
    client.delete_ingress.return_value = True
    return client
