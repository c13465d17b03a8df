"""Ingress construction for public Services."""

import logging

from config import ControllerConfig
from kubernetes_client import KubernetesClient
from models import IngressBackend, IngressRef, IngressSpec, ServiceDescriptor

logger = logging.getLogger(__name__)


def make_host(service_name: str, wildcard_domain: str) -> str:
    """Generate the public host name for a Service.

    Example: ('api', 'example.com') -> 'api.example.com'
    """
    return f"{service_name}.{wildcard_domain}"


def build_backend(service: ServiceDescriptor) -> IngressBackend:
    """Build the backend pointing at the first declared port of a Service.

    A Service without ports yields an empty backend rather than an error.
    """
    if not service.ports:
        logger.warning(
            "Service %s/%s exposes no ports, using an empty backend",
            service.namespace,
            service.name,
        )
        return IngressBackend()
    return IngressBackend(service_name=service.name, port=service.ports[0].port)


def build_ingress(service: ServiceDescriptor, config: ControllerConfig) -> IngressSpec:
    """Build the Ingress spec for a Service.

    The result is fully determined by the Service and the configuration:
    one rule for '<service>.<domain>' with path '/', and one TLS entry for
    the same host using the configured secret.

    Args:
        service: The Service to expose
        config: Controller configuration (domain and TLS secret)

    Returns:
        The Ingress spec, named and namespaced like the Service
    """
    return IngressSpec(
        name=service.name,
        namespace=service.namespace,
        host=make_host(service.name, config.wildcard_domain),
        tls_secret=config.tls_secret,
        backend=build_backend(service),
    )


def create_ingress_for_service(
    client: KubernetesClient,
    service: ServiceDescriptor,
    config: ControllerConfig,
) -> IngressRef:
    """Build and create the Ingress for a Service.

    Raises:
        KubernetesAPIError: if the create call fails
    """
    spec = build_ingress(service, config)
    ref = client.create_ingress(spec)
    logger.info("Created ingress %s for service %s", ref, service.key)
    return ref
