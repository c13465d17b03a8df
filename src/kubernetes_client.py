"""Kubernetes API wrapper with instrumentation and error translation."""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from kubernetes.client import ApiException, CoreV1Api, NetworkingV1Api
from urllib3.exceptions import HTTPError

from metrics import KUBERNETES_API_CALLS, KUBERNETES_API_DURATION
from models import IngressRef, IngressSpec, KubernetesAPIError, ServiceDescriptor

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def api_call(
    resource: str, operation: str
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator recording metrics for a Kubernetes call.

    ApiException is re-raised as KubernetesAPIError carrying the HTTP status.
    Transport failures (urllib3 errors, OSError) become KubernetesAPIError
    without a status. Calls are not retried.
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            start = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except ApiException as e:
                KUBERNETES_API_CALLS.labels(
                    resource=resource, operation=operation, status="error"
                ).inc()
                raise KubernetesAPIError(
                    f"{operation} {resource} failed: {e.status} {e.reason}",
                    status=e.status,
                ) from e
            except (HTTPError, OSError) as e:
                KUBERNETES_API_CALLS.labels(
                    resource=resource, operation=operation, status="error"
                ).inc()
                raise KubernetesAPIError(f"{operation} {resource} failed: {e}") from e
            finally:
                KUBERNETES_API_DURATION.labels(
                    resource=resource, operation=operation
                ).observe(time.monotonic() - start)
            KUBERNETES_API_CALLS.labels(
                resource=resource, operation=operation, status="success"
            ).inc()
            return result

        return wrapper

    return decorator


class KubernetesClient:
    """Wrapper around the kubernetes client with the calls the controller needs."""

    def __init__(self, core_api: CoreV1Api, networking_api: NetworkingV1Api) -> None:
        """Initialize the client.

        Args:
            core_api: CoreV1Api used for Services
            networking_api: NetworkingV1Api used for Ingresses
        """
        self.core_api = core_api
        self.networking_api = networking_api

    # -------------------------------------------------------------------------
    # Service operations
    # -------------------------------------------------------------------------

    @api_call("service", "list")
    def list_services(self) -> list[ServiceDescriptor]:
        """List Services in all namespaces."""
        services = self.core_api.list_service_for_all_namespaces()
        return [ServiceDescriptor.from_api(svc) for svc in services.items or []]

    # -------------------------------------------------------------------------
    # Ingress operations
    # -------------------------------------------------------------------------

    @api_call("ingress", "list")
    def list_ingresses(self) -> list[IngressRef]:
        """List Ingresses in all namespaces."""
        ingresses = self.networking_api.list_ingress_for_all_namespaces()
        return [IngressRef.from_api(ing) for ing in ingresses.items or []]

    @api_call("ingress", "create")
    def create_ingress(self, spec: IngressSpec) -> IngressRef:
        """Create an Ingress from its spec."""
        logger.info("Creating ingress: %s/%s (host=%s)", spec.namespace, spec.name, spec.host)
        created = self.networking_api.create_namespaced_ingress(
            spec.namespace, spec.to_dict()
        )
        return IngressRef.from_api(created)

    def delete_ingress(self, namespace: str, name: str) -> bool:
        """Delete an Ingress.

        Returns:
            True if the Ingress was deleted, False if it was already gone
        """
        try:
            self._delete_ingress(namespace, name)
        except KubernetesAPIError as e:
            if e.status == 404:
                logger.warning("Ingress %s/%s already deleted", namespace, name)
                return False
            raise
        return True

    @api_call("ingress", "delete")
    def _delete_ingress(self, namespace: str, name: str) -> None:
        logger.info("Deleting ingress: %s/%s", namespace, name)
        self.networking_api.delete_namespaced_ingress(name, namespace)
