"""Domain models for the auto-ingress controller.

This module defines typed data structures for Services as the controller
sees them, the Ingresses it creates, and the watch events that drive it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

from constants import MANAGED_BY_LABEL, MANAGED_BY_VALUE


# =============================================================================
# Enums for constrained values
# =============================================================================


class EventType(Enum):
    """Kind of change delivered by the Service watch."""

    ADDED = "Added"
    UPDATED = "Updated"
    DELETED = "Deleted"

    @classmethod
    def from_watch(cls, raw: str | None) -> "EventType":
        """Map a raw watch event type to an EventType.

        The initial listing done by the watcher reports no type and is
        handled like an addition.
        """
        if raw is None or raw == "ADDED":
            return cls.ADDED
        if raw == "MODIFIED":
            return cls.UPDATED
        if raw == "DELETED":
            return cls.DELETED
        raise ValueError(f"Unknown watch event type: {raw}")


class Action(Enum):
    """Outcome of processing a single event."""

    CREATED = "created"
    DELETED = "deleted"
    NOOP = "noop"
    FAILED = "failed"


# =============================================================================
# Services
# =============================================================================


class ServiceKey(NamedTuple):
    """Unique identity of a Service."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class ServicePort:
    """A port exposed by a Service."""

    port: int
    name: str | None = None


@dataclass(frozen=True)
class ServiceDescriptor:
    """The parts of a Service the controller reads."""

    name: str
    namespace: str
    labels: dict[str, str] = field(default_factory=dict)
    ports: tuple[ServicePort, ...] = ()

    @property
    def key(self) -> ServiceKey:
        return ServiceKey(self.namespace, self.name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServiceDescriptor":
        """Create from a raw Service body as delivered by the watch."""
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        ports = tuple(
            ServicePort(port=int(p["port"]), name=p.get("name"))
            for p in spec.get("ports") or []
            if p.get("port") is not None
        )
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            labels=dict(metadata.get("labels") or {}),
            ports=ports,
        )

    @classmethod
    def from_api(cls, service: Any) -> "ServiceDescriptor":
        """Create from a kubernetes client V1Service."""
        metadata = service.metadata
        ports = tuple(
            ServicePort(port=p.port, name=p.name)
            for p in (service.spec.ports if service.spec else None) or []
        )
        return cls(
            name=metadata.name,
            namespace=metadata.namespace,
            labels=dict(metadata.labels or {}),
            ports=ports,
        )


@dataclass(frozen=True)
class ServiceEvent:
    """A single change notification for a Service."""

    type: EventType
    service: ServiceDescriptor

    @property
    def key(self) -> ServiceKey:
        return self.service.key


# =============================================================================
# Ingresses
# =============================================================================


@dataclass(frozen=True)
class IngressRef:
    """Identity of an Ingress, plus the Services its paths route to."""

    namespace: str
    name: str
    backend_services: tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"

    @classmethod
    def from_api(cls, ingress: Any) -> "IngressRef":
        """Create from a kubernetes client V1Ingress.

        Backend Service names are collected in rule and path order.
        """
        backends: list[str] = []
        spec = ingress.spec
        for rule in (spec.rules if spec else None) or []:
            if rule.http is None:
                continue
            for path in rule.http.paths or []:
                service = path.backend.service if path.backend else None
                if service is not None and service.name:
                    backends.append(service.name)
        return cls(
            namespace=ingress.metadata.namespace,
            name=ingress.metadata.name,
            backend_services=tuple(backends),
        )


@dataclass(frozen=True)
class IngressBackend:
    """Backend Service reference of an Ingress path.

    An empty service name and no port is the degenerate backend used for
    Services that expose no ports.
    """

    service_name: str = ""
    port: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for the Kubernetes manifest."""
        port: dict[str, int] = {}
        if self.port is not None:
            port["number"] = self.port
        return {"service": {"name": self.service_name, "port": port}}


@dataclass(frozen=True)
class IngressSpec:
    """Desired Ingress for a public Service."""

    name: str
    namespace: str
    host: str
    tls_secret: str
    backend: IngressBackend
    path: str = "/"
    labels: dict[str, str] = field(
        default_factory=lambda: {MANAGED_BY_LABEL: MANAGED_BY_VALUE}
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a networking.k8s.io/v1 Ingress manifest."""
        return {
            "apiVersion": "networking.k8s.io/v1",
            "kind": "Ingress",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": dict(self.labels),
            },
            "spec": {
                "tls": [{"hosts": [self.host], "secretName": self.tls_secret}],
                "rules": [
                    {
                        "host": self.host,
                        "http": {
                            "paths": [
                                {
                                    "path": self.path,
                                    "pathType": "Prefix",
                                    "backend": self.backend.to_dict(),
                                }
                            ]
                        },
                    }
                ],
            },
        }


# =============================================================================
# Exceptions
# =============================================================================


class ControllerError(Exception):
    """Base exception for controller errors."""

    pass


class ConfigurationError(ControllerError):
    """Invalid or missing configuration."""

    pass


class KubernetesAPIError(ControllerError):
    """Error communicating with the Kubernetes API."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
