"""Shared operator state - thread-safe singleton for Kubernetes clients."""

import threading
from dataclasses import dataclass, field

from kubernetes import client as k8s_client
from kubernetes import config as k8s_config

from kubernetes_client import KubernetesClient
from models import ConfigurationError


@dataclass
class OperatorState:
    """Thread-safe operator state container.

    This class provides thread-safe access to the Kubernetes API clients.
    Credentials come from the kubeconfig passed to configure(), or from the
    in-cluster service account when none is given.

    Reconciliation state (the inventory) is deliberately not kept here; it is
    owned by the event processor.
    """

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _kubeconfig: str | None = field(default=None, repr=False)
    _k8s_client: KubernetesClient | None = field(default=None, repr=False)
    _k8s_configured: bool = field(default=False, repr=False)

    def configure(self, kubeconfig: str | None) -> None:
        """Set the kubeconfig path used on the next credential load."""
        with self._lock:
            if self._k8s_configured and kubeconfig == self._kubeconfig:
                return
            self._kubeconfig = kubeconfig
            self._k8s_configured = False
            self._k8s_client = None

    def _ensure_k8s_config(self) -> None:
        """Ensure Kubernetes configuration is loaded (must hold lock)."""
        if self._k8s_configured:
            return
        try:
            if self._kubeconfig:
                k8s_config.load_kube_config(config_file=self._kubeconfig)
            else:
                k8s_config.load_incluster_config()
        except (k8s_config.ConfigException, OSError) as e:
            source = self._kubeconfig or "in-cluster service account"
            raise ConfigurationError(
                f"Failed to load Kubernetes credentials from {source}: {e}"
            ) from e
        self._k8s_configured = True

    def load_credentials(self) -> k8s_client.Configuration:
        """Load credentials and return a copy of the client configuration."""
        with self._lock:
            self._ensure_k8s_config()
            return k8s_client.Configuration.get_default_copy()

    def get_kubernetes_client(self) -> KubernetesClient:
        """Get or create the Kubernetes client (thread-safe)."""
        with self._lock:
            self._ensure_k8s_config()
            if self._k8s_client is None:
                api_client = k8s_client.ApiClient()
                self._k8s_client = KubernetesClient(
                    k8s_client.CoreV1Api(api_client),
                    k8s_client.NetworkingV1Api(api_client),
                )
            return self._k8s_client

    def close(self) -> None:
        """Drop cached clients."""
        with self._lock:
            if self._k8s_client is not None:
                self._k8s_client.core_api.api_client.close()
                self._k8s_client = None


# Global operator state singleton
state = OperatorState()
