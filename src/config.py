"""Process-wide controller configuration, read once at startup."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from constants import (
    DEFAULT_METRICS_PORT,
    ENV_KUBECONFIG,
    ENV_METRICS_PORT,
    ENV_SECRET,
    ENV_SERVER_NAME,
)
from models import ConfigurationError
from utils import normalize_domain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ControllerConfig:
    """Immutable controller settings.

    Attributes:
        wildcard_domain: DNS domain every generated host lives under
        tls_secret: Name of the TLS secret referenced by every Ingress
        kubeconfig: Path to an out-of-cluster kubeconfig, or None for
            in-cluster credentials
        metrics_port: Port of the Prometheus exporter
    """

    wildcard_domain: str
    tls_secret: str
    kubeconfig: str | None = None
    metrics_port: int = DEFAULT_METRICS_PORT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ControllerConfig":
        """Build the configuration from environment variables.

        Raises:
            ConfigurationError: if a required variable is missing or a value
                cannot be parsed
        """
        env = os.environ if environ is None else environ

        domain = normalize_domain(env.get(ENV_SERVER_NAME, ""))
        if not domain:
            raise ConfigurationError(f"{ENV_SERVER_NAME} is required")

        secret = env.get(ENV_SECRET, "").strip()
        if not secret:
            raise ConfigurationError(f"{ENV_SECRET} is required")

        raw_port = env.get(ENV_METRICS_PORT, str(DEFAULT_METRICS_PORT))
        try:
            metrics_port = int(raw_port)
        except ValueError:
            raise ConfigurationError(
                f"{ENV_METRICS_PORT} must be an integer, got {raw_port!r}"
            ) from None

        kubeconfig = env.get(ENV_KUBECONFIG, "").strip() or None

        config = cls(
            wildcard_domain=domain,
            tls_secret=secret,
            kubeconfig=kubeconfig,
            metrics_port=metrics_port,
        )
        logger.info(
            "Loaded configuration: domain=%s, secret=%s, kubeconfig=%s",
            config.wildcard_domain,
            config.tls_secret,
            config.kubeconfig or "<in-cluster>",
        )
        return config
