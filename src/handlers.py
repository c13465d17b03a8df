"""Kopf handlers for the auto-ingress controller."""

import logging
import sys
from pathlib import Path
from typing import Any

# Add src directory to path for imports when run as script by Kopf
_src_dir = Path(__file__).parent
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import kopf
from prometheus_client import start_http_server
from urllib3.exceptions import HTTPError

from config import ControllerConfig
from metrics import init_metrics, set_controller_info
from models import ControllerError, EventType, ServiceDescriptor, ServiceEvent
from processor import EventProcessor
from resources.bootstrap import reconcile
from state import state

logger = logging.getLogger(__name__)

# Controller version
CONTROLLER_VERSION = "0.1.0"


def connection_info(configuration: Any) -> kopf.ConnectionInfo:
    """Convert a kubernetes client Configuration into kopf credentials."""
    scheme: str | None = None
    token: str | None = None
    header = configuration.get_api_key_with_prefix("authorization")
    if header:
        scheme, _, token = header.partition(" ")
        if not token:
            scheme, token = None, scheme

    return kopf.ConnectionInfo(
        server=configuration.host,
        ca_path=configuration.ssl_ca_cert,
        insecure=not configuration.verify_ssl,
        username=configuration.username or None,
        password=configuration.password or None,
        scheme=scheme,
        token=token,
        certificate_path=configuration.cert_file,
        private_key_path=configuration.key_file,
    )


@kopf.on.login()
def login(logger: logging.Logger, **kwargs: Any) -> kopf.ConnectionInfo | None:
    """Authenticate kopf with the same credentials as the API client."""
    try:
        kubeconfig = ControllerConfig.from_env().kubeconfig
    except ControllerError as e:
        raise kopf.PermanentError(f"Invalid configuration: {e}") from e
    if not kubeconfig:
        return kopf.login_via_client(logger=logger, **kwargs)

    state.configure(kubeconfig)
    try:
        configuration = state.load_credentials()
    except ControllerError as e:
        raise kopf.PermanentError(str(e)) from e
    logger.info("Using kubeconfig %s", kubeconfig)
    return connection_info(configuration)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Load configuration, reconcile existing state and start event processing.

    Kopf only starts watching Services once this handler returns, so the
    startup reconciliation always completes before the first live event is
    consumed. Any failure here stops the operator.
    """
    # Reduce logging noise
    settings.posting.level = logging.WARNING
    settings.watching.clusterwide = True

    try:
        config = ControllerConfig.from_env()
        state.configure(config.kubeconfig)
        client = state.get_kubernetes_client()
    except ControllerError as e:
        raise kopf.PermanentError(f"Invalid configuration: {e}") from e

    # Start Prometheus metrics server
    try:
        start_http_server(config.metrics_port)
        logger.info("Prometheus metrics server started on port %d", config.metrics_port)
    except OSError as e:
        logger.warning(
            "Failed to start metrics server on port %d: %s", config.metrics_port, e
        )

    init_metrics()
    set_controller_info(CONTROLLER_VERSION, config.wildcard_domain)

    logger.info("Initializing mapping between ingresses and services...")
    try:
        inventory = reconcile(client, config)
    except (ControllerError, HTTPError, OSError) as e:
        raise kopf.PermanentError(f"Startup reconciliation failed: {e}") from e

    processor = EventProcessor(inventory, client, config)
    processor.start()
    memo.processor = processor

    logger.info("Auto-ingress controller started (version %s)", CONTROLLER_VERSION)


@kopf.on.cleanup()
def cleanup(memo: kopf.Memo, **_: Any) -> None:
    """Stop event processing on operator shutdown."""
    logger.info("Auto-ingress controller shutting down")
    processor: EventProcessor | None = memo.get("processor")
    if processor is not None:
        processor.stop()
    state.close()


@kopf.on.event("", "v1", "services")
def service_event(event: dict[str, Any], memo: kopf.Memo, **_: Any) -> None:
    """Queue a Service watch event for the event processor."""
    processor: EventProcessor | None = memo.get("processor")
    if processor is None:
        logger.warning("Event processor not running, dropping Service event")
        return

    try:
        event_type = EventType.from_watch(event.get("type"))
    except ValueError as e:
        logger.warning("Ignoring Service event: %s", e)
        return

    service = ServiceDescriptor.from_dict(event.get("object") or {})
    processor.submit(ServiceEvent(type=event_type, service=service))


def main() -> None:
    """Entry point for running the controller."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Kopf will be run via the CLI, but this allows direct invocation for testing
    logger.info("Starting auto-ingress controller...")
    logger.info("Use 'kopf run --all-namespaces src/handlers.py' to run the controller")
    sys.exit(0)


if __name__ == "__main__":
    main()
