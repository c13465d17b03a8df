"""Startup reconciliation of the Ingress inventory.

Before live events are processed, the controller lists every Service and
every Ingress in the cluster and rebuilds its inventory:

- Public Services that already have an Ingress are recorded.
- Public Services without one get an Ingress created.
- Services that have an Ingress but are no longer public are left out of the
  inventory. Their Ingress is not deleted from the cluster.

The two listings are independent snapshots; anything that changes between
them is picked up by the live event stream afterwards.
"""

import logging
import time

from config import ControllerConfig
from kubernetes_client import KubernetesClient
from metrics import BOOTSTRAP_DURATION, BOOTSTRAP_RUNS, INGRESS_OPERATIONS
from models import IngressRef, ServiceKey
from resources.ingress import create_ingress_for_service
from resources.inventory import Inventory
from utils import is_public

logger = logging.getLogger(__name__)


def index_ingresses(ingresses: list[IngressRef]) -> dict[ServiceKey, IngressRef]:
    """Map each backend Service to the first Ingress routing to it.

    Ingress backends always refer to Services in the Ingress's own namespace.
    When several Ingresses route to the same Service, the first one listed
    wins.
    """
    index: dict[ServiceKey, IngressRef] = {}
    for ingress in ingresses:
        for service_name in ingress.backend_services:
            key = ServiceKey(ingress.namespace, service_name)
            if key not in index:
                index[key] = ingress
    return index


def reconcile(client: KubernetesClient, config: ControllerConfig) -> Inventory:
    """Build the inventory from the current cluster state.

    Args:
        client: Kubernetes client
        config: Controller configuration

    Returns:
        Inventory holding exactly the public Services that already had an
        Ingress or got one created

    Raises:
        KubernetesAPIError: if a listing fails or any Ingress creation fails.
            A single failed creation aborts the whole reconciliation.
    """
    start_time = time.monotonic()
    try:
        inventory = _reconcile(client, config)
    except Exception:
        BOOTSTRAP_RUNS.labels(status="error").inc()
        raise
    finally:
        BOOTSTRAP_DURATION.observe(time.monotonic() - start_time)
    BOOTSTRAP_RUNS.labels(status="success").inc()
    return inventory


def _reconcile(client: KubernetesClient, config: ControllerConfig) -> Inventory:
    services = client.list_services()
    ingresses = client.list_ingresses()
    logger.info(
        "Reconciling %d services against %d ingresses", len(services), len(ingresses)
    )

    existing = index_ingresses(ingresses)
    inventory = Inventory()

    for service in services:
        key = service.key
        ingress = existing.get(key)
        public = is_public(service.labels)

        if ingress is None:
            if not public:
                continue
            try:
                ref = create_ingress_for_service(client, service, config)
            except Exception:
                INGRESS_OPERATIONS.labels(operation="create", status="error").inc()
                logger.error("Failed to create ingress for service %s", key)
                raise
            INGRESS_OPERATIONS.labels(operation="create", status="success").inc()
            inventory.set(key, ref)
        elif public:
            inventory.set(key, ingress)
        else:
            logger.warning(
                "Service %s is no longer public but ingress %s still exists; "
                "leaving it in place",
                key,
                ingress,
            )

    logger.info("Reconciliation done: %d managed ingresses", len(inventory))
    return inventory
