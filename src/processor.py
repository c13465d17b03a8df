"""Serialized processing of Service events.

Watch handlers may run on several threads, so they only enqueue events.
A single worker thread drains the queue and applies the label transition
policy against the inventory, which is never touched from anywhere else.
"""

import logging
import queue
import threading

from config import ControllerConfig
from kubernetes_client import KubernetesClient
from metrics import EVENT_QUEUE_DEPTH, EVENTS_TOTAL, INGRESS_OPERATIONS
from models import Action, EventType, ServiceDescriptor, ServiceEvent
from resources.ingress import create_ingress_for_service
from resources.inventory import Inventory
from utils import is_public

logger = logging.getLogger(__name__)

_STOP = object()


class EventProcessor:
    """Single-consumer processor applying Service events to the inventory."""

    def __init__(
        self,
        inventory: Inventory,
        client: KubernetesClient,
        config: ControllerConfig,
    ) -> None:
        self.inventory = inventory
        self.client = client
        self.config = config
        self._queue: queue.Queue = queue.Queue()
        self._thread: threading.Thread | None = None

    def submit(self, event: ServiceEvent) -> None:
        """Queue an event for processing (thread-safe)."""
        self._queue.put(event)
        EVENT_QUEUE_DEPTH.set(self._queue.qsize())

    def start(self) -> threading.Thread:
        """Start the worker thread."""
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._thread = threading.Thread(
            target=self.run, name="auto-ingress-events", daemon=True
        )
        self._thread.start()
        logger.info("Event processor started")
        return self._thread

    def stop(self, timeout: float | None = 10.0) -> None:
        """Stop the worker once the events already queued are processed."""
        self._queue.put(_STOP)
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Event processor did not stop within %s seconds", timeout)
                return
            self._thread = None
        logger.info("Event processor stopped")

    def run(self) -> None:
        """Process queued events one at a time until stopped."""
        while True:
            event = self._queue.get()
            EVENT_QUEUE_DEPTH.set(self._queue.qsize())
            if event is _STOP:
                return
            try:
                self.process(event)
            except Exception:
                logger.exception("Unexpected error processing event for %s", event.key)

    def process(self, event: ServiceEvent) -> Action:
        """Apply a single event to the inventory.

        Returns:
            The action taken
        """
        service = event.service
        logger.info("Service %s: %s", event.type.value.lower(), service.key)

        if event.type is EventType.DELETED:
            action = self._on_deleted(service)
        elif event.type is EventType.UPDATED:
            action = self._on_updated(service)
        else:
            action = self._on_added(service)

        EVENTS_TOTAL.labels(event=event.type.value, action=action.value).inc()
        return action

    def _on_added(self, service: ServiceDescriptor) -> Action:
        if service.key in self.inventory:
            return Action.NOOP
        if not is_public(service.labels):
            return Action.NOOP
        return self._create(service)

    def _on_updated(self, service: ServiceDescriptor) -> Action:
        if service.key in self.inventory:
            if is_public(service.labels):
                return Action.NOOP
            return self._delete(service)
        if is_public(service.labels):
            return self._create(service)
        return Action.NOOP

    def _on_deleted(self, service: ServiceDescriptor) -> Action:
        if service.key not in self.inventory:
            return Action.NOOP
        return self._delete(service)

    def _create(self, service: ServiceDescriptor) -> Action:
        try:
            ref = create_ingress_for_service(self.client, service, self.config)
        except Exception as e:
            logger.error("Failed to create ingress for service %s: %s", service.key, e)
            INGRESS_OPERATIONS.labels(operation="create", status="error").inc()
            return Action.FAILED

        INGRESS_OPERATIONS.labels(operation="create", status="success").inc()
        self.inventory.set(service.key, ref)
        return Action.CREATED

    def _delete(self, service: ServiceDescriptor) -> Action:
        ref = self.inventory.get(service.key)
        if ref is None:
            return Action.NOOP

        try:
            self.client.delete_ingress(ref.namespace, ref.name)
        except Exception as e:
            logger.error(
                "Failed to delete ingress %s for service %s: %s", ref, service.key, e
            )
            INGRESS_OPERATIONS.labels(operation="delete", status="error").inc()
            return Action.FAILED

        INGRESS_OPERATIONS.labels(operation="delete", status="success").inc()
        logger.info("Deleted ingress %s for service %s", ref, service.key)
        self.inventory.remove(service.key)
        return Action.DELETED
