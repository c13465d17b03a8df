"""In-memory inventory of Ingresses managed by the controller."""

import logging

from metrics import MANAGED_INGRESSES
from models import IngressRef, ServiceKey
from utils import format_keys

logger = logging.getLogger(__name__)


class Inventory:
    """Mapping from Service identity to the Ingress created for it.

    An entry exists only while the controller believes a live Ingress exists
    for the Service. The inventory is not synchronized: it must only be used
    from the single reconciliation thread (bootstrap, then the event
    processor). Nothing is persisted; bootstrap rebuilds it on restart.
    """

    def __init__(self) -> None:
        self._entries: dict[ServiceKey, IngressRef] = {}

    def get(self, key: ServiceKey) -> IngressRef | None:
        """Get the Ingress recorded for a Service, if any."""
        return self._entries.get(key)

    def set(self, key: ServiceKey, ref: IngressRef) -> None:
        """Record (or replace) the Ingress for a Service."""
        self._entries[key] = ref
        self._changed()

    def remove(self, key: ServiceKey) -> IngressRef | None:
        """Forget the Ingress recorded for a Service.

        Returns:
            The removed entry, or None if there was none
        """
        ref = self._entries.pop(key, None)
        if ref is not None:
            self._changed()
        return ref

    def keys(self) -> list[ServiceKey]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Inventory({format_keys(self._entries)})"

    def _changed(self) -> None:
        MANAGED_INGRESSES.set(len(self._entries))
        logger.info("Updated inventory: %s", format_keys(self._entries))
