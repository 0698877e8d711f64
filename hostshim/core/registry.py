"""Process-scoped service registry.

Maps contract ids to component factories. Exactly one factory is active
per contract id; registering a new one replaces the previous entry for all
subsequent lookups. Swaps happen under a lock so that no caller ever sees
a half-registered entry.

The registry also remembers the first service captured per contract id,
so that every override layered on it can find the original again.
"""

import logging
import threading

from .errors import ServiceUnavailableError
from .models import (
    ANDROID_BRIDGE_CONTRACT_ID,
    GONK_SERVICE_CONTRACT_ID,
    MAC_UTILS_CONTRACT_ID,
    WINDOWS_REGISTRY_CONTRACT_ID,
    Capability,
    PlatformFlags,
    ServiceRegistryEntry,
)
from .ports import Component, ComponentFactory

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Registry of component factories keyed by contract id."""

    def __init__(self) -> None:
        self._entries: dict[str, ServiceRegistryEntry] = {}
        self._originals: dict[str, tuple[ServiceRegistryEntry, Component]] = {}
        self._lock = threading.RLock()

    def register_factory(
        self,
        class_id: str,
        description: str,
        contract_id: str,
        factory: ComponentFactory,
    ) -> ServiceRegistryEntry | None:
        """Register a factory, displacing any entry for the same contract id.

        Args:
            class_id: Identifier of the concrete class backing the contract.
            description: Human-readable name for logs.
            contract_id: Stable contract id collaborators look up.
            factory: Factory producing the component.

        Returns:
            The entry that was displaced, or None if the contract was free.
        """
        entry = ServiceRegistryEntry(
            class_id=class_id,
            description=description,
            contract_id=contract_id,
            factory=factory,
        )
        with self._lock:
            previous = self._entries.get(contract_id)
            self._entries[contract_id] = entry

        if previous is None:
            logger.info(f"Registered {description} for {contract_id}")
        else:
            logger.info(
                f"Replaced {previous.description} with {description} for {contract_id}"
            )
        return previous

    def unregister_factory(self, contract_id: str, factory: ComponentFactory) -> None:
        """Remove the entry for contract_id if factory is the active one.

        Raises:
            ServiceUnavailableError: If factory is not registered for contract_id.
        """
        with self._lock:
            entry = self._entries.get(contract_id)
            if entry is None or entry.factory is not factory:
                raise ServiceUnavailableError(contract_id)
            del self._entries[contract_id]
        logger.info(f"Unregistered {entry.description} for {contract_id}")

    def lookup(self, contract_id: str) -> ComponentFactory:
        """Return the active factory for contract_id.

        Raises:
            ServiceUnavailableError: If nothing is registered.
        """
        return self.get_entry(contract_id).factory

    def get_entry(self, contract_id: str) -> ServiceRegistryEntry:
        """Return the active entry for contract_id.

        Raises:
            ServiceUnavailableError: If nothing is registered.
        """
        with self._lock:
            entry = self._entries.get(contract_id)
        if entry is None:
            raise ServiceUnavailableError(contract_id)
        return entry

    def is_registered(self, contract_id: str) -> bool:
        with self._lock:
            return contract_id in self._entries

    def __contains__(self, contract_id: object) -> bool:
        return isinstance(contract_id, str) and self.is_registered(contract_id)

    def get_service(self, contract_id: str, capability: Capability) -> Component:
        """Look up the service for contract_id viewed as capability.

        Raises:
            ServiceUnavailableError: If nothing is registered.
            NoInterfaceError: If the service does not declare capability.
        """
        return self.lookup(contract_id).create_instance(None, capability)

    def capture_original(
        self, contract_id: str, capability: Capability
    ) -> tuple[ServiceRegistryEntry, Component]:
        """Capture the service currently registered for contract_id, once.

        The first call records the active entry and the service it produces.
        Later calls return that same pair whatever is registered by then, so
        a service installed over the original is never mistaken for it.

        Raises:
            ServiceUnavailableError: If nothing was captured yet and nothing
                is registered.
        """
        with self._lock:
            captured = self._originals.get(contract_id)
            if captured is None:
                entry = self.get_entry(contract_id)
                captured = (entry, entry.factory.create_instance(None, capability))
                self._originals[contract_id] = captured
                logger.debug(f"Captured original {entry.description} for {contract_id}")
        return captured

    def original(self, contract_id: str) -> tuple[ServiceRegistryEntry, Component] | None:
        """Return the captured original for contract_id, or None."""
        with self._lock:
            return self._originals.get(contract_id)

    def contract_ids(self) -> list[str]:
        """Return registered contract ids in sorted order."""
        with self._lock:
            return sorted(self._entries)


def detect_platform(registry: ServiceRegistry) -> PlatformFlags:
    """Infer the host platform from platform-only components in registry."""
    return PlatformFlags(
        is_windows=WINDOWS_REGISTRY_CONTRACT_ID in registry,
        is_mac=MAC_UTILS_CONTRACT_ID in registry,
        is_android=ANDROID_BRIDGE_CONTRACT_ID in registry,
        is_gonk=GONK_SERVICE_CONTRACT_ID in registry,
    )
