"""Port interfaces for the hostshim test environment.

These abstract base classes define the boundaries between the core
shim logic and the host components it stands in for. Implementations
live in the adapters/ package and in core.identity.

Port Interface Categories:

1. **Capability ports** (answered by identity services)
   - AppInfoPort: product identity and build stamps
   - RuntimePort: runtime environment facts
   - CrashReporterPort: free-form crash report annotations

2. **Component model ports**
   - ComponentFactory: produces components for the service registry

3. **Subsystem ports**
   - SchedulingPolicyOwner: a subsystem that owns a SchedulingPolicy
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

from .errors import NoInterfaceError
from .models import Capability

if TYPE_CHECKING:
    from .scheduling import SchedulingPolicy


# arm(delay_seconds, callback) -> handle; cancel(handle) -> None
ArmFn: TypeAlias = Callable[[float, Callable[[], None]], Any]
CancelFn: TypeAlias = Callable[[Any], None]


class Component(ABC):
    """Base for anything that can be registered in the service registry.

    A component declares the capabilities it answers for and is narrowed
    to one of them through query_interface().
    """

    @property
    @abstractmethod
    def capabilities(self) -> frozenset[Capability]:
        """Capabilities this component answers for."""

    def query_interface(self, capability: Capability) -> "Component":
        """Return this component viewed as the requested capability.

        Raises:
            NoInterfaceError: If the capability is not declared.
        """
        if capability not in self.capabilities:
            raise NoInterfaceError(capability)
        return self


class AppInfoPort(Component):
    """Product identity of the running application."""

    @property
    @abstractmethod
    def vendor(self) -> str: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def id(self) -> str: ...

    @property
    @abstractmethod
    def version(self) -> str: ...

    @property
    @abstractmethod
    def app_build_id(self) -> str: ...

    @property
    @abstractmethod
    def platform_version(self) -> str: ...

    @property
    @abstractmethod
    def platform_build_id(self) -> str: ...


class RuntimePort(Component):
    """Facts about the runtime environment the application runs in."""

    @property
    @abstractmethod
    def in_safe_mode(self) -> bool: ...

    @property
    @abstractmethod
    def log_console_errors(self) -> bool: ...

    @property
    @abstractmethod
    def os(self) -> str:
        """Operating system label, e.g. "Linux" or "WINNT"."""

    @property
    @abstractmethod
    def abi(self) -> str:
        """Architecture and compiler label, e.g. "x86_64-gcc3"."""

    @abstractmethod
    def invalidate_caches_on_restart(self) -> None:
        """Ask the runtime to drop its startup caches on next restart."""


class IdentityProvider(AppInfoPort, RuntimePort):
    """A complete application identity service (app info plus runtime)."""


class CrashReporterPort(Component):
    """Crash report annotation sink."""

    @abstractmethod
    def annotate_crash_report(self, key: str, data: str) -> None:
        """Attach a key/value annotation to any future crash report.

        Args:
            key: Annotation name. Writing an existing key overwrites it.
            data: Annotation payload.

        Raises:
            TypeError: If key is not a string.
        """


class ComponentFactory(ABC):
    """Factory registered with the service registry under a contract id."""

    @abstractmethod
    def create_instance(
        self, outer: object | None, capability: Capability
    ) -> Component:
        """Produce a component narrowed to the requested capability.

        Args:
            outer: Controlling outer object for aggregation. Identity
                factories never support aggregation and require None.
            capability: Capability the caller will use the component as.

        Returns:
            The component, viewed as the requested capability.

        Raises:
            NoAggregationError: If outer is not None.
            NoInterfaceError: If the component does not declare the capability.
        """


class SchedulingPolicyOwner(ABC):
    """A subsystem that owns a SchedulingPolicy for its periodic task."""

    @property
    @abstractmethod
    def subsystem_name(self) -> str:
        """Human-readable name used in errors and logs."""

    @abstractmethod
    def get_scheduling_policy(self) -> "SchedulingPolicy | None":
        """Return the live policy, or None if the subsystem is not initialized."""
