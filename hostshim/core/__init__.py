"""Core shim logic for the hostshim test environment.

This package contains zero external dependencies: the service registry,
the fake application identity and the scheduling hooks. Real host
components and the subject subsystem live in the adapters package.
"""

from .errors import (
    ComponentProtocolError,
    NoAggregationError,
    NoInterfaceError,
    PreconditionError,
    ServiceUnavailableError,
    ShimError,
    SubsystemNotInitializedError,
)
from .identity import IdentityOverrideRegistry, RuntimeIdentity, RuntimeIdentityFactory
from .models import (
    APP_INFO_CLASS_ID,
    APP_INFO_CONTRACT_ID,
    Capability,
    IdentityField,
    ServiceRegistryEntry,
)
from .registry import ServiceRegistry
from .scheduling import SchedulerHookInjector, SchedulingPolicy

__all__ = [
    "APP_INFO_CLASS_ID",
    "APP_INFO_CONTRACT_ID",
    "Capability",
    "ComponentProtocolError",
    "IdentityField",
    "IdentityOverrideRegistry",
    "NoAggregationError",
    "NoInterfaceError",
    "PreconditionError",
    "RuntimeIdentity",
    "RuntimeIdentityFactory",
    "SchedulerHookInjector",
    "SchedulingPolicy",
    "ServiceRegistry",
    "ServiceRegistryEntry",
    "ServiceUnavailableError",
    "ShimError",
    "SubsystemNotInitializedError",
]
