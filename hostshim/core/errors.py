"""Exceptions raised by the hostshim core.

Two families:

1. Precondition violations: the environment is not ready for a setup
   call (no real identity service registered, subsystem not initialized).
2. Component protocol violations: a caller misused the component model
   (requested aggregation, or queried an undeclared capability).

All of them are fatal to the test that triggered them.
"""

from .models import Capability


class ShimError(Exception):
    """Base class for all hostshim errors."""


class PreconditionError(ShimError):
    """A setup call ran before its precondition was satisfied."""


class ServiceUnavailableError(PreconditionError):
    """No service is registered under the requested contract id."""

    def __init__(self, contract_id: str) -> None:
        self.contract_id = contract_id
        super().__init__(f"No service registered for contract {contract_id!r}")


class SubsystemNotInitializedError(PreconditionError):
    """The subsystem owning a scheduling policy has not initialized yet."""

    def __init__(self, subsystem: str) -> None:
        self.subsystem = subsystem
        super().__init__(
            f"Subsystem {subsystem!r} has no scheduling policy; initialize it first"
        )


class ComponentProtocolError(ShimError):
    """A caller violated the component instantiation contract."""


class NoAggregationError(ComponentProtocolError):
    """An outer (aggregating) object was passed to a component factory."""

    def __init__(self) -> None:
        super().__init__("Component does not support aggregation")


class NoInterfaceError(ComponentProtocolError):
    """A component was queried for a capability it does not declare."""

    def __init__(self, capability: Capability) -> None:
        self.capability = capability
        super().__init__(f"Component does not implement {capability.name}")
