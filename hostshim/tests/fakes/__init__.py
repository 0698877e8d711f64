"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow the shim to be tested without the
real host:

- FakeHostIdentity: A "real" identity service with recognizable values
- FakeIdentityFactory: Component factory serving a FakeHostIdentity
- CountingScheduler: Arm/cancel hooks that record calls instead of timing
- FakePolicyOwner: A subsystem whose policy can be absent or present
"""

from .identity import FakeHostIdentity, FakeIdentityFactory
from .scheduling import CountingScheduler, FakePolicyOwner

__all__ = [
    "CountingScheduler",
    "FakeHostIdentity",
    "FakeIdentityFactory",
    "FakePolicyOwner",
]
