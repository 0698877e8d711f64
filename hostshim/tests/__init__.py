"""Test suite for the hostshim test environment.

Organized into three categories:

1. core/: Unit tests for the registry, identity override and scheduling hooks
   - No external dependencies, fast execution
   - Uses in-memory fakes for the real host identity

2. adapters/: Tests for the real host identity, asyncio timers and the
   daily session subsystem

3. fakes/: Port implementations for testing
   - FakeHostIdentity stands in for the real host identity service
   - CountingScheduler records arm/cancel calls
"""
