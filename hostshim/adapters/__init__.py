"""External adapters for the hostshim test environment.

This package contains the real host components the shim stands in front
of, and provides implementations of the core port interfaces.

Adapter Organization:

- host/: The real application identity service
- scheduler/: Real timer primitives (asyncio)
- session/: The daily session subsystem driven by a SchedulingPolicy
"""
