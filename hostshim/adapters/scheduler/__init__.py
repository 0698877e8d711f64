"""Real timer primitives backing a subsystem's scheduling policy.

Implementations:
- Asyncio (loop.call_later timers on the running event loop)
"""
