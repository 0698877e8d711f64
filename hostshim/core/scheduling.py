"""Scheduling hooks for a subsystem's daily timer.

A SchedulingPolicy holds the arm/cancel pair a subsystem uses for its
recurring daily task. The pair is stored and replaced as one value, so a
caller never sees a new arm hook paired with an old cancel hook.
SchedulerHookInjector swaps the pair on an already-initialized subsystem.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from .errors import SubsystemNotInitializedError
from .ports import ArmFn, CancelFn, SchedulingPolicyOwner

logger = logging.getLogger(__name__)


def noop_arm(delay_seconds: float, callback: Callable[[], None]) -> None:
    """Arm hook that schedules nothing."""
    return None


def noop_cancel(handle: Any) -> None:
    """Cancel hook that cancels nothing."""
    return None


def _check_hooks(arm: ArmFn, cancel: CancelFn) -> None:
    if not callable(arm):
        raise TypeError(f"arm hook must be callable, got {type(arm).__name__}")
    if not callable(cancel):
        raise TypeError(f"cancel hook must be callable, got {type(cancel).__name__}")


class SchedulingPolicy:
    """Mutable arm/cancel pair owned by a subsystem.

    Owners call set_daily_timeout(delay, callback) and
    clear_daily_timeout(handle); both read the current pair.
    """

    def __init__(self, arm: ArmFn, cancel: CancelFn) -> None:
        _check_hooks(arm, cancel)
        self._lock = threading.Lock()
        self._hooks: tuple[ArmFn, CancelFn] = (arm, cancel)

    @property
    def hooks(self) -> tuple[ArmFn, CancelFn]:
        """The current (arm, cancel) pair."""
        return self._hooks

    @property
    def set_daily_timeout(self) -> ArmFn:
        return self._hooks[0]

    @property
    def clear_daily_timeout(self) -> CancelFn:
        return self._hooks[1]

    def set_scheduler(self, arm: ArmFn, cancel: CancelFn) -> tuple[ArmFn, CancelFn]:
        """Replace both hooks in one step.

        Returns:
            The previous (arm, cancel) pair.

        Raises:
            TypeError: If either hook is not callable. Nothing is replaced.
        """
        _check_hooks(arm, cancel)
        with self._lock:
            previous = self._hooks
            self._hooks = (arm, cancel)
        return previous


class SchedulerHookInjector:
    """Replaces the scheduling hooks of a live subsystem."""

    def __init__(self, owner: SchedulingPolicyOwner) -> None:
        self.owner = owner

    def override_scheduling(
        self, arm: ArmFn, cancel: CancelFn
    ) -> tuple[ArmFn, CancelFn]:
        """Redirect the owner's arm/cancel calls to the given hooks.

        Args:
            arm: Called as arm(delay_seconds, callback); returns a handle.
            cancel: Called as cancel(handle).

        Returns:
            The previous (arm, cancel) pair.

        Raises:
            SubsystemNotInitializedError: If the owner has no policy yet.
            TypeError: If either hook is not callable.
        """
        policy = self.owner.get_scheduling_policy()
        if policy is None:
            raise SubsystemNotInitializedError(self.owner.subsystem_name)

        previous = policy.set_scheduler(arm, cancel)
        logger.debug(
            f"Scheduling hooks of {self.owner.subsystem_name} replaced with "
            f"{getattr(arm, '__name__', repr(arm))}/{getattr(cancel, '__name__', repr(cancel))}"
        )
        return previous

    def disable_timers(self) -> tuple[ArmFn, CancelFn]:
        """Install no-op hooks, disabling all periodic activity."""
        return self.override_scheduling(noop_arm, noop_cancel)
