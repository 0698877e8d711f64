"""Daily session subsystem.

A minimal subsystem with a recurring daily task: once a day it records a
collection stamped with the application identity it looks up from the
service registry. Its timer goes through a SchedulingPolicy, which tests
take over with SchedulerHookInjector.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any, cast

from hostshim.adapters.scheduler.timers import AsyncioTimerScheduler
from hostshim.core.errors import NoInterfaceError, SubsystemNotInitializedError
from hostshim.core.models import APP_INFO_CONTRACT_ID, Capability, DailyCollection
from hostshim.core.ports import CrashReporterPort, IdentityProvider, SchedulingPolicyOwner
from hostshim.core.registry import ServiceRegistry
from hostshim.core.scheduling import SchedulingPolicy

logger = logging.getLogger(__name__)


def seconds_until_next_midnight(now: datetime) -> float:
    """Seconds from now until the next local midnight."""
    midnight = (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    return (midnight - now).total_seconds()


class DailySession(SchedulingPolicyOwner):
    """Subsystem that arms a daily collection timer through its policy.

    Lifecycle: initialize() creates the policy, start() arms the first
    daily timer, shutdown() cancels it.
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        timers: AsyncioTimerScheduler | None = None,
        daily_interval_seconds: float | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize daily session.

        Args:
            registry: Registry the session looks identity up in.
            timers: Real timer primitives the policy starts with.
            daily_interval_seconds: Fixed delay between collections. When
                None, each collection is armed for the next local midnight.
            clock: Source of the current local time.
        """
        self.registry = registry
        self.timers = timers or AsyncioTimerScheduler()
        self.daily_interval_seconds = daily_interval_seconds
        self.clock = clock
        self.session_id: str | None = None
        self.collections: list[DailyCollection] = []
        self.running = False
        self._policy: SchedulingPolicy | None = None
        self._daily_handle: Any = None

    @property
    def subsystem_name(self) -> str:
        return "DailySession"

    def get_scheduling_policy(self) -> SchedulingPolicy | None:
        return self._policy

    def initialize(self) -> SchedulingPolicy:
        """Create the scheduling policy. Calling twice keeps the first policy."""
        if self._policy is not None:
            return self._policy

        self._policy = SchedulingPolicy(self.timers.arm, self.timers.cancel)
        self.session_id = str(uuid.uuid4())
        self._annotate_session()
        logger.debug(f"Daily session {self.session_id} initialized")
        return self._policy

    def _annotate_session(self) -> None:
        try:
            reporter = self.registry.get_service(
                APP_INFO_CONTRACT_ID, Capability.CRASH_REPORTER
            )
        except NoInterfaceError:
            logger.debug("Identity service has no crash reporter; skipping annotation")
            return
        if isinstance(reporter, CrashReporterPort) and self.session_id:
            reporter.annotate_crash_report("TelemetrySessionId", self.session_id)

    def _require_policy(self) -> SchedulingPolicy:
        if self._policy is None:
            raise SubsystemNotInitializedError(self.subsystem_name)
        return self._policy

    def next_daily_delay(self) -> float:
        if self.daily_interval_seconds is not None:
            return self.daily_interval_seconds
        return seconds_until_next_midnight(self.clock())

    def start(self) -> None:
        """Arm the daily timer.

        Raises:
            SubsystemNotInitializedError: If initialize() was not called.
        """
        self._require_policy()
        if self.running:
            logger.warning("Daily session already running")
            return
        self.running = True
        self._arm_daily()

    def _arm_daily(self) -> None:
        policy = self._require_policy()
        delay = self.next_daily_delay()
        self._daily_handle = policy.set_daily_timeout(delay, self._on_daily_timeout)
        logger.debug(f"Daily collection armed in {delay:.1f}s")

    def _on_daily_timeout(self) -> None:
        self._daily_handle = None
        try:
            self.collect_daily()
        except Exception as e:
            logger.error(f"Error in daily collection: {e}", exc_info=True)
            raise
        finally:
            # A failed collection must not end the daily cycle
            if self.running:
                self._arm_daily()

    def collect_daily(self) -> DailyCollection:
        """Record a daily collection stamped with the current identity."""
        app_info = self.current_identity()
        collection = DailyCollection(
            sequence=len(self.collections) + 1,
            delay_seconds=self.next_daily_delay(),
            app_id=app_info.id,
            app_version=app_info.version,
            os=app_info.os,
        )
        self.collections.append(collection)
        logger.info(
            f"Daily collection #{collection.sequence} for {collection.app_id} "
            f"{collection.app_version} on {collection.os}"
        )
        return collection

    def current_identity(self) -> IdentityProvider:
        service = self.registry.get_service(APP_INFO_CONTRACT_ID, Capability.RUNTIME)
        return cast(IdentityProvider, service)

    def environment(self) -> dict[str, Any]:
        """Build and environment facts as reported in a session payload."""
        app_info = self.current_identity()
        return {
            "build": {
                "vendor": app_info.vendor,
                "applicationName": app_info.name,
                "applicationId": app_info.id,
                "version": app_info.version,
                "buildId": app_info.app_build_id,
                "platformVersion": app_info.platform_version,
                "platformBuildId": app_info.platform_build_id,
            },
            "system": {
                "os": app_info.os,
                "abi": app_info.abi,
            },
            "settings": {
                "safeMode": app_info.in_safe_mode,
                "logConsoleErrors": app_info.log_console_errors,
            },
        }

    def shutdown(self) -> None:
        """Cancel the daily timer and stop re-arming."""
        if not self.running:
            return
        self.running = False
        policy = self._require_policy()
        policy.clear_daily_timeout(self._daily_handle)
        self._daily_handle = None
        logger.debug("Daily session shut down")
