"""Composition root for the hostshim test environment.

This module is the ONLY location that imports both the core shim logic
and the concrete host adapters. All wiring happens here, producing a
ShimContext that test setup code threads through instead of relying on
process-wide singletons.

Module Structure:
- Logging configuration from settings
- Service registry with the real host identity
- Daily session initialization
- No-op scheduling hooks so timers never interrupt tests
"""

import json
import logging
import sys
from dataclasses import dataclass
from typing import cast

from hostshim.adapters.host.appinfo import HostAppInfo, register_host_app_info
from hostshim.adapters.scheduler.timers import AsyncioTimerScheduler
from hostshim.adapters.session.daily import DailySession
from hostshim.config import Settings, load_settings
from hostshim.core.identity import IdentityOverrideRegistry, RuntimeIdentity
from hostshim.core.models import Capability, PlatformFlags
from hostshim.core.ports import ArmFn, CancelFn, IdentityProvider
from hostshim.core.registry import ServiceRegistry, detect_platform
from hostshim.core.scheduling import SchedulerHookInjector

TRACE = 5

_LOGGER_NAME = "hostshim"


def configure_logging(log_level: str, log_format: str, log_dump: bool = True) -> None:
    """Configure hostshim logging.

    Args:
        log_level: Logging level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
        log_dump: Echo records to stdout.
    """
    logging.addLevelName(TRACE, "TRACE")
    level = TRACE if log_level == "TRACE" else getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    root = logging.getLogger(_LOGGER_NAME)
    root.setLevel(level)

    # Reconfiguring replaces the handler installed by a previous call.
    for handler in list(root.handlers):
        if getattr(handler, "_hostshim", False):
            root.removeHandler(handler)

    if log_dump:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(format_str))
        handler._hostshim = True  # type: ignore[attr-defined]
        root.addHandler(handler)


@dataclass
class ShimContext:
    """Everything a test needs to control the host environment."""

    settings: Settings
    registry: ServiceRegistry
    host_app_info: IdentityProvider
    identities: IdentityOverrideRegistry
    session: DailySession
    hooks: SchedulerHookInjector
    platform: PlatformFlags

    def install_identity(
        self, id: str, name: str, version: str, platform_version: str
    ) -> RuntimeIdentity:
        """Make identity lookups return a test identity. See IdentityOverrideRegistry."""
        return self.identities.install_identity(id, name, version, platform_version)

    def override_scheduling(self, arm: ArmFn, cancel: CancelFn) -> tuple[ArmFn, CancelFn]:
        """Redirect the session's daily timer. See SchedulerHookInjector."""
        return self.hooks.override_scheduling(arm, cancel)

    def shutdown(self) -> None:
        """Stop the session and put the real identity back."""
        self.session.shutdown()
        self.session.timers.cancel_all()
        self.identities.restore()


def bootstrap_test_environment(
    settings: Settings | None = None,
    registry: ServiceRegistry | None = None,
) -> ShimContext:
    """Load configuration and wire the test environment.

    Steps:
    1. Load configuration and configure logging
    2. Register the real host identity (unless registry already has one)
    3. Initialize the daily session
    4. Install no-op scheduling hooks

    Returns:
        A ShimContext with no test identity installed yet.
    """
    # Step 1: Configuration and logging
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_format, settings.log_dump)
    logger = logging.getLogger(__name__)
    logger.debug("Bootstrapping test environment...")

    # Step 2: Real host identity
    registry = registry or ServiceRegistry()
    identities = IdentityOverrideRegistry(registry)
    host_app_info: IdentityProvider
    if identities.contract_id not in registry:
        host_app_info = HostAppInfo.from_settings(settings)
        register_host_app_info(registry, host_app_info)
    elif identities.original is not None:
        host_app_info = identities.original
    else:
        host_app_info = cast(
            IdentityProvider,
            registry.get_service(identities.contract_id, Capability.RUNTIME),
        )

    # Step 3: Subject subsystem
    session = DailySession(
        registry=registry,
        timers=AsyncioTimerScheduler(),
        daily_interval_seconds=settings.daily_interval_seconds,
    )
    session.initialize()

    # Step 4: Avoid timers interrupting test behavior
    hooks = SchedulerHookInjector(session)
    hooks.disable_timers()

    platform = detect_platform(registry)
    logger.debug(f"Test environment ready (platform: {platform})")

    return ShimContext(
        settings=settings,
        registry=registry,
        host_app_info=host_app_info,
        identities=identities,
        session=session,
        hooks=hooks,
        platform=platform,
    )


def main() -> None:
    """Print the environment a session would report under the shim.

    Exit codes:
        0: Success
        1: Fatal bootstrap error
    """
    logger = logging.getLogger(__name__)
    try:
        context = bootstrap_test_environment()
        context.install_identity("xpcshell@tests.mozilla.org", "XPCShell", "1", "1.9.2")
        print(json.dumps(context.session.environment(), indent=2, default=str))
        context.shutdown()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
