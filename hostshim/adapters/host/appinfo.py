"""Real host application identity service.

Answers identity queries from configuration and from the running
interpreter. This is the service a test identity falls back to for any
field it does not override.
"""

import logging
import os
import platform
import sys

from hostshim.config import Settings
from hostshim.core.errors import NoAggregationError
from hostshim.core.models import APP_INFO_CLASS_ID, APP_INFO_CONTRACT_ID, Capability
from hostshim.core.ports import ComponentFactory, IdentityProvider
from hostshim.core.registry import ServiceRegistry

logger = logging.getLogger(__name__)

# platform.system() -> host OS label
_OS_LABELS = {
    "Windows": "WINNT",
    "Darwin": "Darwin",
    "Linux": "Linux",
}


def host_os_label() -> str:
    system = platform.system()
    return _OS_LABELS.get(system, system or "Unknown")


def host_abi_label() -> str:
    machine = platform.machine() or "unknown"
    return f"{machine}-{platform.python_implementation().lower()}"


class HostAppInfo(IdentityProvider):
    """Identity of the real host, frozen at construction."""

    def __init__(
        self,
        vendor: str,
        name: str,
        id: str,
        version: str,
        app_build_id: str,
        platform_version: str,
        platform_build_id: str,
        in_safe_mode: bool = False,
        log_console_errors: bool = False,
    ) -> None:
        self._vendor = vendor
        self._name = name
        self._id = id
        self._version = version
        self._app_build_id = app_build_id
        self._platform_version = platform_version
        self._platform_build_id = platform_build_id
        self._in_safe_mode = in_safe_mode
        self._log_console_errors = log_console_errors
        self._os = host_os_label()
        self._abi = host_abi_label()

        # Extra facts outside the declared fields
        self.process_id = os.getpid()
        self.python_implementation = platform.python_implementation()
        self.is_64_bit = sys.maxsize > 2**32

        self.invalidate_requested = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "HostAppInfo":
        return cls(
            vendor=settings.host_vendor,
            name=settings.host_name,
            id=settings.host_id,
            version=settings.host_version,
            app_build_id=settings.host_build_id,
            platform_version=settings.platform_version,
            platform_build_id=settings.platform_build_id,
        )

    @property
    def capabilities(self) -> frozenset[Capability]:
        return frozenset({Capability.SUPPORTS, Capability.APP_INFO, Capability.RUNTIME})

    @property
    def vendor(self) -> str:
        return self._vendor

    @property
    def name(self) -> str:
        return self._name

    @property
    def id(self) -> str:
        return self._id

    @property
    def version(self) -> str:
        return self._version

    @property
    def app_build_id(self) -> str:
        return self._app_build_id

    @property
    def platform_version(self) -> str:
        return self._platform_version

    @property
    def platform_build_id(self) -> str:
        return self._platform_build_id

    @property
    def in_safe_mode(self) -> bool:
        return self._in_safe_mode

    @property
    def log_console_errors(self) -> bool:
        return self._log_console_errors

    @property
    def os(self) -> str:
        return self._os

    @property
    def abi(self) -> str:
        return self._abi

    def invalidate_caches_on_restart(self) -> None:
        self.invalidate_requested = True


class HostAppInfoFactory(ComponentFactory):
    """Factory that hands out a single HostAppInfo."""

    def __init__(self, app_info: HostAppInfo) -> None:
        self.app_info = app_info

    def create_instance(
        self, outer: object | None, capability: Capability
    ) -> IdentityProvider:
        if outer is not None:
            raise NoAggregationError()
        self.app_info.query_interface(capability)
        return self.app_info


def register_host_app_info(registry: ServiceRegistry, app_info: HostAppInfo) -> HostAppInfoFactory:
    """Register the real host identity under the application identity contract."""
    factory = HostAppInfoFactory(app_info)
    registry.register_factory(APP_INFO_CLASS_ID, "HostAppInfo", APP_INFO_CONTRACT_ID, factory)
    logger.debug(f"Host identity: {app_info.id} {app_info.version} on {app_info.os}")
    return factory
