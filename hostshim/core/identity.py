"""Fake application identity for tests.

RuntimeIdentity answers identity queries from a small read-only map of
overridden fields and delegates everything else to the real identity
service it was built over. IdentityOverrideRegistry installs such an
identity in a ServiceRegistry, capturing the real service exactly once so
that repeated installs always fall back to the original host identity and
never to a previously installed fake.
"""

import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, cast

from .errors import NoAggregationError
from .models import (
    APP_INFO_CLASS_ID,
    APP_INFO_CONTRACT_ID,
    TEST_ABI,
    TEST_BUILD_ID,
    TEST_OS,
    Capability,
    IdentityField,
)
from .ports import ComponentFactory, CrashReporterPort, IdentityProvider
from .registry import ServiceRegistry

logger = logging.getLogger(__name__)


class RuntimeIdentity(IdentityProvider, CrashReporterPort):
    """Identity service with explicit overrides over a real fallback.

    Lookups consult the overrides first and fall through to the fallback
    object for anything absent, including attributes this class does not
    know about. The fallback is held for delegation only.

    The object is immutable after construction, except for the contents
    of its annotations map.
    """

    _CAPABILITIES = frozenset(
        {
            Capability.SUPPORTS,
            Capability.APP_INFO,
            Capability.RUNTIME,
            Capability.CRASH_REPORTER,
        }
    )

    def __init__(
        self,
        overrides: Mapping[IdentityField, Any],
        fallback: IdentityProvider,
    ) -> None:
        object.__setattr__(
            self,
            "_overrides",
            MappingProxyType({IdentityField(k).value: v for k, v in overrides.items()}),
        )
        object.__setattr__(self, "_fallback", fallback)
        object.__setattr__(self, "_annotations", {})

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable; cannot set {name!r}")

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails: forward to the real service.
        if name.startswith("__") or name in ("_overrides", "_fallback", "_annotations"):
            raise AttributeError(name)
        return getattr(self._fallback, name)

    def _resolve(self, field: IdentityField) -> Any:
        if field.value in self._overrides:
            return self._overrides[field.value]
        return getattr(self._fallback, field.value)

    def get(self, field: IdentityField | str) -> Any:
        """Resolve a field by enum member or attribute name."""
        try:
            member = IdentityField(field)
        except ValueError:
            return getattr(self, str(field))
        return self._resolve(member)

    @property
    def overrides(self) -> Mapping[str, Any]:
        return self._overrides

    @property
    def fallback(self) -> IdentityProvider:
        return self._fallback

    @property
    def annotations(self) -> dict[str, str]:
        return self._annotations

    @property
    def capabilities(self) -> frozenset[Capability]:
        return self._CAPABILITIES

    # App info

    @property
    def vendor(self) -> str:
        return self._resolve(IdentityField.VENDOR)

    @property
    def name(self) -> str:
        return self._resolve(IdentityField.NAME)

    @property
    def id(self) -> str:
        return self._resolve(IdentityField.ID)

    @property
    def version(self) -> str:
        return self._resolve(IdentityField.VERSION)

    @property
    def app_build_id(self) -> str:
        return self._resolve(IdentityField.APP_BUILD_ID)

    @property
    def platform_version(self) -> str:
        return self._resolve(IdentityField.PLATFORM_VERSION)

    @property
    def platform_build_id(self) -> str:
        return self._resolve(IdentityField.PLATFORM_BUILD_ID)

    # Runtime

    @property
    def in_safe_mode(self) -> bool:
        return self._resolve(IdentityField.IN_SAFE_MODE)

    @property
    def log_console_errors(self) -> bool:
        return self._resolve(IdentityField.LOG_CONSOLE_ERRORS)

    @property
    def os(self) -> str:
        return self._resolve(IdentityField.OS)

    @property
    def abi(self) -> str:
        return self._resolve(IdentityField.ABI)

    def invalidate_caches_on_restart(self) -> None:
        """Do nothing; tests never restart."""

    # Crash reporter

    def annotate_crash_report(self, key: str, data: str) -> None:
        if not isinstance(key, str):
            raise TypeError(f"annotation key must be a string, got {type(key).__name__}")
        self._annotations[key] = data

    def __repr__(self) -> str:
        return (
            f"RuntimeIdentity(id={self.id!r}, version={self.version!r}, "
            f"overrides={sorted(self._overrides)})"
        )


class RuntimeIdentityFactory(ComponentFactory):
    """Factory that always hands out the same RuntimeIdentity."""

    def __init__(self, identity: RuntimeIdentity) -> None:
        self.identity = identity

    def create_instance(
        self, outer: object | None, capability: Capability
    ) -> RuntimeIdentity:
        if outer is not None:
            raise NoAggregationError()
        return cast(RuntimeIdentity, self.identity.query_interface(capability))


def build_test_identity(
    id: str,
    name: str,
    version: str,
    platform_version: str,
    fallback: IdentityProvider,
) -> RuntimeIdentity:
    """Build a RuntimeIdentity with the fixed test environment fields."""
    return RuntimeIdentity(
        overrides={
            IdentityField.NAME: name,
            IdentityField.ID: id,
            IdentityField.VERSION: version,
            IdentityField.APP_BUILD_ID: TEST_BUILD_ID,
            IdentityField.PLATFORM_VERSION: platform_version,
            IdentityField.PLATFORM_BUILD_ID: TEST_BUILD_ID,
            IdentityField.IN_SAFE_MODE: False,
            IdentityField.LOG_CONSOLE_ERRORS: True,
            IdentityField.OS: TEST_OS,
            IdentityField.ABI: TEST_ABI,
        },
        fallback=fallback,
    )


class IdentityOverrideRegistry:
    """Installs fake application identities into a ServiceRegistry.

    The real identity service is captured on the registry at the first
    install through any IdentityOverrideRegistry sharing it. Later installs
    reuse that capture, so fakes never chain behind other fakes.
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        contract_id: str = APP_INFO_CONTRACT_ID,
        class_id: str = APP_INFO_CLASS_ID,
    ) -> None:
        self.registry = registry
        self.contract_id = contract_id
        self.class_id = class_id
        self._current: RuntimeIdentity | None = None
        self._lock = threading.Lock()

    @property
    def original(self) -> IdentityProvider | None:
        """The captured real identity service, None before the first install."""
        captured = self.registry.original(self.contract_id)
        if captured is None:
            return None
        return cast(IdentityProvider, captured[1])

    @property
    def current(self) -> RuntimeIdentity | None:
        """The most recently installed fake identity."""
        return self._current

    def _capture_original(self) -> IdentityProvider:
        _, service = self.registry.capture_original(self.contract_id, Capability.RUNTIME)
        return cast(IdentityProvider, service)

    def install_identity(
        self, id: str, name: str, version: str, platform_version: str
    ) -> RuntimeIdentity:
        """Register a fake identity under the application identity contract.

        Args:
            id: Product id, e.g. "xpcshell@tests.mozilla.org".
            name: Product name.
            version: Product version.
            platform_version: Platform version.

        Returns:
            The installed identity. Every lookup of the contract id now
            returns it.

        Raises:
            ServiceUnavailableError: If this is the first install and no
                real identity service is registered.
        """
        with self._lock:
            fallback = self._capture_original()
            identity = build_test_identity(id, name, version, platform_version, fallback)
            self.registry.register_factory(
                self.class_id,
                "XULAppInfo",
                self.contract_id,
                RuntimeIdentityFactory(identity),
            )
            self._current = identity

        logger.debug(f"Installed test identity {id} {version} (platform {platform_version})")
        return identity

    def restore(self) -> None:
        """Put the captured real identity factory back in the registry.

        Does nothing if no identity was ever installed on the registry.
        """
        with self._lock:
            captured = self.registry.original(self.contract_id)
            if captured is None:
                return
            entry = captured[0]
            self.registry.register_factory(
                entry.class_id, entry.description, entry.contract_id, entry.factory
            )
            self._current = None
