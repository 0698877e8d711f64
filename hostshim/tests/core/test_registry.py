"""Unit tests for the service registry."""

import threading

import pytest

from hostshim.core.errors import NoAggregationError, NoInterfaceError, ServiceUnavailableError
from hostshim.core.models import (
    APP_INFO_CLASS_ID,
    APP_INFO_CONTRACT_ID,
    MAC_UTILS_CONTRACT_ID,
    WINDOWS_REGISTRY_CONTRACT_ID,
    Capability,
    PlatformFlags,
    ServiceRegistryEntry,
)
from hostshim.core.registry import ServiceRegistry, detect_platform
from hostshim.tests.fakes import FakeHostIdentity, FakeIdentityFactory


@pytest.fixture
def registry() -> ServiceRegistry:
    return ServiceRegistry()


def register(registry: ServiceRegistry, factory: FakeIdentityFactory, description: str = "AppInfo"):
    return registry.register_factory(APP_INFO_CLASS_ID, description, APP_INFO_CONTRACT_ID, factory)


class TestRegisterFactory:
    """Test registration and replacement."""

    def test_register_on_free_contract_returns_none(self, registry: ServiceRegistry) -> None:
        assert register(registry, FakeIdentityFactory()) is None
        assert registry.is_registered(APP_INFO_CONTRACT_ID)
        assert APP_INFO_CONTRACT_ID in registry

    def test_register_replaces_not_stacks(self, registry: ServiceRegistry) -> None:
        first = FakeIdentityFactory()
        second = FakeIdentityFactory(FakeHostIdentity(vendor="Second"))
        register(registry, first, "First")

        previous = register(registry, second, "Second")

        assert isinstance(previous, ServiceRegistryEntry)
        assert previous.factory is first
        assert registry.lookup(APP_INFO_CONTRACT_ID) is second
        assert registry.contract_ids() == [APP_INFO_CONTRACT_ID]

    def test_entry_requires_contract_id(self, registry: ServiceRegistry) -> None:
        with pytest.raises(ValueError):
            registry.register_factory(APP_INFO_CLASS_ID, "AppInfo", " ", FakeIdentityFactory())

    def test_entry_requires_class_id(self, registry: ServiceRegistry) -> None:
        with pytest.raises(ValueError):
            registry.register_factory("", "AppInfo", APP_INFO_CONTRACT_ID, FakeIdentityFactory())

    def test_concurrent_registration_leaves_one_whole_entry(
        self, registry: ServiceRegistry
    ) -> None:
        factories = [FakeIdentityFactory() for _ in range(20)]
        threads = [
            threading.Thread(target=register, args=(registry, factory, f"AppInfo{i}"))
            for i, factory in enumerate(factories)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        entry = registry.get_entry(APP_INFO_CONTRACT_ID)
        index = factories.index(entry.factory)
        assert entry.description == f"AppInfo{index}"


class TestLookup:
    """Test lookup and service retrieval."""

    def test_lookup_missing_contract_raises(self, registry: ServiceRegistry) -> None:
        with pytest.raises(ServiceUnavailableError) as exc_info:
            registry.lookup("@example.org/missing;1")

        assert exc_info.value.contract_id == "@example.org/missing;1"

    def test_get_service_narrows_to_capability(self, registry: ServiceRegistry) -> None:
        factory = FakeIdentityFactory()
        register(registry, factory)

        assert registry.get_service(APP_INFO_CONTRACT_ID, Capability.APP_INFO) is factory.identity

    def test_get_service_undeclared_capability_raises(self, registry: ServiceRegistry) -> None:
        register(registry, FakeIdentityFactory())

        with pytest.raises(NoInterfaceError):
            registry.get_service(APP_INFO_CONTRACT_ID, Capability.CRASH_REPORTER)

    def test_get_service_never_aggregates(self, registry: ServiceRegistry) -> None:
        factory = FakeIdentityFactory()
        register(registry, factory)

        registry.get_service(APP_INFO_CONTRACT_ID, Capability.RUNTIME)

        with pytest.raises(NoAggregationError):
            factory.create_instance(registry, Capability.RUNTIME)

    def test_contains_rejects_non_strings(self, registry: ServiceRegistry) -> None:
        register(registry, FakeIdentityFactory())

        assert 42 not in registry


class TestUnregisterFactory:
    """Test unregistration."""

    def test_unregister_active_factory(self, registry: ServiceRegistry) -> None:
        factory = FakeIdentityFactory()
        register(registry, factory)

        registry.unregister_factory(APP_INFO_CONTRACT_ID, factory)

        assert not registry.is_registered(APP_INFO_CONTRACT_ID)

    def test_unregister_displaced_factory_raises(self, registry: ServiceRegistry) -> None:
        first = FakeIdentityFactory()
        register(registry, first)
        register(registry, FakeIdentityFactory())

        with pytest.raises(ServiceUnavailableError):
            registry.unregister_factory(APP_INFO_CONTRACT_ID, first)

        assert registry.is_registered(APP_INFO_CONTRACT_ID)


class TestCaptureOriginal:
    """Test first-capture-wins bookkeeping of original services."""

    def test_original_is_none_before_capture(self, registry: ServiceRegistry) -> None:
        register(registry, FakeIdentityFactory())

        assert registry.original(APP_INFO_CONTRACT_ID) is None

    def test_first_capture_wins(self, registry: ServiceRegistry) -> None:
        real = FakeIdentityFactory()
        register(registry, real, "RealAppInfo")
        entry, service = registry.capture_original(APP_INFO_CONTRACT_ID, Capability.RUNTIME)
        register(registry, FakeIdentityFactory(FakeHostIdentity(vendor="Other")), "OtherAppInfo")

        again = registry.capture_original(APP_INFO_CONTRACT_ID, Capability.RUNTIME)

        assert again == (entry, service)
        assert entry.factory is real
        assert service is real.identity
        assert real.create_call_count == 1
        assert registry.original(APP_INFO_CONTRACT_ID) == (entry, service)

    def test_capture_without_registration_raises(self, registry: ServiceRegistry) -> None:
        with pytest.raises(ServiceUnavailableError):
            registry.capture_original(APP_INFO_CONTRACT_ID, Capability.RUNTIME)

        assert registry.original(APP_INFO_CONTRACT_ID) is None


class TestDetectPlatform:
    """Test platform inference from registered components."""

    def test_empty_registry_has_no_platform(self, registry: ServiceRegistry) -> None:
        assert detect_platform(registry) == PlatformFlags(
            is_windows=False, is_mac=False, is_android=False, is_gonk=False
        )

    def test_platform_components_are_detected(self, registry: ServiceRegistry) -> None:
        registry.register_factory("{win}", "WindowsRegistry", WINDOWS_REGISTRY_CONTRACT_ID, FakeIdentityFactory())
        registry.register_factory("{mac}", "MacUtils", MAC_UTILS_CONTRACT_ID, FakeIdentityFactory())

        flags = detect_platform(registry)

        assert flags.is_windows is True
        assert flags.is_mac is True
        assert flags.is_android is False
        assert flags.is_gonk is False
