"""Tests for the real host identity adapter."""

import os
import platform
import sys
from unittest.mock import patch

import pytest

from hostshim.adapters.host.appinfo import (
    HostAppInfo,
    HostAppInfoFactory,
    host_abi_label,
    host_os_label,
    register_host_app_info,
)
from hostshim.config import Settings
from hostshim.core.errors import NoAggregationError, NoInterfaceError
from hostshim.core.models import APP_INFO_CONTRACT_ID, Capability
from hostshim.core.registry import ServiceRegistry


@pytest.fixture
def app_info() -> HostAppInfo:
    return HostAppInfo.from_settings(
        Settings(host_vendor="Acme", host_name="Widget", host_version="3.1")
    )


def test_from_settings_copies_identity(app_info: HostAppInfo) -> None:
    assert app_info.vendor == "Acme"
    assert app_info.name == "Widget"
    assert app_info.version == "3.1"
    assert app_info.id == "xpcshell@tests.mozilla.org"
    assert app_info.in_safe_mode is False


def test_environment_comes_from_interpreter(app_info: HostAppInfo) -> None:
    assert app_info.os == host_os_label()
    assert app_info.abi == host_abi_label()
    assert app_info.process_id == os.getpid()
    assert app_info.python_implementation == platform.python_implementation()
    assert app_info.is_64_bit is (sys.maxsize > 2**32)


@pytest.mark.parametrize(
    "system, label",
    [("Windows", "WINNT"), ("Darwin", "Darwin"), ("Linux", "Linux"), ("", "Unknown")],
)
def test_os_label_mapping(system: str, label: str) -> None:
    with patch("hostshim.adapters.host.appinfo.platform.system", return_value=system):
        assert host_os_label() == label


def test_invalidate_caches_is_recorded(app_info: HostAppInfo) -> None:
    app_info.invalidate_caches_on_restart()

    assert app_info.invalidate_requested is True


def test_factory_rejects_aggregation(app_info: HostAppInfo) -> None:
    factory = HostAppInfoFactory(app_info)

    with pytest.raises(NoAggregationError):
        factory.create_instance(object(), Capability.APP_INFO)


def test_factory_rejects_crash_reporter(app_info: HostAppInfo) -> None:
    factory = HostAppInfoFactory(app_info)

    with pytest.raises(NoInterfaceError):
        factory.create_instance(None, Capability.CRASH_REPORTER)


def test_register_host_app_info(app_info: HostAppInfo) -> None:
    registry = ServiceRegistry()

    factory = register_host_app_info(registry, app_info)

    assert registry.lookup(APP_INFO_CONTRACT_ID) is factory
    assert registry.get_service(APP_INFO_CONTRACT_ID, Capability.RUNTIME) is app_info
