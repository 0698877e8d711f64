"""Domain models for the hostshim test environment.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ports import ComponentFactory


# Well-known identifiers of the application identity service.
APP_INFO_CONTRACT_ID = "@mozilla.org/xre/app-info;1"
APP_INFO_CLASS_ID = "{c763b610-9d49-455a-bbd2-ede71682a1ac}"

# Values every fake identity carries regardless of the requested identity.
TEST_BUILD_ID = "2007010101"
TEST_OS = "XPCShell"
TEST_ABI = "noarch-spidermonkey"


class IdentityField(str, Enum):
    """Fields answered by an application identity service.

    Values are the attribute names used on identity objects.
    """

    # App info
    VENDOR = "vendor"
    NAME = "name"
    ID = "id"
    VERSION = "version"
    APP_BUILD_ID = "app_build_id"
    PLATFORM_VERSION = "platform_version"
    PLATFORM_BUILD_ID = "platform_build_id"

    # Runtime environment
    IN_SAFE_MODE = "in_safe_mode"
    LOG_CONSOLE_ERRORS = "log_console_errors"
    OS = "os"
    ABI = "abi"


class Capability(Enum):
    """Interfaces an identity service may be queried for.

    SUPPORTS is the base interface every component answers.
    """

    SUPPORTS = "supports"
    APP_INFO = "app_info"
    RUNTIME = "runtime"
    CRASH_REPORTER = "crash_reporter"


@dataclass(frozen=True)
class ServiceRegistryEntry:
    """A factory registered under a contract id."""

    class_id: str
    description: str
    contract_id: str
    factory: "ComponentFactory"

    def __post_init__(self) -> None:
        """Validate entry invariants on creation."""
        if not self.contract_id or not self.contract_id.strip():
            raise ValueError("contract_id must be a non-empty string")
        if not self.class_id or not self.class_id.strip():
            raise ValueError("class_id must be a non-empty string")


@dataclass(frozen=True)
class PlatformFlags:
    """Host platform as inferred from the components a registry offers."""

    is_windows: bool
    is_mac: bool
    is_android: bool
    is_gonk: bool


@dataclass(frozen=True)
class DailyCollection:
    """One firing of a session's daily timer."""

    sequence: int
    delay_seconds: float
    app_id: str
    app_version: str
    os: str


# Components whose presence identifies the host platform.
WINDOWS_REGISTRY_CONTRACT_ID = "@mozilla.org/windows-registry-key;1"
MAC_UTILS_CONTRACT_ID = "@mozilla.org/xpcom/mac-utils;1"
ANDROID_BRIDGE_CONTRACT_ID = "@mozilla.org/android/bridge;1"
GONK_SERVICE_CONTRACT_ID = "@mozilla.org/cellbroadcast/gonkservice;1"
