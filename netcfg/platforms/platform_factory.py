"""Factory for creating platform-specific configuration-session handlers.

Maps a platform string to the ``CfgPlatform`` implementation for it, and
can build the transport driver too when starting from connection details.

Usage::

    factory = PlatformFactory()
    cfg = factory.create("eos", driver)

    # From connection details
    cfg = factory.create_for_device(device_info, settings)
"""

from __future__ import annotations

import logging

from ..core.base_driver import BaseDriver, DeviceInfo
from ..core.exceptions import UnsupportedPlatformError
from ..core.settings import CfgSettings
from ..drivers.netmiko_driver import NetmikoDriver
from .base import CfgPlatform
from .eos import EOSCfg

logger = logging.getLogger(__name__)

PLATFORM_MAP: dict[str, type[CfgPlatform]] = {
    "eos": EOSCfg,
    "arista_eos": EOSCfg,
    "arista": EOSCfg,
}


class PlatformFactory:
    """Factory for creating ``CfgPlatform`` instances.

    Args:
        custom_platforms: Optional mapping of additional platform names to
            platform classes.

    """

    def __init__(
        self,
        custom_platforms: dict[str, type[CfgPlatform]] | None = None,
    ) -> None:
        """Initialize the factory with an optional set of custom platforms."""
        self._registry: dict[str, type[CfgPlatform]] = dict(PLATFORM_MAP)
        if custom_platforms:
            self._registry.update({k.lower(): v for k, v in custom_platforms.items()})
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def register(self, platform: str, platform_cls: type[CfgPlatform]) -> None:
        """Register a new platform implementation."""
        self._registry[platform.lower()] = platform_cls
        self._logger.info("Registered %s for platform '%s'", platform_cls.__name__, platform)

    def create(
        self,
        platform: str,
        driver: BaseDriver,
        settings: CfgSettings | None = None,
    ) -> CfgPlatform:
        """Create a platform handler bound to ``driver``.

        Args:
            platform: Platform identifier (case-insensitive).
            driver: Driver for the device.
            settings: Optional shared settings.

        Raises:
            UnsupportedPlatformError: If the platform is not recognized.

        """
        platform_cls = self._registry.get(platform.lower())
        if platform_cls is None:
            supported = ", ".join(sorted(self._registry.keys()))
            raise UnsupportedPlatformError(
                f"Unsupported platform '{platform}'. Supported: {supported}",
                details={"platform": platform},
            )
        self._logger.debug("Creating %s for %s", platform_cls.__name__, driver.hostname)
        return platform_cls(driver, settings)

    def create_for_device(
        self,
        device_info: DeviceInfo,
        settings: CfgSettings | None = None,
    ) -> CfgPlatform:
        """Build an unconnected ``NetmikoDriver`` and the platform on top of it."""
        settings = settings or CfgSettings()
        driver = NetmikoDriver(
            device_info,
            timeout_ops=settings.timeout_ops,
            failed_when_contains=settings.failed_when_contains,
        )
        return self.create(device_info.platform, driver, settings)

    @property
    def supported_platforms(self) -> list[str]:
        """Return sorted list of supported platform identifiers."""
        return sorted(self._registry.keys())
