"""Abstract capability set for configuration-session platforms.

Each platform variant (EOS today) implements the same small set of
operations and is selected at construction time by ``PlatformFactory``.
"""

from __future__ import annotations

import abc
import logging

from ..core.base_driver import BaseDriver
from ..core.exceptions import InvalidConfigTargetError
from ..core.response import CfgResult, LoadResult
from ..core.settings import CfgSettings

logger = logging.getLogger(__name__)


class CfgPlatform(abc.ABC):
    """Abstract base class for configuration-session platforms.

    Subclasses define ``config_command_map`` and implement every
    ``@abstractmethod``.

    Args:
        driver: Connected driver used for every exchange.
        settings: Shared settings; defaults to ``CfgSettings()``.

    Raises:
        InvalidConfigTargetError: If a configured source has no command.

    """

    config_command_map: dict[str, str] = {}

    def __init__(self, driver: BaseDriver, settings: CfgSettings | None = None) -> None:
        """Bind the platform to a driver and validate config sources.

        Explicit ``settings`` also set the driver's ``timeout_ops`` and
        ``failed_when_contains``; without them the driver keeps its own.
        """
        self.driver = driver
        self.settings = settings or CfgSettings()
        if settings is not None:
            driver.timeout_ops = settings.timeout_ops
            driver.failed_when_contains = settings.failed_when_contains
        self._logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

        unsupported = [s for s in self.settings.config_sources if s not in self.config_command_map]
        if unsupported:
            raise InvalidConfigTargetError(
                "Config sources not supported by platform",
                device=self.hostname,
                details={"sources": ", ".join(unsupported)},
            )

    @property
    def hostname(self) -> str:
        """Return the hostname of the managed device."""
        return self.driver.hostname

    def _get_config_command(self, source: str) -> str:
        """Return the command retrieving ``source``.

        Raises:
            InvalidConfigTargetError: If the source is not configured.

        """
        if source not in self.settings.config_sources or source not in self.config_command_map:
            raise InvalidConfigTargetError(
                f"Invalid config source '{source}'",
                device=self.hostname,
                details={"valid": ", ".join(self.settings.config_sources)},
            )
        return self.config_command_map[source]

    @abc.abstractmethod
    def get_version(self) -> CfgResult:
        """Retrieve the software version string from the device."""

    @abc.abstractmethod
    def get_config(self, source: str = "running") -> CfgResult:
        """Retrieve the configuration of a source datastore."""

    @abc.abstractmethod
    def load_config(self, config: str, replace: bool = False) -> LoadResult:
        """Load a candidate configuration.

        Raises:
            TransportError: If the channel fails mid-load.
            DeviceRejectedError: If the device rejects a step.

        """

    @abc.abstractmethod
    def abort_config(self) -> LoadResult:
        """Abort the loaded candidate configuration."""

    @abc.abstractmethod
    def register_config_session(self, session_name: str) -> None:
        """Register a configuration session with the driver."""

    @abc.abstractmethod
    def clear_config_session(self) -> None:
        """Forget the active configuration session."""
