"""Interactive SSH driver backed by a Netmiko connection.

Implements the ``BaseDriver`` transport primitives on Netmiko's channel
API (``write_channel`` / ``read_until_pattern``).  Prompt detection and
privilege handling stay in ``BaseDriver`` so registered configuration
sessions are recognized as soon as the table is recompiled.

Requires:
    - netmiko

Usage::

    info = DeviceInfo(hostname="leaf1", platform="eos", username="admin", password="...")
    with NetmikoDriver(info) as drv:
        response = drv.send_command("show version")
"""

from __future__ import annotations

import logging
import re
from typing import Any

from ..core.base_driver import BaseDriver, DeviceInfo
from ..core.exceptions import ConnectionError, TransportError

logger = logging.getLogger(__name__)

NETMIKO_DEVICE_TYPE_MAP: dict[str, str] = {
    "eos": "arista_eos",
    "arista": "arista_eos",
    "arista_eos": "arista_eos",
}


class NetmikoDriver(BaseDriver):
    """Line-oriented driver over a Netmiko SSH session.

    Args:
        device_info: Connection parameters for the device.
        **kwargs: Passed through to ``BaseDriver``.

    """

    def __init__(self, device_info: DeviceInfo, **kwargs: Any) -> None:
        """Initialize the driver with device connection parameters."""
        super().__init__(device_info, **kwargs)
        self._netmiko_conn: Any = None

    # -- Connection lifecycle -----------------------------------------------

    def connect(self) -> None:
        """Open the Netmiko SSH session.

        Raises:
            ConnectionError: If netmiko is missing or the session fails.

        """
        try:
            from netmiko import ConnectHandler

            self._netmiko_conn = ConnectHandler(
                device_type=NETMIKO_DEVICE_TYPE_MAP.get(self.platform, "arista_eos"),
                host=self._device_info.hostname,
                username=self._device_info.username,
                password=self._device_info.password,
                secret=self._device_info.secret,
                port=self._device_info.port,
                timeout=self._device_info.timeout,
            )
        except ImportError:
            raise ConnectionError(
                "netmiko is not installed",
                device=self.hostname,
            ) from None
        except Exception as exc:
            raise ConnectionError(
                f"Netmiko connection failed: {exc}",
                device=self.hostname,
                details={"platform": self.platform},
            ) from exc

        self._connected = True
        self.current_priv = ""
        self._logger.info("Connected to %s (%s)", self.hostname, self.platform)

    def disconnect(self) -> None:
        """Close the Netmiko session.  Idempotent."""
        if self._netmiko_conn is not None:
            try:
                self._netmiko_conn.disconnect()
            except Exception:
                self._logger.debug("Error closing Netmiko session", exc_info=True)
            finally:
                self._netmiko_conn = None

        self._connected = False
        self._logger.info("Disconnected from %s", self.hostname)

    # -- Transport primitives -----------------------------------------------

    def write(self, text: str) -> None:
        """Write raw text to the Netmiko channel."""
        conn = self._ensure_connected()
        self._logger.debug("[%s] write %r", self.hostname, text)
        try:
            conn.write_channel(text)
        except Exception as exc:
            raise TransportError(
                f"Channel write failed: {exc}",
                device=self.hostname,
            ) from exc

    def read_until(self, pattern: re.Pattern[str]) -> str:
        """Read until ``pattern`` matches or ``timeout_ops`` elapses."""
        conn = self._ensure_connected()
        try:
            return str(
                conn.read_until_pattern(
                    pattern=pattern.pattern,
                    re_flags=pattern.flags,
                    read_timeout=self.timeout_ops,
                )
            )
        except Exception as exc:
            raise TransportError(
                f"Channel read failed: {exc}",
                device=self.hostname,
                details={"timeout_ops": self.timeout_ops},
            ) from exc

    # -- Internal helpers ---------------------------------------------------

    def _ensure_connected(self) -> Any:
        """Return the live Netmiko connection or raise."""
        if not self._connected or self._netmiko_conn is None:
            raise TransportError(
                "Not connected, call connect() first",
                device=self.hostname,
            )
        return self._netmiko_conn
