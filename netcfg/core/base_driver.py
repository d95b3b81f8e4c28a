"""Abstract base class for line-oriented network device drivers.

Defines the transport contract every concrete driver must implement and
provides concrete *template method* implementations for the exchanges the
configuration layer relies on: privilege acquisition, prompt-confirmed
commands and configuration, eager configuration, and raw channel input.

Usage::

    with NetmikoDriver(device_info) as driver:
        driver.acquire_priv("configuration")
        response = driver.send_config("hostname leaf1")
"""

from __future__ import annotations

import abc
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from .exceptions import PrivilegeEscalationError
from .privilege import (
    CONFIGURATION,
    EOS_DEFAULT_PRIVILEGE_LEVELS,
    PRIVILEGE_EXEC,
    PrivilegeLevel,
    PrivilegeLevelTable,
    strip_inline_flags,
)
from .response import Response

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_OPS = 30.0
MAX_PRIVILEGE_STEPS = 8

EOS_FAILED_WHEN_CONTAINS: tuple[str, ...] = (
    "% Ambiguous command",
    "% Error",
    "% Incomplete command",
    "% Invalid input",
    "% Cannot commit",
    "% Unavailable command",
    "% Duplicate sequence number",
)


@dataclass(frozen=True)
class DeviceInfo:
    """Immutable device connection parameters.

    Attributes:
        hostname: DNS name or IP address of the device.
        platform: Platform string (``eos``).
        username: Login username.
        password: Login password.
        port: SSH port.
        timeout: Connection timeout in seconds.
        secret: Enable secret, if escalation requires one.

    """

    hostname: str
    platform: str
    username: str
    password: str
    port: int = 22
    timeout: int = 30
    secret: str = ""


class BaseDriver(abc.ABC):
    """Abstract base class for interactive, prompt-driven device drivers.

    Subclasses implement the four transport primitives; everything else is
    expressed in terms of them.  The driver supports context-manager usage
    for automatic connect/disconnect::

        with SomeDriver(device_info) as drv:
            drv.send_command("show version")

    Args:
        device_info: Connection parameters for the target device.
        timeout_ops: Seconds to wait for a prompt on each read.
        failed_when_contains: Output markers that flag a response as failed.
        privilege_levels: Initial privilege hierarchy.

    """

    def __init__(
        self,
        device_info: DeviceInfo,
        timeout_ops: float = DEFAULT_TIMEOUT_OPS,
        failed_when_contains: Sequence[str] = EOS_FAILED_WHEN_CONTAINS,
        privilege_levels: tuple[PrivilegeLevel, ...] = EOS_DEFAULT_PRIVILEGE_LEVELS,
    ) -> None:
        """Initialize the driver with connection parameters and prompt table."""
        self._device_info = device_info
        self._connected: bool = False
        self.timeout_ops = timeout_ops
        self.failed_when_contains: tuple[str, ...] = tuple(failed_when_contains)
        self.privilege_levels = PrivilegeLevelTable(privilege_levels)
        self.current_priv: str = ""
        self._logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    # -- Properties ---------------------------------------------------------

    @property
    def hostname(self) -> str:
        """Return the hostname of the managed device."""
        return self._device_info.hostname

    @property
    def platform(self) -> str:
        """Return the platform string (e.g., ``eos``)."""
        return self._device_info.platform

    @property
    def is_connected(self) -> bool:
        """Return ``True`` if the driver currently holds an open session."""
        return self._connected

    # -- Context manager ----------------------------------------------------

    def __enter__(self) -> BaseDriver:
        """Open a connection to the device upon entering a ``with`` block."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Ensure the connection is closed when leaving a ``with`` block."""
        try:
            self.disconnect()
        except Exception:
            self._logger.exception("Error during disconnect in __exit__")

    # -- Abstract methods (transport-specific) ------------------------------

    @abc.abstractmethod
    def connect(self) -> None:
        """Establish an interactive session to the device.

        Raises:
            ConnectionError: If the connection cannot be established.

        """

    @abc.abstractmethod
    def disconnect(self) -> None:
        """Gracefully close the session.

        Implementations must be idempotent.
        """

    @abc.abstractmethod
    def write(self, text: str) -> None:
        """Write raw text to the channel without reading.

        Raises:
            TransportError: If the channel is closed or the write fails.

        """

    @abc.abstractmethod
    def read_until(self, pattern: re.Pattern[str]) -> str:
        """Read from the channel until ``pattern`` matches the accumulated output.

        Returns:
            Everything read, including the matching text.

        Raises:
            TransportError: On timeout or channel failure.

        """

    # -- Prompt and privilege handling --------------------------------------

    def get_prompt(self) -> str:
        """Return the prompt currently shown by the device."""
        self.write("\n")
        output = self.read_until(self.privilege_levels.all_prompts)
        lines = [line for line in output.splitlines() if line.strip()]
        return lines[-1].strip() if lines else ""

    def acquire_priv(self, name: str) -> None:
        """Move the device to the named privilege level.

        Reads the current prompt and escalates along the target's
        ``previous_priv`` chain, or de-escalates out of unrelated levels,
        until the prompt matches the target.

        Raises:
            PrivilegeEscalationError: If the level is unknown or not reached.

        """
        target_path = self.privilege_levels.path_to(name)
        for _ in range(MAX_PRIVILEGE_STEPS):
            prompt = self.get_prompt()
            current = self.privilege_levels.resolve(prompt, preferred=(self.current_priv, name))
            if current is None:
                raise PrivilegeEscalationError(
                    "Prompt matches no known privilege level",
                    device=self.hostname,
                    details={"prompt": prompt},
                )
            self.current_priv = current
            if current == name:
                self._logger.debug("[%s] privilege level is %s", self.hostname, name)
                return
            if current in target_path:
                next_level = self.privilege_levels[target_path[target_path.index(current) + 1]]
                self._escalate(next_level)
            else:
                self._deescalate(self.privilege_levels[current])

        raise PrivilegeEscalationError(
            f"Failed to acquire privilege level '{name}'",
            device=self.hostname,
            details={"current": self.current_priv},
        )

    def _escalate(self, level: PrivilegeLevel) -> None:
        self._logger.debug("[%s] escalating to %s", self.hostname, level.name)
        if not level.escalate_auth or not self._device_info.secret:
            self.send_input(level.escalate)
            return
        secret_prompt = strip_inline_flags(level.escalate_prompt)
        auth_prompt = re.compile(
            f"(?:{secret_prompt})|(?:{self.privilege_levels.all_prompts.pattern})",
            re.IGNORECASE | re.MULTILINE,
        )
        self.write(f"{level.escalate}\n")
        output = self.read_until(auth_prompt)
        if re.search(level.escalate_prompt, output):
            self.write(f"{self._device_info.secret}\n")
            self.read_until(self.privilege_levels.all_prompts)

    def _deescalate(self, level: PrivilegeLevel) -> None:
        if not level.deescalate:
            raise PrivilegeEscalationError(
                f"Privilege level '{level.name}' has no de-escalate command",
                device=self.hostname,
            )
        self._logger.debug("[%s] de-escalating from %s", self.hostname, level.name)
        self.send_input(level.deescalate)

    # -- Exchanges ----------------------------------------------------------

    def send_input(self, channel_input: str) -> str:
        """Send one line and read until any known prompt.

        Returns:
            Device output with the echoed input and trailing prompt removed.

        """
        self.write(f"{channel_input}\n")
        raw = self.read_until(self.privilege_levels.all_prompts)
        return self._clean_output(raw, channel_input)

    def send_raw_input(self, channel_input: str) -> str:
        """Send one line outside privilege bookkeeping.

        Unlike the structured sends, ``current_priv`` is neither consulted nor
        updated; the caller owns privilege state afterwards.
        """
        self._logger.debug("[%s] raw input %r", self.hostname, channel_input)
        self.write(f"{channel_input}\n")
        return self.read_until(self.privilege_levels.all_prompts)

    def send_command(self, command: str) -> Response:
        """Send an operational command at privilege-exec level."""
        self.acquire_priv(PRIVILEGE_EXEC)
        response = Response(host=self.hostname, channel_input=command)
        response.record(self.send_input(command), self.failed_when_contains)
        return response

    def send_config(
        self,
        config: str,
        privilege_level: str = CONFIGURATION,
        eager: bool = False,
    ) -> Response:
        """Send configuration lines at the given privilege level.

        Args:
            config: Configuration text, one command per line.
            privilege_level: Level every line is sent at.
            eager: Write all lines without waiting for a prompt after each
                one, reading once at the end.  Used for free-text blocks.

        Returns:
            A single receipt covering every line sent.

        """
        response = Response(host=self.hostname, channel_input=config)
        if eager:
            lines = config.splitlines()
        else:
            lines = [line.rstrip() for line in config.splitlines() if line.strip()]
        if not lines:
            response.record("")
            return response

        self.acquire_priv(privilege_level)
        if eager:
            output = self._send_eager(lines)
        else:
            output = "\n".join(self.send_input(line) for line in lines)

        response.record(output, self.failed_when_contains)
        self._logger.debug(
            "[%s] sent %d config lines at %s (eager=%s)",
            self.hostname,
            len(lines),
            privilege_level,
            eager,
        )
        return response

    def _send_eager(self, lines: list[str]) -> str:
        for line in lines:
            self.write(f"{line}\n")
        # every echo of the final line must arrive before a prompt can be trusted
        last = lines[-1].strip()
        output = ""
        if last:
            # an echo starts its own line, or follows a prompt once text mode has ended
            echo = re.compile(
                rf"(?:^|[#>] ?)[ \t]*{re.escape(last)}[ \t\r]*$",
                re.MULTILINE,
            )
            for _ in range(sum(1 for line in lines if line.strip() == last)):
                output += self.read_until(echo)
        return output + self.read_until(self.privilege_levels.all_prompts)

    @staticmethod
    def _clean_output(raw: str, channel_input: str) -> str:
        lines = raw.splitlines()
        if lines and channel_input.strip() and channel_input.strip() in lines[0]:
            lines = lines[1:]
        if lines:
            lines = lines[:-1]
        return "\n".join(lines).strip()
