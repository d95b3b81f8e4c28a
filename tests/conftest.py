"""Shared pytest fixtures for the configuration-session test suite.

Provides device info, an in-memory EOS simulator driver, sample
configurations, and a ready ``EOSCfg`` bound to the simulator.
"""

from __future__ import annotations

import re

import pytest

from netcfg.core.base_driver import BaseDriver, DeviceInfo
from netcfg.core.exceptions import TransportError
from netcfg.platforms.eos import EOSCfg

SESSION_NAME = "netcfg_1700000000"

# ---------------------------------------------------------------------------
# Simulated EOS device
# ---------------------------------------------------------------------------


class FakeEOSDriver(BaseDriver):
    """Driver whose transport is an in-memory EOS command-mode simulator.

    Every written line is echoed, handled according to the current mode,
    and followed by the mode's prompt (except inside a banner).  Reads
    consume the buffer up to the first pattern match; a read that cannot
    match raises ``TransportError`` like an operation timeout would.
    """

    def __init__(self, device_info: DeviceInfo, **kwargs: object) -> None:
        super().__init__(device_info, **kwargs)  # type: ignore[arg-type]
        self.mode = "privilege_exec"
        self.session = ""
        self.in_banner = False
        self.require_secret = False
        self.awaiting_secret = False
        self.fail_on: str | None = None
        self.reject_on: str | None = None
        self.writes: list[str] = []
        self.sessions: dict[str, list[str]] = {}
        self.running_config = "hostname leaf1\n"
        self._buffer = ""

    def connect(self) -> None:
        self._connected = True

    def disconnect(self) -> None:
        self._connected = False

    def write(self, text: str) -> None:
        for line in text.split("\n")[:-1]:
            if self.fail_on is not None and self.fail_on in line and line:
                raise TransportError("Socket closed", device=self.hostname)
            self.writes.append(line)
            self._buffer += f"{line}\n{self._handle(line)}"

    def read_until(self, pattern: re.Pattern[str]) -> str:
        match = pattern.search(self._buffer)
        if match is None:
            raise TransportError("Timed out waiting for pattern", device=self.hostname)
        output, self._buffer = self._buffer[: match.end()], self._buffer[match.end() :]
        return output

    @property
    def pending_output(self) -> str:
        """Channel output written but not yet read."""
        return self._buffer

    @property
    def commands(self) -> list[str]:
        """Non-empty lines written, i.e. without prompt probes."""
        return [w for w in self.writes if w]

    def prompt(self) -> str:
        return {
            "exec": "leaf1>",
            "privilege_exec": "leaf1#",
            "configuration": "leaf1(config)#",
            "session": f"leaf1(config-s-{self.session[:6]})#",
        }[self.mode]

    def _handle(self, line: str) -> str:
        if self.in_banner:
            if line.strip() == "EOF":
                self.in_banner = False
                return self.prompt()
            self.sessions[self.session].append(line)
            return ""

        if self.awaiting_secret:
            self.awaiting_secret = False
            self.mode = "privilege_exec"
            return self.prompt()

        cmd = line.strip()
        if self.reject_on is not None and cmd and self.reject_on in cmd:
            return f"% Invalid input (at token 0: '{cmd}')\n" + self.prompt()
        output = ""
        if not cmd or cmd == "!":
            pass
        elif self.mode == "exec":
            if cmd == "enable":
                if self.require_secret:
                    self.awaiting_secret = True
                    return "Password: "
                self.mode = "privilege_exec"
            else:
                output = "% Invalid input\n"
        elif self.mode == "privilege_exec":
            output = self._handle_privilege_exec(cmd)
        elif cmd == "end":
            self.mode = "privilege_exec"
        elif self.mode == "session":
            output = self._handle_session(cmd, line)
            if self.in_banner:
                return output
        return output + self.prompt()

    def _handle_privilege_exec(self, cmd: str) -> str:
        if cmd == "configure terminal":
            self.mode = "configuration"
        elif cmd.startswith("configure session "):
            self.session = cmd.split()[-1]
            self.sessions.setdefault(self.session, [])
            self.mode = "session"
        elif cmd == "disable":
            self.mode = "exec"
        elif cmd.startswith("show version"):
            return "Software image version: 4.28.3M\n"
        elif cmd == "show running-config":
            return self.running_config
        elif cmd == "show startup-config":
            return "hostname startup\n"
        else:
            return "% Invalid input (at token 0)\n"
        return ""

    def _handle_session(self, cmd: str, line: str) -> str:
        if cmd == "abort":
            self.sessions.pop(self.session, None)
            self.session = ""
            self.mode = "privilege_exec"
        elif cmd == "rollback clean-config":
            self.sessions[self.session] = []
        elif cmd.startswith("banner "):
            self.in_banner = True
            self.sessions[self.session].append(line)
            return "Enter TEXT message.  Type 'EOF' on its own line to end.\n"
        elif cmd.startswith("bogus"):
            return "% Invalid input (at token 0: 'bogus')\n"
        else:
            self.sessions[self.session].append(line)
        return ""


# ---------------------------------------------------------------------------
# Device fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def eos_device_info() -> DeviceInfo:
    """DeviceInfo for an Arista leaf switch."""
    return DeviceInfo(
        hostname="leaf1",
        platform="eos",
        username="admin",
        password="admin123",
        port=22,
        timeout=30,
    )


@pytest.fixture
def fake_driver_cls() -> type[FakeEOSDriver]:
    """The simulator class, for tests that build their own instance."""
    return FakeEOSDriver


@pytest.fixture
def fake_driver(eos_device_info: DeviceInfo) -> FakeEOSDriver:
    """A connected simulator driver sitting at privilege-exec."""
    driver = FakeEOSDriver(eos_device_info)
    driver.connect()
    return driver


@pytest.fixture
def session_name() -> str:
    """Session name every ``eos_cfg`` fixture opens."""
    return SESSION_NAME


@pytest.fixture
def eos_cfg(fake_driver: FakeEOSDriver, session_name: str) -> EOSCfg:
    """An EOSCfg on the simulator with a fixed session name."""
    return EOSCfg(fake_driver, session_name_factory=lambda prefix: session_name)


# ---------------------------------------------------------------------------
# Sample configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def two_banner_config() -> str:
    """Configuration with two banners between ordinary lines."""
    return (
        "hostname leaf1\n"
        "banner login\n"
        "Authorized access only\n"
        "EOF\n"
        "interface Ethernet1\n"
        "   description uplink\n"
        "banner motd\n"
        "leaf1# not a prompt\n"
        "EOF\n"
        "end\n"
    )


# ---------------------------------------------------------------------------
# Pytest configuration
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
