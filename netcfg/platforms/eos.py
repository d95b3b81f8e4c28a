"""Arista EOS configuration-session platform.

Candidate configuration is applied inside an EOS configuration session:
an isolated, named change set entered with ``configure session <name>``.
The session is registered with the driver as its own privilege level so
the driver can recognize the session prompt and escalate into it.

The platform never commits or discards on its own.  Callers include the
commit (or abort) in what they load, or call ``abort_config``.

Usage::

    cfg = EOSCfg(driver)
    cfg.load_config(candidate, replace=True)
    cfg.load_config("commit")
    cfg.clear_config_session()
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from enum import StrEnum

from ..core.base_driver import BaseDriver
from ..core.exceptions import (
    ConfigSessionAlreadyExistsError,
    DeviceRejectedError,
    NoActiveConfigSessionError,
    PrivilegeEscalationError,
    TransportError,
)
from ..core.privilege import PRIVILEGE_EXEC, PrivilegeLevel
from ..core.response import CfgResult, LoadResult, Response, SendResult
from ..core.settings import CfgSettings
from .base import CfgPlatform
from .patterns import EOS_PATTERNS, ConfigPatterns
from .payload import ConfigPayload, prepare_config_payloads

logger = logging.getLogger(__name__)

VERSION_COMMAND = "show version | i Software image version"
VERSION_PATTERN = r"(?i)\d+\.\d+\.[a-z0-9\-]+(\.\d+[a-z]?)?"
ROLLBACK_CLEAN_CONFIG = "rollback clean-config"
ABORT_COMMAND = "abort"
SESSION_DEESCALATE = "end"
# EOS shows only this many characters of the session name in its prompt
SESSION_PROMPT_PREFIX_LEN = 6


class SessionState(StrEnum):
    """Lifecycle of the platform's configuration session."""

    NO_SESSION = "no-session"
    SESSION_PENDING = "session-pending"
    SESSION_ACTIVE = "session-active"


def timestamp_session_name(prefix: str) -> str:
    """Return ``<prefix>_<unix seconds>``.

    Two sessions created in the same second share a name; pass another
    factory to ``EOSCfg`` when several processes target one device.
    """
    return f"{prefix}_{int(time.time())}"


def session_prompt_pattern(session_name: str) -> str:
    """Return the prompt pattern for a configuration session."""
    prefix = re.escape(session_name[:SESSION_PROMPT_PREFIX_LEN])
    return rf"(?im)^[\w.\-@()/:\s]{{1,63}}\(config\-s\-{prefix}[\w.\-@_/:]{{0,32}}\)#\s?$"


class EOSCfg(CfgPlatform):
    """Configuration sessions on Arista EOS.

    Args:
        driver: Connected driver used for every exchange.
        settings: Shared settings; defaults to ``CfgSettings()``.
        patterns: Compiled payload patterns.
        session_name_factory: Builds a session name from the configured
            prefix; defaults to ``timestamp_session_name``.

    """

    config_command_map: dict[str, str] = {
        "running": "show running-config",
        "startup": "show startup-config",
    }

    def __init__(
        self,
        driver: BaseDriver,
        settings: CfgSettings | None = None,
        patterns: ConfigPatterns = EOS_PATTERNS,
        session_name_factory: Callable[[str], str] | None = None,
    ) -> None:
        """Initialize the platform with no active session."""
        super().__init__(driver, settings)
        self.patterns = patterns
        self.version_pattern = re.compile(self.settings.version_pattern or VERSION_PATTERN)
        self._session_name_factory = session_name_factory or timestamp_session_name
        self.config_session_name = ""
        self._session_registered = False

    @property
    def session_state(self) -> SessionState:
        """Return where the configuration session is in its lifecycle."""
        if not self.config_session_name:
            return SessionState.NO_SESSION
        if not self._session_registered:
            return SessionState.SESSION_PENDING
        return SessionState.SESSION_ACTIVE

    def clear_config_session(self) -> None:
        """Forget the session name so the next load opens a new session."""
        self.config_session_name = ""
        self._session_registered = False

    # -- Retrieval ------------------------------------------------------------

    def get_version(self) -> CfgResult:
        """Get the software version; empty string if the output has none."""
        response = self.driver.send_command(VERSION_COMMAND)
        match = self.version_pattern.search(response.result)
        version = match.group(0) if match else ""
        return CfgResult(host=self.hostname, result=version, responses=[response])

    def get_config(self, source: str = "running") -> CfgResult:
        """Get the configuration of a source datastore.

        Raises:
            InvalidConfigTargetError: If ``source`` is not a known source.

        """
        command = self._get_config_command(source)
        response = self.driver.send_command(command)
        return CfgResult(host=self.hostname, result=response.result, responses=[response])

    # -- Session registration -------------------------------------------------

    def prepare_config_payloads(self, config: str) -> ConfigPayload:
        """Split ``config`` into standard and eager payloads."""
        return prepare_config_payloads(config, self.patterns)

    def register_config_session(self, session_name: str) -> None:
        """Register ``session_name`` as a privilege level on the driver.

        Does not escalate into the new level.

        Raises:
            ConfigSessionAlreadyExistsError: If the name is already registered.

        """
        if session_name in self.driver.privilege_levels:
            raise ConfigSessionAlreadyExistsError(
                f"Configuration session '{session_name}' already exists",
                device=self.hostname,
            )

        level = PrivilegeLevel(
            name=session_name,
            pattern=session_prompt_pattern(session_name),
            previous_priv=PRIVILEGE_EXEC,
            escalate=f"configure session {session_name}",
            deescalate=SESSION_DEESCALATE,
            escalate_auth=False,
            escalate_prompt="",
        )
        self.driver.privilege_levels.register(level)
        self.driver.privilege_levels.recompile()
        self._logger.info("[%s] registered configuration session %s", self.hostname, session_name)

    def _open_config_session(self) -> None:
        self.config_session_name = self._session_name_factory(self.settings.session_name_prefix)
        self._logger.debug(
            "[%s] configuration session name will be %s",
            self.hostname,
            self.config_session_name,
        )
        try:
            self.register_config_session(self.config_session_name)
        except ConfigSessionAlreadyExistsError:
            self.clear_config_session()
            raise
        self._session_registered = True

    # -- Load / abort ---------------------------------------------------------

    def load_config(self, config: str, replace: bool = False) -> LoadResult:
        """Load a candidate configuration into the configuration session.

        Opens a session on first use and reuses it until cleared.  With
        ``replace`` the session is first rolled back to a clean config, so
        the candidate replaces rather than merges.

        Args:
            config: Candidate configuration text.
            replace: Roll back to clean config before loading.

        Returns:
            Receipts for every step, in order.

        Raises:
            ConfigSessionAlreadyExistsError: If the generated name collides.
            TransportError: If the channel fails; ``responses`` holds the
                receipts completed before the failure.
            DeviceRejectedError: If the device rejects a step; ``responses``
                ends with the rejected receipt.

        """
        payload = self.prepare_config_payloads(config)

        if not self.config_session_name:
            self._open_config_session()

        steps: list[tuple[str, str, bool]] = []
        if replace:
            steps.append(("rollback", ROLLBACK_CLEAN_CONFIG, False))
        steps.append(("standard", payload.standard, False))
        if payload.has_eager:
            steps.append(("eager", payload.eager, True))

        result = LoadResult(host=self.hostname)
        for step, text, eager in steps:
            sent = self._send_step(step, text, eager)
            if sent.response is not None:
                result.responses.append(sent.response)
            sent.raise_for_outcome(self.hostname, result.responses)

        self._logger.info(
            "[%s] loaded config into session %s (%d steps)",
            self.hostname,
            self.config_session_name,
            len(result.responses),
        )
        return result

    def _send_step(self, step: str, text: str, eager: bool) -> SendResult:
        try:
            response = self.driver.send_config(
                text,
                privilege_level=self.config_session_name,
                eager=eager,
            )
        except (TransportError, PrivilegeEscalationError) as exc:
            self._logger.error("[%s] %s step failed: %s", self.hostname, step, exc)
            return SendResult.from_error(step, exc)

        sent = SendResult.from_response(step, response)
        if response.failed:
            self._logger.warning("[%s] device rejected %s step", self.hostname, step)
        return sent

    def abort_config(self) -> LoadResult:
        """Abort the session's pending changes.

        The abort is sent as raw input because it leaves the session
        without a prompt the privilege bookkeeping expects; the driver's
        privilege is then set to privilege-exec without re-reading the
        prompt.  The session name is left set: call
        ``clear_config_session`` after a successful abort.

        Raises:
            NoActiveConfigSessionError: If no session name is set.
            PrivilegeEscalationError: If the session cannot be entered.
            TransportError: If the raw send fails.
            DeviceRejectedError: If the device reports the abort as failed.

        """
        if not self.config_session_name:
            raise NoActiveConfigSessionError(
                "No configuration session to abort",
                device=self.hostname,
            )

        self.driver.acquire_priv(self.config_session_name)

        response = Response(host=self.hostname, channel_input=ABORT_COMMAND)
        raw = self.driver.send_raw_input(ABORT_COMMAND)
        response.record(raw, self.driver.failed_when_contains)
        self.driver.current_priv = PRIVILEGE_EXEC

        result = LoadResult(host=self.hostname, responses=[response])
        if response.failed:
            raise DeviceRejectedError(
                "Device rejected abort",
                device=self.hostname,
                details={"session": self.config_session_name},
                responses=result.responses,
            )

        self._logger.info(
            "[%s] aborted configuration session %s", self.hostname, self.config_session_name
        )
        return result
