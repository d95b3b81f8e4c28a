"""Custom exception hierarchy for the configuration-session manager.

All library exceptions inherit from ``CfgError`` to enable granular catch
clauses while still allowing a single top-level handler.

Exception tree::

    CfgError
    ├── ConnectionError
    ├── TransportError
    ├── DeviceRejectedError
    ├── InvalidConfigTargetError
    ├── ConfigSessionAlreadyExistsError
    ├── NoActiveConfigSessionError
    ├── PrivilegeEscalationError
    ├── UnsupportedPlatformError
    └── SettingsError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .response import Response


class CfgError(Exception):
    """Base exception for all configuration-session errors.

    Attributes:
        message: Human-readable error description.
        device: Optional device host that triggered the error.
        details: Optional mapping of additional contextual data.

    """

    def __init__(
        self,
        message: str,
        device: str | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize with a message, optional device context, and details."""
        self.message = message
        self.device = device
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional device context."""
        parts: list[str] = []
        if self.device:
            parts.append(f"[{self.device}]")
        parts.append(self.message)
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)


class _PartialProgressError(CfgError):
    """Error raised part-way through a pipeline, carrying the receipts so far."""

    def __init__(
        self,
        message: str,
        device: str | None = None,
        details: dict[str, object] | None = None,
        responses: list[Response] | None = None,
    ) -> None:
        """Initialize with the receipts collected before the pipeline stopped."""
        self.responses: list[Response] = list(responses or [])
        super().__init__(message, device=device, details=details)


class ConnectionError(CfgError):
    """Raised when a device session cannot be opened.

    Examples:
        - SSH handshake or authentication failure
        - Transport SDK not installed

    """


class TransportError(_PartialProgressError):
    """Raised when the channel fails during a command exchange.

    The command may or may not have reached the device; ``responses`` holds
    every receipt completed before the failure.

    Examples:
        - Connection lost mid-exchange
        - Operation timeout waiting for a prompt

    """


class DeviceRejectedError(_PartialProgressError):
    """Raised when the device round-tripped a command but flagged it as failed.

    ``responses`` ends with the rejected receipt.
    """


class InvalidConfigTargetError(CfgError):
    """Raised when a configuration source name has no retrieval command."""


class ConfigSessionAlreadyExistsError(CfgError):
    """Raised when registering a session name already in the privilege table."""


class NoActiveConfigSessionError(CfgError):
    """Raised when an operation requires a configuration session and none is set."""


class PrivilegeEscalationError(CfgError):
    """Raised when a privilege level is unknown or cannot be reached.

    Examples:
        - Target level not registered
        - Prompt never matched the target after escalating

    """


class UnsupportedPlatformError(CfgError):
    """Raised when no platform implementation is registered for a name."""


class SettingsError(CfgError):
    """Raised when a settings file is missing or malformed."""
