"""Core module providing the driver abstraction, receipts, and settings.

This module contains the foundational components the configuration
platforms build on: the abstract line-oriented driver, the privilege-level
table, device receipts, settings, and the custom exception hierarchy.
"""

from .exceptions import (
    CfgError,
    ConfigSessionAlreadyExistsError,
    ConnectionError,
    DeviceRejectedError,
    InvalidConfigTargetError,
    NoActiveConfigSessionError,
    PrivilegeEscalationError,
    SettingsError,
    TransportError,
    UnsupportedPlatformError,
)

__all__ = [
    "CfgError",
    "ConfigSessionAlreadyExistsError",
    "ConnectionError",
    "DeviceRejectedError",
    "InvalidConfigTargetError",
    "NoActiveConfigSessionError",
    "PrivilegeEscalationError",
    "SettingsError",
    "TransportError",
    "UnsupportedPlatformError",
]
