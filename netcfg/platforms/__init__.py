"""Platform-specific configuration-session implementations.

Each platform subclasses ``CfgPlatform``.  ``PlatformFactory`` selects the
implementation from the device's platform string.
"""

from .base import CfgPlatform
from .eos import EOSCfg, SessionState
from .patterns import EOS_PATTERNS, ConfigPatterns
from .payload import ConfigPayload, prepare_config_payloads
from .platform_factory import PlatformFactory

__all__ = [
    "EOS_PATTERNS",
    "CfgPlatform",
    "ConfigPatterns",
    "ConfigPayload",
    "EOSCfg",
    "PlatformFactory",
    "SessionState",
    "prepare_config_payloads",
]
