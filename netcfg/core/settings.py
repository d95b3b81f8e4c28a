"""Settings for configuration-session platforms.

Settings are an immutable dataclass so a single instance can be shared by
every platform built from the same file.  They can be constructed directly
or loaded from a YAML mapping::

    # netcfg.yml
    timeout_ops: 60
    session_name_prefix: change42
    config_sources: [running, startup]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .base_driver import DEFAULT_TIMEOUT_OPS, EOS_FAILED_WHEN_CONTAINS
from .exceptions import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_SESSION_NAME_PREFIX = "netcfg"


@dataclass(frozen=True)
class CfgSettings:
    """Tunables shared by platform and driver.

    Attributes:
        timeout_ops: Seconds the channel waits for a prompt on each read.
        session_name_prefix: Leading part of generated session names.  The
            device shows only the first six characters in its prompt.
        config_sources: Source names callers may pass to ``get_config``.
        failed_when_contains: Output markers that flag a response as failed.
        version_pattern: Regex overriding the platform's version pattern.

    """

    timeout_ops: float = DEFAULT_TIMEOUT_OPS
    session_name_prefix: str = DEFAULT_SESSION_NAME_PREFIX
    config_sources: tuple[str, ...] = ("running", "startup")
    failed_when_contains: tuple[str, ...] = EOS_FAILED_WHEN_CONTAINS
    version_pattern: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CfgSettings:
        """Build settings from a plain mapping, validating keys and types.

        Raises:
            SettingsError: On unknown keys or values of the wrong type.

        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise SettingsError(
                "Unknown settings keys",
                details={"keys": ", ".join(unknown)},
            )

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key in ("config_sources", "failed_when_contains"):
                if not isinstance(value, list | tuple) or not all(isinstance(v, str) for v in value):
                    raise SettingsError(f"'{key}' must be a list of strings")
                kwargs[key] = tuple(value)
            elif key == "timeout_ops":
                if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
                    raise SettingsError("'timeout_ops' must be a positive number")
                kwargs[key] = float(value)
            else:
                if not isinstance(value, str):
                    raise SettingsError(f"'{key}' must be a string")
                kwargs[key] = value

        if kwargs.get("session_name_prefix", DEFAULT_SESSION_NAME_PREFIX) == "":
            raise SettingsError("'session_name_prefix' must not be empty")
        return cls(**kwargs)


def load_settings(path: Path | str) -> CfgSettings:
    """Load ``CfgSettings`` from a YAML file.

    An empty file yields default settings.

    Raises:
        SettingsError: If the file is missing, unparsable, or invalid.

    """
    settings_file = Path(path)
    if not settings_file.exists():
        raise SettingsError(f"Settings file not found: {settings_file}")

    try:
        with settings_file.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise SettingsError(
            f"Invalid YAML in settings file: {settings_file}",
            details={"original_error": str(exc)},
        ) from exc

    if not isinstance(raw, dict):
        raise SettingsError(f"Settings file must contain a mapping: {settings_file}")

    settings = CfgSettings.from_dict(raw)
    logger.debug("Loaded settings from %s", settings_file)
    return settings
