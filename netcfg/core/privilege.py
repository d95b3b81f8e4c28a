"""Privilege levels and the driver's shared privilege-level table.

A privilege level is a named state in the device's command-mode hierarchy,
recognized by a prompt pattern and reached from its ``previous_priv`` via an
escalate command.  The table owns the set of known levels and the compiled
prompt set the driver reads against; every insertion must be followed by
``recompile()`` so new prompts are recognized.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass

from .exceptions import ConfigSessionAlreadyExistsError, PrivilegeEscalationError

logger = logging.getLogger(__name__)

EXEC = "exec"
PRIVILEGE_EXEC = "privilege_exec"
CONFIGURATION = "configuration"


@dataclass(frozen=True)
class PrivilegeLevel:
    """Descriptor of one command-mode state.

    Attributes:
        name: Unique level name within a driver's table.
        pattern: Regex matching the prompt shown at this level.
        previous_priv: Level this one escalates from (empty for the root).
        escalate: Command entering this level from ``previous_priv``.
        deescalate: Command returning to ``previous_priv``.
        escalate_auth: Whether escalation prompts for a secret.
        escalate_prompt: Regex of the secret prompt when ``escalate_auth``.
        not_contains: Substrings that disqualify a prompt from this level.

    """

    name: str
    pattern: str
    previous_priv: str
    escalate: str
    deescalate: str
    escalate_auth: bool = False
    escalate_prompt: str = ""
    not_contains: tuple[str, ...] = ()


EOS_DEFAULT_PRIVILEGE_LEVELS: tuple[PrivilegeLevel, ...] = (
    PrivilegeLevel(
        name=EXEC,
        pattern=r"(?im)^[\w.\-@()/: ]{1,63}>\s?$",
        previous_priv="",
        escalate="",
        deescalate="",
    ),
    PrivilegeLevel(
        name=PRIVILEGE_EXEC,
        pattern=r"(?im)^[\w.\-@()/: ]{1,63}#\s?$",
        previous_priv=EXEC,
        escalate="enable",
        deescalate="disable",
        escalate_auth=True,
        escalate_prompt=r"(?im)^(?:enable\s){0,1}password:\s?$",
        not_contains=("(config",),
    ),
    PrivilegeLevel(
        name=CONFIGURATION,
        pattern=r"(?im)^[\w.\-@()/: ]{1,63}\(config(?!\-s\-)[\w.\-@/:\+]{0,32}\)#\s?$",
        previous_priv=PRIVILEGE_EXEC,
        escalate="configure terminal",
        deescalate="end",
    ),
)


class PrivilegeLevelTable:
    """Mutable mapping of level name to ``PrivilegeLevel`` plus compiled prompts.

    Args:
        levels: Initial levels; defaults to the EOS hierarchy.

    """

    def __init__(self, levels: tuple[PrivilegeLevel, ...] = EOS_DEFAULT_PRIVILEGE_LEVELS) -> None:
        """Initialize the table and compile its prompt set."""
        self._levels: dict[str, PrivilegeLevel] = {level.name: level for level in levels}
        self._compiled: dict[str, re.Pattern[str]] = {}
        self._all_prompts: re.Pattern[str] = re.compile("")
        self.recompile()

    def __contains__(self, name: object) -> bool:
        return name in self._levels

    def __getitem__(self, name: str) -> PrivilegeLevel:
        try:
            return self._levels[name]
        except KeyError:
            raise PrivilegeEscalationError(
                f"Unknown privilege level '{name}'",
                details={"known": ", ".join(sorted(self._levels))},
            ) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    @property
    def all_prompts(self) -> re.Pattern[str]:
        """Return the combined pattern matching any known prompt."""
        return self._all_prompts

    def register(self, level: PrivilegeLevel) -> None:
        """Insert a new level.  Callers must ``recompile()`` afterwards.

        Raises:
            ConfigSessionAlreadyExistsError: If the name is already present.

        """
        if level.name in self._levels:
            raise ConfigSessionAlreadyExistsError(
                f"Privilege level '{level.name}' already registered",
            )
        self._levels[level.name] = level
        logger.debug("Registered privilege level %s", level.name)

    def recompile(self) -> None:
        """Rebuild the per-level and combined prompt patterns."""
        self._compiled = {name: re.compile(level.pattern) for name, level in self._levels.items()}
        # inline flags must lead each alternative, so strip and re-apply them
        bodies = [strip_inline_flags(level.pattern) for level in self._levels.values()]
        self._all_prompts = re.compile(
            "|".join(f"(?:{body})" for body in bodies),
            re.IGNORECASE | re.MULTILINE,
        )

    def path_to(self, name: str) -> list[str]:
        """Return level names from the root down to ``name`` inclusive."""
        path: list[str] = []
        current = name
        while current:
            if current in path:
                raise PrivilegeEscalationError(
                    f"Privilege level cycle through '{current}'",
                )
            path.append(current)
            current = self[current].previous_priv
        path.reverse()
        return path

    def resolve(self, prompt: str, preferred: tuple[str, ...] = ()) -> str | None:
        """Map a prompt to a level name.

        Session levels share a truncated prompt, so several levels may match.
        Names in ``preferred`` win ties, in order.

        Returns:
            The matching level name, or ``None`` if no pattern matches.

        """
        matches = [
            name
            for name, pattern in self._compiled.items()
            if pattern.search(prompt)
            and not any(s in prompt for s in self._levels[name].not_contains)
        ]
        if not matches:
            return None
        for name in preferred:
            if name in matches:
                return name
        return matches[0]


def strip_inline_flags(pattern: str) -> str:
    """Remove a leading inline flag group so the pattern can be embedded."""
    return re.sub(r"^\(\?[aiLmsux]+\)", "", pattern)
