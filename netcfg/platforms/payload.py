"""Split candidate configuration into standard and eager payloads.

Free-text blocks (banners) carry embedded newlines and arbitrary text that
may look like a prompt, so they cannot go through the line-by-line,
prompt-confirmed send path.  They are pulled out into an *eager* payload
and their original position in the *standard* payload is neutralized.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .patterns import EOS_PATTERNS, ConfigPatterns

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigPayload:
    """Standard and eager payloads derived from one configuration blob.

    Attributes:
        standard: Ordinary lines sent with per-line prompt confirmation.
        eager: Free-text blocks joined by newlines; empty when there are none.

    """

    standard: str
    eager: str

    @property
    def has_eager(self) -> bool:
        """Return ``True`` if there is an eager payload to send."""
        return bool(self.eager)


def prepare_config_payloads(config: str, patterns: ConfigPatterns = EOS_PATTERNS) -> ConfigPayload:
    """Prepare the standard and eager payloads for ``config``.

    Comments and a trailing session terminator are neutralized first, then
    every eager block is extracted and replaced by the no-op line.

    Args:
        config: Raw candidate configuration.
        patterns: Compiled patterns for the target platform.

    Returns:
        The payload pair.  Applying this function to the returned standard
        payload yields the same standard payload.

    """
    config = patterns.strip_comments(config)
    config = patterns.strip_session_terminator(config)

    eager_blocks = patterns.extract_eager_blocks(config)
    for block in eager_blocks:
        config = config.replace(block, patterns.noop_line)

    payload = ConfigPayload(standard=config, eager="\n".join(eager_blocks))
    logger.debug(
        "Prepared payloads: %d standard chars, %d eager blocks",
        len(payload.standard),
        len(eager_blocks),
    )
    return payload
