"""Compiled text patterns used to prepare configuration payloads.

A ``ConfigPatterns`` value is immutable and compiled once at import time.
Platforms receive it by reference.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

NOOP_LINE = "!"


@dataclass(frozen=True)
class ConfigPatterns:
    """Pure text operations over candidate configuration.

    Attributes:
        comment_line: Matches a full-line comment.
        session_terminator: Matches a trailing token that would exit the
            configuration session.
        eager_block: Matches one multi-line free-text block.
        noop_line: Neutral line substituted for removed text.

    """

    comment_line: re.Pattern[str]
    session_terminator: re.Pattern[str]
    eager_block: re.Pattern[str]
    noop_line: str = NOOP_LINE

    def strip_comments(self, text: str) -> str:
        """Replace every full-line comment with the no-op line."""
        return self.comment_line.sub(self.noop_line, text)

    def strip_session_terminator(self, text: str) -> str:
        """Replace a trailing session terminator with the no-op line."""
        return self.session_terminator.sub(self.noop_line, text)

    def extract_eager_blocks(self, text: str) -> list[str]:
        """Return every free-text block in order of appearance."""
        return [match.group(0) for match in self.eager_block.finditer(text)]


EOS_PATTERNS = ConfigPatterns(
    comment_line=re.compile(r"^! .*$", re.IGNORECASE | re.MULTILINE),
    # only an "end" line followed by nothing but whitespace
    session_terminator=re.compile(r"^end[ \t\r]*$(?=\s*\Z)", re.MULTILINE),
    # lazy so that each banner stops at its own EOF sentinel
    eager_block=re.compile(r"^banner\b.*?^EOF$", re.IGNORECASE | re.MULTILINE | re.DOTALL),
)
