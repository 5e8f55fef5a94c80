"""Content statistics model."""

import re
from dataclasses import dataclass
from typing import Any, Dict


LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")


@dataclass
class ContentStatistics:
    """
    Line, character and byte counts of a piece of content.

    Lines split on ``\\r\\n``, ``\\r`` or ``\\n``; bytes are the UTF-8
    encoded length.
    """

    lines: int
    characters: int
    bytes: int

    def __post_init__(self):
        """Validate statistics after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate statistics integrity."""
        if self.lines < 0:
            raise ValueError("lines must be non-negative")

        if self.characters < 0:
            raise ValueError("characters must be non-negative")

        if self.bytes < 0:
            raise ValueError("bytes must be non-negative")

    @classmethod
    def from_text(cls, text: str) -> 'ContentStatistics':
        """Compute statistics for a string; empty or absent content counts as zero."""
        if not text:
            return cls(lines=0, characters=0, bytes=0)

        return cls(
            lines=len(LINE_BREAK_PATTERN.split(text)),
            characters=len(text),
            bytes=len(text.encode("utf-8", errors="surrogatepass")),
        )

    def is_empty(self) -> bool:
        """Check if the content was empty."""
        return self.characters == 0

    def summary(self) -> str:
        """Human readable one-line summary."""
        if self.is_empty():
            return "Empty content"
        return f"Lines: {self.lines:,} | Characters: {self.characters:,} | Bytes: {self.bytes:,}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary for JSON serialization."""
        return {
            "lines": self.lines,
            "characters": self.characters,
            "bytes": self.bytes,
        }
