"""Serial terminal transcript model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Entry:
    """One reconstructed command, or a line that did not look like one."""

    command: str  # command text, or the raw line for passthrough entries
    output: str = ""  # newline-joined output lines
    return_code: int = 0  # only meaningful when passthrough is False
    passthrough: bool = False


class ParseError(RuntimeError):
    """Raised when a transcript cannot be parsed any further.

    ``entries`` holds everything that was closed before the failure so callers
    can still show the partial result.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        excerpt: str | None = None,
        entries: list[Entry] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.excerpt = excerpt
        self.entries: list[Entry] = entries if entries is not None else []

    def __str__(self) -> str:
        text = f"line {self.line}: {self.message}" if self.line is not None else self.message
        if self.excerpt:
            excerpt = self.excerpt.strip()
            if len(excerpt) > 160:
                excerpt = excerpt[:157] + "..."
            text += f"\n> {excerpt}"
        return text


class ReturnCodeError(ParseError):
    """A sentinel token was found but the exit status after it is unreadable."""


__all__ = ["Entry", "ParseError", "ReturnCodeError"]
