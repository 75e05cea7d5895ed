"""Parse openQA serial terminal logs into commands, output and exit codes.

openQA's ``script_run`` appends ``; echo <token>-$?-`` to every command it
types into the serial console. The shell echoes the command line back, prints
the command's output, and finally prints ``<token>-<exit status>-``. The token
is five random characters, so finding it again marks the end of the output.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator

from . import Entry, ReturnCodeError

_LOGGER = logging.getLogger(__name__)

# e.g. "zypper -n in vim; echo Gi8yV-$?-"
_SENTINEL_ECHO_RE = re.compile(r"(;[ ]+echo [a-zA-Z0-9~_]{5})-\$\?-.*")
_RETURN_CODE_RE = re.compile(r"-([0-9]+)-")
_MAX_RETURN_CODE = 2**63 - 1

# Heredoc delimiters and continuation prompts echo parts of the command line
_HEREDOC_MARKERS = ("_EOT", "EOT_")
_CONTINUATION_PROMPT = ">"


class ParserState(Enum):
    """Where the parser is between two lines."""

    SEEK_COMMAND = "seek_command"
    AWAIT_SENTINEL = "await_sentinel"


def clean_token(fragment: str) -> str:
    """Turn a matched ``; echo XXXXX`` fragment into the bare token."""
    token = fragment.lstrip(";").strip()
    if token.startswith("echo "):
        token = token[len("echo "):]
    return token.strip()


def decode_return_code(text: str) -> int:
    """Decode the ``-<digits>-`` suffix that follows a sentinel token.

    Raises:
        ValueError: if the text has any other shape.
    """
    match = _RETURN_CODE_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid return code string: {text!r}")
    value = int(match.group(1))
    if value > _MAX_RETURN_CODE:
        raise ValueError(f"return code out of range: {text!r}")
    return value


class SerialParser:
    """Single-pass state machine over serial terminal lines.

    Feed lines one at a time with :meth:`feed`; every line either closes an
    entry (which is returned) or is absorbed into the pending one.
    """

    def __init__(self) -> None:
        self.state = ParserState.SEEK_COMMAND
        self.pending: Entry | None = None
        self.token: str | None = None
        self.line_number = 0
        self._output: list[str] = []

    def feed(self, line: str) -> Entry | None:
        """Consume one line and return the entry it completes, if any.

        Raises:
            ReturnCodeError: if the sentinel token is found but the text after
                it is not a valid exit status.
        """
        self.line_number += 1
        line = line.rstrip("\r\n")

        if self.state is ParserState.AWAIT_SENTINEL:
            return self._await_sentinel(line)
        return self._seek_command(line)

    def finish(self) -> None:
        """Signal end of stream. An unclosed entry is dropped."""
        if self.state is ParserState.AWAIT_SENTINEL:
            _LOGGER.debug(
                "Dropping unfinished command %r (token %s never echoed)",
                self.pending.command,
                self.token,
            )
        self._reset()

    def _seek_command(self, line: str) -> Entry | None:
        match = _SENTINEL_ECHO_RE.search(line)
        if match is None:
            return Entry(command=line, passthrough=True)

        self.pending = Entry(command=line[:match.start()].strip())
        self.token = clean_token(match.group(1))
        self._output = []
        self.state = ParserState.AWAIT_SENTINEL
        return None

    def _await_sentinel(self, line: str) -> Entry | None:
        if line.startswith(_CONTINUATION_PROMPT) or any(m in line for m in _HEREDOC_MARKERS):
            self._append_output(line)
            return None

        i = line.find(self.token)
        if i < 0:
            self._append_output(line)
            return None

        rest = line[i + len(self.token):].strip()
        try:
            return_code = decode_return_code(rest)
        except ValueError as exc:
            raise ReturnCodeError(str(exc), line=self.line_number, excerpt=line) from exc

        entry = self.pending
        entry.output = "\n".join(self._output)
        entry.return_code = return_code
        self._reset()
        return entry

    def _append_output(self, line: str) -> None:
        # Blank lines before any real output are dropped
        if not any(self._output):
            self._output = [line]
        else:
            self._output.append(line)

    def _reset(self) -> None:
        self.state = ParserState.SEEK_COMMAND
        self.pending = None
        self.token = None
        self._output = []


def iter_entries(lines: Iterable[str]) -> Iterator[Entry]:
    """Lazily parse lines into entries, in input order.

    Raises:
        ReturnCodeError: on an unreadable exit status. Entries yielded before
            the error are already with the caller.
    """
    parser = SerialParser()
    for line in lines:
        entry = parser.feed(line)
        if entry is not None:
            yield entry
    parser.finish()


def parse_lines(lines: Iterable[str]) -> list[Entry]:
    """Parse serial terminal lines into a list of entries.

    Args:
        lines: Transcript lines, trailing newlines optional.

    Returns:
        Closed entries in input order. A command whose sentinel never shows up
        (truncated log) is left out.

    Raises:
        ReturnCodeError: on an unreadable exit status; ``exc.entries`` holds the
            entries closed before it.
    """
    entries: list[Entry] = []
    try:
        for entry in iter_entries(lines):
            entries.append(entry)
    except ReturnCodeError as exc:
        exc.entries = entries
        raise
    return entries


def parse_transcript(path: Path) -> list[Entry]:
    """Parse a serial terminal log file."""
    text = path.read_text(encoding="utf-8", errors="replace")
    return parse_lines(text.splitlines())
