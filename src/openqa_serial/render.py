"""Turn parsed entries into numbered, colorized terminal lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

import click

from .transcripts import Entry

_NUMBER_WIDTH = 6
_OUTPUT_INDENT = " " * (_NUMBER_WIDTH + 1)


@dataclass(frozen=True)
class RenderOptions:
    numbers: bool = True
    colors: bool = True


def entry_color(entry: Entry) -> str | None:
    """Green for success, red for failure, nothing for passthrough lines."""
    if entry.passthrough:
        return None
    return "green" if entry.return_code == 0 else "red"


def format_entry(index: int, entry: Entry, options: RenderOptions) -> list[str]:
    """Format a single entry as display lines (no trailing newlines)."""
    head = f"{index:{_NUMBER_WIDTH}d} {entry.command}" if options.numbers else entry.command
    lines = [head]
    if not entry.passthrough:
        indent = _OUTPUT_INDENT if options.numbers else ""
        lines.extend(f"{indent}{line}" for line in entry.output.split("\n"))

    color = entry_color(entry) if options.colors else None
    if color:
        lines = [click.style(line, fg=color) for line in lines]
    return lines


def format_entries(entries: Iterable[Entry], options: RenderOptions | None = None) -> Iterator[str]:
    """Yield display lines for all entries, numbered from zero."""
    options = options or RenderOptions()
    for index, entry in enumerate(entries):
        yield from format_entry(index, entry, options)
