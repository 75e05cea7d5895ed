"""Fetch serial terminal logs from local files, stdin, or openQA jobs."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from urllib import error as urllib_error
from urllib import request as urllib_request

from . import __version__
from .config import DEFAULT_ASSET, Config

_LOGGER = logging.getLogger(__name__)

USER_AGENT = f"openqa-serial/{__version__}"


class SourceError(RuntimeError):
    """The transcript could not be read or downloaded."""


def is_url(location: str) -> bool:
    return "://" in location


def resolve_url(url: str, asset: str = DEFAULT_ASSET) -> str:
    """Point an openQA job URL at its serial terminal asset.

    ``https://openqa.opensuse.org/tests/123#step/foo/1`` becomes
    ``https://openqa.opensuse.org/tests/123/file/serial_terminal.txt``. URLs
    that already name a file under ``/file/`` are kept as they are.
    """
    i = url.find("#")
    if i > 0:
        url = url[:i]
    if "/file/" not in url:
        url = f"{url.rstrip('/')}/file/{asset}"
    return url


def fetch_url(url: str, timeout: float) -> str:
    _LOGGER.debug("Fetching %s", url)
    request = urllib_request.Request(url, headers={"User-Agent": USER_AGENT})  # noqa: S310
    try:
        with urllib_request.urlopen(request, timeout=timeout) as response:  # noqa: S310
            if response.status != 200:
                raise SourceError(f"http status code {response.status} for {url}")
            charset = response.headers.get_content_charset() or "utf-8"
            body = response.read()
    except urllib_error.HTTPError as exc:
        raise SourceError(f"http status code {exc.code} for {url}") from exc
    except urllib_error.URLError as exc:
        raise SourceError(f"http error: {exc.reason}") from exc
    except OSError as exc:
        raise SourceError(f"http error: {exc}") from exc
    return body.decode(charset, errors="replace")


def read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise SourceError(f"error reading {path}: {exc.strerror or exc}") from exc


def read_lines(location: str, config: Config | None = None) -> list[str]:
    """Read a transcript and split it into lines.

    Args:
        location: File path, openQA job/asset URL, or ``-`` for stdin.
        config: Supplies the HTTP timeout and asset name.

    Raises:
        SourceError: if the transcript cannot be acquired.
    """
    if config is None:
        config = Config()

    if location == "-":
        text = sys.stdin.read()
    elif is_url(location):
        text = fetch_url(resolve_url(location, config.asset), config.timeout)
    else:
        text = read_file(Path(location))

    lines = text.splitlines()
    _LOGGER.debug("Read %d line(s) from %s", len(lines), location)
    return lines
