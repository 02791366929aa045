"""Splitting a command line into arguments, with quoted arguments."""

from __future__ import annotations

import unicodedata
from typing import Iterator

QUOTES = ('"', "'")
_LATIN1_SPACES = "\t\n\v\f\r \x85\xa0"


def is_quote(ch: str) -> bool:
    """True for a double or single quote character."""
    return ch in QUOTES


def _is_space(ch: str) -> bool:
    if len(ch) != 1:
        return False
    if ch in _LATIN1_SPACES:
        return True
    return ord(ch) > 0xFF and unicodedata.category(ch) in ("Zs", "Zl", "Zp")


def scan_args(data: str, at_eof: bool) -> tuple[int, str | None]:
    """Find the next argument in ``data``.

    Returns how many characters to consume and the argument, or ``None``
    when no complete argument is available yet.  An argument that opens
    with a quote runs to the matching quote; an unterminated one is
    returned with its opening quote once ``at_eof`` is set.
    """
    start, first = 0, ""
    for start, first in enumerate(data):
        if not _is_space(first):
            break
    else:
        start = len(data)
    quoted = is_quote(first)
    if quoted:
        start += 1
    for index, ch in enumerate(data[start:], start):
        if (quoted and ch == first) or (not quoted and _is_space(ch)):
            return index + 1, data[start:index]
    if at_eof and len(data) > start:
        if quoted:
            start -= 1
        return len(data), data[start:]
    if quoted:
        start -= 1
    return start, None


def _iter_args(text: str) -> Iterator[str]:
    while text:
        advance, token = scan_args(text, True)
        text = text[advance:]
        if token is not None:
            yield token
        elif advance == 0:
            return


class ArgsScanner(list):
    """Arguments collected from one or more lines of input."""

    def reset(self) -> None:
        self.clear()

    def parse(self, text: str) -> str:
        """Add the arguments in ``text``.

        When the last argument is an unterminated quote it is removed and
        returned with a trailing newline, to be prefixed to the next line;
        otherwise an empty string is returned.
        """
        self.extend(_iter_args(text))
        if not self:
            return ""
        last = self[-1]
        if not last or not is_quote(last[0]):
            return ""
        self.pop()
        return last + "\n"