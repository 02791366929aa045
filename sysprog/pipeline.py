"""Line pipelines: read, filter, highlight and count words."""

from __future__ import annotations

import argparse
import sys
from collections import Counter
from typing import Any, Iterable, Iterator, Protocol, TextIO

_RESET_FG = "\x1b[39m"


class _Cancel(Protocol):
    def is_set(self) -> bool: ...


def _cancelled(cancel: _Cancel | None) -> bool:
    return cancel is not None and cancel.is_set()


def _as_line(raw: Any) -> str:
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8", "replace")
    if raw.endswith("\n"):
        raw = raw[:-1]
    if raw.endswith("\r"):
        raw = raw[:-1]
    return raw


def source_lines(stream: Iterable[Any], cancel: _Cancel | None = None) -> Iterator[str]:
    """Yield the lines of ``stream`` without their line endings."""
    for raw in stream:
        if _cancelled(cancel):
            return
        yield _as_line(raw)


def text_filter(
    lines: Iterable[str], needle: str, cancel: _Cancel | None = None
) -> Iterator[str]:
    """Yield only the lines that contain ``needle``."""
    for line in lines:
        if _cancelled(cancel):
            return
        if needle in line:
            yield line


def highlight(line: str, needle: str, color: int) -> str:
    """Wrap the first occurrence of ``needle`` in an ANSI colour."""
    index = line.find(needle)
    if index == -1:
        raise ValueError(line)
    return (
        f"{line[:index]}\x1b[{color}m{needle}{_RESET_FG}{line[index + len(needle):]}"
    )


def printer(
    lines: Iterable[str],
    color: int,
    needle: str,
    stream: TextIO,
    cancel: _Cancel | None = None,
) -> None:
    """Write each line with ``needle`` highlighted; ValueError if it is missing."""
    for line in lines:
        if _cancelled(cancel):
            return
        stream.write(highlight(line, needle, color) + "\n")


def source_line_words(
    stream: Iterable[Any], cancel: _Cancel | None = None
) -> Iterator[list[str]]:
    """Yield the whitespace-separated words of each line."""
    for line in source_lines(stream, cancel):
        yield line.split()


def word_occurrence(
    lines: Iterable[list[str]], cancel: _Cancel | None = None
) -> Iterator[Counter[str]]:
    """Yield a word count for each list of words."""
    for words in lines:
        if _cancelled(cancel):
            return
        yield Counter(words)


def merge_counts(
    sources: Iterable[Iterable[dict[str, int]]], cancel: _Cancel | None = None
) -> Counter[str]:
    """Sum the counts from all sources, taking from each in turn."""
    total: Counter[str] = Counter()
    active = [iter(source) for source in sources]
    while active:
        for source in list(active):
            if _cancelled(cancel):
                return total
            try:
                counts = next(source)
            except StopIteration:
                active.remove(source)
                continue
            total.update(counts)
    return total


def main(argv: list[str] | None = None) -> int:
    """Highlight lines of standard input holding a term, or count their words."""
    parser = argparse.ArgumentParser(prog="pipeline")
    parser.add_argument("search", nargs="?", default="in")
    parser.add_argument("--color", type=int, default=31)
    parser.add_argument("--count", action="store_true", help="count words instead")
    args = parser.parse_args(argv)
    if args.count:
        words = source_line_words(sys.stdin)
        print(dict(merge_counts([word_occurrence(words), word_occurrence(words)])))
        return 0
    printer(
        text_filter(source_lines(sys.stdin), args.search),
        args.color,
        args.search,
        sys.stdout,
    )
    return 0