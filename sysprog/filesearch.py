"""Search a tree for files by name or by content."""

from __future__ import annotations

import argparse
import os
import stat
import sys
from dataclasses import dataclass, field
from typing import Iterator, Protocol


class _Cancel(Protocol):
    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class Match:
    line: int
    text: str


@dataclass
class Result:
    file: str
    error: OSError | None = None
    matches: list[Match] = field(default_factory=list)


@dataclass
class Options:
    contents: bool = False
    exclude: list[str] = field(default_factory=list)


def _cancelled(cancel: _Cancel | None) -> bool:
    return cancel is not None and cancel.is_set()


def _line(raw: bytes) -> str:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw.decode("utf-8", "replace")


def _search(
    path: str, term: str, options: Options | None, cancel: _Cancel | None
) -> Iterator[Result]:
    if _cancelled(cancel):
        return
    name = os.path.basename(path)
    if options is not None and name in options.exclude:
        return
    try:
        info = os.stat(path)
    except OSError as exc:
        yield Result(path, error=exc)
        return
    if stat.S_ISDIR(info.st_mode):
        try:
            names = sorted(os.listdir(path))
        except OSError as exc:
            yield Result(path, error=exc)
            return
        for child in names:
            if _cancelled(cancel):
                return
            yield from _search(os.path.join(path, child), term, options, cancel)
        return
    if options is None or not options.contents:
        if name == term:
            yield Result(path)
        return
    try:
        handle = open(path, "rb")
    except OSError as exc:
        yield Result(path, error=exc)
        return
    matches: list[Match] = []
    with handle:
        try:
            for number, raw in enumerate(handle, start=1):
                if _cancelled(cancel):
                    return
                text = _line(raw)
                if term in text:
                    matches.append(Match(number, text))
        except OSError as exc:
            yield Result(path, error=exc)
            return
    if matches:
        yield Result(path, matches=matches)


def file_search(
    root: str | os.PathLike[str],
    term: str,
    options: Options | None = None,
    cancel: _Cancel | None = None,
) -> Iterator[Result]:
    """Yield files under ``root`` named ``term``, or holding it with ``contents``."""
    return _search(os.fspath(root), term, options, cancel)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="filesearch")
    parser.add_argument("-c", dest="contents", action="store_true", help="Search contents")
    parser.add_argument("-x", dest="exclude", default="", help="Exclude folders (use : as separator)")
    parser.add_argument("args", nargs="*")
    ns = parser.parse_args(argv)
    if len(ns.args) != 2:
        print(f"Usage `{os.path.basename(sys.argv[0])} <file> <search_term>`")
        return 2
    options = Options(
        contents=ns.contents, exclude=ns.exclude.split(":") if ns.exclude else []
    )
    try:
        for result in file_search(ns.args[0], ns.args[1], options):
            if result.error is not None:
                print(f"{result.file} - error: {result.error}")
            elif not options.contents:
                print(f"{result.file} - match")
            else:
                print(f"{result.file} - matches:")
                for match in result.matches:
                    print(f"\t{match.line}:{match.text}")
    except KeyboardInterrupt:
        print("* Context done *")
        return 0
    print("* Search done *")
    return 0