"""File utilities: reverse a file, count lines, walk a tree, search text."""

from __future__ import annotations

import argparse
import os
import stat
import sys
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Iterator

CHUNK = 16
_RED = b"\x1b[31m"
_DEFAULT = b"\x1b[39m"


def reverse_chunk(chunk: bytes) -> bytes:
    """Reverse bytes, keeping ``\\r\\n`` pairs in their original order."""
    b = bytearray(chunk)
    last = len(b) - 1
    i, j = 0, last
    while i < j:
        if b[i] == 0x0D and b[i + 1] == 0x0A:
            b[i], b[i + 1] = b[i + 1], b[i]
        elif j != last and b[j - 1] == 0x0D and b[j] == 0x0A:
            b[j], b[j - 1] = b[j - 1], b[j]
        b[i], b[j] = b[j], b[i]
        i += 1
        j -= 1
    return bytes(b)


def reverse_file(src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> None:
    """Write ``src`` to ``dst`` back to front, reading it in small chunks."""
    fd = os.open(dst, os.O_WRONLY | os.O_CREAT, 0o644)
    with open(src, "rb") as source, open(fd, "wb") as target:
        cursor = source.seek(0, os.SEEK_END)
        while cursor:
            step = min(CHUNK, cursor)
            cursor -= step
            source.seek(cursor)
            chunk = source.read(step)
            if len(chunk) != step:
                raise OSError(f"read: expected {step} bytes, got {len(chunk)}")
            target.write(reverse_chunk(chunk))


def count_lines(stream: Iterable[bytes | str]) -> int:
    """Number of lines in ``stream``, counting a final unterminated one."""
    return sum(1 for _ in stream)


def _walk(path: str) -> Iterator[tuple[str, bool]]:
    is_dir = stat.S_ISDIR(os.lstat(path).st_mode)
    yield path, is_dir
    if is_dir:
        for name in sorted(os.listdir(path)):
            yield from _walk(os.path.join(path, name))


def walk_count(root: str | os.PathLike[str]) -> tuple[int, int, list[str]]:
    """Walk ``root`` in lexical order; return files, directories and all paths."""
    files = dirs = 0
    paths: list[str] = []
    for path, is_dir in _walk(os.fspath(root)):
        if is_dir:
            dirs += 1
        else:
            files += 1
        paths.append(path)
    return files, dirs, paths


@dataclass
class QueryWriter:
    """Writes the lines of the data it gets that contain the query, highlighted."""

    query: bytes | str
    stream: BinaryIO

    def __post_init__(self) -> None:
        if isinstance(self.query, str):
            self.query = self.query.encode("utf-8")

    def write(self, data: bytes) -> int:
        query = self.query
        for line in bytes(data).split(b"\n"):
            index = line.find(query)
            if index == -1:
                continue
            end = index + len(query)
            self.stream.write(line[:index] + _RED + line[index:end] + _DEFAULT + line[end:])
            self.stream.write(b"\n")
        return len(data)


def search_tree(
    root: str | os.PathLike[str], query: bytes | str, stream: BinaryIO
) -> None:
    """Write every file path under ``root`` followed by its matching lines."""
    writer = QueryWriter(query, stream)
    for path, is_dir in _walk(os.fspath(root)):
        if is_dir:
            continue
        stream.write(os.fsencode(path) + b"\n")
        with open(path, "rb") as handle:
            writer.write(handle.read())


def main(argv: list[str] | None = None) -> int:
    """Run one of the ``reverse``, ``lines``, ``walk`` or ``search`` tools."""
    parser = argparse.ArgumentParser(prog="files")
    sub = parser.add_subparsers(dest="tool", required=True)
    rev = sub.add_parser("reverse")
    rev.add_argument("src")
    rev.add_argument("dst")
    lines = sub.add_parser("lines")
    lines.add_argument("path")
    walk = sub.add_parser("walk")
    walk.add_argument("path")
    search = sub.add_parser("search")
    search.add_argument("path")
    search.add_argument("query", nargs="+")
    args = parser.parse_args(argv)
    out = sys.stdout
    try:
        if args.tool == "reverse":
            reverse_file(args.src, args.dst)
        elif args.tool == "lines":
            with open(args.path, "rb") as handle:
                data = handle.read()
            out.buffer.write(data)
            count = count_lines(data.splitlines(keepends=True))
            out.write(f"\nRow count: {count}\n")
        elif args.tool == "walk":
            root = os.path.abspath(args.path)
            out.write(f"Listing files in {root}\n")
            files, dirs, paths = walk_count(root)
            for path in paths:
                out.write(f"- {path}\n")
            out.write(f"Total: {files} files in {dirs} directories\n")
        else:
            root = os.path.abspath(args.path)
            query = " ".join(args.query)
            out.write(f"Searching for {query!r} in {root}...\n")
            out.flush()
            search_tree(root, query, out.buffer)
    except OSError as exc:
        out.write(f"Error: {exc}\n")
        return 1
    return 0