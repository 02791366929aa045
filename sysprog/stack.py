"""A stack command whose contents persist between sessions."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence, TextIO

from sysprog.commands import Command

_USAGE = "Use `stack push <something>` or `stack pop`\n"


class Stack(Command):
    """Push and pop strings; saved to a file on shutdown."""

    name = "stack"
    help = "a stack-like memory storage"

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.data: list[str] = []
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else Path.home() / ".stack"

    def push(self, *args: str) -> None:
        self.data.extend(args)

    def pop(self) -> str:
        """Remove and return the top value; IndexError when empty."""
        return self.data.pop()

    @staticmethod
    def _is_valid(action: str, rest: Sequence[str]) -> bool:
        if action == "pop":
            return not rest
        if action == "push":
            return bool(rest)
        return False

    def run(self, stdin: TextIO, stdout: TextIO, args: Sequence[str]) -> bool:
        if len(args) < 2 or not self._is_valid(args[1], args[2:]):
            stdout.write(_USAGE)
            return False
        if args[1] == "push":
            self.push(*args[2:])
            return False
        try:
            value = self.pop()
        except IndexError:
            stdout.write("Empty!\n")
        else:
            stdout.write(f"Got: `{value}`\n")
        return False

    def startup(self, stream: TextIO) -> None:
        """Load the saved values, one per line; a missing file is fine."""
        try:
            handle = self.path.open("rb")
        except FileNotFoundError:
            return
        with handle:
            self.data.clear()
            for raw in handle:
                if raw.endswith(b"\n"):
                    raw = raw[:-1]
                if raw.endswith(b"\r"):
                    raw = raw[:-1]
                self.data.append(raw.decode("utf-8", "surrogateescape"))

    def shutdown(self, stream: TextIO) -> None:
        """Save the values, one per line, replacing the file."""
        fd = os.open(self.path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o644)
        with open(fd, "wb") as handle:
            for value in self.data:
                handle.write(value.encode("utf-8", "surrogateescape") + b"\n")