"""Named terminal commands kept in an alphabetical registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence, TextIO

Action = Callable[[TextIO, TextIO, Sequence[str]], bool]


class DuplicateCommandError(ValueError):
    """Two commands were registered with the same name."""

    def __init__(self, name: str) -> None:
        super().__init__("Duplicate command")
        self.name = name


class Command(ABC):
    """A command of the shell; ``args[0]`` passed to ``run`` is its name."""

    name: str
    help: str

    def startup(self, stream: TextIO) -> None:
        """Prepare the command before the shell starts; by default flushes ``stream``."""
        stream.flush()

    def shutdown(self, stream: TextIO) -> None:
        """Clean up when the shell stops; by default flushes ``stream``."""
        stream.flush()

    @abstractmethod
    def run(self, stdin: TextIO, stdout: TextIO, args: Sequence[str]) -> bool:
        """Execute the command; return True to leave the shell."""


@dataclass
class FunctionCommand(Command):
    """A command that runs a function."""

    name: str
    help: str
    action: Action

    def run(self, stdin: TextIO, stdout: TextIO, args: Sequence[str]) -> bool:
        return self.action(stdin, stdout, args)

    def __str__(self) -> str:
        return self.name


def _quote(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings, counted in characters."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + (ca != cb))
            )
        previous = current
    return previous[-1]


class Registry:
    """Commands with unique names, kept in alphabetical order."""

    def __init__(self) -> None:
        self._commands: list[Command] = []

    def register(self, command: Command) -> None:
        for index, existing in enumerate(self._commands):
            if existing.name == command.name:
                raise DuplicateCommandError(command.name)
            if existing.name > command.name:
                self._commands.insert(index, command)
                return
        self._commands.append(command)

    def get(self, name: str) -> Command:
        """The command called ``name``, or one that suggests similar names."""
        return next(
            (c for c in self._commands if c.name == name),
            FunctionCommand(name="", help="", action=self._suggest),
        )

    def startup(self, stream: TextIO) -> None:
        for command in self._commands:
            try:
                command.startup(stream)
            except Exception as exc:
                stream.write(f"{command.name}: startup error: {exc}")

    def shutdown(self, stream: TextIO) -> None:
        for command in self._commands:
            try:
                command.shutdown(stream)
            except Exception as exc:
                stream.write(f"{command.name}: shutdown error: {exc}")

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands))

    def _suggest(self, stdin: TextIO, stdout: TextIO, args: Sequence[str]) -> bool:
        wanted = args[0]
        close = [c.name for c in self._commands if levenshtein(c.name, wanted) < 3]
        stdout.write(f"Command {_quote(wanted)} not found.")
        if close:
            stdout.write(" Maybe you meant: " + ", ".join(close))
        return False

    def _help(self, stdin: TextIO, stdout: TextIO, args: Sequence[str]) -> bool:
        stdout.write("Available commands:\n")
        for command in self._commands:
            stdout.write(f"  - {command.name:<15} {command.help}\n")
        return False


def _exit(stdin: TextIO, stdout: TextIO, args: Sequence[str]) -> bool:
    stdout.write("Goodbye! :)\n")
    return True


def default_registry() -> Registry:
    """A registry holding the ``help`` and ``exit`` commands."""
    registry = Registry()
    registry.register(
        FunctionCommand(name="help", help="Shows available commands", action=registry._help)
    )
    registry.register(
        FunctionCommand(name="exit", help="Exits the application", action=_exit)
    )
    return registry