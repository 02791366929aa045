"""An interactive pseudo-terminal built on the command registry."""

from __future__ import annotations

import os
import random
import sys
from pathlib import Path
from typing import Iterator, Sequence, TextIO

from sysprog.argscan import ArgsScanner
from sysprog.commands import FunctionCommand, Registry, default_registry
from sysprog.stack import Stack

WELCOME = "** Welcome to PseudoTerm! **\nPlease enter a command.\n"


def shuffle_action(stdin: TextIO, stdout: TextIO, args: Sequence[str]) -> bool:
    """Write the arguments after the command name in random order."""
    words = list(args[1:])
    random.shuffle(words)
    stdout.write(" ".join(words) + "\n")
    return False


def print_action(stdin: TextIO, stdout: TextIO, args: Sequence[str]) -> bool:
    """Copy the one file named in the arguments to the output."""
    if len(args) != 2:
        stdout.write("Please specify one file!\n")
        return False
    name = args[1]
    try:
        handle = open(name, encoding="utf-8", errors="replace")
    except OSError as exc:
        stdout.write(f"Cannot open {name}: {exc}\n")
        return False
    with handle:
        try:
            for chunk in iter(lambda: handle.read(32 * 1024), ""):
                stdout.write(chunk)
        except OSError as exc:
            stdout.write(f"Cannot print {name}: {exc}\n")
    stdout.write("\n")
    return False


def build_registry(stack_path: str | os.PathLike[str] | None = None) -> Registry:
    """The default commands plus ``shuffle``, ``print`` and ``stack``."""
    registry = default_registry()
    registry.register(
        FunctionCommand(
            name="shuffle", help="Shuffles a list of strings", action=shuffle_action
        )
    )
    registry.register(
        FunctionCommand(name="print", help="Prints a file", action=print_action)
    )
    registry.register(Stack(stack_path))
    return registry


def _strip_line(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def read_command(lines: Iterator[str]) -> ArgsScanner:
    """Read one command from ``lines``, joining lines inside an open quote.

    Raises EOFError when the input ends before a command is complete.
    """
    args = ArgsScanner()
    pending = ""
    while True:
        try:
            line = next(lines)
        except StopIteration:
            raise EOFError("end of input") from None
        extra = args.parse(pending + _strip_line(line))
        if not extra:
            return args
        pending = extra


def _prompt_dir() -> str:
    cwd = os.getcwd()
    return Path(cwd).name or cwd


def run_shell(stdin: TextIO, stdout: TextIO, registry: Registry) -> None:
    """Read and run commands until one asks to exit or input ends."""
    registry.startup(stdout)
    try:
        stdout.write(WELCOME)
        lines = iter(stdin)
        while True:
            stdout.write(f"\n[{_prompt_dir()}] > ")
            stdout.flush()
            try:
                args = read_command(lines)
            except EOFError:
                return
            if not args:
                continue
            if registry.get(args[0]).run(stdin, stdout, list(args)):
                stdout.write("\n")
                return
    finally:
        registry.shutdown(stdout)


def main(argv: list[str] | None = None) -> int:
    """Start the shell on standard input and output."""
    run_shell(sys.stdin, sys.stdout, build_registry())
    return 0