import io

import pytest

from sysprog.commands import (
    Command,
    DuplicateCommandError,
    FunctionCommand,
    Registry,
    default_registry,
    levenshtein,
)


def _noop(stdin, stdout, args):
    return False


class _Failing(Command):
    name = "bad"
    help = "always fails"

    def startup(self, stream):
        raise OSError("boom")

    def shutdown(self, stream):
        raise OSError("bang")

    def run(self, stdin, stdout, args):
        return False


def test_levenshtein_known_example():
    assert levenshtein("kitten", "sitting") == 3


def test_levenshtein_invariants():
    assert levenshtein("", "abc") == len("abc")
    assert levenshtein("same", "same") == 0
    assert levenshtein("help", "hepl") == levenshtein("hepl", "help")


def test_default_registry_is_sorted():
    assert [c.name for c in default_registry()] == ["exit", "help"]


def test_register_keeps_alphabetical_order():
    registry = default_registry()
    for name in ("shuffle", "print", "stack", "a"):
        registry.register(FunctionCommand(name=name, help="", action=_noop))
    names = [c.name for c in registry]
    assert names == sorted(names)
    assert len(names) == 6


def test_register_duplicate_raises():
    registry = default_registry()
    with pytest.raises(DuplicateCommandError):
        registry.register(FunctionCommand(name="help", help="", action=_noop))


def test_exit_command_leaves():
    out = io.StringIO()
    assert default_registry().get("exit").run(io.StringIO(), out, ["exit"]) is True
    assert out.getvalue() == "Goodbye! :)\n"


def test_help_lists_commands():
    out = io.StringIO()
    registry = default_registry()
    assert registry.get("help").run(io.StringIO(), out, ["help"]) is False
    lines = out.getvalue().splitlines()
    assert lines[0] == "Available commands:"
    assert len(lines) == 3
    assert lines[1].startswith("  - exit")
    assert lines[1].endswith("Exits the application")
    assert lines[2].endswith("Shows available commands")


def test_unknown_command_suggests():
    out = io.StringIO()
    command = default_registry().get("hepl")
    assert command.run(io.StringIO(), out, ["hepl"]) is False
    assert out.getvalue() == 'Command "hepl" not found. Maybe you meant: help'


def test_unknown_command_without_suggestion():
    out = io.StringIO()
    default_registry().get("zzzzzzz").run(io.StringIO(), out, ["zzzzzzz"])
    assert out.getvalue() == 'Command "zzzzzzz" not found.'


def test_function_command_passes_args():
    seen = []

    def action(stdin, stdout, args):
        seen.extend(args)
        return True

    command = FunctionCommand(name="echo", help="", action=action)
    assert command.run(io.StringIO(), io.StringIO(), ["echo", "x"]) is True
    assert seen == ["echo", "x"]
    assert str(command) == "echo"


def test_startup_and_shutdown_report_errors():
    registry = Registry()
    registry.register(_Failing())
    out = io.StringIO()
    registry.startup(out)
    assert out.getvalue() == "bad: startup error: boom"
    out = io.StringIO()
    registry.shutdown(out)
    assert out.getvalue() == "bad: shutdown error: bang"