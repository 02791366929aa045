import io

import pytest

from sysprog.shell import (
    build_registry,
    print_action,
    read_command,
    run_shell,
    shuffle_action,
)


def test_shuffle_action_is_permutation():
    out = io.StringIO()
    words = ["banana", "pear", "apple", "kiwi"]
    assert shuffle_action(io.StringIO(), out, ["shuffle", *words]) is False
    text = out.getvalue()
    assert text.endswith("\n")
    assert sorted(text[:-1].split(" ")) == sorted(words)


def test_shuffle_action_without_words():
    out = io.StringIO()
    shuffle_action(io.StringIO(), out, ["shuffle"])
    assert out.getvalue() == "\n"


def test_print_action_requires_one_file():
    out = io.StringIO()
    assert print_action(io.StringIO(), out, ["print"]) is False
    assert out.getvalue() == "Please specify one file!\n"


def test_print_action_prints_file(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("line one\nline two", encoding="utf-8")
    out = io.StringIO()
    print_action(io.StringIO(), out, ["print", str(path)])
    assert out.getvalue() == "line one\nline two\n"


def test_print_action_missing_file(tmp_path):
    missing = str(tmp_path / "nope.txt")
    out = io.StringIO()
    assert print_action(io.StringIO(), out, ["print", missing]) is False
    assert out.getvalue().startswith(f"Cannot open {missing}: ")


def test_build_registry_names_sorted(tmp_path):
    registry = build_registry(tmp_path / "stack")
    assert [c.name for c in registry] == ["exit", "help", "print", "shuffle", "stack"]


def test_read_command_single_line():
    args = read_command(iter(["stack push a b\n"]))
    assert list(args) == ["stack", "push", "a", "b"]


def test_read_command_joins_quoted_lines():
    args = read_command(iter(['stack push "hello\n', 'world"\n']))
    assert list(args) == ["stack", "push", "hello\nworld"]


def test_read_command_eof():
    with pytest.raises(EOFError):
        read_command(iter([]))


def test_read_command_eof_inside_quote():
    with pytest.raises(EOFError):
        read_command(iter(['say "open\n']))


def test_run_shell_stack_and_exit(tmp_path):
    stack_file = tmp_path / "stack"
    stdin = io.StringIO("stack push a b\nstack pop\nexit\n")
    out = io.StringIO()
    run_shell(stdin, out, build_registry(stack_file))
    text = out.getvalue()
    assert text.startswith("** Welcome to PseudoTerm! **\nPlease enter a command.\n")
    assert "Got: `b`\n" in text
    assert text.endswith("Goodbye! :)\n\n")
    assert stack_file.read_text(encoding="utf-8") == "a\n"


def test_run_shell_loads_saved_stack(tmp_path):
    stack_file = tmp_path / "stack"
    stack_file.write_text("x\ny\n", encoding="utf-8")
    out = io.StringIO()
    run_shell(io.StringIO("stack pop\nexit\n"), out, build_registry(stack_file))
    assert "Got: `y`\n" in out.getvalue()
    assert stack_file.read_text(encoding="utf-8") == "x\n"


def test_run_shell_unknown_command_suggests(tmp_path):
    out = io.StringIO()
    run_shell(io.StringIO("hepl\n"), out, build_registry(tmp_path / "stack"))
    assert 'Command "hepl" not found. Maybe you meant: help' in out.getvalue()


def test_run_shell_prompt_shows_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    run_shell(io.StringIO(""), out, build_registry(tmp_path / "stack"))
    assert out.getvalue().endswith(f"\n[{tmp_path.name}] > ")


def test_run_shell_saves_on_end_of_input(tmp_path):
    stack_file = tmp_path / "stack"
    run_shell(io.StringIO("stack push one\n"), io.StringIO(), build_registry(stack_file))
    assert stack_file.read_text(encoding="utf-8") == "one\n"


def test_run_shell_help_lists_commands(tmp_path):
    out = io.StringIO()
    run_shell(io.StringIO("help\nexit\n"), out, build_registry(tmp_path / "stack"))
    text = out.getvalue()
    assert "Available commands:\n" in text
    assert "  - shuffle         Shuffles a list of strings\n" in text