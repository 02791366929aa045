import io
import random
import re

from sysprog.color import Color, main, shuffle_colored

ESCAPE = re.compile(r"\x1b\[\d+m")


def test_start_and_end():
    buf = io.StringIO()
    Color.GREEN.start(buf)
    Color.GREEN.end(buf)
    assert buf.getvalue() == "\x1b[32m\x1b[0m"


def test_write_formats_arguments():
    buf = io.StringIO()
    Color.RED.write(buf, "the answer is %s\n", 42)
    assert buf.getvalue() == "\x1b[31mthe answer is 42\n\x1b[0m"


def test_write_without_arguments_keeps_percent():
    buf = io.StringIO()
    Color.BLUE.write(buf, "100%")
    assert ESCAPE.sub("", buf.getvalue()) == "100%"


def test_shuffle_is_permutation():
    words = ["banana", "pear", "apple", "something else"]
    buf = io.StringIO()
    order = shuffle_colored(buf, words, random.Random(1))
    assert sorted(order) == sorted(words)
    assert ESCAPE.sub("", buf.getvalue()) == " ".join(order) + "\n"


def test_shuffle_alternates_colours():
    buf = io.StringIO()
    order = shuffle_colored(buf, ["a", "b", "c"], random.Random(3))
    out = buf.getvalue()
    assert out.startswith(f"\x1b[31m{order[0]}\x1b[0m")
    assert f"\x1b[32m{order[1]}\x1b[0m" in out


def test_shuffle_is_seeded():
    words = list("abcdefgh")
    first = shuffle_colored(io.StringIO(), words, random.Random(7))
    second = shuffle_colored(io.StringIO(), words, random.Random(7))
    assert first == second
    assert words == list("abcdefgh")


def test_main_prints_every_colour(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.count("the answer is 42") == len(Color)