"""ANSI colour output helpers."""

from __future__ import annotations

import random
import sys
from enum import IntEnum
from typing import Any, Sequence, TextIO


class Color(IntEnum):
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37

    def start(self, stream: TextIO) -> None:
        stream.write(f"\x1b[{int(self)}m")

    def end(self, stream: TextIO) -> None:
        stream.write("\x1b[0m")

    def write(self, stream: TextIO, fmt: str, *args: Any) -> None:
        """Write ``fmt % args`` wrapped in this colour."""
        self.start(stream)
        stream.write(fmt % args if args else fmt)
        self.end(stream)


def shuffle_colored(
    stream: TextIO, words: Sequence[str], rng: random.Random | None = None
) -> list[str]:
    """Write the words shuffled, alternating red and green; return their order."""
    order = list(words)
    (rng or random.Random()).shuffle(order)
    for position, word in enumerate(order):
        if position:
            stream.write(" ")
        (Color.RED if position % 2 == 0 else Color.GREEN).write(stream, "%s", word)
    stream.write("\n")
    return order


def main(argv: list[str] | None = None) -> int:
    out = sys.stdout
    for color in Color:
        color.write(out, "the answer is %s\n", 42)
    shuffle_colored(out, ["banana", "pear", "apple", "something else"])
    return 0