"""Writing a list of books, one line each."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Iterable, TextIO

GRR = "G.R.R. Martin"


@dataclass(frozen=True)
class BookEntry:
    author: str
    title: str
    year: int = 0

    def format(self) -> str:
        """``Title - Author`` with `` (Year)`` when the year is known."""
        text = f"{self.title} - {self.author}"
        if self.year > 0:
            text += f" ({self.year})"
        return text


def default_books() -> list[BookEntry]:
    return [
        BookEntry(GRR, "A Game of Thrones", 1996),
        BookEntry(GRR, "A Clash of Kings", 1998),
        BookEntry(GRR, "A Storm of Swords", 2000),
        BookEntry(GRR, "A Feast for Crows", 2005),
        BookEntry(GRR, "A Dance with Dragons", 2011),
        BookEntry(GRR, "The Winds of Winter"),
        BookEntry(GRR, "A Dream of Spring"),
    ]


def write_book_list(stream: TextIO, books: Iterable[BookEntry]) -> None:
    for book in books:
        stream.write(book.format() + "\n")


def main(argv: list[str] | None = None) -> int:
    """Write the default list to the given file, or to stdout."""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        write_book_list(sys.stdout, default_books())
        return 0
    try:
        fd = os.open(args[0], os.O_CREAT | os.O_WRONLY, 0o666)
    except OSError as exc:
        print("Error:", exc)
        return 1
    with open(fd, "w", encoding="utf-8") as dst:
        write_book_list(dst, default_books())
    return 0