"""A reading list that tracks books and pages read."""

from __future__ import annotations

from dataclasses import dataclass, field


class ReadingError(Exception):
    """Base class for reading list errors."""


class MissingISBNError(ReadingError):
    def __init__(self) -> None:
        super().__init__("missing ISBN")


class DuplicateBookError(ReadingError):
    def __init__(self) -> None:
        super().__init__("duplicate book")


class MissingBookError(ReadingError):
    def __init__(self) -> None:
        super().__init__("missing book")


@dataclass(frozen=True)
class Book:
    isbn: str
    title: str = ""
    author: str = ""
    year: int = 0
    pages: int = 0

    def __str__(self) -> str:
        text = f"{self.title} - {self.author}"
        if self.year:
            text += f" ({self.year})"
        if self.pages:
            text += f" {self.pages} pages"
        return text


@dataclass(frozen=True)
class Progress:
    isbn: str
    pages: int


@dataclass
class ReadingList:
    """Books with the number of pages read for each."""

    books: list[Book] = field(default_factory=list)
    progress: list[int] = field(default_factory=list)

    def _find(self, isbn: str) -> int | None:
        return next((i for i, b in enumerate(self.books) if b.isbn == isbn), None)

    def _require(self, isbn: str) -> int:
        if not isbn:
            raise MissingISBNError()
        index = self._find(isbn)
        if index is None:
            raise MissingBookError()
        return index

    def add_book(self, book: Book) -> None:
        if not book.isbn:
            raise MissingISBNError()
        if self._find(book.isbn) is not None:
            raise DuplicateBookError()
        self.books.append(book)
        self.progress.append(0)

    def remove_book(self, isbn: str) -> None:
        """Remove a book; the last book takes its place."""
        index = self._require(isbn)
        self.books[index] = self.books[-1]
        self.progress[index] = self.progress[-1]
        self.books.pop()
        self.progress.pop()

    def get_progress(self, isbn: str) -> int:
        return self.progress[self._require(isbn)]

    def set_progress(self, isbn: str, pages: int) -> None:
        """Set pages read, capped at the book's page count."""
        index = self._require(isbn)
        self.progress[index] = min(pages, self.books[index].pages)

    def advance_progress(self, isbn: str, pages: int) -> None:
        """Add pages read, capped at the book's page count."""
        index = self._require(isbn)
        left = self.books[index].pages - self.progress[index]
        self.progress[index] += min(pages, left)