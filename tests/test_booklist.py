import io

from sysprog.booklist import GRR, BookEntry, default_books, main, write_book_list


def test_format_with_year():
    assert BookEntry(GRR, "A Game of Thrones", 1996).format() == (
        "A Game of Thrones - G.R.R. Martin (1996)"
    )


def test_format_without_year():
    assert BookEntry(GRR, "A Dream of Spring").format() == "A Dream of Spring - G.R.R. Martin"


def test_write_list_one_line_per_book():
    buf = io.StringIO()
    books = default_books()
    write_book_list(buf, books)
    lines = buf.getvalue().splitlines()
    assert lines == [b.format() for b in books]
    assert buf.getvalue().endswith("\n")


def test_only_known_years_printed():
    buf = io.StringIO()
    write_book_list(buf, default_books())
    lines = buf.getvalue().splitlines()
    assert sum("(" in line for line in lines) == sum(b.year > 0 for b in default_books())


def test_main_writes_file(tmp_path):
    path = tmp_path / "book_list.txt"
    assert main([str(path)]) == 0
    expected = io.StringIO()
    write_book_list(expected, default_books())
    assert path.read_text(encoding="utf-8") == expected.getvalue()


def test_main_stdout(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out.splitlines()[0] == default_books()[0].format()


def test_main_error(tmp_path, capsys):
    assert main([str(tmp_path / "missing" / "list.txt")]) == 1
    assert capsys.readouterr().out.startswith("Error:")