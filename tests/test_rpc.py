import threading
import xmlrpc.client

import pytest

from sysprog.reading import Book, Progress
from sysprog.rpc import ReadingService, call, make_server

HP = "H.P. Lovecraft"
WARD = Book(isbn="1540335534", author=HP, title="The Case of Charles Dexter Ward", pages=176)


def test_add_and_get_progress():
    service = ReadingService()
    assert service.add_book(WARD) is True
    assert service.get_progress(WARD.isbn) == 0


def test_duplicate_book_is_fault():
    service = ReadingService()
    service.add_book(WARD)
    with pytest.raises(xmlrpc.client.Fault) as info:
        service.add_book({"isbn": WARD.isbn, "title": "x"})
    assert info.value.faultString == "duplicate book"


def test_missing_isbn_and_book():
    service = ReadingService()
    with pytest.raises(xmlrpc.client.Fault) as info:
        service.get_progress("")
    assert info.value.faultString == "missing ISBN"
    with pytest.raises(xmlrpc.client.Fault) as info:
        service.remove_book("nothing")
    assert info.value.faultString == "missing book"


def test_progress_is_capped():
    service = ReadingService()
    service.add_book(WARD)
    assert service.set_progress(Progress(WARD.isbn, 10)) is True
    assert service.get_progress(WARD.isbn) == 10
    service.advance_progress({"isbn": WARD.isbn, "pages": 40})
    assert service.get_progress(WARD.isbn) == 50
    service.advance_progress(Progress(WARD.isbn, 1000))
    assert service.get_progress(WARD.isbn) == WARD.pages


def test_remove_book():
    service = ReadingService()
    service.add_book(WARD)
    assert service.remove_book(WARD.isbn) is True
    assert service.reading_list.books == []


@pytest.fixture
def proxy():
    server = make_server("127.0.0.1", 0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address
    client = xmlrpc.client.ServerProxy(f"http://{host}:{port}/", allow_none=True)
    yield client
    client("close")()
    server.shutdown()
    server.server_close()


def test_live_calls(proxy):
    assert call(proxy, "ReadingService.AddBook", WARD) is True
    again = call(proxy, "ReadingService.AddBook", WARD)
    assert isinstance(again, xmlrpc.client.Fault)
    assert again.faultString == "duplicate book"
    assert call(proxy, "ReadingService.SetProgress", Progress(WARD.isbn, 10)) is True
    assert call(proxy, "ReadingService.AdvanceProgress", Progress(WARD.isbn, 40)) is True
    assert call(proxy, "ReadingService.GetProgress", WARD.isbn) == 50


def test_live_missing_book(proxy):
    result = call(proxy, "ReadingService.GetProgress", "1980722803")
    assert isinstance(result, xmlrpc.client.Fault)
    assert result.faultString == "missing book"