"""The reading list served over XML-RPC, and a client that drives it."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import xmlrpc.client
from typing import Any
from xmlrpc.server import SimpleXMLRPCServer

from sysprog.reading import Book, Progress, ReadingError, ReadingList

logger = logging.getLogger(__name__)

FAULT_CODE = 1


def _from(cls: type, value: Any) -> Any:
    if isinstance(value, cls):
        return value
    names = {f.name for f in dataclasses.fields(cls)}
    data = {k.lower(): v for k, v in dict(value).items()}
    data.setdefault("isbn", "")
    return cls(**{k: v for k, v in data.items() if k in names})


class ReadingService:
    """Reading list operations that report failures as XML-RPC faults."""

    def __init__(self, reading_list: ReadingList | None = None) -> None:
        self.reading_list = reading_list if reading_list is not None else ReadingList()

    @staticmethod
    def _fault(exc: ReadingError) -> xmlrpc.client.Fault:
        return xmlrpc.client.Fault(FAULT_CODE, str(exc))

    def add_book(self, book: Book | dict) -> bool:
        try:
            self.reading_list.add_book(_from(Book, book))
        except ReadingError as exc:
            raise self._fault(exc) from exc
        return True

    def remove_book(self, isbn: str) -> bool:
        try:
            self.reading_list.remove_book(isbn)
        except ReadingError as exc:
            raise self._fault(exc) from exc
        return True

    def get_progress(self, isbn: str) -> int:
        try:
            return self.reading_list.get_progress(isbn)
        except ReadingError as exc:
            raise self._fault(exc) from exc

    def set_progress(self, progress: Progress | dict) -> bool:
        p = _from(Progress, progress)
        try:
            self.reading_list.set_progress(p.isbn, p.pages)
        except ReadingError as exc:
            raise self._fault(exc) from exc
        return True

    def advance_progress(self, progress: Progress | dict) -> bool:
        p = _from(Progress, progress)
        try:
            self.reading_list.advance_progress(p.isbn, p.pages)
        except ReadingError as exc:
            raise self._fault(exc) from exc
        return True


def make_server(host: str, port: int) -> SimpleXMLRPCServer:
    """An XML-RPC server exposing a fresh ReadingService as ``server.service``."""
    server = SimpleXMLRPCServer((host, port), logRequests=False, allow_none=True)
    service = ReadingService()
    server.register_function(service.add_book, "ReadingService.AddBook")
    server.register_function(service.remove_book, "ReadingService.RemoveBook")
    server.register_function(service.get_progress, "ReadingService.GetProgress")
    server.register_function(service.set_progress, "ReadingService.SetProgress")
    server.register_function(service.advance_progress, "ReadingService.AdvanceProgress")
    server.service = service
    return server


def call(proxy: xmlrpc.client.ServerProxy, method: str, arg: Any) -> Any:
    """Call ``method`` with ``arg``; return the result, or the fault raised."""
    payload = dataclasses.asdict(arg) if dataclasses.is_dataclass(arg) else arg
    try:
        result: Any = getattr(proxy, method)(payload)
    except xmlrpc.client.Fault as exc:
        result = exc
    logger.info("%s: [%s] -> %s", method, arg, result)
    return result


def _run_client(url: str) -> None:
    hp = "H.P. Lovecraft"
    books = [
        Book(isbn="1540335534", author=hp, title="The Call of Cthulhu", pages=36),
        Book(isbn="1980722803", author=hp, title="The Dunwich Horror ", pages=53),
        Book(isbn="197620299X", author=hp, title="The Shadow Over Innsmouth", pages=40),
        Book(isbn="1540335534", author=hp, title="The Case of Charles Dexter Ward", pages=176),
    ]
    with xmlrpc.client.ServerProxy(url, allow_none=True) as proxy:
        call(proxy, "ReadingService.GetProgress", books[0].isbn)
        call(proxy, "ReadingService.AddBook", books[0])
        call(proxy, "ReadingService.AddBook", books[0])
        call(proxy, "ReadingService.GetProgress", books[0].isbn)
        call(proxy, "ReadingService.AddBook", books[1])
        call(proxy, "ReadingService.AddBook", books[2])
        call(proxy, "ReadingService.AddBook", books[3])
        call(proxy, "ReadingService.SetProgress", Progress(books[3].isbn, 10))
        call(proxy, "ReadingService.GetProgress", books[3].isbn)
        call(proxy, "ReadingService.AdvanceProgress", Progress(books[3].isbn, 40))
        call(proxy, "ReadingService.GetProgress", books[3].isbn)


def main(argv: list[str] | None = None) -> int:
    """Run the ``server`` or the ``client`` at ``host:port``."""
    parser = argparse.ArgumentParser(prog="rpc")
    parser.add_argument("mode", choices=["server", "client"])
    parser.add_argument("address", help="host:port")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    host, sep, port = args.address.rpartition(":")
    if not sep or not port.isdigit():
        print("Please specify an address.", file=sys.stderr)
        return 1
    try:
        if args.mode == "client":
            _run_client(f"http://{host or 'localhost'}:{port}/")
            return 0
        with make_server(host, int(port)) as server:
            logger.info("Server Started")
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                pass
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0