"""Line-based TCP and UDP servers, plain and with framed messages."""

from __future__ import annotations

import argparse
import logging
import socket
import socketserver
import sys
import threading
from enum import Enum
from typing import Any, Callable, Iterable

from sysprog.message import MessageError, create_message, message_content

logger = logging.getLogger(__name__)

CUSTOM_PACKET_SIZE = 256 * 256
UDP_PACKET_SIZE = 1024


class MessageKind(Enum):
    QUIT = "quit"
    SPECIAL = "special"
    TEXT = "text"


def _text(line: Any) -> str:
    if isinstance(line, (bytes, bytearray)):
        return bytes(line).decode("utf-8", "replace")
    return line


def classify_message(line: str | bytes) -> tuple[MessageKind, str]:
    """Trim a received line and tell whether it is ``\\q``, ``\\x`` or text."""
    text = _text(line).strip()
    if text == "\\q":
        return MessageKind.QUIT, text
    if text == "\\x":
        return MessageKind.SPECIAL, text
    return MessageKind.TEXT, text


def handle_lines(
    stream: Iterable[str | bytes], log: Callable[[str], Any] | None = None
) -> bool:
    """Log each line of ``stream``; return True if ``\\q`` ended it, False at EOF."""
    emit = log if log is not None else logger.info
    for line in stream:
        kind, text = classify_message(line)
        if kind is MessageKind.QUIT:
            emit("Exiting...")
            return True
        if kind is MessageKind.SPECIAL:
            emit("<- Special message `\\x` received!")
        else:
            emit(f"<- Message Received: {text}")
    emit("<- EOF")
    return False


def reverse_payload(data: bytes) -> bytes:
    return bytes(data)[::-1]


def custom_reply(data: bytes) -> bytes:
    """Decode a framed message and frame its content reversed."""
    return create_message(reverse_payload(message_content(data)))


def udp_reply(data: bytes) -> bytes:
    """Reverse the trimmed part of a datagram in place.

    The surrounding whitespace is kept, and the byte just after the trimmed
    text, when there is one, becomes a newline.
    """
    buf = bytearray(data)
    stripped = bytes(buf).lstrip()
    start = len(buf) - len(stripped)
    end = start + len(stripped.rstrip())
    buf[start:end] = buf[start:end][::-1]
    if end < len(buf):
        buf[end] = 0x0A
    return bytes(buf)


class LineTCPHandler(socketserver.StreamRequestHandler):
    """Logs the lines a client sends; ``\\q`` closes it and stops the server."""

    def handle(self) -> None:
        quit_requested = handle_lines(self.rfile)
        if quit_requested:
            event = getattr(self.server, "quit_event", None)
            if event is not None:
                event.set()


class CustomUDPHandler(socketserver.BaseRequestHandler):
    """Answers a framed message with its content reversed."""

    def handle(self) -> None:
        data, sock = self.request
        try:
            content = message_content(data)
            reply = create_message(reverse_payload(content))
        except MessageError as exc:
            logger.info("<- %s Decode error: %s", self.client_address, exc)
            return
        logger.info("<- %r from %s", content, self.client_address)
        try:
            sock.sendto(reply, self.client_address)
        except OSError as exc:
            logger.info("-> %s Send error: %s", self.client_address, exc)


class ReverseUDPHandler(socketserver.BaseRequestHandler):
    """Answers a datagram with its trimmed text reversed."""

    def handle(self) -> None:
        data, sock = self.request
        logger.info("<- %r from %s", data.strip(), self.client_address)
        try:
            sock.sendto(udp_reply(data), self.client_address)
        except OSError as exc:
            logger.info("-> %s Send error: %s", self.client_address, exc)


class _CustomUDPServer(socketserver.ThreadingUDPServer):
    max_packet_size = CUSTOM_PACKET_SIZE


class _ReverseUDPServer(socketserver.ThreadingUDPServer):
    max_packet_size = UDP_PACKET_SIZE


class _LineTCPServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, address: tuple[str, int]) -> None:
        super().__init__(address, LineTCPHandler)
        self.quit_event = threading.Event()


def _parse_address(text: str) -> tuple[str, int]:
    host, sep, port = text.rpartition(":")
    if not sep:
        raise ValueError(f"invalid address: {text}")
    return host, int(port)


def _run_custom_client(address: tuple[str, int]) -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.connect(address)
        logger.info("-> Connection to %s", address)
        sys.stdout.write("# ")
        sys.stdout.flush()
        for line in sys.stdin:
            sock.send(create_message(line.strip().encode("utf-8")))
            try:
                reply = message_content(sock.recv(UDP_PACKET_SIZE))
            except MessageError as exc:
                logger.info("<- Decode error: %s", exc)
            except OSError as exc:
                logger.info("<- Receive error: %s", exc)
            else:
                logger.info("<- %r", reply)
            sys.stdout.write("# ")
            sys.stdout.flush()


def main(argv: list[str] | None = None) -> int:
    """Run a ``tcp``, ``custom`` or ``udp`` server, or the ``custom-client``."""
    parser = argparse.ArgumentParser(prog="servers")
    parser.add_argument("mode", choices=["tcp", "custom", "custom-client", "udp"])
    parser.add_argument("address", help="host:port")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    try:
        address = _parse_address(args.address)
    except ValueError as exc:
        print("Invalid address:", args.address, exc, file=sys.stderr)
        return 1
    try:
        if args.mode == "custom-client":
            _run_custom_client(address)
        elif args.mode == "tcp":
            with _LineTCPServer(address) as server:
                thread = threading.Thread(target=server.serve_forever, daemon=True)
                thread.start()
                logger.info("start...")
                try:
                    server.quit_event.wait()
                except KeyboardInterrupt:
                    pass
                server.shutdown()
                logger.info("exit...")
        else:
            server_class = _CustomUDPServer if args.mode == "custom" else _ReverseUDPServer
            handler = CustomUDPHandler if args.mode == "custom" else ReverseUDPHandler
            with server_class(address, handler) as server:
                try:
                    server.serve_forever()
                except KeyboardInterrupt:
                    pass
    except OSError as exc:
        print("Listener:", args.address, exc, file=sys.stderr)
        return 1
    return 0