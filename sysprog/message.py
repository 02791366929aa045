"""A framed message format with length and checksum."""

from __future__ import annotations

SEQUENCE = b"\x2a\x00\x2a\x00"
ACK = 0x00
NACK = 0xFF
MAX_LENGTH = 65535


class MessageError(ValueError):
    """A message could not be encoded or decoded."""


def checksum(data: bytes) -> bytes:
    """Four-byte checksum: 5-byte groups as little-endian numbers, then the rest."""
    data = bytes(data)
    full = len(data) - len(data) % 5
    total = sum(int.from_bytes(data[i:i + 5], "little") for i in range(0, full, 5))
    total += sum(data[full:])
    return (total % (1 << 32)).to_bytes(4, "little")


def create_message(content: bytes) -> bytes:
    """Frame ``content`` with sequence markers, length and checksum."""
    content = bytes(content)
    if len(content) > MAX_LENGTH:
        raise MessageError("message too long")
    return b"".join(
        (
            SEQUENCE,
            len(content).to_bytes(2, "big"),
            checksum(content),
            content,
            SEQUENCE,
        )
    )


def message_content(data: bytes) -> bytes:
    """Verify a framed message and return its content."""
    data = bytes(data)
    n = len(data)
    if n < 14:
        raise MessageError("Too short")
    if data[:4] != SEQUENCE:
        raise MessageError(f"Wrong opening sequence {data[:4].hex()}")
    length = int.from_bytes(data[4:6], "big")
    if length != n - 14:
        raise MessageError(f"Wrong length: {length} (expected {n - 14})")
    if data[n - 4:] != SEQUENCE:
        raise MessageError(f"Wrong closing sequence {data[n - 4:].hex()}")
    content = data[10:n - 4]
    if checksum(content) != data[6:10]:
        raise MessageError("Wrong checksum")
    return content