import pytest

from sysprog.message import (
    SEQUENCE,
    MessageError,
    checksum,
    create_message,
    message_content,
)


def test_checksum_empty():
    assert checksum(b"") == bytes(4)


def test_checksum_weights_five_byte_groups():
    assert checksum(b"\x01\x02\x03\x04\x05") == b"\x01\x02\x03\x04"


def test_checksum_length():
    assert len(checksum(b"any content at all")) == 4


def test_frame_layout():
    msg = create_message(b"hi")
    assert msg[:4] == SEQUENCE
    assert msg[4:6] == b"\x00\x02"
    assert msg[6:10] == checksum(b"hi")
    assert msg[10:12] == b"hi"
    assert msg[-4:] == SEQUENCE


@pytest.mark.parametrize("content", [b"", b"x", b"hello world", bytes(range(256)), bytes(65535)])
def test_round_trip(content):
    assert message_content(create_message(content)) == content


def test_too_long():
    with pytest.raises(MessageError, match="too long"):
        create_message(bytes(65536))


def test_too_short():
    with pytest.raises(MessageError, match="Too short"):
        message_content(b"\x2a\x00")


def test_wrong_opening():
    msg = bytearray(create_message(b"abc"))
    msg[0] = 0
    with pytest.raises(MessageError, match="Wrong opening sequence"):
        message_content(bytes(msg))


def test_wrong_closing():
    msg = bytearray(create_message(b"abc"))
    msg[-1] = 1
    with pytest.raises(MessageError, match="Wrong closing sequence"):
        message_content(bytes(msg))


def test_wrong_length():
    msg = SEQUENCE + b"\x00\x05" + checksum(b"hi") + b"hi" + SEQUENCE
    with pytest.raises(MessageError, match="Wrong length"):
        message_content(msg)


def test_wrong_checksum():
    msg = bytearray(create_message(b"abc"))
    msg[10] ^= 0xFF
    with pytest.raises(MessageError, match="Wrong checksum"):
        message_content(bytes(msg))