import pytest

from bbqrcodec.chunker import (
    CompressionError,
    EmptyPayloadError,
    EncodingError,
    b32decode,
    b32encode,
    deflate,
    inflate,
    prepare_body,
    read_input,
    restore_payload,
    split_body,
)
from bbqrcodec.models import TransferEncoding


def test_b32_unpadded():
    assert b32encode(b"f") == "MY"
    assert b32encode(b"foobar") == "MZXW6YTBOI"
    assert b32encode(b"") == ""


def test_b32decode_lenient_case_and_padding():
    assert b32decode("mzxw6ytboi") == b"foobar"
    assert b32decode("MZXW6YTBOI======") == b"foobar"
    assert b32decode("") == b""


@pytest.mark.parametrize("text", ["A", "MZXW1", "MZ XW", "MZ!W", "MZéW", "MZßW"])
def test_b32decode_rejects(text):
    with pytest.raises(EncodingError):
        b32decode(text)


def test_deflate_is_raw_stream():
    packed = deflate(b"hello hello hello hello")
    # no zlib header (0x78 ..)
    assert packed[:1] != b"\x78"
    assert inflate(packed) == b"hello hello hello hello"


def test_inflate_errors():
    with pytest.raises(CompressionError):
        inflate(b"\xff\xff\xff\xff")
    with pytest.raises(CompressionError):
        inflate(deflate(b"hello world " * 20)[:3])


def test_prepare_and_restore():
    assert prepare_body(b"\x01\xab", TransferEncoding.HEX) == "01AB"
    assert prepare_body(b"foobar", TransferEncoding.PLAIN) == "MZXW6YTBOI"
    body = prepare_body(b"x" * 200, TransferEncoding.COMPRESSED)
    assert len(body) < len(prepare_body(b"x" * 200, TransferEncoding.PLAIN))
    assert restore_payload(body, TransferEncoding.COMPRESSED) == b"x" * 200
    assert restore_payload("01ab", TransferEncoding.HEX) == b"\x01\xab"


def test_restore_failures():
    with pytest.raises(EmptyPayloadError):
        restore_payload("", TransferEncoding.COMPRESSED)
    with pytest.raises(EncodingError):
        restore_payload("0G", TransferEncoding.HEX)
    assert restore_payload("", TransferEncoding.PLAIN) == b""


def test_split_body():
    assert split_body("", 5) == [""]
    assert split_body("ABCDEFG", 3) == ["ABC", "DEF", "G"]
    assert split_body("ABCDEF", 3) == ["ABC", "DEF"]
    with pytest.raises(ValueError):
        split_body("ABC", 0)


def test_read_input(tmp_path):
    path = tmp_path / "payload.bin"
    path.write_bytes(b"\x00\x01payload")
    assert read_input(str(path)) == b"\x00\x01payload"
