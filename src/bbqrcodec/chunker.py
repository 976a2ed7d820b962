from __future__ import annotations

import base64
import sys
import zlib
from pathlib import Path
from typing import Iterator, List

from . import config
from .frames import BBQRError
from .models import TransferEncoding

READ_BUF = 1024 * 256


class EncodingError(BBQRError):
    pass


class CompressionError(EncodingError):
    pass


class EmptyPayloadError(EncodingError):
    pass


def b32encode(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").rstrip("=")


def b32decode(text: str) -> bytes:
    if not text.isascii():
        raise EncodingError("base32 decode failed: non-ASCII character in body")
    text = text.strip().rstrip("=").upper()
    pad = -len(text) % 8
    try:
        return base64.b32decode(text + "=" * pad)
    except ValueError as exc:
        raise EncodingError(f"base32 decode failed: {exc}") from exc


def deflate(data: bytes) -> bytes:
    try:
        comp = zlib.compressobj(config.ZLIB_LEVEL, zlib.DEFLATED, config.ZLIB_WBITS)
        return comp.compress(data) + comp.flush()
    except zlib.error as exc:
        raise CompressionError(f"deflate failed: {exc}") from exc


def inflate(data: bytes) -> bytes:
    decomp = zlib.decompressobj(config.INFLATE_WBITS)
    try:
        out = decomp.decompress(data) + decomp.flush()
    except zlib.error as exc:
        raise CompressionError(f"inflate failed: {exc}") from exc
    if not decomp.eof:
        raise CompressionError("inflate failed: truncated deflate stream")
    return out


def prepare_body(payload: bytes, encoding: TransferEncoding) -> str:
    """Turn payload bytes into the text that gets split across fragments."""
    if encoding is TransferEncoding.HEX:
        return payload.hex().upper()
    if encoding is TransferEncoding.COMPRESSED:
        payload = deflate(payload)
    return b32encode(payload)


def restore_payload(body: str, encoding: TransferEncoding) -> bytes:
    """Inverse of prepare_body. Raises an EncodingError subclass."""
    if encoding is TransferEncoding.HEX:
        try:
            return bytes.fromhex(body)
        except ValueError as exc:
            raise EncodingError(f"hex decode failed: {exc}") from exc
    raw = b32decode(body)
    if encoding is TransferEncoding.COMPRESSED:
        if not raw:
            raise EmptyPayloadError("compressed transfer carried no data")
        return inflate(raw)
    return raw


def split_body(body: str, fragment_length: int) -> List[str]:
    if fragment_length < 1:
        raise ValueError("fragment length must be >= 1")
    if not body:
        return [""]
    return [body[i : i + fragment_length] for i in range(0, len(body), fragment_length)]


def iter_chunks(stream, chunk_size: int = READ_BUF) -> Iterator[bytes]:
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield chunk


def read_input(input_path: str) -> bytes:
    """Read a whole payload from a file path, or stdin when given "-"."""
    if input_path == "-":
        return b"".join(iter_chunks(sys.stdin.buffer))
    with open(Path(input_path), "rb") as f:
        return b"".join(iter_chunks(f))
