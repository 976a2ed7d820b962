from __future__ import annotations

import string
from dataclasses import dataclass

from . import config
from .models import ContentType, TransferEncoding

_BASE36_DIGITS = string.digits + string.ascii_uppercase


class BBQRError(Exception):
    pass


class HeaderError(BBQRError):
    pass


def encode_base36(number: int, width: int = 2) -> str:
    if number < 0 or number >= 36**width:
        raise ValueError(f"{number} does not fit in {width} base36 digits")
    digits = []
    for _ in range(width):
        number, rem = divmod(number, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def decode_base36(value: str) -> int:
    digits = value.upper()
    if not digits or not value.isascii() or not all(c in _BASE36_DIGITS for c in digits):
        raise HeaderError(f"bad base36 field {value!r}")
    return int(digits, 36)


@dataclass(frozen=True)
class Header:
    encoding: TransferEncoding
    content_type: ContentType
    total_parts: int
    part_index: int

    def encode(self) -> str:
        return (
            config.MAGIC
            + self.encoding.code
            + self.content_type.code
            + encode_base36(self.total_parts)
            + encode_base36(self.part_index)
        )

    def same_transfer(self, other: "Header") -> bool:
        return (
            self.encoding == other.encoding
            and self.content_type == other.content_type
            and self.total_parts == other.total_parts
        )

    @classmethod
    def parse(cls, fragment: str) -> "Header":
        if not isinstance(fragment, str):
            raise HeaderError("fragment must be text")
        if len(fragment) < config.HEADER_LENGTH:
            raise HeaderError("fragment too short")
        if not fragment.startswith(config.MAGIC):
            raise HeaderError("bad magic")
        try:
            encoding = TransferEncoding.from_code(fragment[2])
            content_type = ContentType.from_code(fragment[3])
        except ValueError as exc:
            raise HeaderError(str(exc)) from exc
        total = decode_base36(fragment[4:6])
        index = decode_base36(fragment[6:8])
        if total < 1:
            raise HeaderError("total part count must be positive")
        return cls(
            encoding=encoding,
            content_type=content_type,
            total_parts=total,
            part_index=index,
        )


def body_of(fragment: str) -> str:
    return fragment[config.HEADER_LENGTH :]


def is_fragment(text: str) -> bool:
    try:
        Header.parse(text)
    except HeaderError:
        return False
    return True
