from __future__ import annotations

import dataclasses
import enum
from typing import Dict, Optional


class ContentType(enum.Enum):
    PSBT = "psbt"
    TRANSACTION = "transaction"
    JSON = "json"
    CBOR = "cbor"
    UNICODE = "unicode"
    BINARY = "binary"
    EXECUTABLE = "executable"

    @property
    def code(self) -> str:
        return _TYPE_CODES[self]

    @classmethod
    def from_code(cls, code: str) -> "ContentType":
        try:
            return _TYPES_BY_CODE[code]
        except KeyError:
            raise ValueError(f"unknown content type code {code!r}") from None

    @property
    def is_text(self) -> bool:
        return self in (ContentType.JSON, ContentType.UNICODE)


class TransferEncoding(enum.Enum):
    PLAIN = "plain"
    COMPRESSED = "compressed"
    HEX = "hex"

    @property
    def code(self) -> str:
        return _ENCODING_CODES[self]

    @classmethod
    def from_code(cls, code: str) -> "TransferEncoding":
        try:
            return _ENCODINGS_BY_CODE[code]
        except KeyError:
            raise ValueError(f"unknown transfer encoding code {code!r}") from None


_TYPE_CODES: Dict[ContentType, str] = {
    ContentType.PSBT: "P",
    ContentType.TRANSACTION: "T",
    ContentType.JSON: "J",
    ContentType.CBOR: "C",
    ContentType.UNICODE: "U",
    ContentType.BINARY: "B",
    ContentType.EXECUTABLE: "X",
}
_TYPES_BY_CODE: Dict[str, ContentType] = {v: k for k, v in _TYPE_CODES.items()}

_ENCODING_CODES: Dict[TransferEncoding, str] = {
    TransferEncoding.PLAIN: "2",
    TransferEncoding.COMPRESSED: "Z",
    TransferEncoding.HEX: "H",
}
_ENCODINGS_BY_CODE: Dict[str, TransferEncoding] = {v: k for k, v in _ENCODING_CODES.items()}


class FailureReason(enum.Enum):
    BAD_ENCODING = "bad_encoding"
    BAD_COMPRESSION = "bad_compression"
    EMPTY_PAYLOAD = "empty_payload"


class DecoderState(enum.Enum):
    EMPTY = "empty"
    COLLECTING = "collecting"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True)
class Outcome:
    success: bool
    data: Optional[bytes] = None
    content_type: Optional[ContentType] = None
    reason: Optional[FailureReason] = None
    message: str = ""

    @classmethod
    def ok(cls, data: bytes, content_type: ContentType) -> "Outcome":
        return cls(success=True, data=data, content_type=content_type)

    @classmethod
    def failed(cls, reason: FailureReason, message: str = "") -> "Outcome":
        return cls(success=False, reason=reason, message=message)

    @property
    def text(self) -> Optional[str]:
        """UTF-8 view of the payload for JSON and Unicode transfers."""
        if not self.success or self.content_type is None or not self.content_type.is_text:
            return None
        return self.data.decode("utf-8", errors="replace")


def estimate_total_parts(body_length: int, fragment_length: int) -> int:
    return max(1, (body_length + fragment_length - 1) // fragment_length)
