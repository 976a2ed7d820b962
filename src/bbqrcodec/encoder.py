from __future__ import annotations

import logging
from typing import List

from . import config
from .chunker import EncodingError, prepare_body, split_body
from .frames import Header
from .models import ContentType, TransferEncoding, estimate_total_parts

logger = logging.getLogger(__name__)


class FragmentBudgetExceeded(EncodingError):
    pass


class Encoder:
    """
    Split one payload into BBQR fragments.

    Fragments are built once at construction; next_part() walks them with a
    cursor that wraps back to index 0 after the last part, matching a display
    loop that cycles the codes until the scanner has them all.
    """

    def __init__(
        self,
        payload: bytes,
        content_type: ContentType,
        encoding: TransferEncoding = TransferEncoding.COMPRESSED,
        max_fragment_length: int = config.DEFAULT_FRAGMENT_LENGTH,
        first_index: int = 0,
        fallback_to_plain: bool = False,
    ) -> None:
        if max_fragment_length < 1:
            raise ValueError("max_fragment_length must be >= 1")
        self.content_type = content_type
        self.encoding, body = self._prepare(bytes(payload), encoding, fallback_to_plain)
        total = estimate_total_parts(len(body), max_fragment_length)
        if total > config.MAX_PARTS:
            raise FragmentBudgetExceeded(
                f"payload needs {total} parts at {max_fragment_length} chars each; "
                f"at most {config.MAX_PARTS} fit in the header"
            )
        self._parts = [
            Header(self.encoding, content_type, total, idx).encode() + chunk
            for idx, chunk in enumerate(split_body(body, max_fragment_length))
        ]
        if not 0 <= first_index < len(self._parts):
            raise ValueError(f"first_index {first_index} outside 0..{len(self._parts) - 1}")
        self._index = first_index
        logger.debug(
            "encoded %d bytes as %s/%s in %d parts",
            len(payload),
            self.encoding.name,
            content_type.name,
            len(self._parts),
        )

    @staticmethod
    def _prepare(payload: bytes, encoding: TransferEncoding, fallback: bool):
        if encoding is not TransferEncoding.COMPRESSED or not fallback:
            return encoding, prepare_body(payload, encoding)
        plain = prepare_body(payload, TransferEncoding.PLAIN)
        try:
            compressed = prepare_body(payload, TransferEncoding.COMPRESSED)
        except EncodingError as exc:
            logger.debug("compression failed, sending plain: %s", exc)
            return TransferEncoding.PLAIN, plain
        if len(compressed) > len(plain):
            return TransferEncoding.PLAIN, plain
        return TransferEncoding.COMPRESSED, compressed

    def part_count(self) -> int:
        return len(self._parts)

    def is_single_part(self) -> bool:
        return len(self._parts) == 1

    @property
    def cursor(self) -> int:
        return self._index

    def next_part(self) -> str:
        part = self._parts[self._index]
        self._index = (self._index + 1) % len(self._parts)
        return part

    def all_parts(self) -> List[str]:
        return list(self._parts)


def encode(
    payload: bytes,
    content_type: ContentType,
    encoding: TransferEncoding = TransferEncoding.COMPRESSED,
    max_fragment_length: int = config.DEFAULT_FRAGMENT_LENGTH,
) -> Encoder:
    return Encoder(payload, content_type, encoding, max_fragment_length)
