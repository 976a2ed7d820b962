from __future__ import annotations

import logging
from typing import List, Optional

from . import config
from .chunker import CompressionError, EmptyPayloadError, EncodingError, restore_payload
from .frames import Header, HeaderError, body_of
from .models import DecoderState, FailureReason, Outcome

logger = logging.getLogger(__name__)


class Decoder:
    """
    Collect BBQR fragments in any order and rebuild the payload.

    The first accepted fragment fixes encoding, type and part count for the
    session. Fragments from any other transfer, malformed strings and repeats
    are refused without touching the session. Calls are not synchronized;
    feed one decoder from one thread.
    """

    def __init__(self, max_parts: int = config.DEFAULT_MAX_PARTS) -> None:
        if not 1 <= max_parts <= config.MAX_PARTS:
            raise ValueError(f"max_parts must be within 1..{config.MAX_PARTS}")
        self.max_parts = max_parts
        self.reset()

    def reset(self) -> None:
        self.header: Optional[Header] = None
        self._bodies: List[Optional[str]] = []
        self._filled = 0
        self._outcome: Optional[Outcome] = None
        self.state = DecoderState.EMPTY

    def receive_part(self, fragment: str) -> bool:
        """Return True when the fragment was new and stored."""
        if self.state in (DecoderState.COMPLETE, DecoderState.FAILED):
            return False
        try:
            header = Header.parse(fragment)
        except HeaderError as exc:
            logger.debug("ignoring non-BBQR input: %s", exc)
            return False

        if header.part_index >= header.total_parts:
            logger.debug("part index %d out of range", header.part_index)
            return False
        if self.header is None:
            if header.total_parts > self.max_parts:
                logger.debug("refusing transfer of %d parts", header.total_parts)
                return False
            self._start(header)
        elif not header.same_transfer(self.header):
            logger.debug("ignoring fragment from another transfer")
            return False

        if self._bodies[header.part_index] is not None:
            return False

        self._bodies[header.part_index] = body_of(fragment)
        self._filled += 1
        if self._filled == self.header.total_parts:
            self._finish(self.header)
        return True

    def _start(self, header: Header) -> None:
        self.header = header
        self._bodies = [None] * header.total_parts
        self.state = DecoderState.COLLECTING

    def _finish(self, header: Header) -> None:
        body = "".join(self._bodies)
        try:
            data = restore_payload(body, header.encoding)
        except EmptyPayloadError as exc:
            self._fail(FailureReason.EMPTY_PAYLOAD, exc)
        except CompressionError as exc:
            self._fail(FailureReason.BAD_COMPRESSION, exc)
        except EncodingError as exc:
            self._fail(FailureReason.BAD_ENCODING, exc)
        else:
            self._outcome = Outcome.ok(data, header.content_type)
            self.state = DecoderState.COMPLETE
            logger.debug("transfer complete: %d bytes", len(data))

    def _fail(self, reason: FailureReason, exc: Exception) -> None:
        self._outcome = Outcome.failed(reason, str(exc))
        self.state = DecoderState.FAILED
        logger.debug("transfer failed (%s): %s", reason.value, exc)

    def processed_parts_count(self) -> int:
        return self._filled

    def expected_part_count(self) -> int:
        return self.header.total_parts if self.header else 0

    def percent_complete(self) -> float:
        total = self.expected_part_count()
        if not total:
            return 0.0
        return self._filled / total

    def is_complete(self) -> bool:
        return self._outcome is not None

    def result(self) -> Optional[Outcome]:
        return self._outcome

    def progress(self) -> str:
        if self.header is None:
            return "waiting for first part"
        return (
            f"{self._filled}/{self.header.total_parts} parts "
            f"({self.percent_complete() * 100:.1f}%)"
        )
