"""BBQR fragment codec: split payloads into QR-sized text parts and join them back."""

from .chunker import CompressionError, EmptyPayloadError, EncodingError
from .decoder import Decoder
from .encoder import Encoder, FragmentBudgetExceeded, encode
from .frames import BBQRError, Header, HeaderError, is_fragment
from .models import ContentType, DecoderState, FailureReason, Outcome, TransferEncoding

__all__ = [
    "BBQRError",
    "CompressionError",
    "ContentType",
    "Decoder",
    "DecoderState",
    "EmptyPayloadError",
    "Encoder",
    "EncodingError",
    "FailureReason",
    "FragmentBudgetExceeded",
    "Header",
    "HeaderError",
    "Outcome",
    "TransferEncoding",
    "encode",
    "is_fragment",
]
