from __future__ import annotations

import argparse
import time
from pathlib import Path
from typing import Iterable, List

from .decoder import Decoder
from .models import Outcome


def feed_lines(decoder: Decoder, lines: Iterable[str]) -> int:
    """Feed text lines to the decoder until it completes; return how many were accepted."""
    accepted = 0
    for line in lines:
        if decoder.is_complete():
            break
        line = line.strip()
        if line and decoder.receive_part(line):
            accepted += 1
    return accepted


def process_stream(source: str, camera: bool = False, decoder: Decoder | None = None) -> Decoder:
    import cv2

    cap = cv2.VideoCapture(0 if camera else source)
    if not cap.isOpened():
        raise RuntimeError(f"Unable to open {'camera' if camera else source}")
    detector = cv2.QRCodeDetector()
    decoder = decoder or Decoder()
    last_report = time.time()

    try:
        while not decoder.is_complete():
            ret, frame = cap.read()
            if not ret:
                break
            if frame.ndim == 3:
                frame = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
            retval, decoded_info, _, _ = detector.detectAndDecodeMulti(frame)
            if retval:
                for data in decoded_info:
                    if data:
                        decoder.receive_part(data)
            now = time.time()
            if now - last_report > 1.0:
                print(f"[receive] {decoder.progress()}")
                last_report = now
    finally:
        cap.release()
    return decoder


def write_outcome(outcome: Outcome | None, output_path: str) -> str:
    if outcome is None:
        raise RuntimeError("Transfer incomplete; not every part was received.")
    if not outcome.success:
        raise RuntimeError(f"Transfer failed ({outcome.reason.value}): {outcome.message}")
    dest = Path(output_path)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(outcome.data)
    return str(dest)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BBQR receiver")
    parser.add_argument("--input", help="Video file path; omit to use camera", default=None)
    parser.add_argument("--from-text", help="Read fragment strings, one per line, from this file")
    parser.add_argument("--output", default="received.bin", help="Output file")
    return parser


def main(argv: List[str] | None = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.from_text:
        decoder = Decoder()
        with open(args.from_text, "r", encoding="utf-8") as fh:
            feed_lines(decoder, fh)
    else:
        camera = args.input is None
        decoder = process_stream(source=args.input or "0", camera=camera)

    print(f"[receive] {decoder.progress()}")
    final_path = write_outcome(decoder.result(), args.output)
    outcome = decoder.result()
    print(f"[receive] {outcome.content_type.name} payload restored to {final_path}")


if __name__ == "__main__":
    main()
