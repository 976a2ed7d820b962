from __future__ import annotations

import argparse
import itertools
import sys
from typing import Iterator, List

from . import config
from .chunker import read_input
from .encoder import Encoder, FragmentBudgetExceeded
from .models import ContentType, TransferEncoding


def _content_type(value: str) -> ContentType:
    try:
        return ContentType.from_code(value.upper()) if len(value) == 1 else ContentType(value.lower())
    except ValueError:
        raise argparse.ArgumentTypeError(f"unknown content type {value!r}") from None


def _transfer_encoding(value: str) -> TransferEncoding:
    try:
        return TransferEncoding.from_code(value.upper()) if len(value) == 1 else TransferEncoding(value.lower())
    except ValueError:
        raise argparse.ArgumentTypeError(f"unknown encoding {value!r}") from None


def _batched(encoder: Encoder, n: int) -> Iterator[List[str]]:
    """Cycle through the parts forever, n at a time."""
    n = min(n, encoder.part_count())
    while True:
        yield [encoder.next_part() for _ in range(n)]


def render_parts(
    encoder: Encoder,
    rows: int,
    cols: int,
    fps: int,
    loops: int = 0,
    display: bool = True,
    output_video: str | None = None,
    status_text: bool = True,
) -> None:
    """Show the fragments as QR codes, looping until 'q'/Esc or `loops` passes."""
    import cv2

    from .qrencode import compose_grid, fit_canvas, label_progress, make_qr_array

    grid_cells = rows * cols
    per_pass = -(-encoder.part_count() // min(grid_cells, encoder.part_count()))
    batches = _batched(encoder, grid_cells)
    if loops > 0:
        batches = itertools.islice(batches, per_pass * loops)
    delay_ms = int(1000 / max(1, fps))
    positions = {part: idx for idx, part in enumerate(encoder.all_parts())}
    writer = None
    size = None

    try:
        for batch in batches:
            img = compose_grid([make_qr_array(p) for p in batch], rows, cols)
            if size is None:
                size = img.shape
            img = fit_canvas(img, *size)
            if status_text:
                img = label_progress(img, positions[batch[0]], encoder.part_count())

            if output_video:
                if writer is None:
                    h, w = img.shape
                    fourcc = cv2.VideoWriter_fourcc(*"mp4v")
                    writer = cv2.VideoWriter(output_video, fourcc, fps, (w, h), isColor=False)
                writer.write(img)

            if display:
                cv2.imshow("BBQR Sender", img)
                key = cv2.waitKey(delay_ms) & 0xFF
                if key in (ord("q"), 27):
                    break
    finally:
        if writer:
            writer.release()
        if display:
            cv2.destroyAllWindows()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BBQR sender")
    parser.add_argument("input", help="Path to file or '-' for stdin")
    parser.add_argument("--type", type=_content_type, default=ContentType.BINARY, help="Content type name or code (e.g. json, J)")
    parser.add_argument("--encoding", type=_transfer_encoding, default=TransferEncoding.COMPRESSED, help="plain|compressed|hex or 2|Z|H")
    parser.add_argument("--fragment-length", type=int, default=config.DEFAULT_FRAGMENT_LENGTH)
    parser.add_argument("--fallback", action="store_true", help="Send plain base32 when compression does not help")
    parser.add_argument("--grid-rows", type=int, default=config.DEFAULT_GRID_ROWS)
    parser.add_argument("--grid-cols", type=int, default=config.DEFAULT_GRID_COLS)
    parser.add_argument("--fps", type=int, default=config.DEFAULT_FPS)
    parser.add_argument("--loops", type=int, default=0, help="Passes over all parts (0 = until closed)")
    parser.add_argument("--print", dest="print_parts", action="store_true", help="Print fragment strings instead of rendering")
    parser.add_argument("--no-display", action="store_true", help="Do not open window")
    parser.add_argument("--video-output", help="Optional path to save MP4 of the QR stream")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.fragment_length <= 0:
        parser.error("fragment-length must be > 0")
    if args.grid_rows <= 0 or args.grid_cols <= 0:
        parser.error("grid must be at least 1x1")
    if args.no_display and not (args.video_output or args.print_parts):
        parser.error("When --no-display is set you must provide --video-output.")

    payload = read_input(args.input)
    try:
        encoder = Encoder(
            payload,
            args.type,
            args.encoding,
            args.fragment_length,
            fallback_to_plain=args.fallback,
        )
    except FragmentBudgetExceeded as exc:
        parser.error(str(exc))

    if args.print_parts:
        for part in encoder.all_parts():
            sys.stdout.write(part + "\n")
        return

    print(
        f"[send] bytes={len(payload)} type={args.type.name} encoding={encoder.encoding.name} "
        f"parts={encoder.part_count()} grid={args.grid_rows}x{args.grid_cols} fps={args.fps}"
    )
    if args.video_output:
        print(f"[send] writing video to {args.video_output}")
    if args.no_display and args.loops <= 0:
        args.loops = 1

    render_parts(
        encoder,
        rows=args.grid_rows,
        cols=args.grid_cols,
        fps=args.fps,
        loops=args.loops,
        display=not args.no_display,
        output_video=args.video_output,
    )


if __name__ == "__main__":
    main()
