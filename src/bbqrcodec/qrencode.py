from __future__ import annotations

from typing import List

import cv2
import numpy as np
import segno

from . import config


def make_qr_array(
    fragment: str,
    scale: int = config.DEFAULT_SCALE,
    border: int = config.DEFAULT_BORDER,
    fg: int = config.DEFAULT_COLOR_FG,
    bg: int = config.DEFAULT_COLOR_BG,
) -> np.ndarray:
    """Render one fragment as a grayscale QR image.

    Fragments only hold `B$`, uppercase base32/base36 and hex digits, all in
    the QR alphanumeric set, so the mode is pinned and the error level kept
    low to fit the most characters per code.
    """
    qr = segno.make(
        fragment,
        mode="alphanumeric",
        error=config.DEFAULT_ERROR_LEVEL,
        micro=False,
        boost_error=False,
    )
    modules = np.pad(np.array(qr.matrix, dtype=bool), border, constant_values=False)
    pixels = np.kron(modules, np.ones((scale, scale), dtype=bool))
    return np.where(pixels, fg, bg).astype(np.uint8)


def compose_grid(
    qr_arrays: List[np.ndarray],
    rows: int,
    cols: int,
    gap: int = config.DEFAULT_GAP,
    bg: int = config.DEFAULT_COLOR_BG,
) -> np.ndarray:
    """Lay QR images out row by row; cells may differ in size, the canvas fits the largest."""
    total_cells = rows * cols
    qr_arrays = qr_arrays[:total_cells]
    h = max(a.shape[0] for a in qr_arrays)
    w = max(a.shape[1] for a in qr_arrays)
    canvas = np.full((rows * h + (rows - 1) * gap, cols * w + (cols - 1) * gap), bg, dtype=np.uint8)
    for idx, arr in enumerate(qr_arrays):
        r, c = divmod(idx, cols)
        y = r * (h + gap)
        x = c * (w + gap)
        canvas[y : y + arr.shape[0], x : x + arr.shape[1]] = arr
    return canvas


def fit_canvas(image: np.ndarray, height: int, width: int, bg: int = config.DEFAULT_COLOR_BG) -> np.ndarray:
    """Pad (or crop) an image to a fixed size so every video frame matches."""
    canvas = np.full((height, width), bg, dtype=np.uint8)
    h = min(height, image.shape[0])
    w = min(width, image.shape[1])
    canvas[:h, :w] = image[:h, :w]
    return canvas


def label_progress(image: np.ndarray, index: int, total: int, color: int = 128) -> np.ndarray:
    """Stamp "index/total" (1-based) in the top-left quiet zone."""
    labelled = image.copy()
    cv2.putText(
        labelled,
        f"{index + 1}/{total}",
        (4, 12),
        cv2.FONT_HERSHEY_PLAIN,
        0.8,
        int(color),
        1,
        lineType=cv2.LINE_AA,
    )
    return labelled
