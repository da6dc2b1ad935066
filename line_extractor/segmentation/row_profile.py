# line_extractor/segmentation/row_profile.py
from __future__ import annotations
import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from ..preprocessing.models import (
    Block, CropInterval, EmptyProfile, InvalidImage, InvalidOptions, OutOfBoundsCrop,
)

logger = logging.getLogger(__name__)

KERNEL_SIZE = 15


def row_profile(rgb: np.ndarray) -> np.ndarray:
    """
    Mean brightness of every image row: sum of R+G+B over the row / (3 * width).
    Grayscale input is treated as R = G = B.
    """
    if rgb is None or rgb.ndim not in (2, 3):
        raise InvalidImage("expected a 2-D grayscale or 3-D RGB pixel array")
    if rgb.ndim == 3 and rgb.shape[2] != 3:
        raise InvalidImage(f"expected 3 color channels, got {rgb.shape[2]}")
    h, w = rgb.shape[:2]
    if h == 0 or w == 0:
        raise InvalidImage(f"image has a zero dimension ({w}x{h})")

    if rgb.ndim == 2:
        return rgb.astype(np.float64).sum(axis=1) / float(w)
    return rgb.astype(np.float64).sum(axis=(1, 2)) / (w * 3.0)


def gaussian_kernel(stddev: float, size: int = KERNEL_SIZE) -> np.ndarray:
    """One side of a gaussian density, offsets 0..size-1. Deliberately not normalized."""
    if not stddev > 0:
        raise InvalidOptions(f"stddev must be positive, got {stddev}")
    if size < 1:
        raise InvalidOptions(f"kernel size must be at least 1, got {size}")
    i = np.arange(size, dtype=np.float64)
    var = stddev * stddev
    return np.exp(-(i * i) / (2.0 * var)) / math.sqrt(2.0 * math.pi * var)


def gaussian_blur(profile: Sequence[float], stddev: float, size: int = KERNEL_SIZE) -> np.ndarray:
    """
    Symmetric gaussian filter over a row profile.
    Past the bottom edge the first value is substituted, past the top edge the last one.
    """
    rows = np.asarray(profile, dtype=np.float64)
    n = len(rows)
    if n == 0:
        raise EmptyProfile("cannot smooth an empty profile")
    kernel = gaussian_kernel(stddev, size)

    idx = np.arange(n)
    out = rows * kernel[0]
    for j in range(1, size):
        fwd = np.where(idx + j < n, rows[np.minimum(idx + j, n - 1)], rows[0])
        back = np.where(idx >= j, rows[np.maximum(idx - j, 0)], rows[n - 1])
        out = out + kernel[j] * fwd + kernel[j] * back
    return out


def box_blur(profile: Sequence[float], size: int) -> np.ndarray:
    """Mean over the rows within size-1 of each row, window truncated at the edges."""
    rows = np.asarray(profile, dtype=np.float64)
    n = len(rows)
    if n == 0:
        raise EmptyProfile("cannot smooth an empty profile")
    if size < 1:
        raise InvalidOptions(f"box size must be at least 1, got {size}")

    csum = np.concatenate(([0.0], np.cumsum(rows)))
    idx = np.arange(n)
    lo = np.maximum(idx - (size - 1), 0)
    hi = np.minimum(idx + (size - 1), n - 1) + 1
    return (csum[hi] - csum[lo]) / (hi - lo)


def percentile_threshold(profile: Sequence[float], cutoff: float) -> float:
    """Value at position floor(cutoff * n) of the ascending profile."""
    rows = np.asarray(profile, dtype=np.float64)
    n = len(rows)
    if n == 0:
        raise EmptyProfile("cannot threshold an empty profile")
    k = int(n * cutoff)
    if not 0 <= k < n:
        raise InvalidOptions(f"cutoff {cutoff} selects index {k} outside [0, {n})")
    return float(np.sort(rows)[k])


def binarize(profile: Sequence[float], cutoff: float) -> Tuple[np.ndarray, float]:
    """Rows darker than the percentile threshold are text (True). Returns (text_rows, threshold)."""
    rows = np.asarray(profile, dtype=np.float64)
    thr = percentile_threshold(rows, cutoff)
    return rows < thr, thr


def find_blocks(text_rows: Sequence[bool], close_trailing: bool = True) -> List[Block]:
    """
    Scan top to bottom for maximal runs of text rows.
    A run still open at the last row is closed there, or dropped if close_trailing is False.
    """
    blocks: List[Block] = []
    white = True
    start = 0
    for y, is_text in enumerate(text_rows):
        if is_text and white:
            start = y
            white = False
        elif not is_text and not white:
            blocks.append(Block(start, y - 1))
            white = True
    if not white and close_trailing:
        blocks.append(Block(start, len(text_rows) - 1))
    return blocks


def expand_blocks(blocks: Sequence[Block], height: int, above: float, below: float) -> List[CropInterval]:
    """
    Pad each block into the neighbouring gaps.
    The padding is a fraction of the gap, truncated toward zero; the result is not clamped.
    """
    crops: List[CropInterval] = []
    last = len(blocks) - 1
    for i, (start, end) in enumerate(blocks):
        prev_end = blocks[i - 1].end if i > 0 else 0
        next_start = blocks[i + 1].start if i < last else height
        gap_before = start - prev_end
        gap_after = next_start - end
        crops.append(CropInterval(
            start - int(above * gap_before),
            end + int(below * gap_after),
        ))
    return crops


def check_crop_bounds(crops: Sequence[CropInterval], height: int, clamp: bool = False) -> List[CropInterval]:
    """Reject (or clamp) intervals reaching outside rows [0, height)."""
    checked: List[CropInterval] = []
    for i, crop in enumerate(crops):
        if crop.start >= 0 and crop.end < height and crop.start <= crop.end:
            checked.append(crop)
            continue
        if not clamp:
            raise OutOfBoundsCrop(
                f"line {i}: rows [{crop.start}, {crop.end}] outside image of height {height}"
            )
        start = min(max(0, crop.start), height - 1)
        end = min(max(start, crop.end), height - 1)
        logger.warning(f"Clamped line {i} from [{crop.start}, {crop.end}] to [{start}, {end}]")
        checked.append(CropInterval(start, end))
    return checked
