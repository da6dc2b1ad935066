# line_extractor/preprocessing/core.py
import logging
from pathlib import Path
from typing import List, Optional, Union

import cv2
import numpy as np

from .models import (
    CropInterval, ExtractionConfig, ExtractionResult, InvalidImage, NoBlocksFound,
)
from ..segmentation.row_profile import (
    binarize, box_blur, check_crop_bounds, expand_blocks, find_blocks,
    gaussian_blur, row_profile,
)

logger = logging.getLogger(__name__)


# --- image helpers -----------------------------------------------------
def load_rgb(path: Union[str, Path]) -> np.ndarray:
    bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if bgr is None:
        raise InvalidImage(f"Cannot read image: {path}")
    return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)


def decode_rgb(data: bytes) -> np.ndarray:
    arr = np.frombuffer(data, np.uint8)
    bgr = cv2.imdecode(arr, cv2.IMREAD_COLOR) if arr.size else None
    if bgr is None:
        raise InvalidImage("Cannot decode uploaded image")
    return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)


def to_luma(rgb: np.ndarray) -> np.ndarray:
    if rgb.ndim == 2:
        return rgb.copy()
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)


def crop_rows(rgb: np.ndarray, crop: CropInterval) -> np.ndarray:
    """Full-width slice of rows crop.start..crop.end (inclusive)."""
    return rgb[crop.start:crop.end + 1].copy()


def darken_text_rows(gray: np.ndarray, text_rows: np.ndarray) -> np.ndarray:
    """Grayscale view with every text row at half brightness."""
    view = gray.copy()
    view[text_rows] //= 2
    return view
# -----------------------------------------------------------------------


def extract_intervals(rgb: np.ndarray, config: Optional[ExtractionConfig] = None) -> ExtractionResult:
    """
    Row-brightness pipeline:
      profile -> smooth -> percentile threshold -> text blocks -> padded crops
    Raises an ExtractionError subclass and produces nothing if any stage fails.
    """
    cfg = config or ExtractionConfig()

    raw = row_profile(rgb)
    height, width = rgb.shape[:2]

    if cfg.box_size is not None:
        smoothed = box_blur(raw, cfg.box_size)
    else:
        smoothed = gaussian_blur(raw, cfg.stddev, cfg.kernel_size)

    text_rows, threshold = binarize(smoothed, cfg.cutoff)
    logger.debug(f"threshold={threshold:.3f}, text rows={int(text_rows.sum())}/{height}")

    blocks = find_blocks(text_rows, close_trailing=cfg.close_trailing_block)
    logger.debug(f"blocks={blocks}")
    if not blocks:
        raise NoBlocksFound(
            f"no text rows below the {cfg.cutoff:.2f} brightness percentile ({threshold:.2f})"
        )

    crops = expand_blocks(blocks, height, cfg.above, cfg.below)
    crops = check_crop_bounds(crops, height, clamp=cfg.clamp_crops)

    return ExtractionResult(
        height=height,
        width=width,
        raw_profile=raw,
        smoothed_profile=smoothed,
        text_rows=text_rows,
        threshold=threshold,
        blocks=blocks,
        crops=crops,
    )


class LineExtractor:
    def __init__(self, cfg: Optional[ExtractionConfig] = None):
        self.cfg = cfg or ExtractionConfig()

    def run(self, rgb: np.ndarray) -> ExtractionResult:
        result = extract_intervals(rgb, self.cfg)
        logger.info(
            f"Found {result.n_lines} line(s) in {result.width}x{result.height} image "
            f"(threshold {result.threshold:.2f})"
        )
        return result

    def crops(self, rgb: np.ndarray, result: ExtractionResult) -> List[np.ndarray]:
        return [crop_rows(rgb, crop) for crop in result.crops]

    def text_view(self, rgb: np.ndarray, result: ExtractionResult) -> np.ndarray:
        return darken_text_rows(to_luma(rgb), result.text_rows)
