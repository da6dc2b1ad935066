# line_extractor/utils/storage.py
import logging
import os
from pathlib import Path
from typing import List, Sequence, Union

import cv2
import numpy as np
from PIL import Image

from ..preprocessing.models import ExtractionResult

logger = logging.getLogger(__name__)

STRIP_WIDTH = 200


def profile_strip(profile: Sequence[float], width: int = STRIP_WIDTH) -> np.ndarray:
    """Render a row profile as a grayscale strip, one image row per profile value."""
    values = np.clip(np.asarray(profile, dtype=np.float64), 0, 255).astype(np.uint8)
    return np.repeat(values[:, None], width, axis=1)


class OutputStorage:
    """Write extracted lines and diagnostic images to the local filesystem"""

    def __init__(self, output_dir: Union[str, Path] = "out",
                 diagnostics_dir: Union[str, Path] = "."):
        self.output_dir = Path(output_dir)
        self.diagnostics_dir = Path(diagnostics_dir)

    def save_crops(self, crops: Sequence[np.ndarray], format: str = "PNG") -> List[Path]:
        """Save RGB line crops as 00.png, 01.png, ... in the output directory"""
        os.makedirs(self.output_dir, exist_ok=True)
        paths = []
        for i, crop in enumerate(crops):
            path = self.output_dir / f"{i:02d}.png"
            Image.fromarray(crop).save(path, format=format)
            paths.append(path)
        logger.info(f"Saved {len(paths)} line image(s) to: {self.output_dir}")
        return paths

    def _write_gray(self, image: np.ndarray, name: str) -> Path:
        os.makedirs(self.diagnostics_dir, exist_ok=True)
        path = self.diagnostics_dir / name
        if not cv2.imwrite(str(path), image):
            logger.error(f"Failed to write diagnostic image {path}")
            raise OSError(f"Cannot write image: {path}")
        return path

    def save_profile(self, profile: Sequence[float], name: str) -> Path:
        return self._write_gray(profile_strip(profile), name)

    def save_diagnostics(self, result: ExtractionResult, view: np.ndarray) -> List[Path]:
        """
        Dump the profile at each stage plus the darkened page:
          average_raw.png, average_blurred.png, average_cutoff.png, view.png
        """
        cutoff = np.where(result.text_rows, 0.0, 255.0)
        paths = [
            self.save_profile(result.raw_profile, "average_raw.png"),
            self.save_profile(result.smoothed_profile, "average_blurred.png"),
            self.save_profile(cutoff, "average_cutoff.png"),
            self._write_gray(view, "view.png"),
        ]
        logger.info(f"Diagnostics written to: {self.diagnostics_dir}")
        return paths
