# line_extractor/preprocessing/models.py
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional
import numpy as np


class ExtractionError(Exception):
    """Base exception for line extraction failures"""
    pass


class InvalidImage(ExtractionError):
    """Image could not be decoded or has a zero dimension"""
    pass


class EmptyProfile(ExtractionError):
    """Row profile has no rows"""
    pass


class NoBlocksFound(ExtractionError):
    """Thresholding left no text rows"""
    pass


class OutOfBoundsCrop(ExtractionError):
    """A padded crop interval falls outside the image"""
    pass


class InvalidOptions(ExtractionError, ValueError):
    """An extraction option is outside its allowed range"""
    pass


class Block(NamedTuple):
    """Maximal run of text rows, both ends inclusive."""
    start: int
    end: int


class CropInterval(NamedTuple):
    """Padded row range used to cut one line out of the page, both ends inclusive."""
    start: int
    end: int

    @property
    def height(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class ExtractionConfig:
    """Configuration for the row-brightness pipeline"""
    # Percentile of smoothed brightness separating text rows from background
    cutoff: float = 0.3

    # Fraction of the gap before/after a block included in its crop
    above: float = 0.7
    below: float = 0.6

    # Gaussian smoothing
    stddev: float = 1.0
    kernel_size: int = 15

    # Unnormalized box blur of this radius instead of the gaussian (None = gaussian)
    box_size: Optional[int] = None

    # Edge handling
    close_trailing_block: bool = True
    clamp_crops: bool = False

    def __post_init__(self):
        if not 0.0 <= self.cutoff < 1.0:
            raise InvalidOptions(f"cutoff must be in [0, 1), got {self.cutoff}")
        if not 0.0 <= self.above <= 1.0:
            raise InvalidOptions(f"above must be in [0, 1], got {self.above}")
        if not 0.0 <= self.below <= 1.0:
            raise InvalidOptions(f"below must be in [0, 1], got {self.below}")
        if not self.stddev > 0.0:
            raise InvalidOptions(f"stddev must be positive, got {self.stddev}")
        if self.kernel_size < 1:
            raise InvalidOptions(f"kernel_size must be at least 1, got {self.kernel_size}")
        if self.box_size is not None and self.box_size < 1:
            raise InvalidOptions(f"box_size must be at least 1, got {self.box_size}")

    @classmethod
    def from_settings(cls, settings, **overrides) -> "ExtractionConfig":
        """Build a config from the application settings, letting non-None overrides win."""
        values = dict(
            cutoff=settings.cutoff,
            above=settings.above,
            below=settings.below,
            stddev=settings.stddev,
            kernel_size=settings.kernel_size,
            box_size=settings.box_size,
            close_trailing_block=settings.close_trailing_block,
            clamp_crops=settings.clamp_crops,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class ExtractionResult:
    """Result of running the pipeline over one image"""
    height: int
    width: int
    raw_profile: np.ndarray
    smoothed_profile: np.ndarray
    text_rows: np.ndarray
    threshold: float
    blocks: List[Block] = field(default_factory=list)
    crops: List[CropInterval] = field(default_factory=list)

    @property
    def n_lines(self) -> int:
        return len(self.crops)

    def to_dict(self, include_profile: bool = False) -> dict:
        data = {
            "height": self.height,
            "width": self.width,
            "threshold": float(self.threshold),
            "n_lines": self.n_lines,
            "lines": [
                {
                    "order": i,
                    "start": int(crop.start),
                    "end": int(crop.end),
                    "block_start": int(block.start),
                    "block_end": int(block.end),
                }
                for i, (block, crop) in enumerate(zip(self.blocks, self.crops))
            ],
        }
        if include_profile:
            data["profile"] = [float(v) for v in self.smoothed_profile]
        return data
