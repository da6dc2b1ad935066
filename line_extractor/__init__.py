"""
Row-brightness line extraction for scanned pages.

Main components:
- segmentation.row_profile: row profile, smoothing, thresholding, block detection, padding
- preprocessing.core: image I/O, pipeline entry point and LineExtractor
- preprocessing.models: configuration, result types and errors
- utils.storage: writing line crops and diagnostic images
- cli: `extract-lines` command
- api.endpoints: FastAPI service
"""

from .preprocessing.core import LineExtractor, extract_intervals
from .preprocessing.models import ExtractionConfig, ExtractionResult, ExtractionError

__all__ = ["LineExtractor", "extract_intervals", "ExtractionConfig", "ExtractionResult", "ExtractionError"]
