# line_extractor/api/endpoints.py
import logging
import time
from typing import Optional

import numpy as np
from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from fastapi.responses import Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from ..preprocessing.core import LineExtractor, decode_rgb
from ..preprocessing.models import ExtractionConfig, ExtractionError
from config.settings import settings

# Initialize application
app = FastAPI(title="Line Extraction Service", version="1.0.0")

logger = logging.getLogger(__name__)

EXTRACT_REQUESTS = Counter(
    "line_extract_requests_total", "Line extraction requests", ["status"]
)
EXTRACT_LINES = Counter("line_extract_lines_total", "Lines found across all requests")
EXTRACT_SECONDS = Histogram("line_extract_seconds", "Time spent extracting lines")


@app.get("/")
async def root():
    return {"message": "Line Extraction Service", "status": "healthy"}


@app.get("/health")
async def health_check():
    """Run the pipeline on a tiny synthetic page"""
    page = np.full((40, 8, 3), 255, dtype=np.uint8)
    page[15:25] = 0
    try:
        result = LineExtractor(ExtractionConfig(cutoff=0.5)).run(page)
    except ExtractionError as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "services": {"pipeline": "working" if result.n_lines == 1 else "degraded"},
    }


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.post("/extract")
async def extract(
    file: UploadFile = File(...),
    cutoff: Optional[float] = Query(None, description="Brightness percentile separating text and background"),
    above: Optional[float] = Query(None, description="Fraction of the gap before a line to include"),
    below: Optional[float] = Query(None, description="Fraction of the gap after a line to include"),
    stddev: Optional[float] = Query(None, description="Gaussian blur stddev"),
    clamp: Optional[bool] = Query(None, description="Clamp out-of-range crops instead of failing"),
    include_profile: bool = Query(False, description="Return the smoothed row profile"),
):
    data = await file.read()
    start_time = time.time()
    try:
        cfg = ExtractionConfig.from_settings(
            settings, cutoff=cutoff, above=above, below=below, stddev=stddev, clamp_crops=clamp
        )
        rgb = decode_rgb(data)
        result = LineExtractor(cfg).run(rgb)
    except ExtractionError as e:
        EXTRACT_REQUESTS.labels(status="error").inc()
        logger.warning(f"Extraction failed for {file.filename}: {e}")
        raise HTTPException(status_code=422, detail=f"{type(e).__name__}: {e}")

    EXTRACT_SECONDS.observe(time.time() - start_time)
    EXTRACT_REQUESTS.labels(status="ok").inc()
    EXTRACT_LINES.inc(result.n_lines)

    # return intervals only; client crops locally
    return {"ok": True, "filename": file.filename, **result.to_dict(include_profile=include_profile)}
