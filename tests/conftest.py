import io

import numpy as np
import pytest
from PIL import Image


def page_from_rows(rows, width=10):
    """RGB page whose every row has the given uniform brightness."""
    values = np.asarray(rows, dtype=np.uint8)
    return np.repeat(values[:, None, None], width, axis=1).repeat(3, axis=2)


def png_bytes(rgb):
    buf = io.BytesIO()
    Image.fromarray(rgb).save(buf, format="PNG")
    return buf.getvalue()


# Two dark bands: rows 10-19 and 30-39 of a 100-row page
TWO_BANDS = [255] * 10 + [0] * 10 + [255] * 10 + [0] * 10 + [255] * 60


@pytest.fixture
def two_band_page():
    return page_from_rows(TWO_BANDS)


@pytest.fixture
def white_page():
    return page_from_rows([255] * 50)


@pytest.fixture
def write_page(tmp_path):
    def _write(rgb, name="page.png"):
        path = tmp_path / name
        Image.fromarray(rgb).save(path)
        return path
    return _write
