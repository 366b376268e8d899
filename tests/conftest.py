import io

import numpy as np
import pytest
from PIL import Image

from modi_upload.models import SourceAsset


def encode_image(width, height, fmt='JPEG', mode='RGB', noise=False, seed=0):
    """Build an encoded test image: a smooth gradient, or random noise"""
    if noise:
        rng = np.random.default_rng(seed)
        pixels = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    else:
        xs = np.linspace(0, 255, width, dtype=np.float32)
        ys = np.linspace(0, 255, height, dtype=np.float32)
        red = np.tile(xs, (height, 1))
        green = np.tile(ys[:, None], (1, width))
        blue = np.full((height, width), 128, dtype=np.float32)
        pixels = np.stack([red, green, blue], axis=2).astype(np.uint8)

    image = Image.fromarray(pixels)
    if mode != 'RGB':
        image = image.convert(mode)

    output = io.BytesIO()
    image.save(output, fmt)
    return output.getvalue()


@pytest.fixture
def make_asset():
    def _make(width=800, height=600, fmt='JPEG', name=None, content_type=None, **kwargs):
        data = encode_image(width, height, fmt=fmt, **kwargs)
        ext = fmt.lower()
        return SourceAsset(
            data=data,
            content_type=content_type or f"image/{ext}",
            name=name or f"photo.{ext}",
        )
    return _make


class FakeRaster:
    """Stand-in raster that records whether it was released"""

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.size = (width, height)
        self.closed = False

    def close(self):
        self.closed = True


class FakeDecoder:
    def __init__(self, raster=None, error=None):
        self.raster = raster
        self.error = error
        self.calls = 0

    def decode(self, data):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.raster
