"""
Image Decoding Module
Turns uploaded bytes into a Pillow raster, falling back to OpenCV
when Pillow cannot read the format
"""
import io

import cv2
import numpy as np
from PIL import Image, ImageOps

from .errors import DecodeFailedError


def _to_8bit(image):
    """Scale 16-bit grayscale down to 8-bit, as OpenCV sources are"""
    pixels = np.asarray(image, dtype=np.float64)
    scaled = np.clip(pixels / 257, 0, 255).astype(np.uint8)
    image.close()
    return Image.fromarray(scaled)


def _normalize_mode(image):
    """Convert to RGB, or RGBA when the source carries transparency"""
    if image.mode in ('RGB', 'RGBA'):
        return image
    # Pillow's convert() clips these instead of scaling
    if image.mode == 'I' or image.mode.startswith('I;16'):
        image = _to_8bit(image)
    has_alpha = image.mode in ('LA', 'PA') or 'transparency' in image.info
    converted = image.convert('RGBA' if has_alpha else 'RGB')
    image.close()
    return converted


class DirectDecoder:
    name = 'Pillow'

    def decode(self, data):
        image = Image.open(io.BytesIO(data))
        try:
            image.load()
            # Respect camera orientation like a browser would
            oriented = ImageOps.exif_transpose(image)
        except Exception:
            image.close()
            raise

        if oriented is not image:
            image.close()
        return _normalize_mode(oriented)


class CanvasFallbackDecoder:
    name = 'OpenCV'

    def decode(self, data):
        buffer = np.frombuffer(data, np.uint8)
        pixels = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
        if pixels is None:
            raise ValueError("OpenCV could not decode image data")

        # 16-bit sources
        if pixels.dtype != np.uint8:
            pixels = (pixels / 257).astype(np.uint8)

        if pixels.ndim == 2:
            pixels = cv2.cvtColor(pixels, cv2.COLOR_GRAY2RGB)
        elif pixels.shape[2] == 4:
            pixels = cv2.cvtColor(pixels, cv2.COLOR_BGRA2RGBA)
        else:
            pixels = cv2.cvtColor(pixels, cv2.COLOR_BGR2RGB)

        height, width = pixels.shape[:2]
        source = Image.fromarray(pixels)
        canvas = Image.new(source.mode, (width, height))
        canvas.paste(source, (0, 0))
        source.close()
        return canvas


class ImageDecoder:
    def __init__(self, strategies=None):
        """
        Initialize decoder

        Args:
            strategies: Decoders tried in order, one attempt each
                        (default: Pillow, then OpenCV)
        """
        self.strategies = strategies or [DirectDecoder(), CanvasFallbackDecoder()]

    def decode(self, data):
        """
        Decode image bytes

        Returns:
            PIL.Image.Image in RGB or RGBA mode

        Raises:
            DecodeFailedError: if every strategy failed
        """
        last_error = None

        for index, strategy in enumerate(self.strategies):
            if index > 0:
                print(f"🔁 Falling back to {strategy.name} for loading")
            try:
                raster = strategy.decode(data)
            except Exception as e:
                print(f"⚠️  {strategy.name} decode failed: {e}")
                last_error = e
                continue

            if raster.width > 0 and raster.height > 0:
                return raster

            raster.close()
            last_error = ValueError(f"Decoded image has no pixels: {raster.size}")

        raise DecodeFailedError(cause=last_error) from last_error
