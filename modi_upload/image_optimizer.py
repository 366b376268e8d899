"""
Image Optimization Module
Resize and re-encode product images as WebP until they fit the upload budget
"""
import io
import math
import re

from PIL import Image

from .config import Config
from .decoder import ImageDecoder
from .errors import EncodeFailedError, ImageOptimizationError, OptimizationExhaustedError
from .models import OptimizedAsset
from .validator import validate_source

_EXTENSION = re.compile(r'\.[^.]*$')


def calculate_dimensions(width, height, max_resolution):
    """
    Fit the longer edge into max_resolution, keeping aspect ratio.
    Never upscales.
    """
    max_dimension = max(width, height)

    if max_dimension <= max_resolution:
        return width, height

    scale = max_resolution / max_dimension
    # Half-up rounding, not Python's banker's rounding; thin strips keep at least 1px
    return max(1, math.floor(width * scale + 0.5)), max(1, math.floor(height * scale + 0.5))


def webp_name(name):
    """Swap the trailing extension for .webp (or append it when there is none)"""
    return _EXTENSION.sub('', name or 'image') + '.webp'


class ImageOptimizer:
    def __init__(self, target_bytes=None, resolution_ladder=None, quality_ladder=None,
                 max_input_bytes=None, decoder=None, verbose=True):
        """
        Initialize image optimizer

        Args:
            target_bytes: Size budget for the encoded WebP (default 400KB)
            resolution_ladder: Longer-edge caps, tried largest first
            quality_ladder: WebP quality factors (0-1), tried highest first
            max_input_bytes: Inputs above this are rejected before decoding
            decoder: ImageDecoder to use (default: Pillow with OpenCV fallback)
            verbose: Print every attempted candidate

        Raises:
            ValueError: if an option is out of range
        """
        self.target_bytes = Config.TARGET_BYTES if target_bytes is None else target_bytes
        self.resolution_ladder = list(Config.RESOLUTION_LADDER if resolution_ladder is None else resolution_ladder)
        self.quality_ladder = list(Config.QUALITY_LADDER if quality_ladder is None else quality_ladder)
        self.max_input_bytes = Config.MAX_INPUT_BYTES if max_input_bytes is None else max_input_bytes
        Config.check_optimizer_options(
            self.target_bytes,
            self.resolution_ladder,
            self.quality_ladder,
            self.max_input_bytes
        )
        self.decoder = ImageDecoder() if decoder is None else decoder
        self.verbose = verbose

    def optimize(self, asset):
        """
        Validate, decode and compress one image

        Args:
            asset: SourceAsset selected by the user

        Returns:
            OptimizedAsset whose optimized_size is within target_bytes

        Raises:
            ImageOptimizationError: (or a subclass) describing the failure
        """
        validate_source(asset, self.max_input_bytes)

        original_size = asset.size
        print(f"📦 Optimizing {asset.name}: {original_size / 1024:.1f}KB → target {self.target_bytes / 1024:.0f}KB")

        try:
            raster = self.decoder.decode(asset.data)
            try:
                found = self.search(raster)
            finally:
                raster.close()
        except ImageOptimizationError as e:
            print(f"❌ Image optimization failed: {e}")
            raise
        except Exception as e:
            print(f"❌ Image optimization failed: {e}")
            raise ImageOptimizationError(str(e) or None) from e

        optimized_size = len(found['data'])
        compression_ratio = (original_size - optimized_size) / original_size * 100

        print(f"✅ Optimized: {original_size / 1024:.2f}KB → {optimized_size / 1024:.2f}KB ({compression_ratio:.1f}% smaller)")

        return OptimizedAsset(
            data=found['data'],
            name=webp_name(asset.name),
            original_size=original_size,
            optimized_size=optimized_size,
            compression_ratio=compression_ratio,
            width=found['width'],
            height=found['height'],
            quality=found['quality'],
            max_resolution=found['max_resolution'],
            attempts=found['attempts'],
        )

    def optimize_batch(self, assets):
        """
        Optimize images one after another.
        The first failure is raised; nothing is returned for earlier items.
        """
        results = []

        for asset in assets:
            try:
                results.append(self.optimize(asset))
            except ImageOptimizationError as e:
                print(f"❌ Failed to optimize {getattr(asset, 'name', asset)}: {e}")
                raise

        return results

    def search(self, raster):
        """
        Walk the resolution ladder (outer) and quality ladder (inner)
        and return the first encoding within budget

        Returns:
            dict: data, width, height, quality, max_resolution, attempts
        """
        attempts = 0

        for max_resolution in self.resolution_ladder:
            width, height = calculate_dimensions(raster.width, raster.height, max_resolution)
            self._log(f"📐 Trying resolution: {max_resolution}px ({width}x{height})")

            for quality in self.quality_ladder:
                attempts += 1
                data = self.resize_and_compress(raster, width, height, quality)
                size = len(data)

                if size <= self.target_bytes:
                    self._log(f"🎯 Quality {quality}: {size / 1024:.2f}KB fits")
                    return {
                        'data': data,
                        'width': width,
                        'height': height,
                        'quality': quality,
                        'max_resolution': max_resolution,
                        'attempts': attempts,
                    }

                self._log(f"   Quality {quality}: {size / 1024:.2f}KB too large, continuing...")

        raise OptimizationExhaustedError(
            f"Could not optimize the image to {self.target_bytes / 1024:g}KB or less. "
            "Please upload a smaller image"
        )

    def resize_and_compress(self, raster, width, height, quality):
        """Draw raster at width x height and encode as WebP"""
        if raster.size == (width, height):
            resized = raster
        else:
            resized = raster.resize((width, height), Image.Resampling.LANCZOS)

        output = io.BytesIO()
        try:
            resized.save(output, 'WEBP', quality=int(round(quality * 100)))
        except (OSError, KeyError, ValueError) as e:
            raise EncodeFailedError(f"Failed to encode WebP: {e}") from e
        finally:
            if resized is not raster:
                resized.close()

        data = output.getvalue()
        if not data:
            raise EncodeFailedError()
        return data

    def _log(self, message):
        if self.verbose:
            print(message)


def optimize_image_to_webp(asset, **options):
    """Optimize a single SourceAsset with a one-off ImageOptimizer"""
    return ImageOptimizer(**options).optimize(asset)


def optimize_images(assets, **options):
    """Optimize SourceAssets in order, stopping at the first failure"""
    return ImageOptimizer(**options).optimize_batch(assets)
