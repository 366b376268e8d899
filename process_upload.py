#!/usr/bin/env python3
"""
Product Image Upload Processing
Optimizes images to WebP within the upload budget, optionally uploading them
"""
import sys
import json
import time
from pathlib import Path
from datetime import datetime

# Add modi_upload to path
sys.path.insert(0, str(Path(__file__).parent))

from modi_upload.config import Config
from modi_upload.errors import ImageOptimizationError, UploadError
from modi_upload.image_optimizer import ImageOptimizer
from modi_upload.models import SourceAsset
from modi_upload.uploader import ImageUploader


def process_images(image_paths, upload=False, optimizer=None, uploader=None):
    """
    Optimize product images in order and optionally upload them

    Args:
        image_paths: Paths to the selected image files
        upload: Send optimized images to the product service
        optimizer: ImageOptimizer to use (default: from config)
        uploader: ImageUploader to use (default: from config)

    Returns:
        dict: Processing results
    """
    start_time = time.time()

    print(f"\n{'='*60}")
    print(f"🖼️  Processing {len(image_paths)} image(s)")
    print(f"⏱️  Start: {datetime.now().strftime('%H:%M:%S.%f')[:-3]}")
    print(f"{'='*60}")

    result = {
        'success': False,
        'images': [],
        'uploaded_urls': [],
        'error': None,
        'processing_time': 0
    }

    optimizer = optimizer or ImageOptimizer()

    try:
        # ===== STEP 1: Optimization (all or nothing) =====
        sources = [SourceAsset.from_path(path) for path in image_paths]
        optimized = optimizer.optimize_batch(sources)
        result['images'] = [asset.to_dict() for asset in optimized]

        # ===== STEP 2: Upload =====
        if upload:
            uploader = uploader or ImageUploader()
            result['uploaded_urls'] = uploader.upload_many(optimized)
        else:
            print("📡 Upload disabled")

        result['success'] = True

    except (ImageOptimizationError, UploadError, OSError) as e:
        error_msg = str(e)
        print(f"\n❌ Processing failed: {error_msg}")
        result['error'] = error_msg
        result['images'] = []
        result['uploaded_urls'] = []

    # ===== SUMMARY =====
    total_time = time.time() - start_time
    result['processing_time'] = total_time

    print(f"\n{'='*60}")
    print(f"⏱️  Total time: {total_time:.2f}s")
    print(f"📊 Summary:")
    print(f"   Optimized: {len(result['images'])}")
    print(f"   Uploaded: {len(result['uploaded_urls'])}")
    if result['images']:
        original = sum(image['original_size'] for image in result['images'])
        optimized_total = sum(image['optimized_size'] for image in result['images'])
        print(f"   💾 Size: {original / 1024:.1f}KB → {optimized_total / 1024:.1f}KB "
              f"(budget {Config.TARGET_BYTES / 1024:.0f}KB per image)")
    print(f"{'='*60}\n")

    return result


def main():
    """Main function for command-line usage"""
    args = sys.argv[1:]
    upload = '--upload' in args
    image_paths = [arg for arg in args if arg != '--upload']

    if not image_paths:
        print("Usage: python process_upload.py <image_path> [<image_path> ...] [--upload]")
        sys.exit(1)

    for image_path in image_paths:
        if not Path(image_path).exists():
            print(f"❌ Image not found: {image_path}")
            sys.exit(1)

    result = process_images(image_paths, upload=upload)

    # Output result as JSON for Node.js to parse
    print("\nPYTHON_RESULT:" + json.dumps(result))

    sys.exit(0 if result['success'] else 1)

if __name__ == '__main__':
    main()
