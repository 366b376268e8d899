"""
Data models for the upload optimizer
Assets are transient: built per call, never persisted
"""
from dataclasses import dataclass
from pathlib import Path

WEBP_CONTENT_TYPE = 'image/webp'

CONTENT_TYPES = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.gif': 'image/gif',
    '.bmp': 'image/bmp',
    '.webp': 'image/webp',
    '.tif': 'image/tiff',
    '.tiff': 'image/tiff',
}


@dataclass(frozen=True)
class SourceAsset:
    """
    A user-selected file before optimization

    Fields:
        data: Raw encoded bytes
        content_type: Declared MIME type, e.g. "image/png"
        name: Original file name
    """
    data: bytes
    content_type: str
    name: str

    @property
    def size(self):
        return len(self.data) if self.data else 0

    @classmethod
    def from_path(cls, path, content_type=None):
        """Read a file from disk, guessing its content type from the extension"""
        path = Path(path)
        with open(path, 'rb') as f:
            data = f.read()
        if content_type is None:
            content_type = CONTENT_TYPES.get(path.suffix.lower(), 'application/octet-stream')
        return cls(data=data, content_type=content_type, name=path.name)


@dataclass(frozen=True)
class OptimizedAsset:
    """WebP output of a successful optimization plus its metrics"""
    data: bytes
    name: str
    original_size: int
    optimized_size: int
    compression_ratio: float
    width: int
    height: int
    quality: float
    max_resolution: int
    attempts: int

    content_type = WEBP_CONTENT_TYPE

    def to_dict(self):
        return {
            'name': self.name,
            'content_type': self.content_type,
            'original_size': self.original_size,
            'optimized_size': self.optimized_size,
            'compression_ratio': round(self.compression_ratio, 1),
            'width': self.width,
            'height': self.height,
            'quality': self.quality,
            'max_resolution': self.max_resolution,
            'attempts': self.attempts,
        }
