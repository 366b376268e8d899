from .config import Config
from .errors import InvalidInputError, TooLargeError, UnsupportedTypeError


def validate_source(asset, max_input_bytes=None):
    """
    Reject unusable inputs before any decode work

    Args:
        asset: SourceAsset to check (may be None)
        max_input_bytes: Absolute size ceiling (default: from config)
    """
    if max_input_bytes is None:
        max_input_bytes = Config.MAX_INPUT_BYTES

    if asset is None or asset.size == 0:
        raise InvalidInputError()

    if not (asset.content_type or '').startswith('image/'):
        raise UnsupportedTypeError()

    if asset.size > max_input_bytes:
        limit_mb = max_input_bytes / (1024 * 1024)
        raise TooLargeError(
            f"Image file is too large. Please choose a file of {limit_mb:g}MB or less"
        )
