"""
Error types raised by the upload optimizer
Every failure carries a message that can be shown to the user verbatim
"""


class ImageOptimizationError(Exception):
    kind = 'OptimizationFailed'
    default_message = "Image optimization failed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return self.args[0]


class InvalidInputError(ImageOptimizationError):
    kind = 'InvalidInput'
    default_message = "Invalid file: the image is empty"


class UnsupportedTypeError(ImageOptimizationError):
    kind = 'UnsupportedType'
    default_message = "Only image files can be uploaded"


class TooLargeError(ImageOptimizationError):
    kind = 'TooLarge'
    default_message = "Image file is too large. Please choose a file of 20MB or less"


class DecodeFailedError(ImageOptimizationError):
    kind = 'DecodeFailed'
    default_message = "Could not load the image"

    def __init__(self, message=None, cause=None):
        super().__init__(message)
        self.cause = cause


class EncodeFailedError(ImageOptimizationError):
    kind = 'EncodeFailed'
    default_message = "Failed to encode the image"


class OptimizationExhaustedError(ImageOptimizationError):
    kind = 'OptimizationExhausted'
    default_message = "Could not optimize the image to 400KB or less. Please upload a smaller image"


class UploadError(Exception):
    """Raised when the product service rejects or never receives an image"""
