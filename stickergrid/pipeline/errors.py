"""
Exceptions raised by the sticker grid pipeline
"""


class StickerGridError(Exception):
    """Base exception for sticker grid processing errors"""

    pass


class DecodeError(StickerGridError):
    """Raised when an input buffer is not a valid image"""

    pass


class EmptyInputError(StickerGridError):
    """Raised when the compositor receives no source images"""

    pass
