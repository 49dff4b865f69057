"""
Sticker Grid Pipeline: composite, background removal, seam erasure, split
"""

from .bitmap import Bitmap, load_bitmap
from .config import PipelineConfig
from .errors import DecodeError, EmptyInputError, StickerGridError
from .export import StickerSet
from .logger import PipelineLogger
from .mask import Mask, MaskValue
from .pipeline import StickerSheetPipeline

__all__ = [
    "Bitmap",
    "DecodeError",
    "EmptyInputError",
    "Mask",
    "MaskValue",
    "PipelineConfig",
    "PipelineLogger",
    "StickerGridError",
    "StickerSet",
    "StickerSheetPipeline",
    "load_bitmap",
]
