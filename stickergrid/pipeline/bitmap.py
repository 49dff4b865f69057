"""
Bitmap: RGBA pixel buffer passed between pipeline stages
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError

WHITE = (255, 255, 255, 255)


@dataclass
class Bitmap:
    """
    Row-major RGBA image, 4 bytes per pixel

    `pixels` has shape (height, width, 4) and dtype uint8. Stages never
    modify a bitmap they receive; they return a new one.
    """

    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(
                f"Bitmap pixels must have shape (height, width, 4), got {self.pixels.shape}"
            )
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Bitmap pixels must be uint8, got {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def blank(
        cls, width: int, height: int, color: tuple[int, int, int, int] = WHITE
    ) -> "Bitmap":
        """Create a canvas filled with a single RGBA color"""
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = color
        return cls(pixels)

    @classmethod
    def from_image(cls, image: Image.Image) -> "Bitmap":
        return cls(np.array(image.convert("RGBA"), dtype=np.uint8))

    @classmethod
    def decode(cls, data: bytes) -> "Bitmap":
        """
        Decode an encoded image buffer (PNG, JPEG, ...)

        Raises:
            DecodeError: If the buffer is not a readable image
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                return cls.from_image(img)
        except UnidentifiedImageError as e:
            raise DecodeError(f"Cannot identify image format: {e}") from e
        except (OSError, ValueError) as e:
            raise DecodeError(f"Error decoding image: {e}") from e

    @classmethod
    def open(cls, path: Path) -> "Bitmap":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input image not found: {path}")
        try:
            with Image.open(path) as img:
                return cls.from_image(img)
        except UnidentifiedImageError as e:
            raise DecodeError(f"Cannot identify image format of {path}: {e}") from e
        except OSError as e:
            raise DecodeError(f"Error reading image {path}: {e}") from e

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels, "RGBA")

    def encode(self) -> bytes:
        """Encode as PNG"""
        buffer = io.BytesIO()
        self.to_image().save(buffer, "PNG", optimize=True)
        return buffer.getvalue()

    def save(self, path: Path) -> Path:
        path = Path(path)
        self.to_image().save(path, "PNG", optimize=True)
        return path

    def copy(self) -> "Bitmap":
        return Bitmap(self.pixels.copy())

    def resized(self, width: int, height: int) -> "Bitmap":
        """Stretch to exactly width x height (aspect ratio not preserved)"""
        if (width, height) == self.size:
            return self.copy()
        interpolation = (
            cv2.INTER_AREA
            if width < self.width and height < self.height
            else cv2.INTER_LINEAR
        )
        resized = cv2.resize(self.pixels, (width, height), interpolation=interpolation)
        return Bitmap(np.ascontiguousarray(resized, dtype=np.uint8))

    def crop(self, x: int, y: int, width: int, height: int) -> "Bitmap":
        return Bitmap(self.pixels[y : y + height, x : x + width].copy())


BitmapSource = Union[Bitmap, bytes, bytearray, str, Path, Image.Image, np.ndarray]


def load_bitmap(source: BitmapSource) -> Bitmap:
    """
    Coerce any supported image source into a Bitmap

    Bitmaps are returned as-is; the caller hands over ownership.

    Raises:
        DecodeError: If an encoded buffer or file cannot be decoded
        FileNotFoundError: If a path does not exist
    """
    if isinstance(source, Bitmap):
        return source
    if isinstance(source, (bytes, bytearray)):
        return Bitmap.decode(bytes(source))
    if isinstance(source, (str, Path)):
        return Bitmap.open(Path(source))
    if isinstance(source, Image.Image):
        return Bitmap.from_image(source)
    if isinstance(source, np.ndarray):
        if source.ndim == 3 and source.shape[2] == 3:
            alpha = np.full(source.shape[:2] + (1,), 255, dtype=np.uint8)
            return Bitmap(np.concatenate([source.astype(np.uint8), alpha], axis=2))
        return Bitmap(source.astype(np.uint8))
    raise TypeError(f"Unsupported image source: {type(source).__name__}")
