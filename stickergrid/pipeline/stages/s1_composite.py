"""
Stage 1: Grid Composite (up to 8 stickers onto a 2x4 canvas)
"""

from typing import Optional, Sequence

import cv2
import numpy as np

from ..bitmap import Bitmap, BitmapSource, load_bitmap
from ..errors import DecodeError, EmptyInputError
from ..grid import CELL_HEIGHT, CELL_WIDTH, CELLS_PER_GRID, cell_rect, grid_size
from ..logger import PipelineLogger


def fit_within(
    width: int, height: int, max_width: int, max_height: int
) -> tuple[int, int]:
    """Largest size with the source aspect ratio that fits inside the box"""
    scale = min(max_width / width, max_height / height)
    fit_w = max(1, min(max_width, int(round(width * scale))))
    fit_h = max(1, min(max_height, int(round(height * scale))))
    return fit_w, fit_h


def paste_centered(
    canvas: np.ndarray, image: Bitmap, rect: tuple[int, int, int, int]
) -> tuple[int, int, int, int]:
    """
    Scale image to fit rect, center it, and alpha-blend it onto the canvas

    Returns:
        Placed rectangle (x, y, w, h) in canvas coordinates
    """
    x, y, cell_w, cell_h = rect
    fit_w, fit_h = fit_within(image.width, image.height, cell_w, cell_h)

    interpolation = cv2.INTER_AREA if fit_w < image.width else cv2.INTER_LINEAR
    scaled = cv2.resize(image.pixels, (fit_w, fit_h), interpolation=interpolation)

    offset_x = x + (cell_w - fit_w) // 2
    offset_y = y + (cell_h - fit_h) // 2

    region = canvas[offset_y : offset_y + fit_h, offset_x : offset_x + fit_w]
    alpha = scaled[:, :, 3:4].astype(np.float32) / 255.0
    blended = scaled[:, :, :3] * alpha + region[:, :, :3] * (1.0 - alpha)
    region[:, :, :3] = np.clip(np.round(blended), 0, 255).astype(np.uint8)
    region[:, :, 3] = np.maximum(region[:, :, 3], scaled[:, :, 3])

    return offset_x, offset_y, fit_w, fit_h


def composite_grid(
    images: Sequence[Optional[BitmapSource]],
    cell_width: int = CELL_WIDTH,
    cell_height: int = CELL_HEIGHT,
    logger: Optional[PipelineLogger] = None,
) -> Bitmap:
    """
    Arrange up to 8 sticker images into a 2-column x 4-row grid

    Each image is scaled uniformly to fit its cell and centered. Cells
    without an image stay white. Images beyond the eighth are ignored.

    Args:
        images: Sticker sources in cell order (None leaves a cell blank)
        cell_width: Width of one cell
        cell_height: Height of one cell
        logger: Logger instance

    Returns:
        Grid bitmap of exactly (2 * cell_width) x (4 * cell_height)

    Raises:
        EmptyInputError: If no images are supplied
    """
    logger = logger or PipelineLogger()

    sources = list(images)[:CELLS_PER_GRID]
    if not sources:
        raise EmptyInputError("No images to composite")

    width, height = grid_size(cell_width, cell_height)
    canvas = Bitmap.blank(width, height)

    logger.log_info(f"Stage 1: Compositing {len(sources)} image(s) into {width}x{height} grid...")

    placements = {}
    skipped = []
    for index, source in enumerate(sources):
        if source is None:
            continue
        try:
            image = load_bitmap(source)
        except DecodeError as e:
            # Best effort: an unreadable sticker leaves its cell blank
            logger.log_warning(f"  Cell {index}: {e}, leaving blank")
            skipped.append(index)
            continue

        rect = cell_rect(index, cell_width, cell_height)
        placements[index] = paste_centered(canvas.pixels, image, rect)

    logger.log_s1(
        method="fit_within + center",
        grid_size=(width, height),
        cell_size=(cell_width, cell_height),
        sources=len(sources),
        placed=placements,
        skipped=skipped,
    )

    return canvas
