"""
Stage 3: Seam Erasure at the internal grid boundaries
"""

from typing import Optional

import numpy as np

from ..bitmap import Bitmap, BitmapSource, load_bitmap
from ..grid import CELL_HEIGHT, CELL_WIDTH, GRID_COLUMNS, GRID_ROWS, grid_size
from ..logger import PipelineLogger

# Empirically tuned; changing them changes output
SEAM_RADIUS = 5  # Band scanned on each side of a seam
ERASE_RADIUS = 3  # Band where dark lines are painted over
SAMPLE_DISTANCE = 5  # Distance of the flanking pixels used for smoothing
LIGHT_BACKGROUND = 200
DARK_LINE = 200
EDGE_DIFFERENCE = 15
PASSES = 2


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def estimate_background(pixels: np.ndarray) -> tuple[np.ndarray, bool]:
    """
    Average the four corner pixels

    Returns:
        (rgb, is_light) where is_light means mean channel value > 200
    """
    h, w = pixels.shape[:2]
    corners = pixels[[0, 0, h - 1, h - 1], [0, w - 1, 0, w - 1], :3].astype(np.float64)
    rgb = _round_half_up(corners.sum(axis=0) / 4).astype(np.uint8)
    is_light = float(rgb.astype(np.int32).sum()) / 3 > LIGHT_BACKGROUND
    return rgb, is_light


def erase_seam(
    rgb: np.ndarray, seam: int, background: np.ndarray, is_light: bool
) -> int:
    """
    Erase one seam in place

    The seam is the column `seam` of `rgb` (shape (N, M, 3)); pass a
    transposed view to erase a horizontal seam. Columns are visited from
    left to right so smoothing sees already-erased neighbours.

    Returns:
        Number of pixels changed
    """
    size = rgb.shape[1]
    changed = 0

    for offset in range(-SEAM_RADIUS, SEAM_RADIUS + 1):
        pos = seam + offset
        if not 0 <= pos < size:
            continue

        column = rgb[:, pos]
        current = column.astype(np.int32)
        current_sum = current.sum(axis=1)

        handled = np.zeros(len(column), dtype=bool)
        if is_light and abs(offset) <= ERASE_RADIUS:
            # Dark line on a light field: paint with background colour
            handled = current_sum < 3 * DARK_LINE
            column[handled] = background
            changed += int(np.count_nonzero(handled))

        before = max(0, pos - SAMPLE_DISTANCE)
        after = min(size - 1, pos + SAMPLE_DISTANCE)
        before_px = rgb[:, before].astype(np.float64)
        after_px = rgb[:, after].astype(np.float64)

        before_sum = before_px.sum(axis=1)
        after_sum = after_px.sum(axis=1)
        sharp = (np.abs(current_sum - before_sum) / 3 > EDGE_DIFFERENCE) | (
            np.abs(current_sum - after_sum) / 3 > EDGE_DIFFERENCE
        )
        sharp &= ~handled
        if not np.any(sharp):
            continue

        # Inverse-distance weights: the closer flank counts more
        before_dist = pos - before
        after_dist = after - pos
        total = before_dist + after_dist
        before_weight = after_dist / total if total > 0 else 0.5
        after_weight = before_dist / total if total > 0 else 0.5

        blended = before_px[sharp] * before_weight + after_px[sharp] * after_weight
        column[sharp] = np.clip(_round_half_up(blended), 0, 255).astype(np.uint8)
        changed += int(np.count_nonzero(sharp))

    return changed


def erase_seams(
    grid: BitmapSource,
    cell_width: int = CELL_WIDTH,
    cell_height: int = CELL_HEIGHT,
    logger: Optional[PipelineLogger] = None,
) -> Bitmap:
    """
    Remove divider lines the generator drew between cells

    Algorithm (run twice, second pass on the first pass's output):
    1. Estimate background colour from the four corners
    2. For the vertical seam and the three horizontal seams, scan +-5 px
    3. Within +-3 px on a light background, paint dark pixels with the background
    4. Elsewhere, blend pixels that differ by more than 15 from a flank 5 px away

    A grid that is not exactly 2*cell_width x 4*cell_height is stretched to
    that size first. Alpha is left untouched.

    Args:
        grid: Grid image
        cell_width: Width of one cell
        cell_height: Height of one cell
        logger: Logger instance

    Returns:
        New bitmap of the expected grid size
    """
    logger = logger or PipelineLogger()

    image = load_bitmap(grid)
    width, height = grid_size(cell_width, cell_height)

    resampled = image.size != (width, height)
    if resampled:
        logger.log_warning(
            f"Grid size {image.width}x{image.height} differs from expected "
            f"{width}x{height}, resampling"
        )
        result = image.resized(width, height)
    else:
        result = image.copy()

    logger.log_info("Stage 3: Erasing grid seams...")

    pixels = result.pixels
    rgb = pixels[:, :, :3]
    background, is_light = estimate_background(pixels)

    vertical_seams = [cell_width * col for col in range(1, GRID_COLUMNS)]
    horizontal_seams = [cell_height * row for row in range(1, GRID_ROWS)]

    pass_changes = []
    for pass_num in range(PASSES):
        changed = 0
        for x in vertical_seams:
            changed += erase_seam(rgb, x, background, is_light)
        rows = rgb.transpose(1, 0, 2)
        for y in horizontal_seams:
            changed += erase_seam(rows, y, background, is_light)
        pass_changes.append(changed)
        logger.log_info(f"  Pass {pass_num + 1}/{PASSES}: {changed:,} pixels changed")

    logger.log_s3(
        method="corner_background + seam_band_smoothing",
        resampled=resampled,
        source_size=image.size,
        background_rgb=background.tolist(),
        light_background=is_light,
        vertical_seams=vertical_seams,
        horizontal_seams=horizontal_seams,
        pass_changes=pass_changes,
    )

    return result
