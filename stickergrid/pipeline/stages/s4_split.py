"""
Stage 4: Grid Split into individual sticker cells
"""

from typing import Optional

from ..bitmap import Bitmap, BitmapSource
from ..grid import CELL_HEIGHT, CELL_WIDTH, CELLS_PER_GRID, cell_rect, grid_size
from ..logger import PipelineLogger
from .s3_seams import erase_seams


def split_grid(
    grid: BitmapSource,
    cell_width: int = CELL_WIDTH,
    cell_height: int = CELL_HEIGHT,
    logger: Optional[PipelineLogger] = None,
) -> list[Bitmap]:
    """
    Crop a grid into its 8 cells in reading order

    Seams are erased first. All 8 cells are returned; trimming padding
    cells of a partial grid is up to the caller.

    Args:
        grid: Grid image
        cell_width: Width of one cell
        cell_height: Height of one cell
        logger: Logger instance

    Returns:
        8 bitmaps of cell_width x cell_height

    Raises:
        DecodeError: If the grid cannot be decoded
    """
    logger = logger or PipelineLogger()

    cleaned = erase_seams(grid, cell_width, cell_height, logger)

    width, height = grid_size(cell_width, cell_height)
    if cleaned.size != (width, height):
        cleaned = cleaned.resized(width, height)

    logger.log_info(f"Stage 4: Splitting grid into {CELLS_PER_GRID} cells...")

    cells = []
    for index in range(CELLS_PER_GRID):
        cells.append(cleaned.crop(*cell_rect(index, cell_width, cell_height)))

    logger.log_s4(
        method="exact_crop",
        grid_size=(width, height),
        cell_size=(cell_width, cell_height),
        cells=len(cells),
    )

    return cells
