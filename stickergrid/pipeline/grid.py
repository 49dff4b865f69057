"""
Grid geometry: 2 columns x 4 rows of fixed-size sticker cells
"""

import math

GRID_COLUMNS = 2
GRID_ROWS = 4
CELLS_PER_GRID = GRID_COLUMNS * GRID_ROWS

# LINE sticker cell size
CELL_WIDTH = 370
CELL_HEIGHT = 320


def cell_position(index: int) -> tuple[int, int]:
    """Map a cell index (0-7) to (row, col) in reading order"""
    if not 0 <= index < CELLS_PER_GRID:
        raise ValueError(f"Cell index out of range: {index}")
    return index // GRID_COLUMNS, index % GRID_COLUMNS


def cell_rect(
    index: int, cell_width: int = CELL_WIDTH, cell_height: int = CELL_HEIGHT
) -> tuple[int, int, int, int]:
    """Pixel rectangle (x, y, w, h) of a cell inside the grid canvas"""
    row, col = cell_position(index)
    return col * cell_width, row * cell_height, cell_width, cell_height


def grid_size(
    cell_width: int = CELL_WIDTH, cell_height: int = CELL_HEIGHT
) -> tuple[int, int]:
    return GRID_COLUMNS * cell_width, GRID_ROWS * cell_height


def grid_count(sticker_count: int) -> int:
    return math.ceil(sticker_count / CELLS_PER_GRID)


def cells_in_grid(grid_index: int, sticker_count: int) -> int:
    """Number of real (non-padding) cells in the given grid"""
    remaining = sticker_count - grid_index * CELLS_PER_GRID
    return max(0, min(CELLS_PER_GRID, remaining))


def sticker_slice(grid_index: int, sticker_count: int) -> range:
    """Global sticker indices held by the given grid"""
    start = grid_index * CELLS_PER_GRID
    return range(start, start + cells_in_grid(grid_index, sticker_count))
