"""
PipelineConfig: Configuration for the sticker grid pipeline
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .grid import CELL_HEIGHT, CELL_WIDTH, grid_count, grid_size

SUPPORTED_STICKER_COUNTS: tuple[int, ...] = (8, 16, 24, 32, 40)

MIN_THRESHOLD = 200
MAX_THRESHOLD = 255


@dataclass
class PipelineConfig:
    """Configuration for sticker grid pipeline"""

    # Grid geometry
    cell_width: int = CELL_WIDTH
    cell_height: int = CELL_HEIGHT

    # Background removal (lower = more aggressive)
    background_threshold: int = 240

    # Sticker set
    sticker_count: int = 8
    grid_delay: float = 3.0  # Seconds between upstream grid requests

    # Auxiliary images
    main_size: tuple[int, int] = (240, 240)
    tab_size: tuple[int, int] = (96, 74)

    # Output
    output_dir: Optional[Path] = None

    def __post_init__(self):
        if self.cell_width <= 0 or self.cell_height <= 0:
            raise ValueError(
                f"Cell size must be positive, got {self.cell_width}x{self.cell_height}"
            )
        if self.sticker_count <= 0:
            raise ValueError(f"Sticker count must be positive, got {self.sticker_count}")
        self.background_threshold = max(
            MIN_THRESHOLD, min(MAX_THRESHOLD, int(self.background_threshold))
        )
        self.grid_delay = max(0.0, float(self.grid_delay))
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)

    @property
    def grid_count(self) -> int:
        """Number of 8-cell grids needed for the sticker set"""
        return grid_count(self.sticker_count)

    @property
    def grid_size(self) -> tuple[int, int]:
        return grid_size(self.cell_width, self.cell_height)
