"""
StickerSheetPipeline: Main orchestration class
"""

import time
from typing import Callable, Optional, Sequence

from .bitmap import Bitmap, BitmapSource, load_bitmap
from .config import PipelineConfig
from .errors import EmptyInputError
from .export import StickerSet
from .grid import CELLS_PER_GRID, cells_in_grid, sticker_slice
from .logger import PipelineLogger
from .mask import Mask
from .stages import composite_grid, remove_background, split_grid

GridProducer = Callable[[int, range], BitmapSource]


class StickerSheetPipeline:
    """
    Sticker sheet pipeline

    Stages:
    1. Grid Composite (2x4 cells)
    2. Background Removal (border flood fill)
    3. Seam Erasure (inside the split)
    4. Grid Split

    Grids are processed one at a time. When grids come from an upstream
    generator, `generate` waits `config.grid_delay` seconds between requests.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        logger: Optional[PipelineLogger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or PipelineConfig()
        self.logger = logger or PipelineLogger()
        self._sleep = sleep

    def compose_grids(self, sources: Sequence[Optional[BitmapSource]]) -> list[Bitmap]:
        """
        Composite per-sticker sources into grids of 8

        Raises:
            EmptyInputError: If no sources are supplied
        """
        if not sources:
            raise EmptyInputError("No sticker images supplied")

        grids = []
        for start in range(0, len(sources), CELLS_PER_GRID):
            grids.append(
                composite_grid(
                    sources[start : start + CELLS_PER_GRID],
                    self.config.cell_width,
                    self.config.cell_height,
                    self.logger,
                )
            )
        return grids

    def process_grid(
        self,
        grid: BitmapSource,
        grid_index: int = 0,
        mask: Optional[Mask] = None,
        sticker_count: Optional[int] = None,
    ) -> list[Bitmap]:
        """
        Remove the background of one grid and split it into stickers

        Padding cells of the last grid are dropped.

        Args:
            grid: Grid image
            grid_index: Position of this grid in the sticker set
            mask: Optional manual retouch mask for the grid
            sticker_count: Stickers in the whole set (default: config.sticker_count)

        Returns:
            Sticker cells belonging to this grid
        """
        self.logger.start_grid(f"grid-{grid_index + 1}")
        try:
            cleared = remove_background(
                grid, self.config.background_threshold, mask, self.logger
            )
            cells = split_grid(
                cleared, self.config.cell_width, self.config.cell_height, self.logger
            )
        except Exception as e:
            self.logger.log_error(f"Grid {grid_index + 1} failed: {e}", exc_info=True)
            self.logger.save_grid_log()
            raise

        if sticker_count is None:
            sticker_count = self.config.sticker_count
        keep = cells_in_grid(grid_index, sticker_count)
        self.logger.log_info(f"  Grid {grid_index + 1}: keeping {keep}/{len(cells)} cells")
        self.logger.save_grid_log()
        return cells[:keep]

    def process_images(self, sources: Sequence[Optional[BitmapSource]]) -> list[Bitmap]:
        """Composite, clean and split per-sticker images"""
        stickers = []
        for grid_index, grid in enumerate(self.compose_grids(sources)):
            stickers.extend(
                self.process_grid(grid, grid_index, sticker_count=len(sources))
            )
        return stickers

    def generate(self, produce_grid: GridProducer) -> list[Bitmap]:
        """
        Request every grid from an upstream producer and process it

        `produce_grid(grid_index, sticker_indices)` is called once per grid,
        strictly in order. Retrying a failed request is up to the producer.
        """
        stickers = []
        for grid_index in range(self.config.grid_count):
            if grid_index > 0 and self.config.grid_delay > 0:
                self.logger.log_info(
                    f"Waiting {self.config.grid_delay:g}s before requesting next grid..."
                )
                self._sleep(self.config.grid_delay)

            indices = sticker_slice(grid_index, self.config.sticker_count)
            self.logger.log_info(
                f"Requesting grid {grid_index + 1}/{self.config.grid_count} "
                f"(stickers {indices.start + 1}-{indices.stop})"
            )
            grid = load_bitmap(produce_grid(grid_index, indices))
            stickers.extend(self.process_grid(grid, grid_index))
        return stickers

    def prepare_icon(self, source: BitmapSource, size: tuple[int, int]) -> Bitmap:
        """Remove background from a main/tab image and stretch it to size"""
        self.logger.start_grid(f"icon-{size[0]}x{size[1]}")
        try:
            cleared = remove_background(
                source, self.config.background_threshold, logger=self.logger
            )
        except Exception as e:
            self.logger.log_error(f"Icon failed: {e}", exc_info=True)
            self.logger.save_grid_log()
            raise
        self.logger.save_grid_log()
        return cleared.resized(*size)

    def build(
        self,
        sources: Sequence[Optional[BitmapSource]],
        main: Optional[BitmapSource] = None,
        tab: Optional[BitmapSource] = None,
    ) -> StickerSet:
        """Run the full pipeline over per-sticker images"""
        sticker_set = StickerSet(stickers=self.process_images(sources))
        if main is not None:
            sticker_set.main = self.prepare_icon(main, self.config.main_size)
        if tab is not None:
            sticker_set.tab = self.prepare_icon(tab, self.config.tab_size)
        self.logger.log_info(f"Built {len(sticker_set.stickers)} sticker(s)")
        return sticker_set
