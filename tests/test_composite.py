import numpy as np
import pytest

from stickergrid.pipeline import Bitmap, EmptyInputError
from stickergrid.pipeline.stages import composite_grid
from stickergrid.pipeline.stages.s1_composite import fit_within


@pytest.mark.parametrize(
    "cell_width, cell_height, count", [(370, 320, 8), (50, 40, 1), (17, 91, 5)]
)
def test_output_is_exact_grid_size(solid, logger, cell_width, cell_height, count):
    images = [solid(30, 60, (0, 0, 0, 255)) for _ in range(count)]
    grid = composite_grid(images, cell_width, cell_height, logger)
    assert grid.size == (2 * cell_width, 4 * cell_height)


def test_empty_input_fails(logger):
    with pytest.raises(EmptyInputError):
        composite_grid([], logger=logger)


def test_fit_within_preserves_aspect_ratio():
    assert fit_within(400, 400, 370, 320) == (320, 320)
    assert fit_within(100, 50, 370, 320) == (370, 185)
    assert fit_within(10, 1000, 370, 320) == (3, 320)


def test_cells_in_reading_order(solid, palette, logger):
    grid = composite_grid([solid(40, 40, c) for c in palette], logger=logger)

    for index, color in enumerate(palette):
        row, col = divmod(index, 2)
        center = grid.pixels[row * 320 + 160, col * 370 + 185]
        assert tuple(center) == color


def test_square_sticker_scaled_and_centered(square_sticker, logger):
    grid = composite_grid([square_sticker()] * 8, logger=logger)

    assert grid.size == (740, 1280)
    for row in range(4):
        for col in range(2):
            y, x = row * 320, col * 370
            # 400x400 -> 320x320 placed at x offset 25; square spans 80..240
            assert tuple(grid.pixels[y + 160, x + 185]) == (255, 0, 0, 255)
            assert tuple(grid.pixels[y + 100, x + 120]) == (255, 0, 0, 255)
            assert tuple(grid.pixels[y + 40, x + 185]) == (255, 255, 255, 255)
            assert tuple(grid.pixels[y + 160, x + 5]) == (255, 255, 255, 255)


def test_wide_image_is_letterboxed(solid, logger):
    grid = composite_grid([solid(100, 50, (0, 0, 255, 255))], logger=logger)

    # 370x185, vertical offset (320 - 185) // 2 = 67
    assert tuple(grid.pixels[67 + 92, 185]) == (0, 0, 255, 255)
    assert tuple(grid.pixels[67, 0]) == (0, 0, 255, 255)
    assert tuple(grid.pixels[66, 185]) == (255, 255, 255, 255)
    assert tuple(grid.pixels[67 + 185, 185]) == (255, 255, 255, 255)


def test_missing_cells_stay_white(solid, logger):
    grid = composite_grid([solid(40, 40, (0, 0, 0, 255))] * 3, logger=logger)
    # Cells 3..7 are padding
    assert (grid.pixels[320:, 370:] == 255).all()
    assert (grid.pixels[640:, :] == 255).all()


def test_undecodable_source_leaves_cell_blank(solid, logger):
    black = solid(40, 40, (0, 0, 0, 255))
    grid = composite_grid([b"garbage", black], logger=logger)

    assert (grid.pixels[:320, :370] == 255).all()
    assert tuple(grid.pixels[160, 370 + 185]) == (0, 0, 0, 255)


def test_none_source_is_skipped(solid, logger):
    grid = composite_grid([None, solid(10, 10, (0, 0, 0, 255))], logger=logger)
    assert (grid.pixels[:320, :370] == 255).all()


def test_transparent_source_blends_onto_white(solid, logger):
    grid = composite_grid([solid(40, 40, (255, 0, 0, 0))], logger=logger)
    assert tuple(grid.pixels[160, 185]) == (255, 255, 255, 255)


def test_extra_images_are_ignored(solid, palette, logger):
    images = [solid(40, 40, c) for c in palette] + [solid(40, 40, (1, 2, 3, 255))]
    grid = composite_grid(images, logger=logger)
    assert tuple(grid.pixels[3 * 320 + 160, 370 + 185]) == palette[7]


def test_sources_are_not_modified(square_sticker, logger):
    sticker = square_sticker()
    before = sticker.pixels.copy()
    composite_grid([sticker], logger=logger)
    assert np.array_equal(sticker.pixels, before)


def test_accepts_encoded_bytes(solid, logger):
    grid = composite_grid([solid(10, 10, (0, 255, 0, 255)).encode()], logger=logger)
    assert tuple(grid.pixels[160, 185]) == (0, 255, 0, 255)


def test_output_is_opaque(square_sticker, logger):
    grid = composite_grid([square_sticker()], logger=logger)
    assert isinstance(grid, Bitmap)
    assert (grid.pixels[:, :, 3] == 255).all()
