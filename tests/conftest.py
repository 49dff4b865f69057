import numpy as np
import pytest

from stickergrid.pipeline import Bitmap, PipelineLogger

WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)


def _solid(width, height, color=WHITE):
    return Bitmap.blank(width, height, color)


def _square_sticker(color=RED, size=400, square=200):
    """White sticker with a centered solid square"""
    bitmap = _solid(size, size)
    start = (size - square) // 2
    bitmap.pixels[start : start + square, start : start + square] = color
    return bitmap


@pytest.fixture
def logger(tmp_path):
    return PipelineLogger(log_file=tmp_path / "debug.log")


@pytest.fixture
def solid():
    return _solid


@pytest.fixture
def square_sticker():
    return _square_sticker


@pytest.fixture
def palette():
    """Eight distinct, mid-brightness colours"""
    return [
        (200, 30, 30, 255),
        (30, 160, 30, 255),
        (30, 30, 200, 255),
        (180, 180, 20, 255),
        (150, 20, 150, 255),
        (20, 150, 150, 255),
        (90, 60, 30, 255),
        (10, 10, 10, 255),
    ]


@pytest.fixture
def rgba():
    def make(rows):
        return Bitmap(np.array(rows, dtype=np.uint8))

    return make
