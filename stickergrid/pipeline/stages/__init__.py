"""
Pipeline Stages
"""

from .s1_composite import composite_grid
from .s2_background import remove_background
from .s3_seams import erase_seams
from .s4_split import split_grid

__all__ = ["composite_grid", "remove_background", "erase_seams", "split_grid"]
