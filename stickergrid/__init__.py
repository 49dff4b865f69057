"""
LINE sticker sheet processing: 2x4 grid composite, flood-fill background
removal, seam erasure and cell splitting
"""

__version__ = "0.1.0"
