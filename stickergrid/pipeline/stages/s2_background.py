"""
Stage 2: Background Removal using Flood Fill from the image border
"""

from typing import Optional

import numpy as np
from scipy import ndimage

from ..bitmap import Bitmap, BitmapSource, load_bitmap
from ..logger import PipelineLogger
from ..mask import Mask

DEFAULT_THRESHOLD = 240

# 4-connected neighbourhood
CROSS = ndimage.generate_binary_structure(2, 1)


def brightness_mask(pixels: np.ndarray, threshold: int) -> np.ndarray:
    """
    Pixels whose channel average (R+G+B)/3 is above threshold

    Compared as R+G+B > 3*threshold to stay in integers.
    """
    total = pixels[:, :, :3].astype(np.int32).sum(axis=2)
    return total > 3 * threshold


def flood_fill_from_border(candidates: np.ndarray) -> np.ndarray:
    """
    Select candidate pixels 4-connected to the image border

    Args:
        candidates: Boolean mask (True = background-coloured)

    Returns:
        Boolean mask (True = background reachable from an edge pixel)
    """
    labels, num_labels = ndimage.label(candidates, structure=CROSS)
    if num_labels == 0:
        return np.zeros(candidates.shape, dtype=bool)

    border_labels = np.unique(
        np.concatenate([labels[0, :], labels[-1, :], labels[:, 0], labels[:, -1]])
    )
    border_labels = border_labels[border_labels > 0]

    return np.isin(labels, border_labels)


def apply_mask(result: np.ndarray, original: np.ndarray, mask: Mask) -> tuple[int, int]:
    """
    Apply manual overrides on top of the threshold result (in place)

    DELETE forces alpha to 0, PROTECT restores the original RGBA.

    Returns:
        (protected_pixels, deleted_pixels)
    """
    if (mask.width, mask.height) != (original.shape[1], original.shape[0]):
        raise ValueError(
            f"Mask size {mask.width}x{mask.height} does not match "
            f"image size {original.shape[1]}x{original.shape[0]}"
        )

    deleted = mask.deleted()
    protected = mask.protected()

    result[deleted, 3] = 0
    result[protected] = original[protected]

    return int(np.count_nonzero(protected)), int(np.count_nonzero(deleted))


def remove_background(
    source: BitmapSource,
    threshold: int = DEFAULT_THRESHOLD,
    mask: Optional[Mask] = None,
    logger: Optional[PipelineLogger] = None,
) -> Bitmap:
    """
    Make the near-white background transparent

    Algorithm:
    1. Mark pixels brighter than threshold (channel average)
    2. Flood fill from every border pixel through bright pixels (4-connected)
    3. Set alpha = 0 on everything reached; RGB is preserved
    4. Apply the optional retouch mask, which wins per pixel

    Bright regions enclosed by the subject are never reached, so light
    clothing or highlights inside a character survive.

    Args:
        source: Image to process
        threshold: Brightness cut-off, clamped to 0-255 (lower = more aggressive)
        mask: Optional manual retouch mask
        logger: Logger instance

    Returns:
        New bitmap with updated alpha channel

    Raises:
        DecodeError: If the source cannot be decoded
    """
    logger = logger or PipelineLogger()

    image = load_bitmap(source)
    threshold = max(0, min(255, int(threshold)))

    logger.log_info(f"Stage 2: Removing background (threshold={threshold})...")

    original = image.pixels
    result = original.copy()

    bright = brightness_mask(original, threshold)
    background = flood_fill_from_border(bright)
    result[background, 3] = 0

    removed = int(np.count_nonzero(background))
    logger.log_info(
        f"  Removed {removed:,} of {background.size:,} pixels "
        f"({removed / background.size:.1%})"
    )

    protected = deleted = 0
    if mask is not None:
        protected, deleted = apply_mask(result, original, mask)
        logger.log_info(f"  Mask applied: {protected:,} protected, {deleted:,} deleted")

    logger.log_s2(
        method="border_flood_fill",
        threshold=threshold,
        image_size=image.size,
        bright_pixels=int(np.count_nonzero(bright)),
        removed_pixels=removed,
        mask_applied=mask is not None,
        mask_protected=protected,
        mask_deleted=deleted,
    )

    return Bitmap(result)
