"""
Region outlines for Paint Numbers.

An outline pixel sits wherever the index map changes between a pixel and
its right or bottom neighbor. Diagonal changes are ignored.
"""

import numpy as np


def outline_mask(index_map, width=1):
    """
    Compute the outline mask for an index map.

    For a change between (x, y) and (x + 1, y) the run of `width` pixels
    starting at (x + 1, y) is marked; for a change between (x, y) and
    (x, y + 1) the run starting at (x, y + 1) going down is marked.

    Returns a boolean (height, width) array.
    """
    height, cols = index_map.shape
    mask = np.zeros((height, cols), dtype=bool)

    right = index_map[:, :-1] != index_map[:, 1:]
    for k in range(width):
        span = cols - 1 - k
        if span <= 0:
            break
        mask[:, 1 + k:] |= right[:, :span]

    down = index_map[:-1, :] != index_map[1:, :]
    for k in range(width):
        span = height - 1 - k
        if span <= 0:
            break
        mask[1 + k:, :] |= down[:span, :]

    return mask


def draw_outlines(canvas, index_map, width=1, color=(0, 0, 0)):
    """Paint outlines onto the top rows of canvas. Returns the mask used."""
    height = index_map.shape[0]
    mask = outline_mask(index_map, width)
    canvas[:height][mask] = color
    return mask


def blend_outlines(canvas, index_map, opacity):
    """
    Darken outline pixels in place, as a black overlay at the given opacity.

    Channel values are rounded half-up after blending.
    """
    height = index_map.shape[0]
    mask = outline_mask(index_map, 1)
    region = canvas[:height]
    blended = np.floor(region[mask].astype(np.float64) * (1.0 - opacity) + 0.5)
    region[mask] = blended.astype(np.uint8)
    return mask
