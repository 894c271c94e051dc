"""
Centroid calculation for Paint Numbers.
"""

import numpy as np

from paintnumbers.models import div_round_half_up
from paintnumbers.tracer import trace


@trace(label="compute_centroids")
def compute_centroids(regions, width):
    """
    Set each region's centroid to the mean pixel position.

    Coordinates are rounded half-up with exact integer arithmetic. The
    centroid may fall outside a non-convex region; it only anchors the
    label. Empty regions are left untouched.
    """
    for region in regions:
        if not region.pixels:
            continue

        positions = np.asarray(region.pixels, dtype=np.int64)
        n = len(positions)
        sum_x = int((positions % width).sum())
        sum_y = int((positions // width).sum())

        region.centroid = [div_round_half_up(sum_x, n), div_round_half_up(sum_y, n)]

    return regions
