"""
Region segmentation for Paint Numbers.

Finds maximal 4-connected runs of identical palette index.
"""

import cv2
import numpy as np

from paintnumbers.models import Region
from paintnumbers.tracer import get_tracer, trace


def label_components(index_map):
    """
    Label 4-connected components of equal palette index.

    Each palette index present in the map is labeled separately with
    OpenCV, so components never cross a color boundary and diagonal
    neighbors stay apart. Component numbers are arbitrary but unique.

    Returns (labels, count) where labels is a flat int64 array.
    """
    flat = index_map.reshape(-1)
    labels = np.empty(flat.size, dtype=np.int64)
    count = 0

    for color in np.unique(flat):
        mask = (index_map == color).astype(np.uint8)
        n, color_labels = cv2.connectedComponents(mask, connectivity=4, ltype=cv2.CV_32S)
        inside = mask.reshape(-1).astype(bool)
        # Label 0 is everything outside this color
        labels[inside] = color_labels.reshape(-1)[inside] + (count - 1)
        count += n - 1

    return labels, count


@trace(label="find_regions")
def find_regions(index_map):
    """
    Segment an index map into regions.

    Region ids follow row-major discovery order starting at 0: components
    are ordered by their first pixel in scan order. Pixel lists are in
    ascending flat position.

    Returns list of Region.
    """
    tracer = get_tracer()

    flat = index_map.reshape(-1)
    labels, count = label_components(index_map)

    _, first = np.unique(labels, return_index=True)
    discovery = np.argsort(first, kind="stable")
    region_of = np.empty(count, dtype=np.int64)
    region_of[discovery] = np.arange(count)

    region_ids = region_of[labels]
    by_region = np.argsort(region_ids, kind="stable").tolist()
    bounds = np.cumsum(np.bincount(region_ids, minlength=count)).tolist()
    colors = flat[first[discovery]].tolist()

    regions = []
    start = 0
    for region_id, end in enumerate(bounds):
        regions.append(Region(
            region_id=region_id,
            color_index=colors[region_id],
            pixels=by_region[start:end],
            area=end - start,
        ))
        start = end

    tracer.event(f"Found {len(regions)} regions")

    return regions
