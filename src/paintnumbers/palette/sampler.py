"""
Color sampling for Paint Numbers.

Collects a bounded, deterministic set of representative colors from the
input raster before quantization.
"""

import numpy as np

from paintnumbers.tracer import get_tracer, trace


@trace(label="sample_colors")
def sample_colors(image, budget=50000, precision=4):
    """
    Sample colors from a RawImage.

    Pixels are visited with a fixed stride of max(1, pixel_count // budget)
    starting at pixel 0. Each channel is rounded to the nearest multiple of
    precision (halves round up, result clamped to 255) so near-duplicates
    share a bucket.

    Returns (colors, counts):
    - colors: int64 array (N, 3) of distinct reduced colors, ordered by
      first occurrence
    - counts: int64 array (N,) of occurrences among the sampled pixels
    """
    tracer = get_tracer()

    pixels = image.to_array().reshape(-1, 3)
    stride = max(1, image.pixel_count // budget)
    sampled = pixels[::stride].astype(np.int64)

    reduced = (sampled + precision // 2) // precision * precision
    np.minimum(reduced, 255, out=reduced)

    keys = (reduced[:, 0] << 16) | (reduced[:, 1] << 8) | reduced[:, 2]
    unique_keys, first_index, counts = np.unique(keys, return_index=True, return_counts=True)

    order = np.argsort(first_index, kind="stable")
    unique_keys = unique_keys[order]
    counts = counts[order].astype(np.int64)

    colors = np.stack(
        [(unique_keys >> 16) & 0xFF, (unique_keys >> 8) & 0xFF, unique_keys & 0xFF],
        axis=1,
    ).astype(np.int64)

    tracer.event(f"Sampled {len(sampled)} pixels (stride={stride}), {len(colors)} distinct colors")

    return colors, counts
