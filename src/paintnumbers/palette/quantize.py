"""
Median-cut color quantization for Paint Numbers.

Reduces the sampled colors to a palette of at most K entries. The split
order is fully determined by the sample order, so the palette is stable
across runs.
"""

import numpy as np

from paintnumbers.models import Color, div_round_half_up
from paintnumbers.palette.sampler import sample_colors
from paintnumbers.tracer import get_tracer, trace

CHANNEL_NAMES = ("r", "g", "b")


@trace(label="quantize_colors")
def quantize_colors(image, config):
    """
    Build the palette for an image.

    Samples the image, then runs median-cut down to config.quantize.num_colors.
    Returns a list of Color.
    """
    tracer = get_tracer()

    colors, counts = sample_colors(
        image,
        budget=config.quantize.sample_budget,
        precision=config.quantize.precision,
    )
    palette = median_cut(colors, counts, config.quantize.num_colors)

    tracer.event(f"Palette extracted: {len(palette)} colors")

    return palette


def median_cut(colors, counts, num_colors):
    """
    Median-cut quantization over weighted colors.

    colors: (N, 3) integer array, counts: (N,) occurrence weights.

    If N <= num_colors the colors are returned unchanged. Otherwise the
    widest (bucket, channel) range is split at its median until there are
    num_colors buckets or every bucket is monochromatic. Ties go to the
    earliest bucket, then to channel order R, G, B. Each bucket becomes its
    count-weighted average color.
    """
    colors = np.asarray(colors, dtype=np.int64).reshape(-1, 3)
    counts = np.asarray(counts, dtype=np.int64).reshape(-1)

    if len(colors) <= num_colors:
        return [Color(r=int(c[0]), g=int(c[1]), b=int(c[2])) for c in colors]

    # Buckets hold indices into colors, kept in their current sort order
    buckets = [np.arange(len(colors))]

    while len(buckets) < num_colors:
        bucket_idx, channel, widest = _find_widest_bucket(colors, buckets)
        if widest <= 0:
            break

        bucket = buckets[bucket_idx]
        order = np.argsort(colors[bucket, channel], kind="stable")
        bucket = bucket[order]
        mid = len(bucket) // 2

        buckets[bucket_idx:bucket_idx + 1] = [bucket[:mid], bucket[mid:]]

    return [_bucket_average(colors, counts, bucket) for bucket in buckets]


def _find_widest_bucket(colors, buckets):
    """
    Find the bucket and channel with the largest value range.

    Only buckets with at least two colors are considered. Returns
    (bucket_index, channel, range); range is -1 when nothing can be split.
    """
    best_range = -1
    best_bucket = 0
    best_channel = 0

    for i, bucket in enumerate(buckets):
        if len(bucket) < 2:
            continue

        values = colors[bucket]
        ranges = values.max(axis=0) - values.min(axis=0)

        for channel in range(3):
            if ranges[channel] > best_range:
                best_range = int(ranges[channel])
                best_bucket = i
                best_channel = channel

    return best_bucket, best_channel, best_range


def _bucket_average(colors, counts, bucket):
    """Count-weighted average color of a bucket, rounded half-up."""
    weights = counts[bucket]
    total = int(weights.sum())
    sums = (colors[bucket] * weights[:, None]).sum(axis=0)

    r, g, b = (min(255, div_round_half_up(int(s), total)) for s in sums)
    return Color(r=r, g=g, b=b)
