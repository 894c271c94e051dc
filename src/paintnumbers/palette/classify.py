"""
Pixel classification for Paint Numbers.

Maps every pixel to its nearest palette entry.
"""

import numpy as np

from paintnumbers.tracer import get_tracer, trace


@trace(label="classify_pixels")
def classify_pixels(image, palette, chunk_pixels=65536):
    """
    Build the index map for an image.

    Each pixel gets the index of the palette color with the smallest
    squared Euclidean distance. On ties the lowest index wins. Pixels are
    processed in chunks of chunk_pixels so memory stays bounded for large
    images.

    Returns a C-contiguous (height, width) array of palette indices.
    """
    tracer = get_tracer()

    if not palette:
        raise ValueError("Cannot classify pixels against an empty palette")

    pixels = image.to_array().reshape(-1, 3)
    palette_arr = palette_to_array(palette).astype(np.int32)

    dtype = np.uint8 if len(palette) <= 256 else np.int32
    flat = np.empty(image.pixel_count, dtype=dtype)

    for start in range(0, image.pixel_count, chunk_pixels):
        chunk = pixels[start:start + chunk_pixels].astype(np.int32)
        diff = chunk[:, None, :] - palette_arr[None, :, :]
        dist = (diff * diff).sum(axis=2)
        # argmin returns the first minimum, i.e. the lowest index on ties
        flat[start:start + len(chunk)] = dist.argmin(axis=1)

    index_map = flat.reshape(image.height, image.width)

    if tracer.config.enabled:
        used = len(np.unique(index_map))
        tracer.event(f"Pixels mapped to palette: {used}/{len(palette)} entries used")

    return index_map


def palette_to_array(palette):
    """Convert a list of Color into an (K, 3) uint8 array."""
    return np.array([c.as_tuple() for c in palette], dtype=np.uint8).reshape(-1, 3)
