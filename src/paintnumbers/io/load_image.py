"""
Image loading for Paint Numbers.

Decodes image files or buffers with OpenCV and downscales them so the
pipeline works on a bounded number of pixels.
"""

import os

import cv2
import numpy as np

from paintnumbers.models import RawImage, round_half_up
from paintnumbers.tracer import get_tracer, trace

SUPPORTED_EXTENSIONS = [".png", ".jpg", ".jpeg", ".webp", ".tiff", ".tif", ".bmp"]


@trace(label="load_image")
def load_image(path, max_dimension=1000):
    """
    Load an image from disk.

    Returns a tuple of (image, metadata) where:
    - image: RawImage, RGB, alpha dropped, larger side <= max_dimension
    - metadata: dict with width, height, original_width, original_height,
      source_path

    Raises FileNotFoundError if path does not exist.
    Raises ValueError if image cannot be decoded.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Image not found: {path}")

    img_bgr = cv2.imread(path, cv2.IMREAD_COLOR)
    if img_bgr is None:
        raise ValueError(f"Failed to load image: {path}")

    image, metadata = _prepare(img_bgr, max_dimension)
    metadata["source_path"] = os.path.abspath(path)
    return image, metadata


@trace(label="decode_image_bytes")
def decode_image_bytes(buffer, max_dimension=1000):
    """
    Decode an in-memory encoded image (PNG, JPEG, ...).

    Same return value as load_image, with source_path set to None.
    """
    encoded = np.frombuffer(buffer, dtype=np.uint8)
    img_bgr = cv2.imdecode(encoded, cv2.IMREAD_COLOR) if encoded.size else None
    if img_bgr is None:
        raise ValueError("Failed to decode image buffer")

    image, metadata = _prepare(img_bgr, max_dimension)
    metadata["source_path"] = None
    return image, metadata


def _prepare(img_bgr, max_dimension):
    """Convert BGR to RGB and downscale so the larger side fits max_dimension."""
    tracer = get_tracer()

    img_rgb = cv2.cvtColor(img_bgr, cv2.COLOR_BGR2RGB)
    original_height, original_width = img_rgb.shape[:2]

    width, height = fit_within(original_width, original_height, max_dimension)
    if (width, height) != (original_width, original_height):
        img_rgb = cv2.resize(img_rgb, (width, height), interpolation=cv2.INTER_AREA)

    tracer.event(f"Loaded image: {original_width}x{original_height} -> {width}x{height}")

    metadata = {
        "width": width,
        "height": height,
        "original_width": original_width,
        "original_height": original_height,
    }

    return RawImage.from_array(img_rgb), metadata


def fit_within(width, height, max_dimension):
    """
    Scale (width, height) so neither side exceeds max_dimension.

    Aspect ratio is preserved; sides never drop below 1 pixel.
    """
    if not max_dimension or (width <= max_dimension and height <= max_dimension):
        return width, height

    scale = max_dimension / max(width, height)
    return max(1, round_half_up(width * scale)), max(1, round_half_up(height * scale))


def validate_image_inputs(paths):
    """
    Validate that all input paths exist and are readable images.

    Returns a list of error messages (empty if all valid).
    """
    errors = []

    for path in paths:
        if not os.path.exists(path):
            errors.append(f"File not found: {path}")
            continue

        ext = os.path.splitext(path)[1].lower()
        if ext not in SUPPORTED_EXTENSIONS:
            errors.append(f"Unsupported image format: {path}")
            continue

        if cv2.imread(path, cv2.IMREAD_COLOR) is None:
            errors.append(f"Cannot read image: {path}")

    return errors
