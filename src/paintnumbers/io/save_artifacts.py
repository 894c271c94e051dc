"""
Artifact saving utilities for Paint Numbers.

Handles writing rendered rasters, JSON files and debug artifacts.
"""

import base64
import json
import os

import cv2
import numpy as np

from paintnumbers.models import RawImage
from paintnumbers.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def _as_array(img):
    if isinstance(img, RawImage):
        return img.to_array()
    return img


def _to_bgr(img):
    """Convert an RGB array to OpenCV's BGR channel order."""
    if img.ndim == 3 and img.shape[2] == 3:
        return cv2.cvtColor(img, cv2.COLOR_RGB2BGR)
    return img


def save_image(img, path, max_edge=None):
    """
    Save a RawImage or RGB/grayscale array to disk.

    Optionally downscales to max_edge while preserving aspect ratio.
    """
    tracer = get_tracer()

    img = _as_array(img)

    if max_edge and max(img.shape[:2]) > max_edge:
        scale = max_edge / max(img.shape[:2])
        new_size = (max(1, int(img.shape[1] * scale)), max(1, int(img.shape[0] * scale)))
        img = cv2.resize(img, new_size, interpolation=cv2.INTER_AREA)

    ensure_dir(os.path.dirname(path))
    if not cv2.imwrite(path, _to_bgr(img)):
        raise ValueError(f"Failed to write image: {path}")
    tracer.event(f"Saved image: {path}")


def encode_png(img):
    """Encode a RawImage or RGB array as PNG bytes."""
    ok, encoded = cv2.imencode(".png", _to_bgr(_as_array(img)))
    if not ok:
        raise ValueError("PNG encoding failed")
    return encoded.tobytes()


def encode_png_base64(img):
    """Encode a RawImage or RGB array as a base64 PNG string."""
    return base64.b64encode(encode_png(img)).decode("ascii")


def save_json(data, path, indent=2):
    """
    Save a dictionary or Pydantic model to JSON.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


def colorize_index_map(index_map, palette_arr):
    """Paint an index map with its palette for inspection."""
    return np.ascontiguousarray(palette_arr[index_map])


def palette_strip(palette_arr, swatch=32):
    """Render palette colors side by side as an (swatch, K * swatch, 3) image."""
    if len(palette_arr) == 0:
        return np.zeros((swatch, swatch, 3), dtype=np.uint8)
    strip = np.repeat(palette_arr[None, :, :], swatch, axis=0)
    return np.ascontiguousarray(np.repeat(strip, swatch, axis=1))


class DebugArtifactWriter:
    """
    Helper class to manage debug artifact writing for one run.

    Artifacts land in <out_dir>/debug/<stage_name>/.
    """

    def __init__(self, out_dir, enabled=True, max_edge=1600):
        self.out_dir = out_dir
        self.enabled = enabled
        self.max_edge = max_edge

    def get_stage_dir(self, stage_name):
        """Get the debug directory for a stage, creating it if needed."""
        stage_dir = os.path.join(self.out_dir, "debug", stage_name)
        ensure_dir(stage_dir)
        return stage_dir

    def save_image(self, img, stage_name, filename):
        """Save an image artifact."""
        if not self.enabled:
            return
        path = os.path.join(self.get_stage_dir(stage_name), filename)
        save_image(img, path, max_edge=self.max_edge)

    def save_json(self, data, stage_name, filename):
        """Save a JSON artifact."""
        if not self.enabled:
            return
        path = os.path.join(self.get_stage_dir(stage_name), filename)
        save_json(data, path)
