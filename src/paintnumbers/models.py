"""
Pydantic data models for Paint Numbers.

Pixel buffers, palettes, regions and placed labels flow between pipeline
stages through these models. Content-based ID generation gives every result
a deterministic fingerprint.
"""

import hashlib
import math
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Severity levels for validation checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class RawImage(BaseModel):
    """
    A packed RGB raster.

    data holds width * height * 3 bytes in row-major order, one byte per
    channel, no alpha.
    """
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    data: bytes = b""

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def pixel_count(self):
        return self.width * self.height

    @classmethod
    def from_array(cls, arr):
        """Build a RawImage from an (H, W, 3) uint8 array."""
        arr = np.ascontiguousarray(arr, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Expected (H, W, 3) array, got shape {arr.shape}")
        height, width = arr.shape[:2]
        return cls(width=width, height=height, data=arr.tobytes())

    def to_array(self):
        """Return a read-only (H, W, 3) uint8 view over the pixel bytes."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 3)


class Color(BaseModel):
    """An 8-bit RGB color."""
    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)

    model_config = ConfigDict(extra="forbid", frozen=True)

    def as_tuple(self):
        return (self.r, self.g, self.b)

    @property
    def hex(self):
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


class Region(BaseModel):
    """
    A 4-connected set of pixels sharing one palette index.

    pixels holds flat positions (y * width + x). A region absorbed by the
    merger keeps its id but has no pixels and zero area.
    """
    region_id: int = Field(..., ge=0)
    color_index: int = Field(..., ge=0)
    pixels: List[int] = Field(default_factory=list)
    area: int = 0
    centroid: List[int] = Field(default_factory=lambda: [0, 0])

    model_config = ConfigDict(extra="forbid")

    @property
    def number(self):
        """Display label painted inside the region."""
        return self.color_index + 1

    def clear(self):
        self.pixels = []
        self.area = 0


class PlacedLabel(BaseModel):
    """A region number accepted by label placement."""
    region_id: int
    number: int
    x: float
    y: float
    font_size: float
    radius: float

    model_config = ConfigDict(extra="forbid")


class CheckResult(BaseModel):
    """Result of a single validation check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Collection of validation check results."""
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def has_errors(self):
        """Check if any errors exist."""
        return any(c.severity == Severity.ERROR and not c.passed for c in self.checks)

    @property
    def error_count(self):
        """Count of failed error-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.ERROR and not c.passed)

    @property
    def warning_count(self):
        """Count of failed warning-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)


class PaintByNumbersResult(BaseModel):
    """Everything produced by one pipeline run."""
    result_id: str
    template: RawImage
    preview: RawImage
    palette: List[Color] = Field(default_factory=list)
    regions: List[Region] = Field(default_factory=list)
    labels: List[PlacedLabel] = Field(default_factory=list)
    legend_height: int = 0
    validation: Optional[ValidationReport] = None

    model_config = ConfigDict(extra="forbid")

    def summary(self):
        """Compact, JSON-friendly description without pixel payloads."""
        return {
            "result_id": self.result_id,
            "width": self.preview.width,
            "height": self.preview.height,
            "template_height": self.template.height,
            "palette": [c.hex for c in self.palette],
            "region_count": len(self.regions),
            "label_count": len(self.labels),
        }


# Integer rounding helpers. Python's round() is half-to-even; the pipeline
# rounds halves up everywhere.

def div_round_half_up(numerator, denominator):
    """Round numerator / denominator to the nearest integer, halves up."""
    return (2 * numerator + denominator) // (2 * denominator)


def round_half_up(value):
    """Round a float to the nearest integer, halves up."""
    return int(math.floor(value + 0.5))


# ID generation functions for deterministic outputs

def generate_image_id(image):
    """
    Generate deterministic image ID from dimensions and pixel bytes.
    """
    h = hashlib.sha256()
    h.update(f"{image.width}x{image.height}:".encode())
    h.update(image.data)
    return f"img_{h.hexdigest()[:12]}"


def generate_result_id(template, preview):
    """
    Generate deterministic result ID from the rendered template and preview.

    Two runs over the same input and configuration share the same ID.
    """
    h = hashlib.sha256()
    for raster in (template, preview):
        h.update(f"{raster.width}x{raster.height}:".encode())
        h.update(raster.data)
    return f"pbn_{h.hexdigest()[:16]}"
