"""
Region number placement for Paint Numbers.

Larger regions claim their label spot first; a label that would crowd an
already placed one is dropped, leaving only the outline for that region.
"""

import math

import cv2

from paintnumbers.models import PlacedLabel, round_half_up
from paintnumbers.tracer import get_tracer, trace

FONT = cv2.FONT_HERSHEY_SIMPLEX
# Approximate pixel height of a digit at font scale 1.0
GLYPH_HEIGHT = 22.0


@trace(label="place_labels")
def place_labels(regions, width, height, config):
    """
    Choose label anchors for regions.

    For each region, largest area first:
    1. Skip if area < min_region_for_number
    2. Font size = sqrt(area / pi) / 2 clamped to [min_font_size, font_size]
    3. Clamp the centroid into the image, keeping a font-size margin
    4. Reject if closer than font_size * overlap_factor + placed.radius to
       any placed anchor

    Returns list of PlacedLabel in placement order.
    """
    tracer = get_tracer()
    label_cfg = config.labels

    placed = []
    skipped_small = 0
    rejected = 0

    for region in sorted(regions, key=lambda r: -r.area):
        if region.area == 0 or region.area < label_cfg.min_region_for_number:
            skipped_small += 1
            continue

        region_radius = math.sqrt(region.area / math.pi)
        font_size = min(label_cfg.font_size, max(label_cfg.min_font_size, region_radius / 2))

        x, y = clamp_anchor(region.centroid, font_size, width, height)

        min_dist = font_size * label_cfg.overlap_factor
        if any(math.hypot(x - p.x, y - p.y) < min_dist + p.radius for p in placed):
            rejected += 1
            continue

        placed.append(PlacedLabel(
            region_id=region.region_id,
            number=region.number,
            x=x,
            y=y,
            font_size=font_size,
            radius=font_size / 2,
        ))

    tracer.event(f"Placed {len(placed)} labels, {skipped_small} too small, {rejected} crowded out")

    return placed


def clamp_anchor(centroid, font_size, width, height):
    """
    Keep an anchor inside the image.

    The anchor is first pulled at least font_size away from each edge, then
    forced into [0, dimension - 1] for images too small for that margin.
    """
    x = max(font_size, min(width - font_size, centroid[0]))
    y = max(font_size, min(height - font_size, centroid[1]))
    x = min(max(x, 0), width - 1)
    y = min(max(y, 0), height - 1)
    return float(x), float(y)


def draw_labels(canvas, labels, color=(0, 0, 0)):
    """Draw each label's number centered on its anchor."""
    for label in labels:
        put_centered_text(canvas, str(label.number), label.x, label.y, label.font_size, color)


def put_centered_text(canvas, text, x, y, font_size, color=(0, 0, 0)):
    """
    Draw text centered on (x, y) with a pixel height of roughly font_size.

    Drawing is clipped to the canvas.
    """
    scale = font_size / GLYPH_HEIGHT
    (text_w, text_h), _ = cv2.getTextSize(text, FONT, scale, 1)
    origin = (round_half_up(x - text_w / 2), round_half_up(y + text_h / 2))
    cv2.putText(canvas, text, origin, FONT, scale, color, 1, cv2.LINE_8)
