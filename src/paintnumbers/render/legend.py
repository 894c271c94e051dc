"""
Legend strip for Paint Numbers templates.

One swatch and number per palette entry, laid out in a fixed-column grid
below the outline image. Every palette entry is listed, used or not, so
numbering stays identical across templates made with the same palette.
"""

import math

import cv2

from paintnumbers.models import round_half_up
from paintnumbers.render.labels import put_centered_text
from paintnumbers.tracer import trace

LEGEND_BACKGROUND = (245, 245, 245)
SEPARATOR_THICKNESS = 2


def legend_grid(palette_size, config):
    """Return (columns, rows) for a legend of palette_size entries."""
    columns = max(1, min(config.legend.max_columns, palette_size))
    rows = math.ceil(palette_size / columns)
    return columns, rows


def legend_height(palette_size, config):
    """Pixel height of the legend strip."""
    _, rows = legend_grid(palette_size, config)
    return config.legend.padding * 2 + rows * config.legend.row_height


@trace(label="draw_legend")
def draw_legend(canvas, palette, image_height, config):
    """
    Draw the legend into canvas rows from image_height down.

    Returns list of (number, swatch_center_x, swatch_center_y) for each
    entry.
    """
    legend_cfg = config.legend
    width = canvas.shape[1]

    canvas[image_height:] = LEGEND_BACKGROUND
    canvas[image_height:image_height + SEPARATOR_THICKNESS] = 0

    columns, _ = legend_grid(len(palette), config)
    item_width = (width - legend_cfg.padding * 2) / columns
    swatch = legend_cfg.swatch_size

    entries = []
    for i, color in enumerate(palette):
        row, col = divmod(i, columns)

        cx = legend_cfg.padding + col * item_width + item_width / 2
        cy = image_height + legend_cfg.padding + row * legend_cfg.row_height + swatch / 2

        x0 = round_half_up(cx - swatch / 2)
        y0 = round_half_up(cy - swatch / 2)
        top_left = (x0, y0)
        bottom_right = (x0 + swatch - 1, y0 + swatch - 1)

        cv2.rectangle(canvas, top_left, bottom_right, color.as_tuple(), thickness=-1)
        cv2.rectangle(canvas, top_left, bottom_right, (0, 0, 0), thickness=1)

        put_centered_text(canvas, str(i + 1), cx, cy + swatch / 2 + 8, legend_cfg.font_size)
        entries.append((i + 1, cx, cy))

    return entries
