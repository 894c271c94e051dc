"""
Template and preview rendering for Paint Numbers.
"""

import numpy as np

from paintnumbers.palette.classify import palette_to_array
from paintnumbers.render.labels import draw_labels, place_labels
from paintnumbers.render.legend import draw_legend, legend_height
from paintnumbers.render.outlines import blend_outlines, draw_outlines
from paintnumbers.tracer import get_tracer, trace


@trace(label="render_template")
def render_template(index_map, palette, regions, config):
    """
    Render the black-and-white template with numbers and legend.

    Returns (canvas, labels, legend_px) where canvas is an
    (height + legend_px, width, 3) uint8 RGB array.
    """
    tracer = get_tracer()

    height, width = index_map.shape
    legend_px = legend_height(len(palette), config)

    canvas = np.full((height + legend_px, width, 3), 255, dtype=np.uint8)

    with tracer.span("outlines", module="template"):
        mask = draw_outlines(canvas, index_map, config.outline.width)
        tracer.event(f"Outline pixels: {int(mask.sum())}")

    with tracer.span("labels", module="template"):
        labels = place_labels(regions, width, height, config)
        draw_labels(canvas, labels)

    # Legend goes last so label text spilling past the image is covered
    with tracer.span("legend", module="template"):
        draw_legend(canvas, palette, height, config)

    return canvas, labels, legend_px


@trace(label="render_preview")
def render_preview(index_map, palette, config):
    """
    Render the colored preview: palette fill plus faint outlines.

    Returns an (height, width, 3) uint8 RGB array.
    """
    canvas = palette_to_array(palette)[index_map]
    canvas = np.ascontiguousarray(canvas)

    if config.outline.preview_opacity > 0:
        blend_outlines(canvas, index_map, config.outline.preview_opacity)

    return canvas
