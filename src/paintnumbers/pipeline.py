"""
Main pipeline orchestrator for Paint Numbers.

Runs quantization, classification, segmentation, merging, centroid and
rendering stages in order. generate_paint_by_numbers is the pure core:
no file or network I/O unless a debug writer is handed in. run_pipeline
wraps it with image loading and output files.
"""

import os

from paintnumbers.config import PipelineConfig, load_config, validate_config
from paintnumbers.errors import InvalidInputError
from paintnumbers.io.load_image import decode_image_bytes, load_image, validate_image_inputs
from paintnumbers.io.save_artifacts import (
    DebugArtifactWriter, colorize_index_map, encode_png_base64, ensure_dir,
    palette_strip, save_image, save_json,
)
from paintnumbers.models import PaintByNumbersResult, RawImage, generate_image_id, generate_result_id
from paintnumbers.palette.classify import classify_pixels, palette_to_array
from paintnumbers.palette.quantize import quantize_colors
from paintnumbers.regions.centroids import compute_centroids
from paintnumbers.regions.merge import merge_small_regions
from paintnumbers.regions.segment import find_regions
from paintnumbers.render.template import render_preview, render_template
from paintnumbers.tracer import get_tracer, trace
from paintnumbers.validate.report import generate_report
from paintnumbers.validate.rules import run_validation


def validate_raw_image(image):
    """
    Reject images the pipeline cannot process.

    Raises InvalidInputError for zero-area images and for buffers whose
    length does not match width * height * 3.
    """
    if image.width == 0 or image.height == 0:
        raise InvalidInputError(f"Image has zero area: {image.width}x{image.height}")

    expected = image.width * image.height * 3
    if len(image.data) != expected:
        raise InvalidInputError(
            f"Pixel buffer holds {len(image.data)} bytes, expected {expected} "
            f"for {image.width}x{image.height} RGB"
        )


@trace(label="generate_paint_by_numbers")
def generate_paint_by_numbers(image, config=None, debug_writer=None):
    """
    Turn a RawImage into a paint-by-numbers template and colored preview.

    Args:
        image: RawImage with packed RGB bytes
        config: PipelineConfig object (optional, defaults used otherwise)
        debug_writer: DebugArtifactWriter for per-stage artifacts (optional)

    Returns:
        PaintByNumbersResult

    Raises:
        InvalidInputError: zero-area image or malformed pixel buffer
        ConfigError: configuration values that cannot produce output
    """
    tracer = get_tracer()

    if config is None:
        config = PipelineConfig()
    validate_config(config)
    validate_raw_image(image)

    tracer.event(f"Starting paint-by-numbers generation: {image.width}x{image.height}")

    with tracer.span("quantize", module="pipeline"):
        palette = quantize_colors(image, config)

    with tracer.span("classify", module="pipeline"):
        index_map = classify_pixels(image, palette, config.quantize.classify_chunk_pixels)

        if debug_writer:
            palette_arr = palette_to_array(palette)
            debug_writer.save_image(palette_strip(palette_arr), "stage1_palette", "01_palette.png")
            debug_writer.save_json([c.model_dump() for c in palette], "stage1_palette", "palette.json")
            debug_writer.save_image(
                colorize_index_map(index_map, palette_arr), "stage2_classify", "01_index_map.png"
            )

    with tracer.span("segment", module="pipeline"):
        regions = find_regions(index_map)
        initial_count = len(regions)

    with tracer.span("merge", module="pipeline"):
        regions = merge_small_regions(regions, index_map, config.regions.min_region_size)

        if debug_writer:
            debug_writer.save_image(
                colorize_index_map(index_map, palette_to_array(palette)), "stage4_merge", "01_merged_map.png"
            )
            debug_writer.save_json(
                {"initial_regions": initial_count, "surviving_regions": len(regions)},
                "stage4_merge",
                "merge_metrics.json",
            )

    with tracer.span("centroids", module="pipeline"):
        compute_centroids(regions, image.width)

    with tracer.span("render", module="pipeline"):
        template_arr, labels, legend_px = render_template(index_map, palette, regions, config)
        preview_arr = render_preview(index_map, palette, config)

    validation = None
    if config.validation.enabled:
        with tracer.span("validate", module="pipeline"):
            validation = run_validation(regions, index_map, labels, palette, config)
            if validation.has_errors:
                tracer.event(f"Validation found {validation.error_count} errors", level="WARN")

    template = RawImage.from_array(template_arr)
    preview = RawImage.from_array(preview_arr)

    result = PaintByNumbersResult(
        result_id=generate_result_id(template, preview),
        template=template,
        preview=preview,
        palette=palette,
        regions=regions,
        labels=labels,
        legend_height=legend_px,
        validation=validation,
    )

    tracer.event(
        f"Generation complete: {len(palette)} colors, {initial_count} -> {len(regions)} regions, "
        f"{len(labels)} labels"
    )

    return result


@trace(label="generate_png_base64")
def generate_png_base64(buffer, config=None):
    """
    Run the pipeline on an encoded image and return base64 PNGs.

    Returns dict with image_base64 (template), colored_base64 (preview),
    mime_type and result_id.
    """
    if config is None:
        config = PipelineConfig()

    image, _ = decode_image_bytes(buffer, config.input.max_dimension)
    result = generate_paint_by_numbers(image, config)

    return {
        "image_base64": encode_png_base64(result.template),
        "colored_base64": encode_png_base64(result.preview),
        "mime_type": "image/png",
        "result_id": result.result_id,
    }


@trace(label="run_pipeline")
def run_pipeline(input_path, out_dir, config=None, config_path=None, debug=False):
    """
    Run the full pipeline on an image file and write the outputs.

    Args:
        input_path: input image file path
        out_dir: output directory
        config: PipelineConfig object (optional)
        config_path: path to YAML config file (optional)
        debug: enable debug artifact generation

    Writes template.png, preview.png, palette.json, regions.json,
    summary.json and, when validation is enabled, the validation report.

    Returns:
        PaintByNumbersResult
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)
    if debug:
        config.debug.enabled = True

    errors = validate_image_inputs([input_path])
    if errors:
        for error in errors:
            tracer.event(error, level="ERROR")
        raise ValueError(f"Input validation failed: {errors}")

    ensure_dir(out_dir)

    image, metadata = load_image(input_path, config.input.max_dimension)
    metadata["image_id"] = generate_image_id(image)

    debug_writer = DebugArtifactWriter(
        out_dir,
        enabled=True,
        max_edge=config.debug.max_edge_scale,
    ) if config.debug.enabled else None

    result = generate_paint_by_numbers(image, config, debug_writer)

    with tracer.span("save_outputs", module="pipeline"):
        save_image(result.template, os.path.join(out_dir, "template.png"))
        save_image(result.preview, os.path.join(out_dir, "preview.png"))

        save_json(
            [
                {"number": i + 1, "hex": c.hex, "rgb": list(c.as_tuple())}
                for i, c in enumerate(result.palette)
            ],
            os.path.join(out_dir, "palette.json"),
        )
        save_json(
            {
                "regions": [
                    {
                        "region_id": r.region_id,
                        "number": r.number,
                        "area": r.area,
                        "centroid": r.centroid,
                    }
                    for r in result.regions
                ],
                "labels": [label.model_dump() for label in result.labels],
            },
            os.path.join(out_dir, "regions.json"),
        )

        summary = result.summary()
        summary["input"] = metadata
        save_json(summary, os.path.join(out_dir, "summary.json"))

        if result.validation is not None:
            generate_report(result.validation, out_dir)

    tracer.event(f"Pipeline complete: outputs saved to {out_dir}")

    return result
