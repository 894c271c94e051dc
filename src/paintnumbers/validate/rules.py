"""
Validation rules for Paint Numbers.

Checks the invariants a finished template must satisfy: area
conservation, index-map consistency, label spacing, and reports on what
single-pass merging left behind.
"""

import math

import numpy as np

from paintnumbers.models import CheckResult, Severity, ValidationReport
from paintnumbers.regions.adjacency import build_region_graph, same_color_neighbors
from paintnumbers.tracer import get_tracer, trace


@trace(label="run_validation")
def run_validation(regions, index_map, labels, palette, config):
    """
    Run all validation checks on a pipeline result.

    Returns ValidationReport with all check results.
    """
    tracer = get_tracer()

    checks = [
        check_area_conservation(regions, index_map),
        check_index_consistency(regions, index_map),
        check_label_spacing(labels, config),
        check_legend_complete(regions, palette),
        check_min_region_size(regions, config),
        check_adjacent_same_color(regions, index_map),
    ]

    report = ValidationReport(checks=checks)

    tracer.event(f"Validation complete: {report.error_count} errors, {report.warning_count} warnings")

    return report


def check_area_conservation(regions, index_map):
    """
    Check that surviving region areas add up to the image area.
    """
    total = sum(r.area for r in regions if r.area > 0)
    expected = int(index_map.size)

    return CheckResult(
        rule_id="area_conservation",
        severity=Severity.ERROR,
        passed=total == expected,
        message=f"Region areas sum to {total} of {expected} pixels",
        evidence={"total_area": total, "image_area": expected},
    )


def check_index_consistency(regions, index_map):
    """
    Check that every pixel is owned exactly once by a region whose palette
    index matches the index map.
    """
    flat = index_map.reshape(-1)

    ownership = np.zeros(flat.size, dtype=np.int64)
    mismatched = []
    for region in regions:
        if not region.pixels:
            continue
        positions = np.asarray(region.pixels, dtype=np.int64)
        np.add.at(ownership, positions, 1)
        if np.any(flat[positions] != region.color_index):
            mismatched.append(region.region_id)

    unowned = int(np.sum(ownership == 0))
    shared = int(np.sum(ownership > 1))
    passed = not mismatched and unowned == 0 and shared == 0

    return CheckResult(
        rule_id="index_consistency",
        severity=Severity.ERROR,
        passed=passed,
        message=(
            "Index map agrees with region ownership" if passed
            else f"{len(mismatched)} regions disagree with the index map, "
                 f"{unowned} unowned pixels, {shared} shared pixels"
        ),
        evidence={
            "mismatched_regions": mismatched[:5],
            "unowned_pixels": unowned,
            "shared_pixels": shared,
        },
    )


def check_label_spacing(labels, config):
    """
    Check that each label keeps its distance from every label placed
    before it.
    """
    factor = config.labels.overlap_factor
    violations = []

    for i, label in enumerate(labels):
        for earlier in labels[:i]:
            dist = math.hypot(label.x - earlier.x, label.y - earlier.y)
            if dist < label.font_size * factor + earlier.radius:
                violations.append([earlier.region_id, label.region_id])

    return CheckResult(
        rule_id="label_spacing",
        severity=Severity.ERROR,
        passed=not violations,
        message=(
            f"{len(labels)} labels placed without crowding" if not violations
            else f"{len(violations)} label pairs are too close"
        ),
        evidence={"crowded_pairs": violations[:5]},
    )


def check_legend_complete(regions, palette):
    """
    Report how many legend entries are backed by a surviving region.

    The legend always lists the full palette; unused entries are expected
    and only reported.
    """
    used = {r.color_index for r in regions if r.area > 0}
    unused = [i + 1 for i in range(len(palette)) if i not in used]

    return CheckResult(
        rule_id="legend_complete",
        severity=Severity.INFO,
        passed=True,
        message=f"Legend lists {len(palette)} colors, {len(used)} used by regions",
        evidence={"palette_size": len(palette), "used": len(used), "unused_numbers": unused},
    )


def check_min_region_size(regions, config):
    """
    Check for surviving regions below the merge threshold.
    """
    threshold = config.regions.min_region_size
    small = [r.region_id for r in regions if 0 < r.area < threshold]

    return CheckResult(
        rule_id="min_region_size",
        severity=Severity.WARN,
        passed=not small,
        message=(
            f"All regions have at least {threshold} pixels" if not small
            else f"{len(small)} regions remain below {threshold} pixels"
        ),
        evidence={"small_regions": small[:5], "count": len(small)},
    )


def check_adjacent_same_color(regions, index_map):
    """
    Report neighboring regions that ended up with the same palette index.

    Merging can recolor a region to match a third region it also touches;
    the two then read as one area on the template.
    """
    height, width = index_map.shape
    graph = build_region_graph(regions, width, height)
    pairs = same_color_neighbors(graph)

    return CheckResult(
        rule_id="adjacent_same_color",
        severity=Severity.INFO,
        passed=not pairs,
        message=f"{len(pairs)} adjacent region pairs share a color",
        evidence={"pairs": [list(p) for p in pairs[:5]], "edges": graph.number_of_edges()},
    )
