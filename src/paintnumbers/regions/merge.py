"""
Small-region merging for Paint Numbers.

Folds regions below the size threshold into the neighbor they share the
most border with, rewriting the index map once all merges are decided.
"""

import numpy as np

from paintnumbers.regions.adjacency import build_region_graph, region_id_map
from paintnumbers.tracer import get_tracer, trace


@trace(label="merge_small_regions")
def merge_small_regions(regions, index_map, min_region_size):
    """
    Merge regions smaller than min_region_size into a neighbor.

    Regions are visited once, smallest first (stable on ties). A visited
    region is skipped if its current area already meets the threshold or if
    it was absorbed earlier. Otherwise it is absorbed by the neighbor it
    shares the most border pixel pairs with, lowest region id on ties. A
    region with no neighbors (it covers the whole image) stays as is.

    Border lengths come from the region adjacency graph, which is kept
    current as regions are absorbed: the absorbed region's edges are folded
    into the absorbing one.

    This is a single pass: a region left standing or grown by a merge is not
    revisited, so survivors can still be below the threshold.

    Mutates index_map, the absorbing regions and the absorbed regions in
    place. Returns the surviving regions (area > 0) in id order.
    """
    tracer = get_tracer()

    height, width = index_map.shape
    by_id = {r.region_id: r for r in regions}
    graph = build_region_graph(regions, width, height)

    merges = 0
    isolated = 0

    for region in sorted(regions, key=lambda r: r.area):
        if region.area >= min_region_size or region.area == 0:
            continue

        border = graph[region.region_id]
        if not border:
            isolated += 1
            continue

        target_id = min(border.items(), key=lambda item: (-item[1]["weight"], item[0]))[0]
        target = by_id[target_id]

        _fold_edges(graph, region.region_id, target_id)

        target.pixels.extend(region.pixels)
        target.area += region.area
        region.clear()
        merges += 1

    survivors = [r for r in regions if r.area > 0]

    if merges:
        color_of = np.zeros(max(by_id) + 1, dtype=index_map.dtype)
        for region in survivors:
            color_of[region.region_id] = region.color_index
        owner = region_id_map(survivors, width, height)
        owned = owner >= 0
        index_map[owned] = color_of[owner[owned]]

    tracer.event(f"Merged {merges} regions, {isolated} isolated, {len(survivors)} remain")

    return survivors


def _fold_edges(graph, source, target):
    """Move source's border weights onto target and drop source."""
    for neighbor, data in list(graph[source].items()):
        if neighbor == target:
            continue
        if graph.has_edge(target, neighbor):
            graph[target][neighbor]["weight"] += data["weight"]
        else:
            graph.add_edge(target, neighbor, weight=data["weight"])
    graph.remove_node(source)
