"""
Region adjacency graph for Paint Numbers.

Describes which surviving regions touch and how long their shared border
is. Used by validation to inspect what single-pass merging leaves behind.
"""

import networkx as nx
import numpy as np

from paintnumbers.tracer import get_tracer, trace


def region_id_map(regions, width, height):
    """
    Rasterize region ownership.

    Returns a (height, width) int64 array of owning region ids; pixels not
    owned by any of the given regions hold -1.
    """
    owner = np.full(width * height, -1, dtype=np.int64)
    for region in regions:
        if region.pixels:
            owner[np.asarray(region.pixels, dtype=np.int64)] = region.region_id
    return owner.reshape(height, width)


@trace(label="build_region_graph")
def build_region_graph(regions, width, height):
    """
    Build an undirected graph of 4-adjacent regions.

    Nodes are region ids with area, color_index and centroid attributes.
    Edge weight is the number of pixel pairs straddling the shared border.
    """
    tracer = get_tracer()

    graph = nx.Graph()
    for region in regions:
        if region.area > 0:
            graph.add_node(
                region.region_id,
                area=region.area,
                color_index=region.color_index,
                centroid=tuple(region.centroid),
            )

    owner = region_id_map(regions, width, height)

    pairs = []
    for a, b in ((owner[:, :-1], owner[:, 1:]), (owner[:-1, :], owner[1:, :])):
        mask = (a != b) & (a >= 0) & (b >= 0)
        if mask.any():
            pairs.append(np.stack([np.minimum(a[mask], b[mask]), np.maximum(a[mask], b[mask])], axis=1))

    if pairs:
        all_pairs = np.concatenate(pairs)
        unique_pairs, counts = np.unique(all_pairs, axis=0, return_counts=True)
        for (u, v), count in zip(unique_pairs.tolist(), counts.tolist()):
            graph.add_edge(u, v, weight=count)

    tracer.event(f"Region graph: {graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges")

    return graph


def same_color_neighbors(graph):
    """
    List adjacent region pairs that share a palette index.

    Returns sorted list of (region_id, region_id) tuples.
    """
    pairs = []
    for u, v in graph.edges():
        if graph.nodes[u]["color_index"] == graph.nodes[v]["color_index"]:
            pairs.append((min(u, v), max(u, v)))
    return sorted(pairs)
