"""Tests for region segmentation."""

import numpy as np
import pytest


class TestFindRegions:
    """Tests for the find_regions function."""

    def test_solid_map_single_region(self):
        """Test that a uniform map is one region."""
        from paintnumbers.regions.segment import find_regions

        regions = find_regions(np.zeros((2, 2), dtype=np.uint8))

        assert len(regions) == 1
        assert regions[0].area == 4
        assert sorted(regions[0].pixels) == [0, 1, 2, 3]

    def test_checkerboard_has_no_diagonal_links(self):
        """Test that diagonal same-color cells stay separate."""
        from paintnumbers.regions.segment import find_regions

        yy, xx = np.indices((4, 4))
        index_map = ((xx + yy) % 2).astype(np.uint8)

        regions = find_regions(index_map)

        assert len(regions) == 16
        assert all(r.area == 1 for r in regions)
        # Row-major discovery: region id equals the flat pixel position
        assert [r.pixels for r in regions] == [[i] for i in range(16)]

    def test_ids_follow_discovery_order(self):
        """Test that ids increase in row-major discovery order."""
        from paintnumbers.regions.segment import find_regions

        index_map = np.array([
            [0, 0, 0],
            [0, 1, 0],
            [0, 0, 2],
        ], dtype=np.uint8)

        regions = find_regions(index_map)

        assert [r.region_id for r in regions] == [0, 1, 2]
        assert [r.color_index for r in regions] == [0, 1, 2]
        assert [r.area for r in regions] == [7, 1, 1]

    def test_ring_surrounds_hole(self):
        """Test that a ring is one region around its center."""
        from paintnumbers.regions.segment import find_regions

        index_map = np.ones((5, 5), dtype=np.uint8)
        index_map[2, 2] = 0

        regions = find_regions(index_map)

        assert [r.area for r in regions] == [24, 1]
        assert regions[1].pixels == [12]

    def test_conservation(self, blocky_image, small_config):
        """Test that every pixel lands in exactly one region."""
        from paintnumbers.palette.classify import classify_pixels
        from paintnumbers.palette.quantize import quantize_colors
        from paintnumbers.regions.segment import find_regions

        palette = quantize_colors(blocky_image, small_config)
        index_map = classify_pixels(blocky_image, palette)

        regions = find_regions(index_map)

        all_pixels = [p for r in regions for p in r.pixels]
        assert sum(r.area for r in regions) == index_map.size
        assert sorted(all_pixels) == list(range(index_map.size))

        flat = index_map.reshape(-1)
        for region in regions:
            assert all(flat[p] == region.color_index for p in region.pixels)

    def test_large_region(self):
        """Test that a large uniform map is a single region."""
        from paintnumbers.regions.segment import find_regions

        regions = find_regions(np.zeros((300, 300), dtype=np.uint8))

        assert len(regions) == 1
        assert regions[0].area == 90000


    def test_same_color_components_kept_apart(self):
        """Test that separated runs of one color become separate regions."""
        from paintnumbers.regions.segment import find_regions

        regions = find_regions(np.array([[0, 1, 0]], dtype=np.uint8))

        assert [r.color_index for r in regions] == [0, 1, 0]
        assert [r.pixels for r in regions] == [[0], [1], [2]]

    def test_discovery_order_across_colors(self):
        """Test that a region first seen later in the scan gets a later id."""
        from paintnumbers.regions.segment import find_regions

        index_map = np.array([
            [2, 2, 2, 2],
            [0, 1, 1, 2],
            [0, 0, 1, 2],
        ], dtype=np.int32)

        regions = find_regions(index_map)

        assert [r.color_index for r in regions] == [2, 0, 1]
        assert regions[1].pixels == [4, 8, 9]
        assert regions[2].pixels == [5, 6, 10]


class TestLabelComponents:
    """Tests for the label_components helper."""

    def test_counts_components_per_color(self):
        """Test that each 4-connected component gets its own label."""
        from paintnumbers.regions.segment import label_components

        index_map = np.array([
            [0, 1],
            [1, 0],
        ], dtype=np.uint8)

        labels, count = label_components(index_map)

        assert count == 4
        assert sorted(labels.tolist()) == [0, 1, 2, 3]

    def test_labels_cover_every_pixel(self):
        """Test that pixels of one component share a label."""
        from paintnumbers.regions.segment import label_components

        index_map = np.array([
            [0, 0, 1],
            [1, 0, 1],
        ], dtype=np.uint8)

        labels, count = label_components(index_map)

        assert count == 3
        assert labels[0] == labels[1] == labels[4]
        assert labels[2] == labels[5]
        assert labels[3] not in (labels[0], labels[2])
