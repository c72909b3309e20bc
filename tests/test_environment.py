#!/usr/bin/env python3
"""
Tests for the homing-mission terrain generator.
"""

import numpy as np
import pytest

from navtrainer.environment import (
    DIRT_PATCH_COUNT,
    VEGETATION_COUNT,
    FeatureType,
    LinearCongruentialSource,
    StandardRandomSource,
    feature_positions,
    features_in_view,
    generate_environment,
)
from navtrainer.physics import Vector2D


@pytest.fixture(scope="module")
def features():
    return generate_environment(42)


class TestRandomSources:

    def test_lcg_first_draw(self):
        source = LinearCongruentialSource(42)
        assert source.random() == pytest.approx(206659 / 233280)
        assert source.seed == 206659

    def test_lcg_range(self):
        source = LinearCongruentialSource(7)
        draws = [source.random() for _ in range(1000)]
        assert all(0.0 <= d < 1.0 for d in draws)

    def test_standard_source_is_seeded(self):
        a = [StandardRandomSource(3).random() for _ in range(3)]
        b = [StandardRandomSource(3).random() for _ in range(3)]
        assert a == b


class TestGeneration:

    def test_counts_and_order(self, features):
        assert len(features) == VEGETATION_COUNT + DIRT_PATCH_COUNT + 1
        vegetation = features[:VEGETATION_COUNT]
        dirt = features[VEGETATION_COUNT:VEGETATION_COUNT + DIRT_PATCH_COUNT]
        assert {f.feature_type for f in vegetation} == {FeatureType.TREE, FeatureType.BUSH}
        assert all(f.feature_type == FeatureType.DIRT for f in dirt)
        assert features[-1].feature_type == FeatureType.ROAD

    def test_same_seed_same_terrain(self, features):
        assert generate_environment(42) == features

    def test_different_seed_different_terrain(self, features):
        assert generate_environment(43) != features

    def test_vegetation_bounds(self, features):
        for f in features[:VEGETATION_COUNT]:
            assert -10000 <= f.x <= 10000
            assert -15000 <= f.y <= 5000
            assert 15 <= f.size <= 35

    def test_dirt_patches(self, features):
        for f in features[VEGETATION_COUNT:-1]:
            assert -7500 <= f.x <= 7500
            assert 100 <= f.size <= 400
            assert 0 <= f.rotation <= np.pi

    def test_road(self, features):
        road = features[-1]
        assert (road.x, road.y) == (0.0, -10000.0)
        assert road.size == 20000.0

    def test_alternate_random_source(self):
        features = generate_environment(42, source_factory=StandardRandomSource)
        assert len(features) == VEGETATION_COUNT + DIRT_PATCH_COUNT + 1
        assert features != generate_environment(42)


class TestViewCulling:

    def test_positions_array(self, features):
        positions = feature_positions(features)
        assert positions.shape == (len(features), 2)
        assert feature_positions([]).shape == (0, 2)

    def test_far_away_only_road(self, features):
        visible = features_in_view(features, Vector2D(1e6, 1e6))
        assert [f.feature_type for f in visible] == [FeatureType.ROAD]

    def test_window_contains_only_nearby(self, features):
        center = Vector2D(0.0, -5000.0)
        visible = features_in_view(features, center, half_extent=2000.0)
        assert 1 < len(visible) < len(features)
        for f in visible:
            if f.feature_type != FeatureType.ROAD:
                assert abs(f.x - center.x) < 2000.0
                assert abs(f.y - center.y) < 2000.0

    def test_empty(self):
        assert features_in_view([], Vector2D(0.0, 0.0)) == []
