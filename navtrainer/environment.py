"""
Procedural terrain backdrop for the station-homing mission.

The feature list is a pure function of the seed. The linear-congruential
recurrence below is part of the contract (placements must be
bit-reproducible), so it lives behind a named source class; other sources
with the same `random()` interface can be passed to `generate_environment`.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol, Sequence

import numpy as np

from .physics import Vector2D


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_ENVIRONMENT_SEED = 42

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

# Feature counts and placement regions (map units)
VEGETATION_COUNT = 400
VEGETATION_SPAN = 20000.0
TREE_PROBABILITY_THRESHOLD = 0.3  # draws above this are trees, below are bushes
DIRT_PATCH_COUNT = 100
DIRT_PATCH_SPAN = 15000.0
REGION_CENTER_Y = -5000.0

# Single east-west road north of the airport
ROAD_Y = -10000.0
ROAD_HALF_LENGTH = 10000.0
ROAD_WIDTH = 40.0

# Renderer culling window around the aircraft
DEFAULT_VIEW_HALF_EXTENT = 1000.0


class FeatureType(str, Enum):
    TREE = "tree"
    BUSH = "bush"
    DIRT = "dirt"
    ROAD = "road"


@dataclass(frozen=True)
class EnvironmentFeature:
    """
    A static terrain decoration.

    Attributes:
        x: Map X of the feature centre.
        y: Map Y of the feature centre.
        feature_type: Tree, bush, dirt patch or road.
        size: Radius for vegetation, length for dirt patches and roads.
        rotation: Orientation in radians (dirt patches and roads).
    """
    x: float
    y: float
    feature_type: FeatureType
    size: float
    rotation: float = 0.0


# =============================================================================
# RANDOM SOURCES
# =============================================================================

class RandomSource(Protocol):
    def random(self) -> float: ...


class LinearCongruentialSource:
    """seed = (seed * 9301 + 49297) mod 233280; random() = seed / 233280."""

    def __init__(self, seed: int = DEFAULT_ENVIRONMENT_SEED) -> None:
        self.seed = int(seed)

    def random(self) -> float:
        self.seed = (self.seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.seed / LCG_MODULUS


class StandardRandomSource:
    """Mersenne Twister back-end keyed by the same seed."""

    def __init__(self, seed: int = DEFAULT_ENVIRONMENT_SEED) -> None:
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()


# =============================================================================
# GENERATION
# =============================================================================

def generate_environment(
    seed: int = DEFAULT_ENVIRONMENT_SEED,
    source_factory: Callable[[int], RandomSource] = LinearCongruentialSource,
) -> list[EnvironmentFeature]:
    """
    Generate the homing-mission backdrop.

    Draw order is fixed: for each vegetation feature x, y, type, size; for
    each dirt patch x, y, size, rotation; then the road.

    Args:
        seed: Generator seed.
        source_factory: Builds the random source from the seed.

    Returns:
        Ordered list of features.
    """
    rng = source_factory(seed)
    features: list[EnvironmentFeature] = []

    for _ in range(VEGETATION_COUNT):
        x = (rng.random() - 0.5) * VEGETATION_SPAN
        y = (rng.random() - 0.5) * VEGETATION_SPAN + REGION_CENTER_Y
        kind = FeatureType.TREE if rng.random() > TREE_PROBABILITY_THRESHOLD else FeatureType.BUSH
        size = 15 + rng.random() * 20
        features.append(EnvironmentFeature(x, y, kind, size))

    for _ in range(DIRT_PATCH_COUNT):
        x = (rng.random() - 0.5) * DIRT_PATCH_SPAN
        y = (rng.random() - 0.5) * DIRT_PATCH_SPAN + REGION_CENTER_Y
        size = 100 + rng.random() * 300
        rotation = rng.random() * math.pi
        features.append(EnvironmentFeature(x, y, FeatureType.DIRT, size, rotation))

    features.append(EnvironmentFeature(0.0, ROAD_Y, FeatureType.ROAD, 2 * ROAD_HALF_LENGTH))
    return features


def feature_positions(features: Sequence[EnvironmentFeature]) -> np.ndarray:
    """(N, 2) array of feature centres."""
    if not features:
        return np.empty((0, 2), dtype=float)
    return np.array([(f.x, f.y) for f in features], dtype=float)


def features_in_view(
    features: Sequence[EnvironmentFeature],
    center: Vector2D,
    half_extent: float = DEFAULT_VIEW_HALF_EXTENT,
) -> list[EnvironmentFeature]:
    """
    Features whose centre lies inside a square window around `center`.

    Roads span the whole map and are always included.
    """
    positions = feature_positions(features)
    if positions.size == 0:
        return []
    offsets = np.abs(positions - np.array([center.x, center.y]))
    visible = np.all(offsets < half_extent, axis=1)
    return [
        f for f, show in zip(features, visible)
        if show or f.feature_type == FeatureType.ROAD
    ]
