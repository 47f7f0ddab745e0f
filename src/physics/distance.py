"""Distance helpers shared by the cost evaluator, planners and plan adapter.

It provides both Manhattan and Euclidean metrics, a precomputed
``DistanceMatrix`` backed by a numpy array that answers city-to-city queries
in O(1), and ``CachedDistance`` which memoises any external distance
callable.  Every distance object is a plain ``(city, city) -> float``
callable, so the planner never needs to know which one it was given.
"""

from __future__ import annotations

from functools import lru_cache
import math
from typing import Callable, Dict, Hashable, Iterable, List, Mapping, Sequence, Tuple

import numpy as np


City = Hashable
DistanceFn = Callable[[City, City], float]


# Basic distance calculation functions
def euclidean_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """
    Straight-line distance between two points.

    Formula: d = √[(x2-x1)² + (y2-y1)²]
    """
    return math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)


def manhattan_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """
    Grid distance between two points.

    Formula: d = |x2-x1| + |y2-y1|
    """
    return abs(x2 - x1) + abs(y2 - y1)


# Distance Matrix class for precomputed distances
class DistanceMatrix:
    """
    Precomputed city-to-city distances.

    Lookups are O(1): cities are mapped to row indices once and the full
    pairwise matrix is stored as a float64 numpy array.  Instances are
    read-only after construction and therefore safe to share between
    worker threads.
    """

    def __init__(self, cities: Sequence[City], matrix: np.ndarray):
        """
        Args:
            cities: city identifiers, row/column order of ``matrix``
            matrix: square array of non-negative distances

        Example:
            dm = DistanceMatrix.from_coordinates({
                "A": (0, 0),
                "B": (3, 4),
            })
            dm("A", "B")   # 5.0
        """
        matrix = np.array(matrix, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Distance matrix must be square, got shape {matrix.shape}")
        if matrix.shape[0] != len(cities):
            raise ValueError(
                f"Distance matrix has {matrix.shape[0]} rows for {len(cities)} cities"
            )
        if np.any(matrix < 0):
            raise ValueError("Distances must be non-negative")

        self.cities: Tuple[City, ...] = tuple(cities)
        self._index: Dict[City, int] = {}
        for idx, city in enumerate(self.cities):
            if city in self._index:
                raise ValueError(f"Duplicate city {city!r}")
            self._index[city] = idx

        self._matrix = matrix
        self._matrix.setflags(write=False)

    # ========== Constructors ==========

    @classmethod
    def from_coordinates(cls,
                         coordinates: Mapping[City, Tuple[float, float]],
                         use_manhattan: bool = False) -> "DistanceMatrix":
        """Build the matrix from planar coordinates in one vectorised pass."""
        cities = list(coordinates)
        points = np.array([coordinates[city] for city in cities], dtype=np.float64).reshape(-1, 2)
        deltas = points[:, np.newaxis, :] - points[np.newaxis, :, :]
        if use_manhattan:
            matrix = np.abs(deltas).sum(axis=-1)
        else:
            matrix = np.sqrt((deltas ** 2).sum(axis=-1))
        return cls(cities, matrix)

    @classmethod
    def from_function(cls, cities: Iterable[City], distance_fn: DistanceFn) -> "DistanceMatrix":
        """Tabulate an arbitrary distance callable over ``cities``."""
        cities = list(cities)
        size = len(cities)
        matrix = np.zeros((size, size), dtype=np.float64)
        for i, origin in enumerate(cities):
            for j, destination in enumerate(cities):
                if i != j:
                    matrix[i, j] = distance_fn(origin, destination)
        return cls(cities, matrix)

    # ========== Queries ==========

    def get_distance(self, origin: City, destination: City) -> float:
        """Distance between two cities (O(1) lookup)."""
        try:
            return float(self._matrix[self._index[origin], self._index[destination]])
        except KeyError as exc:
            raise KeyError(f"Unknown city {exc.args[0]!r}") from None

    def __call__(self, origin: City, destination: City) -> float:
        return self.get_distance(origin, destination)

    def __contains__(self, city: City) -> bool:
        return city in self._index

    def __len__(self) -> int:
        return len(self.cities)

    def total_distance(self, route: Sequence[City]) -> float:
        """Length of a path visiting ``route`` in order."""
        return path_length(route, self.get_distance)

    def is_symmetric(self, tolerance: float = 1e-9) -> bool:
        return bool(np.allclose(self._matrix, self._matrix.T, atol=tolerance))

    def as_array(self) -> np.ndarray:
        """Read-only view of the underlying matrix."""
        return self._matrix


class CachedDistance:
    """
    Memoising wrapper around an external distance callable.

    The host's distance query is assumed to be pure, so every pair is
    computed at most once.  With ``symmetric=True`` the pairs (a, b) and
    (b, a) share a cache entry.
    """

    def __init__(self, distance_fn: DistanceFn, *, symmetric: bool = True, maxsize: int | None = None):
        self.distance_fn = distance_fn
        self.symmetric = symmetric
        self._cached = lru_cache(maxsize=maxsize)(self._compute)

    def _compute(self, origin: City, destination: City) -> float:
        distance = float(self.distance_fn(origin, destination))
        if distance < 0:
            raise ValueError(f"Negative distance between {origin!r} and {destination!r}")
        return distance

    def __call__(self, origin: City, destination: City) -> float:
        if origin == destination:
            return 0.0
        if self.symmetric and _order_key(destination) < _order_key(origin):
            origin, destination = destination, origin
        return self._cached(origin, destination)

    def cache_info(self):
        return self._cached.cache_info()


def _order_key(city: City) -> Tuple[str, str]:
    return type(city).__name__, repr(city)


# ========== Helper functions ==========

def path_length(route: Sequence[City], distance_fn: DistanceFn) -> float:
    """Sum of leg distances along ``route``."""
    total = 0.0
    for origin, destination in zip(route, route[1:]):
        total += distance_fn(origin, destination)
    return total


def straight_path(origin: City, destination: City) -> List[City]:
    """
    Default path expansion: move directly to the destination.

    Returns the cities travelled through, excluding ``origin`` and including
    ``destination`` (empty when both are the same city).
    """
    if origin == destination:
        return []
    return [destination]
