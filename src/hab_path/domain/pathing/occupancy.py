import math
from collections.abc import Iterable, Sequence

import numpy as np

from hab_path.domain.entities.geometry import Endpoint, Obstacle, Point3


def is_occupied(p: Point3, obstacles: Iterable[Obstacle], tolerance: float) -> bool:
    """
    Axis-aligned box test: p is occupied when it lies strictly within
    `tolerance` of some obstacle position on all three axes.
    Callers pre-filter `obstacles` to the query floor.
    """
    for o in obstacles:
        q = o.position
        if abs(p.x - q.x) < tolerance and abs(p.y - q.y) < tolerance and abs(p.z - q.z) < tolerance:
            return True
    return False


def on_floor(obstacles: Iterable[Obstacle], floor: int) -> list[Obstacle]:
    return [o for o in obstacles if o.floor == floor]


def _same_footprint(o: Obstacle, e: Endpoint) -> bool:
    return math.isclose(o.position.x, e.position.x, abs_tol=1e-9) and math.isclose(
        o.position.z, e.position.z, abs_tol=1e-9
    )


def _belongs_to(o: Obstacle, e: Endpoint) -> bool:
    if e.module_id is not None:
        return o.id is not None and o.id == e.module_id
    return _same_footprint(o, e)


def excluding(obstacles: Iterable[Obstacle], endpoints: Sequence[Endpoint]) -> list[Obstacle]:
    """Drop the modules the query endpoints belong to so they do not block themselves."""
    return [o for o in obstacles if not any(_belongs_to(o, e) for e in endpoints)]


def owner_of(obstacles: Iterable[Obstacle], endpoint: Endpoint) -> Obstacle | None:
    """The module an endpoint sits in, matched the same way `excluding` matches."""
    return next((o for o in obstacles if _belongs_to(o, endpoint)), None)


class ObstacleIndex:
    """Immutable snapshot of a floor's obstacles, vectorized with numpy."""

    def __init__(self, obstacles: Iterable[Obstacle]):
        self.obstacles = tuple(obstacles)
        self._pos = np.array(
            [o.position.as_tuple() for o in self.obstacles], dtype=float
        ).reshape(-1, 3)
        self._pos.setflags(write=False)

    def __len__(self) -> int:
        return len(self.obstacles)

    def occupied(self, p: Point3, tolerance: float) -> bool:
        if not self.obstacles:
            return False
        d = np.abs(self._pos - np.array(p.as_tuple()))
        return bool(np.any(np.all(d < tolerance, axis=1)))

    def count_occupied(self, points: Iterable[Point3], tolerance: float) -> int:
        return sum(1 for p in points if self.occupied(p, tolerance))
