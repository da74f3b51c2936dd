import math
from collections.abc import Iterator

import numpy as np

from hab_path.domain.entities.geometry import HabitatEnvelope, Point3
from hab_path.domain.pathing.boundary import within_envelope
from hab_path.domain.pathing.occupancy import ObstacleIndex


def probe_points(
    start: Point3, end: Point3, *, min_width: float, samples: int
) -> Iterator[Point3]:
    """
    Yield the lateral probes of a segment: at each of `samples` evenly spaced
    points (endpoints included) the centre point and the two points half the
    corridor width away along the horizontal perpendicular.
    Yields nothing for a zero-length segment.
    """
    dx, dz = end.x - start.x, end.z - start.z
    length = math.hypot(dx, dz)
    if length == 0:
        return
    px, pz = -dz / length, dx / length
    half = min_width * 0.5
    for t in np.linspace(0.0, 1.0, samples):
        cx = start.x + (end.x - start.x) * t
        cy = start.y + (end.y - start.y) * t
        cz = start.z + (end.z - start.z) * t
        # centre probe too: side probes alone miss an obstacle dead on the centreline
        for side in (-1, 0, 1):
            yield Point3(float(cx + px * half * side), float(cy), float(cz + pz * half * side))


def segment_clear(
    start: Point3,
    end: Point3,
    index: ObstacleIndex,
    envelope: HabitatEnvelope,
    *,
    floor: int = 0,
    min_width: float = 1.0,
    samples: int = 5,
    wall_margin: float = 0.3,
    tolerance: float = 0.5,
) -> bool:
    for p in probe_points(start, end, min_width=min_width, samples=samples):
        if not within_envelope(p, envelope, wall_margin, floor):
            return False
        if index.occupied(p, tolerance):
            return False
    return True
