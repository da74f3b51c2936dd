import math

from hab_path.domain.entities.geometry import GridNode, Point3


def _index(v: float, resolution: float) -> int:
    # halves round toward +inf
    return math.floor(v / resolution + 0.5)


def snap(p: Point3, resolution: float) -> GridNode:
    if resolution <= 0:
        raise ValueError(f"resolution must be positive, got {resolution}")
    return GridNode(
        _index(p.x, resolution),
        _index(p.y, resolution),
        _index(p.z, resolution),
        resolution,
    )
