from dataclasses import dataclass, field
from enum import Enum

from hab_path.config.models import HabitatModel


# Core geometry types. y is elevation, (x, z) is the floor plane.
@dataclass(frozen=True)
class Point3:
    x: float  # meters
    y: float
    z: float

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class GridNode:
    """A lattice point. Coordinates are derived from integer indices."""

    ix: int
    iy: int
    iz: int
    resolution: float

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.ix, self.iy, self.iz)

    @property
    def x(self) -> float:
        return self.ix * self.resolution

    @property
    def y(self) -> float:
        return self.iy * self.resolution

    @property
    def z(self) -> float:
        return self.iz * self.resolution

    def point(self) -> Point3:
        return Point3(self.x, self.y, self.z)


@dataclass(frozen=True)
class Obstacle:
    """Footprint of a placed module."""

    position: Point3
    floor: int
    id: int | str | None = None
    name: str | None = None
    kind: str | None = None


@dataclass(frozen=True)
class Endpoint:
    position: Point3
    floor: int
    module_id: int | str | None = None


class Shape(Enum):
    CYLINDER = "cylinder"
    DOME = "dome"


@dataclass(frozen=True)
class HabitatEnvelope:
    shape: Shape
    radius: float
    floor_height: float = 3.0
    floors: int = 1
    floor_shapes: tuple[Shape, ...] = field(default_factory=tuple)

    @classmethod
    def from_model(cls, m: HabitatModel) -> "HabitatEnvelope":
        return cls(
            shape=Shape(m.shape),
            radius=m.radius,
            floor_height=m.floor_height,
            floors=m.floors,
            floor_shapes=tuple(Shape(s) for s in (m.floor_shapes or ())),
        )

    def shape_for(self, floor: int) -> Shape:
        if 0 <= floor < len(self.floor_shapes):
            return self.floor_shapes[floor]
        return self.shape

    def has_floor(self, floor: int) -> bool:
        return 0 <= floor < self.floors
