# tests/domain/test_boundary.py
import math

import pytest

from hab_path.domain.entities.geometry import HabitatEnvelope, Point3, Shape
from hab_path.domain.pathing.boundary import usable_area_m2, within_envelope


@pytest.fixture
def cylinder5() -> HabitatEnvelope:
    return HabitatEnvelope(shape=Shape.CYLINDER, radius=5.0)


@pytest.mark.parametrize("shape", [Shape.CYLINDER, Shape.DOME])
def test_limit_is_inclusive(shape):
    env = HabitatEnvelope(shape=shape, radius=5.0)
    assert within_envelope(Point3(4.5, 0.0, 0.0), env, 0.5)
    assert within_envelope(Point3(0.0, 0.0, -4.5), env, 0.5)
    assert not within_envelope(Point3(4.5 + 1e-9, 0.0, 0.0), env, 0.5)


def test_only_the_floor_plane_counts(cylinder5):
    # elevation is irrelevant to the footprint test
    assert within_envelope(Point3(3.0, 100.0, 3.0), cylinder5, 0.5)
    assert not within_envelope(Point3(3.3, 0.0, 3.3), cylinder5, 0.5)


def test_per_floor_shapes_are_looked_up():
    env = HabitatEnvelope(
        shape=Shape.CYLINDER, radius=5.0, floors=2, floor_shapes=(Shape.CYLINDER, Shape.DOME)
    )
    assert env.shape_for(1) is Shape.DOME
    assert env.shape_for(0) is Shape.CYLINDER
    assert within_envelope(Point3(1.0, 3.5, 1.0), env, 0.5, floor=1)


def test_usable_area(cylinder5):
    assert math.isclose(usable_area_m2(cylinder5, 0.5), math.pi * 4.5**2)
    assert usable_area_m2(cylinder5, 6.0) == 0.0
