# tests/domain/test_grid_and_occupancy.py
import pytest

from hab_path.domain.entities.geometry import Endpoint, Obstacle, Point3
from hab_path.domain.pathing.grid import snap
from hab_path.domain.pathing.occupancy import (
    ObstacleIndex,
    excluding,
    is_occupied,
    on_floor,
    owner_of,
)

# ---------- Grid Mapper


def test_snap_rounds_each_axis_to_nearest_multiple():
    n = snap(Point3(0.26, 1.1, -0.26), 0.5)
    assert n.key == (1, 2, -1)
    assert (n.x, n.y, n.z) == (0.5, 1.0, -0.5)


def test_snap_halves_round_up():
    assert snap(Point3(0.25, 0.0, -0.25), 0.5).key == (1, 0, 0)


def test_snap_uses_integer_lattice_so_fine_grids_do_not_drift():
    # 0.3 / 0.1 is 2.9999999999999996 in floating point
    n = snap(Point3(0.3, 0.0, 0.0), 0.1)
    assert n.key == (3, 0, 0)
    assert snap(Point3(0.1 + 0.2, 0.0, 0.0), 0.1) == n


def test_snap_rejects_non_positive_resolution():
    with pytest.raises(ValueError):
        snap(Point3(0.0, 0.0, 0.0), 0.0)


# ---------- Obstacle Index


def test_box_containment_is_strict_on_every_axis():
    obs = [Obstacle(Point3(1.0, 0.0, 1.0), floor=0)]
    assert is_occupied(Point3(1.4, 0.0, 1.4), obs, 0.5)
    assert not is_occupied(Point3(1.4, 0.0, 1.4), obs, 0.4)  # 0.4 is not < 0.4
    assert not is_occupied(Point3(1.5, 0.0, 1.0), obs, 0.5)
    # elevation counts as well
    assert not is_occupied(Point3(1.0, 1.0, 1.0), obs, 0.6)


def test_box_is_not_a_radius_test():
    obs = [Obstacle(Point3(0.0, 0.0, 0.0), floor=0)]
    # corner of the box is farther than tolerance in Euclidean terms but still inside
    assert is_occupied(Point3(0.45, 0.0, 0.45), obs, 0.5)


@pytest.mark.parametrize("tol", [0.3, 0.5, 0.6])
def test_vectorized_index_matches_scalar_test(tol):
    obs = [
        Obstacle(Point3(1.5, 0.0, 0.0), floor=0),
        Obstacle(Point3(-1.0, 0.0, 2.0), floor=0),
    ]
    idx = ObstacleIndex(obs)
    for ix in range(-8, 9):
        for iz in range(-8, 9):
            p = Point3(ix * 0.25, 0.0, iz * 0.25)
            assert idx.occupied(p, tol) == is_occupied(p, obs, tol)


def test_empty_index_never_occupied():
    idx = ObstacleIndex(())
    assert len(idx) == 0
    assert not idx.occupied(Point3(0.0, 0.0, 0.0), 10.0)


def test_widening_tolerance_never_frees_a_point():
    idx = ObstacleIndex(
        [
            Obstacle(Point3(1.5, 0.0, 0.0), floor=0),
            Obstacle(Point3(-1.0, 0.0, 2.0), floor=0),
            Obstacle(Point3(0.3, 0.0, -2.2), floor=0),
        ]
    )
    lattice = [Point3(ix * 0.5, 0.0, iz * 0.5) for ix in range(-8, 9) for iz in range(-8, 9)]
    counts = [idx.count_occupied(lattice, t) for t in (0.1, 0.3, 0.5, 0.6, 0.75, 1.2)]
    assert counts == sorted(counts)
    assert counts[-1] > counts[0]


# ---------- Floor filtering & self-exclusion


def test_on_floor_keeps_only_matching_floor():
    a = Obstacle(Point3(0.0, 0.5, 0.0), floor=0, id=1)
    b = Obstacle(Point3(0.0, 3.5, 0.0), floor=1, id=2)
    assert on_floor([a, b], 1) == [b]


def test_excluding_by_module_id():
    a = Obstacle(Point3(0.0, 0.0, 0.0), floor=0, id="galley")
    b = Obstacle(Point3(2.0, 0.0, 0.0), floor=0, id="lab")
    start = Endpoint(Point3(0.1, 0.0, 0.1), floor=0, module_id="galley")
    assert excluding([a, b], [start]) == [b]


def test_excluding_by_planar_position_when_no_id():
    a = Obstacle(Point3(1.0, 0.5, -2.0), floor=0)
    b = Obstacle(Point3(2.0, 0.5, 0.0), floor=0)
    end = Endpoint(Point3(1.0, 0.0, -2.0), floor=0)
    assert excluding([a, b], [end]) == [b]


def test_owner_of_matches_like_excluding():
    a = Obstacle(Point3(0.0, 0.0, 0.0), floor=0, id="galley", name="Galley")
    b = Obstacle(Point3(2.0, 0.0, 0.0), floor=0, id="lab", name="Lab")
    assert owner_of([a, b], Endpoint(Point3(0.3, 0.0, 0.0), floor=0, module_id="lab")) is b
    assert owner_of([a, b], Endpoint(Point3(2.0, 0.0, 0.0), floor=0)) is b
    assert owner_of([a, b], Endpoint(Point3(1.0, 0.0, 0.0), floor=0)) is None
