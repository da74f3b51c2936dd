# hab_path/io/inputs.py
import json
import math
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from hab_path.config.models import HabitatModel
from hab_path.domain.entities.geometry import Endpoint, HabitatEnvelope, Obstacle, Point3
from hab_path.domain.errors import InvalidQueryError


def to_point(raw: Point3 | Mapping | Iterable[float], what: str = "point") -> Point3:
    if isinstance(raw, Point3):
        p = raw
    elif isinstance(raw, Mapping):
        try:
            p = Point3(float(raw["x"]), float(raw["y"]), float(raw["z"]))
        except KeyError as e:
            raise InvalidQueryError(f"{what} is missing coordinate {e.args[0]!r}") from e
    else:
        xs = [float(v) for v in raw]
        if len(xs) != 3:
            raise InvalidQueryError(f"{what} needs 3 coordinates, got {len(xs)}")
        p = Point3(*xs)
    if not all(math.isfinite(v) for v in p.as_tuple()):
        raise InvalidQueryError(f"{what} has non-finite coordinates {p.as_tuple()}")
    return p


def _to_floor(raw: Any, what: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise InvalidQueryError(f"{what} floor must be an integer, got {raw!r}")
    try:
        f = float(raw)
    except ValueError as e:
        raise InvalidQueryError(f"{what} floor must be an integer, got {raw!r}") from e
    if not f.is_integer():
        raise InvalidQueryError(f"{what} floor must be an integer, got {raw!r}")
    return int(f)


def to_endpoint(raw: Endpoint | Mapping, what: str = "endpoint") -> Endpoint:
    """Accept an Endpoint or the picking layer's {x, y, z, floor[, module_id]}."""
    if isinstance(raw, Endpoint):
        return Endpoint(to_point(raw.position, what), _to_floor(raw.floor, what), raw.module_id)
    if "floor" not in raw:
        raise InvalidQueryError(f"{what} is missing 'floor'")
    pos = raw["position"] if "position" in raw else raw
    return Endpoint(to_point(pos, what), _to_floor(raw["floor"], what), raw.get("module_id"))


def to_obstacle(raw: Obstacle | Mapping) -> Obstacle:
    if isinstance(raw, Obstacle):
        return Obstacle(
            position=to_point(raw.position, "obstacle position"),
            floor=_to_floor(raw.floor, "obstacle"),
            id=raw.id,
            name=raw.name,
            kind=raw.kind,
        )
    if "floor" not in raw:
        raise InvalidQueryError("obstacle is missing 'floor'")
    return Obstacle(
        position=to_point(raw["position"], "obstacle position"),
        floor=_to_floor(raw["floor"], "obstacle"),
        id=raw.get("id"),
        name=raw.get("name"),
        kind=raw.get("type") or raw.get("kind"),
    )


def to_envelope(raw: HabitatEnvelope | HabitatModel | Mapping | None) -> HabitatEnvelope:
    """Validate any envelope form through HabitatModel; bad geometry raises ValidationError."""
    if raw is None:
        raise InvalidQueryError("habitat envelope is required")
    if isinstance(raw, HabitatEnvelope):
        raw = {
            "shape": getattr(raw.shape, "value", raw.shape),
            "radius": raw.radius,
            "floor_height": raw.floor_height,
            "floors": raw.floors,
            "floor_shapes": [getattr(s, "value", s) for s in raw.floor_shapes],
        }
    model = raw if isinstance(raw, HabitatModel) else HabitatModel.model_validate(raw)
    return HabitatEnvelope.from_model(model)


def load_query(path: str | Path) -> dict[str, Any]:
    """Read a query file: {"habitat", "start", "end", "obstacles", "config"?}."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)
