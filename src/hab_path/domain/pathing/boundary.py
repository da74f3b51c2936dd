import math

from hab_path.domain.entities.geometry import HabitatEnvelope, Point3, Shape


def planar_distance(p: Point3) -> float:
    """Distance from the floor's vertical axis (x = 0, z = 0)."""
    return math.hypot(p.x, p.z)


def within_envelope(p: Point3, envelope: HabitatEnvelope, margin: float, floor: int = 0) -> bool:
    # Cylinder and dome floors share the footprint test; elevation is handled by floor selection.
    shape = envelope.shape_for(floor)
    if shape not in (Shape.CYLINDER, Shape.DOME):
        raise ValueError(f"Unsupported habitat shape {shape!r}")
    return planar_distance(p) <= envelope.radius - margin


def usable_area_m2(envelope: HabitatEnvelope, margin: float) -> float:
    r = max(envelope.radius - margin, 0.0)
    return math.pi * r * r
