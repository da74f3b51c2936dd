import math
from collections.abc import Sequence

from hab_path.config.models import EngineModel
from hab_path.domain.entities.analysis import PathAnalysisResult, PathReport, PathSegment
from hab_path.domain.entities.geometry import HabitatEnvelope, Point3
from hab_path.domain.pathing.clearance import segment_clear
from hab_path.domain.pathing.occupancy import ObstacleIndex


def analyze_path(
    path: Sequence[Point3] | None,
    index: ObstacleIndex,
    envelope: HabitatEnvelope,
    *,
    floor: int = 0,
    cfg: EngineModel | None = None,
) -> PathAnalysisResult:
    """
    Validate every consecutive waypoint pair and aggregate the verdicts.
    `index` holds the floor's obstacles minus the query's own modules.
    """
    cfg = cfg or EngineModel()
    w = cfg.min_path_width
    if not path or len(path) < 2:
        # nothing was certified
        return PathAnalysisResult(min_width_observed=0.0, overall_pass=False, min_width_standard=w)

    segments: list[PathSegment] = []
    total, clear, narrow = 0.0, 0, 0
    min_w = math.inf
    for a, b in zip(path, path[1:]):
        L = math.dist(a.as_tuple(), b.as_tuple())
        ok = segment_clear(
            a,
            b,
            index,
            envelope,
            floor=floor,
            min_width=w,
            samples=cfg.sample_count,
            wall_margin=cfg.validation_wall_margin,
            tolerance=cfg.validation_occupancy_tolerance,
        )
        # a narrow segment is reported at half the standard
        width = w if ok else w * 0.5
        min_w = min(min_w, width)
        segments.append(PathSegment(a, b, L, ok, width))
        total += L
        if ok:
            clear += 1
        else:
            narrow += 1

    return PathAnalysisResult(
        segments=segments,
        total_distance=total,
        segment_count=len(segments),
        clear_count=clear,
        narrow_count=narrow,
        min_width_observed=0.0 if min_w == math.inf else min_w,
        overall_pass=narrow == 0,
        min_width_standard=w,
    )


def generate_report(
    analysis: PathAnalysisResult, start_name: str | None = None, end_name: str | None = None
) -> PathReport:
    n = analysis.segment_count
    pass_rate = round(analysis.clear_count / n * 100, 1) if n > 0 else 0.0
    w = analysis.min_width_standard
    if analysis.overall_pass:
        recommendation = "Path meets the minimum crew translation width requirement."
    elif n == 0:
        recommendation = "No walkable path was found. Rearrange modules to open a route."
    else:
        recommendation = (
            f"Path has {analysis.narrow_count} obstructed segment(s). "
            f"Rearrange modules to provide {w:g}m clear width."
        )
    return PathReport(
        start_module=start_name or "Unknown",
        end_module=end_name or "Unknown",
        total_distance=round(analysis.total_distance, 2),
        total_segments=n,
        clear_segments=analysis.clear_count,
        obstructed_segments=analysis.narrow_count,
        pass_rate=pass_rate,
        status="PASS" if analysis.overall_pass else "FAIL",
        min_width=w,
        recommendation=recommendation,
    )
