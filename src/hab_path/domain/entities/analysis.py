from dataclasses import dataclass, field
from typing import Literal

from hab_path.domain.entities.geometry import Point3


@dataclass(frozen=True)
class PathSegment:
    start: Point3
    end: Point3
    length: float
    passed: bool
    clearance_width: float


@dataclass
class PathAnalysisResult:
    segments: list[PathSegment] = field(default_factory=list)
    total_distance: float = 0.0
    segment_count: int = 0
    clear_count: int = 0
    narrow_count: int = 0
    min_width_observed: float = 0.0
    overall_pass: bool = False
    min_width_standard: float = 1.0


@dataclass(frozen=True)
class PathReport:
    start_module: str
    end_module: str
    total_distance: float
    total_segments: int
    clear_segments: int
    obstructed_segments: int
    pass_rate: float  # percent
    status: Literal["PASS", "FAIL"]
    min_width: float
    recommendation: str
