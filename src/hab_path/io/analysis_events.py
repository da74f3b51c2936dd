# hab_path/io/analysis_events.py

from dataclasses import dataclass
from typing import Literal


# Base type for analytics events
@dataclass
class QueryEvent:
    run_id: str
    query_id: int
    name: str  # stable event name


@dataclass
class PathFoundBiz(QueryEvent):
    floor: int
    waypoints: int
    expansions: int


@dataclass
class PathNotFoundBiz(QueryEvent):
    reason: Literal["cross_floor", "unreachable", "budget_exhausted"]
    expansions: int = 0


@dataclass
class PathAnalyzedBiz(QueryEvent):
    total_distance: float
    segment_count: int
    narrow_count: int
    overall_pass: bool
    start_module: str | None = None
    end_module: str | None = None
