"""
Grid A* over the horizontal 8-connected lattice of one habitat floor.

Node bookkeeping lives in an arena (a list of records addressed by int);
predecessors are arena indices, so reconstruction never chases shared
references. The open set is a binary heap keyed (f, insertion seq): the
lowest f wins and ties go to whichever entry was pushed first, which keeps
identical queries producing identical paths.
"""

import heapq
import math
import time
from dataclasses import dataclass
from enum import Enum

from hab_path.app.protocols import NoopHooks, SearchHooks
from hab_path.config.models import EngineModel
from hab_path.domain.entities.geometry import GridNode, HabitatEnvelope, Point3
from hab_path.domain.pathing.boundary import usable_area_m2, within_envelope
from hab_path.domain.pathing.occupancy import ObstacleIndex

# (dx, dz) in lattice steps; elevation never changes
STEPS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
    (1, 1),
    (-1, 1),
    (1, -1),
    (-1, -1),
)


class SearchStatus(Enum):
    FOUND = "found"
    UNREACHABLE = "unreachable"
    BUDGET_EXHAUSTED = "budget_exhausted"


@dataclass
class SearchResult:
    status: SearchStatus
    path: list[Point3] | None = None
    expansions: int = 0
    rejected: int = 0
    elapsed_ms: float = 0.0

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND


@dataclass
class _Rec:
    node: GridNode
    g: float
    h: float
    parent: int  # arena index, -1 at the root

    @property
    def f(self) -> float:
        return self.g + self.h


def euclid(a: GridNode, b: GridNode) -> float:
    return a.resolution * math.sqrt(
        (a.ix - b.ix) ** 2 + (a.iy - b.iy) ** 2 + (a.iz - b.iz) ** 2
    )


class AStarSearch:
    def __init__(
        self,
        resolution: float,
        max_iterations: int = 1000,
        *,
        wall_margin: float = 0.5,
        tolerance: float = 0.6,
        max_wall_s: float | None = None,
        scale_budget_with_area: bool = False,
        hooks: SearchHooks | None = None,
    ):
        if resolution <= 0:
            raise ValueError(f"resolution must be positive, got {resolution}")
        if max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        self.res, self.max_iterations = resolution, max_iterations
        self.wall_margin, self.tolerance = wall_margin, tolerance
        self.max_wall_s = max_wall_s
        self.scale_budget_with_area = scale_budget_with_area
        self._hooks = hooks or NoopHooks()

    @classmethod
    def from_config(cls, cfg: EngineModel, hooks: SearchHooks | None = None) -> "AStarSearch":
        return cls(
            cfg.grid_size,
            cfg.max_iterations,
            wall_margin=cfg.search_wall_margin,
            tolerance=cfg.search_occupancy_tolerance,
            max_wall_s=cfg.max_wall_s,
            scale_budget_with_area=cfg.scale_budget_with_area,
            hooks=hooks,
        )

    def budget_for(self, envelope: HabitatEnvelope) -> int:
        if not self.scale_budget_with_area:
            return self.max_iterations
        cells = math.ceil(usable_area_m2(envelope, self.wall_margin) / (self.res * self.res))
        return max(self.max_iterations, cells)

    # --------------- Helpers -----------------------------

    def _accepts(self, p: Point3, envelope: HabitatEnvelope, index: ObstacleIndex, floor: int):
        return within_envelope(p, envelope, self.wall_margin, floor) and not index.occupied(
            p, self.tolerance
        )

    @staticmethod
    def _reconstruct(arena: list[_Rec], i: int) -> list[Point3]:
        out = []
        while i != -1:
            out.append(arena[i].node.point())
            i = arena[i].parent
        return out[::-1]

    # --------------------------------------------------------

    def run(
        self,
        start: GridNode,
        goal: GridNode,
        envelope: HabitatEnvelope,
        index: ObstacleIndex,
        *,
        floor: int = 0,
        query_id=None,
    ) -> SearchResult:
        if start.resolution != self.res or goal.resolution != self.res:
            raise ValueError("start/goal were snapped at a different resolution")

        t0 = time.perf_counter()
        budget = self.budget_for(envelope)
        self._hooks.search_start(query_id=query_id, budget=budget, obstacles=len(index))

        # both endpoints obey the same walkability rule as every other node
        ends = [start] if start.key == goal.key else [start, goal]
        bad_ends = sum(not self._accepts(n.point(), envelope, index, floor) for n in ends)
        if bad_ends:
            ms = (time.perf_counter() - t0) * 1000
            self._hooks.search_end(
                query_id=query_id,
                status=SearchStatus.UNREACHABLE.value,
                expansions=0,
                rejected=bad_ends,
                ms=ms,
            )
            return SearchResult(SearchStatus.UNREACHABLE, None, 0, bad_ends, ms)

        arena = [_Rec(start, 0.0, euclid(start, goal), -1)]
        where = {start.key: 0}
        closed: set[tuple[int, int, int]] = set()
        heap = [(arena[0].f, 0, 0)]
        seq = 0
        expansions = rejected = 0
        status = SearchStatus.UNREACHABLE
        path = None

        while heap:
            if expansions >= budget:
                status = SearchStatus.BUDGET_EXHAUSTED
                break
            if self.max_wall_s is not None and time.perf_counter() - t0 > self.max_wall_s:
                status = SearchStatus.BUDGET_EXHAUSTED
                break

            f, _, i = heapq.heappop(heap)
            cur = arena[i]
            if cur.node.key in closed or f != cur.f:
                continue  # stale entry
            expansions += 1

            if cur.node.key == goal.key:
                status, path = SearchStatus.FOUND, self._reconstruct(arena, i)
                break

            closed.add(cur.node.key)
            self._hooks.expand(
                query_id=query_id, node=cur.node.key, expansions=expansions, open_size=len(heap)
            )

            for dx, dz in STEPS:
                nb = GridNode(cur.node.ix + dx, cur.node.iy, cur.node.iz + dz, self.res)
                if nb.key in closed:
                    continue
                if not self._accepts(nb.point(), envelope, index, floor):
                    rejected += 1
                    continue

                g = cur.g + self.res * math.hypot(dx, dz)
                j = where.get(nb.key)
                if j is None:
                    j = len(arena)
                    arena.append(_Rec(nb, g, euclid(nb, goal), i))
                    where[nb.key] = j
                elif g < arena[j].g:
                    arena[j].g, arena[j].parent = g, i
                else:
                    continue
                seq += 1
                heapq.heappush(heap, (arena[j].f, seq, j))

        ms = (time.perf_counter() - t0) * 1000
        self._hooks.search_end(
            query_id=query_id, status=status.value, expansions=expansions, rejected=rejected, ms=ms
        )
        return SearchResult(status, path, expansions, rejected, ms)
