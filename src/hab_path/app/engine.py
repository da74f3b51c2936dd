# hab_path/app/engine.py
import itertools
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from hab_path.app.protocols import NoopHooks, SearchHooks
from hab_path.config.models import EngineModel, HabitatModel
from hab_path.domain.entities.analysis import PathAnalysisResult, PathReport
from hab_path.domain.entities.geometry import Endpoint, HabitatEnvelope, Obstacle, Point3
from hab_path.domain.errors import InvalidQueryError
from hab_path.domain.pathing.grid import snap
from hab_path.domain.pathing.occupancy import ObstacleIndex, excluding, on_floor, owner_of
from hab_path.domain.pathing.report import analyze_path, generate_report
from hab_path.domain.pathing.search import AStarSearch, SearchResult, SearchStatus
from hab_path.io.analysis_events import PathAnalyzedBiz, PathFoundBiz, PathNotFoundBiz
from hab_path.io.inputs import to_endpoint, to_envelope, to_obstacle

EnvelopeLike = HabitatEnvelope | HabitatModel | Mapping
EndpointLike = Endpoint | Mapping
ObstacleLike = Obstacle | Mapping


class QueryState(Enum):
    REQUESTED = "requested"
    MAPPED = "mapped"
    SEARCHING = "searching"
    FOUND = "found"
    VALIDATING = "validating"
    REPORTED = "reported"
    NOT_FOUND = "not_found"
    REPORTED_EMPTY = "reported_empty"


TERMINAL = frozenset({QueryState.REPORTED, QueryState.REPORTED_EMPTY})


class Outcome(Enum):
    FOUND = "found"
    CROSS_FLOOR = "cross_floor"
    UNREACHABLE = "unreachable"
    BUDGET_EXHAUSTED = "budget_exhausted"


_FROM_STATUS = {
    SearchStatus.FOUND: Outcome.FOUND,
    SearchStatus.UNREACHABLE: Outcome.UNREACHABLE,
    SearchStatus.BUDGET_EXHAUSTED: Outcome.BUDGET_EXHAUSTED,
}


@dataclass
class PathQueryResult:
    state: QueryState
    outcome: Outcome
    trace: list[QueryState]
    path: list[Point3] | None
    analysis: PathAnalysisResult
    report: PathReport
    expansions: int = 0
    query_id: int = field(default=0, compare=False)

    @property
    def found(self) -> bool:
        return self.path is not None


@dataclass(frozen=True)
class _Prepared:
    start: Endpoint
    end: Endpoint
    envelope: HabitatEnvelope
    index: ObstacleIndex
    start_module: str | None = None
    end_module: str | None = None


class PathEngine:
    """
    Runs one path query at a time: snap, search, validate, report.
    Holds configuration and hooks only; every query starts from scratch.
    """

    def __init__(
        self,
        cfg: EngineModel | Mapping | None = None,
        *,
        hooks: SearchHooks | None = None,
        run_id: str = "local",
    ):
        if cfg is None:
            cfg = EngineModel()
        self.cfg = cfg if isinstance(cfg, EngineModel) else EngineModel.model_validate(cfg)
        self.run_id = run_id
        self._hooks = hooks or NoopHooks()
        self._search = AStarSearch.from_config(self.cfg, hooks=self._hooks)
        self._ids = itertools.count(1)

    # --------------- Helpers -----------------------------

    def _prepare(
        self,
        start: EndpointLike,
        end: EndpointLike,
        obstacles: Iterable[ObstacleLike],
        envelope: EnvelopeLike,
    ) -> _Prepared:
        env = to_envelope(envelope)
        s, e = to_endpoint(start, "start"), to_endpoint(end, "end")
        for name, ep in (("start", s), ("end", e)):
            if not env.has_floor(ep.floor):
                raise InvalidQueryError(
                    f"{name} floor {ep.floor} is outside the habitat (floors={env.floors})"
                )
        obs = [to_obstacle(o) for o in obstacles]
        index = ObstacleIndex(excluding(on_floor(obs, s.floor), (s, e)))
        # reports fall back to the names of the modules the endpoints sit in
        own_s, own_e = owner_of(on_floor(obs, s.floor), s), owner_of(on_floor(obs, e.floor), e)
        return _Prepared(
            s,
            e,
            env,
            index,
            start_module=own_s.name if own_s else None,
            end_module=own_e.name if own_e else None,
        )

    def _run_search(self, q: _Prepared, query_id: int) -> SearchResult:
        res = self.cfg.grid_size
        return self._search.run(
            snap(q.start.position, res),
            snap(q.end.position, res),
            q.envelope,
            q.index,
            floor=q.start.floor,
            query_id=query_id,
        )

    def _empty(self, query_id, trace, outcome, expansions, start_name, end_name):
        trace += [QueryState.NOT_FOUND, QueryState.REPORTED_EMPTY]
        analysis = analyze_path(None, ObstacleIndex(()), None, cfg=self.cfg)
        self._hooks.biz(
            PathNotFoundBiz(
                self.run_id, query_id, "path_not_found", reason=outcome.value, expansions=expansions
            )
        )
        return PathQueryResult(
            state=QueryState.REPORTED_EMPTY,
            outcome=outcome,
            trace=trace,
            path=None,
            analysis=analysis,
            report=generate_report(analysis, start_name, end_name),
            expansions=expansions,
            query_id=query_id,
        )

    # --------------------------------------------------------

    def find_path(
        self,
        start: EndpointLike,
        end: EndpointLike,
        obstacles: Iterable[ObstacleLike],
        envelope: EnvelopeLike,
    ) -> list[Point3] | None:
        """Waypoints from start to end, or None when no path is available."""
        q = self._prepare(start, end, obstacles, envelope)
        if q.start.floor != q.end.floor:
            return None
        return self._run_search(q, next(self._ids)).path

    def query(
        self,
        start: EndpointLike,
        end: EndpointLike,
        obstacles: Iterable[ObstacleLike],
        envelope: EnvelopeLike,
        *,
        start_name: str | None = None,
        end_name: str | None = None,
    ) -> PathQueryResult:
        qid = next(self._ids)
        trace = [QueryState.REQUESTED]

        try:
            q = self._prepare(start, end, obstacles, envelope)
            start_name = start_name or q.start_module
            end_name = end_name or q.end_module
            self._hooks.query_start(
                query_id=qid, start=q.start.position, end=q.end.position, floor=q.start.floor
            )
            if q.start.floor != q.end.floor:
                result = self._empty(qid, trace, Outcome.CROSS_FLOOR, 0, start_name, end_name)
            else:
                trace.append(QueryState.MAPPED)
                trace.append(QueryState.SEARCHING)
                sr = self._run_search(q, qid)
                if not sr.found:
                    outcome = _FROM_STATUS[sr.status]
                    result = self._empty(qid, trace, outcome, sr.expansions, start_name, end_name)
                else:
                    trace += [QueryState.FOUND, QueryState.VALIDATING]
                    self._hooks.biz(
                        PathFoundBiz(
                            self.run_id,
                            qid,
                            "path_found",
                            floor=q.start.floor,
                            waypoints=len(sr.path),
                            expansions=sr.expansions,
                        )
                    )
                    analysis = analyze_path(
                        sr.path, q.index, q.envelope, floor=q.start.floor, cfg=self.cfg
                    )
                    report = generate_report(analysis, start_name, end_name)
                    trace.append(QueryState.REPORTED)
                    self._hooks.biz(
                        PathAnalyzedBiz(
                            self.run_id,
                            qid,
                            "path_analyzed",
                            total_distance=analysis.total_distance,
                            segment_count=analysis.segment_count,
                            narrow_count=analysis.narrow_count,
                            overall_pass=analysis.overall_pass,
                            start_module=start_name,
                            end_module=end_name,
                        )
                    )
                    result = PathQueryResult(
                        state=QueryState.REPORTED,
                        outcome=Outcome.FOUND,
                        trace=trace,
                        path=sr.path,
                        analysis=analysis,
                        report=report,
                        expansions=sr.expansions,
                        query_id=qid,
                    )
        except Exception as exc:
            self._hooks.error(
                query_id=qid,
                reason="query_failed",
                error=str(exc),
                trace=[s.value for s in trace],
            )
            raise

        self._hooks.query_end(
            query_id=qid,
            state=result.state.value,
            outcome=result.outcome.value,
            expansions=result.expansions,
            status=result.report.status,
        )
        return result


def find_path(
    start: EndpointLike,
    end: EndpointLike,
    obstacles: Iterable[ObstacleLike],
    envelope: EnvelopeLike,
    cfg: EngineModel | Mapping | None = None,
) -> list[Point3] | None:
    return PathEngine(cfg).find_path(start, end, obstacles, envelope)
