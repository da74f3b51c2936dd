# tests/io/test_logging_and_recorder.py
import io
import json
import logging

import pytest

from hab_path.app.build import build
from hab_path.app.engine import PathEngine
from hab_path.io.analysis_events import PathNotFoundBiz
from hab_path.io.recorder import JsonlSink, MemorySink, Recorder
from hab_path.io.search_logging import SearchLogging, _JsonFormatter

CYL5 = {"shape": "cylinder", "radius": 5.0}


def _pt(x, z, floor=0):
    return {"x": x, "y": 0.0, "z": z, "floor": floor}


@pytest.fixture
def captured():
    buf = io.StringIO()
    logger = logging.getLogger("hab_path.test_capture")
    logger.handlers.clear()
    h = logging.StreamHandler(buf)
    h.setFormatter(_JsonFormatter())
    logger.addHandler(h)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield logger, buf
    logger.handlers.clear()


def _lines(buf):
    return [json.loads(line) for line in buf.getvalue().splitlines()]


# ---------- Structured logs


def test_query_lifecycle_is_logged_as_json(captured):
    logger, buf = captured
    hooks = SearchLogging(run_id="run-7", logger=logger)
    PathEngine(hooks=hooks).query(_pt(0, 0), _pt(3, 0), [], CYL5)
    recs = _lines(buf)
    assert [r["msg"] for r in recs] == ["query_start", "query_end"]
    assert all(r["run_id"] == "run-7" for r in recs)
    assert recs[0]["start"] == [0.0, 0.0, 0.0]
    assert recs[1]["outcome"] == "found" and recs[1]["status"] == "PASS"
    assert recs[0]["query_id"] == recs[1]["query_id"]


def test_debug_mode_samples_expansions(captured):
    logger, buf = captured
    hooks = SearchLogging(logger=logger, debug=True, sample_every=1)
    r = PathEngine(hooks=hooks).query(_pt(0, 0), _pt(3, 0), [], CYL5)
    msgs = [rec["msg"] for rec in _lines(buf)]
    # the goal is popped but never expanded
    assert msgs.count("expand") == r.expansions - 1
    assert "search_start" in msgs and "search_end" in msgs


def test_errors_log_at_error_level(captured):
    logger, buf = captured
    SearchLogging(logger=logger).error(query_id=3, reason="query_failed", error="x")
    [rec] = _lines(buf)
    assert rec["level"] == "ERROR" and rec["msg"] == "query_error"


# ---------- Recorder


def test_jsonl_sink_writes_one_line_per_event():
    buf = io.StringIO()
    rec = Recorder(JsonlSink(buf))
    rec.emit(PathNotFoundBiz("r", 1, "path_not_found", reason="unreachable", expansions=12))
    [line] = buf.getvalue().splitlines()
    assert json.loads(line) == {
        "run_id": "r",
        "query_id": 1,
        "name": "path_not_found",
        "reason": "unreachable",
        "expansions": 12,
    }


class _BrokenSink:
    def write(self, ev):
        raise OSError("disk full")


def test_broken_sink_does_not_stop_the_others():
    mem = MemorySink()
    rec = Recorder(_BrokenSink(), mem)
    ev = PathNotFoundBiz("r", 1, "path_not_found", reason="cross_floor")
    rec.emit(ev)
    assert mem.events == [ev]
    assert rec.dropped == 1


def test_hooks_forward_analytics_to_recorder(captured):
    logger, _ = captured
    mem = MemorySink()
    hooks = SearchLogging(logger=logger, recorder=Recorder(mem))
    PathEngine(hooks=hooks).query(_pt(0, 0), _pt(3, 0), [], CYL5)
    assert [e.name for e in mem.events] == ["path_found", "path_analyzed"]
    [analyzed] = mem.named("path_analyzed")
    assert analyzed.overall_pass


def test_build_can_send_logs_to_a_stream():
    buf = io.StringIO()
    eng = build(sinks=(MemorySink(),), log_stream=buf)
    eng.query(_pt(0, 0), _pt(3, 0), [], CYL5)
    msgs = [json.loads(line)["msg"] for line in buf.getvalue().splitlines()]
    assert msgs == ["query_start", "query_end"]
