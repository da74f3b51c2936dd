# io/search_logging.py
import json
import logging
import sys

from hab_path.app.protocols import NoopHooks
from hab_path.io.recorder import Recorder


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def _default_json_logger(name="hab_path", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


def stream_json_logger(stream, name="hab_path.stream", level="INFO"):
    """A JSON logger writing only to `stream`; re-pointed on every call."""
    logger = logging.getLogger(name)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    h = logging.StreamHandler(stream)
    h.setFormatter(_JsonFormatter())
    logger.addHandler(h)
    logger.setLevel(level)
    logger.propagate = False
    return logger


class SearchLogging(NoopHooks):
    """
    One place to shape and emit structured logs for path queries, and to
    forward analytics events to the recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 100,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    @staticmethod
    def _xyz(p):
        return None if p is None else [p.x, p.y, p.z]

    # --------------------------------------------------------

    # query lifecycle

    def query_start(self, *, query_id, start, end, floor):
        self._emit(
            "INFO",
            "query_start",
            query_id=query_id,
            start=self._xyz(start),
            end=self._xyz(end),
            floor=floor,
        )

    def search_start(self, *, query_id, budget, obstacles):
        if self.debug:
            self._emit(
                "DEBUG", "search_start", query_id=query_id, budget=budget, obstacles=obstacles
            )

    def expand(self, *, query_id, node, expansions, open_size):
        if self.debug and (expansions % self.sample_every) == 0:
            self._emit(
                "DEBUG",
                "expand",
                query_id=query_id,
                node=list(node),
                expansions=expansions,
                open_size=open_size,
            )

    def search_end(self, *, query_id, status, expansions, rejected, ms):
        if self.debug:
            self._emit(
                "DEBUG",
                "search_end",
                query_id=query_id,
                status=status,
                expansions=expansions,
                rejected=rejected,
                ms=round(ms, 3),
            )

    def query_end(self, *, query_id, state, outcome, **extra):
        self._emit("INFO", "query_end", query_id=query_id, state=state, outcome=outcome, **extra)

    def error(self, *, query_id, reason: str, **kw):
        self._emit("ERROR", "query_error", query_id=query_id, reason=reason, **kw)

    # ------------- Analytics --------------------------

    def biz(self, ev):
        if self.recorder:
            self.recorder.emit(ev)
