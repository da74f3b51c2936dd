# hab_path/io/recorder.py
"""Fan-out of query analytics events to line-oriented or in-memory sinks."""

import json
import logging
import sys
from dataclasses import asdict

from hab_path.app.protocols import Sink
from hab_path.io.analysis_events import QueryEvent

log = logging.getLogger("hab_path.recorder")


class JsonlSink:
    """One JSON object per event; flushed per line so a crashed CLI loses nothing."""

    def __init__(self, fp=sys.stdout, *, flush: bool = True):
        self.fp, self.flush = fp, flush

    def write(self, ev: QueryEvent) -> None:
        self.fp.write(json.dumps(asdict(ev), default=str) + "\n")
        if self.flush:
            self.fp.flush()


class MemorySink:
    def __init__(self):
        self.events: list[QueryEvent] = []

    def write(self, ev: QueryEvent) -> None:
        self.events.append(ev)

    def named(self, name: str) -> list[QueryEvent]:
        return [e for e in self.events if e.name == name]


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)
        self.dropped = 0

    def emit(self, ev: QueryEvent) -> None:
        for s in self.sinks:
            try:
                s.write(ev)
            except (OSError, TypeError, ValueError):
                # analytics never fail a query
                self.dropped += 1
                log.exception("sink %s dropped %s", type(s).__name__, ev.name)
