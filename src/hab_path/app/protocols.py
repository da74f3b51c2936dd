from typing import Protocol, runtime_checkable


# ------------- Hooks --------------------
@runtime_checkable
class SearchHooks(Protocol):
    """
    Observation points around a path query. Implementations must not
    change search behavior; they only watch it.
    """

    def query_start(self, *, query_id, start, end, floor): ...
    def search_start(self, *, query_id, budget, obstacles): ...
    def expand(self, *, query_id, node, expansions, open_size): ...
    def search_end(self, *, query_id, status, expansions, rejected, ms): ...
    def query_end(self, *, query_id, state, outcome, **extra): ...
    def error(self, *, query_id, reason: str, **kw): ...
    def biz(self, ev): ...


class NoopHooks:
    def query_start(self, **_):
        pass

    def search_start(self, **_):
        pass

    def expand(self, **_):
        pass

    def search_end(self, **_):
        pass

    def query_end(self, **_):
        pass

    def error(self, **_):
        pass

    def biz(self, _ev):
        pass


# ------------- Analytics --------------------
@runtime_checkable
class Sink(Protocol):
    def write(self, ev) -> None: ...
