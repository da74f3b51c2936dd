# hab_path/app/build.py
from collections.abc import Mapping
from typing import TextIO

from hab_path.app.engine import PathEngine
from hab_path.app.protocols import NoopHooks, Sink
from hab_path.config.models import ToolModel
from hab_path.io.recorder import JsonlSink, Recorder
from hab_path.io.search_logging import SearchLogging, stream_json_logger  # JSON logs


def build(
    cfg: ToolModel | Mapping | None = None,
    *,
    use_logging: bool = True,
    sinks: tuple[Sink, ...] | None = None,
    log_stream: TextIO | None = None,
) -> PathEngine:
    # 0) Validate config
    if cfg is None:
        cfg = ToolModel()
    model = cfg if isinstance(cfg, ToolModel) else ToolModel.model_validate(cfg)

    # 1) Recorder for analytics
    recorder = Recorder(*(sinks or (JsonlSink(),)))

    # 2) Hooks; logs go to stdout unless a stream is given
    if use_logging:
        logger = (
            stream_json_logger(log_stream, level=model.log.level)
            if log_stream is not None
            else None
        )
        hooks = SearchLogging(
            run_id=model.run_id,
            recorder=recorder,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
            logger=logger,
        )
    else:
        hooks = NoopHooks()

    return PathEngine(model.engine, hooks=hooks, run_id=model.run_id)
