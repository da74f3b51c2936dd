# main.py
import argparse
import json
import sys
from dataclasses import asdict

from hab_path.app.build import build
from hab_path.io.inputs import load_query
from hab_path.io.recorder import JsonlSink


def run(query_file: str, *, use_logging: bool = True) -> int:
    q = load_query(query_file)
    # stdout carries only the result document
    engine = build(
        q.get("config"),
        use_logging=use_logging,
        sinks=(JsonlSink(sys.stderr),),
        log_stream=sys.stderr,
    )

    result = engine.query(
        q["start"],
        q["end"],
        q.get("obstacles", []),
        q["habitat"],
        start_name=q.get("start_name"),
        end_name=q.get("end_name"),
    )

    out = {
        "outcome": result.outcome.value,
        "path": None if result.path is None else [p.as_tuple() for p in result.path],
        "report": asdict(result.report),
    }
    print(json.dumps(out, indent=2))
    return 0 if result.report.status == "PASS" else 1


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Find and certify a crew translation path.")
    ap.add_argument("query", help="JSON file with habitat, start, end, obstacles[, config]")
    ap.add_argument("--quiet", action="store_true", help="disable JSON logs")
    args = ap.parse_args(argv)
    return run(args.query, use_logging=not args.quiet)


if __name__ == "__main__":
    sys.exit(main())
