"""CLI entrypoint for validation, simulation and bound analysis."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from rtsched.analysis import build_audit_report
from rtsched.bounds import available_bound_algorithms
from rtsched.io import ConfigError, ConfigLoader, ExperimentRunner, build_engine, run_bounds
from rtsched.schedulers import available_release_policies


def _write_jsonl(path: str, rows: list[dict[str, Any]]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")


def _write_json(path: str, payload: dict[str, Any]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def cmd_validate(args: argparse.Namespace) -> int:
    loader = ConfigLoader()
    try:
        spec = loader.load(args.config)
    except ConfigError as exc:
        print(f"[ERROR] {args.config}: {exc}")
        return 1
    try:
        # Scheduler name and params must resolve during validate.
        build_engine(spec)
    except ValueError as exc:
        print(f"[ERROR] {args.config}: {exc}")
        return 1
    print("[OK] config validation passed")
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    loader = ConfigLoader()
    try:
        spec = loader.load(args.config)
    except ConfigError as exc:
        print(f"[ERROR] {exc}")
        return 1

    try:
        engine = build_engine(
            spec,
            scheduler=args.scheduler,
            processors=args.processors,
            horizon=args.horizon,
        )
        engine.run()
    except ValueError as exc:
        print(f"[ERROR] {exc}")
        return 1

    events = [event.model_dump(mode="json") for event in engine.events]
    metrics = engine.metric_report()

    events_out = args.events_out or "artifacts/events.jsonl"
    metrics_out = args.metrics_out or "artifacts/metrics.json"
    _write_jsonl(events_out, events)
    _write_json(metrics_out, metrics)
    if args.audit_out:
        audit_report = build_audit_report(engine.schedule())
        _write_json(args.audit_out, audit_report)
        if audit_report["status"] != "pass":
            print(f"[ERROR] simulation audit failed, report={args.audit_out}")
            return 2

    print(
        f"[OK] simulation completed, events={len(events)}, "
        f"deadline_misses={metrics['deadline_miss_count']}, metrics={metrics_out}"
    )
    return 0


def cmd_bound(args: argparse.Namespace) -> int:
    loader = ConfigLoader()
    try:
        spec = loader.load(args.config)
    except ConfigError as exc:
        print(f"[ERROR] {exc}")
        return 1

    try:
        results = run_bounds(
            spec,
            algorithms=args.algorithm,
            processors=args.processors,
            tardiness=args.tardiness,
        )
    except ValueError as exc:
        print(f"[ERROR] {exc}")
        return 1

    for name, result in results.items():
        if result:
            rendered = ", ".join(f"{value:.6g}" for value in result)
            print(f"[OK] {name} {result.kind.value}: [{rendered}]")
        else:
            print(f"[WARN] {name}: {result.status.value} ({result.message})")
    if args.out_json:
        _write_json(args.out_json, {name: result.to_dict() for name, result in results.items()})
    return 0


def cmd_batch_run(args: argparse.Namespace) -> int:
    try:
        runner = ExperimentRunner(workers=args.workers)
        summary = runner.run_batch(
            args.batch_config,
            output_dir=args.output_dir,
            summary_csv=args.summary_csv,
            summary_json=args.summary_json,
        )
    except (ConfigError, ValueError) as exc:
        print(f"[ERROR] {exc}")
        return 1

    print(
        "[OK] batch completed, "
        f"runs={summary.total_runs}, success={summary.succeeded_runs}, failed={summary.failed_runs}, "
        f"csv={summary.summary_csv}, json={summary.summary_json}"
    )
    if args.strict_fail_on_error and summary.failed_runs > 0:
        print("[ERROR] batch contains failed runs in strict mode")
        return 2
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rtsched", description="Global multiprocessor real-time scheduling tools")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="diagnostic logging level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="validate config file")
    validate_parser.add_argument("-c", "--config", required=True, help="path to config YAML/JSON")
    validate_parser.set_defaults(func=cmd_validate)

    simulate_parser = subparsers.add_parser("simulate", help="run schedule simulation")
    simulate_parser.add_argument("-c", "--config", required=True, help="path to config YAML/JSON")
    simulate_parser.add_argument(
        "--scheduler",
        default=None,
        choices=available_release_policies(),
        help="override scheduler name",
    )
    simulate_parser.add_argument("--processors", type=int, default=None, help="override processor count")
    simulate_parser.add_argument("--horizon", type=float, default=None, help="override simulation horizon")
    simulate_parser.add_argument("--events-out", default=None, help="path to write JSONL events")
    simulate_parser.add_argument("--metrics-out", default=None, help="path to write metric JSON")
    simulate_parser.add_argument("--audit-out", default=None, help="path to write audit report JSON")
    simulate_parser.set_defaults(func=cmd_simulate)

    bound_parser = subparsers.add_parser("bound", help="compute global EDF response-time bounds")
    bound_parser.add_argument("-c", "--config", required=True, help="path to config YAML/JSON")
    bound_parser.add_argument(
        "--algorithm",
        action="append",
        default=None,
        choices=available_bound_algorithms(),
        help="bound algorithm (repeatable); defaults to analysis.algorithms",
    )
    bound_parser.add_argument("--processors", type=int, default=None, help="override processor count")
    bound_parser.add_argument("--tardiness", action="store_true", help="report tardiness instead of response time")
    bound_parser.add_argument("--out-json", default=None, help="path to write bound report JSON")
    bound_parser.set_defaults(func=cmd_bound)

    batch_parser = subparsers.add_parser("batch-run", help="run matrix studies")
    batch_parser.add_argument("-b", "--batch-config", required=True, help="path to batch config YAML/JSON")
    batch_parser.add_argument("--workers", type=int, default=1, help="parallel worker threads")
    batch_parser.add_argument("--output-dir", default=None, help="batch output directory")
    batch_parser.add_argument("--summary-csv", default=None, help="summary CSV output path")
    batch_parser.add_argument("--summary-json", default=None, help="summary JSON output path")
    batch_parser.add_argument(
        "--strict-fail-on-error",
        action="store_true",
        help="return non-zero exit code when any run fails",
    )
    batch_parser.set_defaults(func=cmd_batch_run)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
