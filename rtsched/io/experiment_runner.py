"""Batch study runner for parameter matrix sweeps."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import copy
import csv
from dataclasses import dataclass
from itertools import product
import json
import logging
from pathlib import Path
from typing import Any

from .loader import ConfigError, ConfigLoader, read_payload, validate_schema
from .schema import BATCH_SCHEMA
from .study import run_bounds, run_simulation


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchRunSummary:
    summary_csv: Path
    summary_json: Path
    total_runs: int
    succeeded_runs: int
    failed_runs: int


class ExperimentRunner:
    """Expand matrix factors, run simulations and/or bounds, and persist summaries."""

    SUPPORTED_VERSION = "0.1"
    MODES = ("simulate", "bound", "both")

    def __init__(self, loader: ConfigLoader | None = None, *, workers: int = 1) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self._loader = loader or ConfigLoader()
        self._workers = workers

    def run_batch(
        self,
        batch_config_path: str,
        *,
        output_dir: str | None = None,
        summary_csv: str | None = None,
        summary_json: str | None = None,
    ) -> BatchRunSummary:
        batch_path = Path(batch_config_path)
        batch_payload = read_payload(batch_path)
        validate_schema(batch_payload, BATCH_SCHEMA)
        version = str(batch_payload.get("version", self.SUPPORTED_VERSION))
        if version != self.SUPPORTED_VERSION:
            raise ConfigError(f"unsupported batch version '{version}'")

        base_config = batch_payload.get("base_config")
        if not isinstance(base_config, str) or not base_config:
            raise ConfigError("batch config requires non-empty 'base_config'")
        base_config_path = self._resolve_path(batch_path.parent, base_config)
        base_payload = read_payload(base_config_path)

        factors = batch_payload.get("factors") or {}
        normalized_factors = {str(path): list(values) for path, values in factors.items()}
        mode = str(batch_payload.get("mode", "both"))

        run_output_raw = output_dir or batch_payload.get("output_dir")
        if isinstance(run_output_raw, str) and run_output_raw:
            run_output_dir = self._resolve_path(batch_path.parent, run_output_raw)
        else:
            run_output_dir = (batch_path.parent / "artifacts" / "batch").resolve()
        run_output_dir.mkdir(parents=True, exist_ok=True)

        factor_paths = sorted(normalized_factors)
        factor_values = [normalized_factors[path] for path in factor_paths]
        jobs: list[tuple[str, dict[str, Any], dict[str, Any]]] = []
        for idx, combo in enumerate(product(*factor_values)):
            run_id = f"run_{idx:03d}"
            combo_payload = copy.deepcopy(base_payload)
            assignments: dict[str, Any] = {}
            for path, value in zip(factor_paths, combo, strict=True):
                self._apply_factor(combo_payload, path, value)
                assignments[path] = value
            jobs.append((run_id, assignments, combo_payload))

        def _run(job: tuple[str, dict[str, Any], dict[str, Any]]) -> dict[str, Any]:
            run_id, assignments, payload = job
            return self._run_one(run_id, assignments, payload, mode, run_output_dir / run_id)

        logger.info("running %d batch run(s) with %d worker(s)", len(jobs), self._workers)
        if self._workers == 1:
            rows = [_run(job) for job in jobs]
        else:
            with ThreadPoolExecutor(max_workers=self._workers) as pool:
                rows = list(pool.map(_run, jobs))

        summary_csv_path = (
            self._resolve_path(batch_path.parent, summary_csv)
            if isinstance(summary_csv, str) and summary_csv
            else run_output_dir / "summary.csv"
        )
        summary_json_path = (
            self._resolve_path(batch_path.parent, summary_json)
            if isinstance(summary_json, str) and summary_json
            else run_output_dir / "summary.json"
        )
        succeeded = sum(1 for row in rows if row.get("status") == "ok")
        self._write_summary_csv(summary_csv_path, rows)
        self._write_json(
            summary_json_path,
            {
                "version": self.SUPPORTED_VERSION,
                "base_config": str(base_config_path),
                "mode": mode,
                "factors": normalized_factors,
                "total_runs": len(rows),
                "succeeded_runs": succeeded,
                "failed_runs": len(rows) - succeeded,
                "runs": rows,
            },
        )

        return BatchRunSummary(
            summary_csv=summary_csv_path,
            summary_json=summary_json_path,
            total_runs=len(rows),
            succeeded_runs=succeeded,
            failed_runs=len(rows) - succeeded,
        )

    def _run_one(
        self,
        run_id: str,
        assignments: dict[str, Any],
        payload: dict[str, Any],
        mode: str,
        run_dir: Path,
    ) -> dict[str, Any]:
        row: dict[str, Any] = {"run_id": run_id, **assignments}
        try:
            spec = self._loader.load_data(payload)
            if mode in {"simulate", "both"}:
                engine = run_simulation(spec)
                metrics = engine.metric_report()
                events_path = run_dir / "events.jsonl"
                metrics_path = run_dir / "metrics.json"
                self._write_jsonl(events_path, [event.model_dump(mode="json") for event in engine.events])
                self._write_json(metrics_path, metrics)
                row["events_path"] = str(events_path)
                row["metrics_path"] = str(metrics_path)
                row.update(
                    {key: value for key, value in metrics.items() if not isinstance(value, dict)}
                )
            if mode in {"bound", "both"}:
                for name, result in run_bounds(spec, tardiness=True).items():
                    row[f"{name}_status"] = result.status.value
                    row[f"{name}_max_tardiness"] = max(result.values, default=None) if result else None
            row["status"] = "ok"
        except Exception as exc:  # noqa: BLE001 - batch should continue with error summary
            logger.warning("batch run %s failed: %s", run_id, exc)
            row["status"] = "error"
            row["error"] = str(exc)
        return row

    def _apply_factor(self, payload: dict[str, Any], path: str, value: Any) -> None:
        self._apply_parts(payload, path.split("."), value)

    def _apply_parts(self, node: Any, parts: list[str], value: Any) -> None:
        if not parts:
            return
        head = parts[0]
        tail = parts[1:]
        is_last = len(parts) == 1

        if head in {"*", "[*]"}:
            if not isinstance(node, list):
                raise ConfigError(f"factor path wildcard expects list node, got {type(node).__name__}")
            if is_last:
                raise ConfigError("wildcard cannot be terminal in factor path")
            for item in node:
                self._apply_parts(item, tail, value)
            return

        if isinstance(node, list):
            raise ConfigError("factor path cannot address list without wildcard")
        if not isinstance(node, dict):
            raise ConfigError(f"cannot apply factor path to node type {type(node).__name__}")

        if is_last:
            node[head] = value
            return
        if head not in node:
            node[head] = {}
        self._apply_parts(node[head], tail, value)

    def _resolve_path(self, base_dir: Path, raw_path: str) -> Path:
        path = Path(raw_path)
        if path.is_absolute():
            return path
        return (base_dir / path).resolve()

    def _write_summary_csv(self, path: Path, rows: list[dict[str, Any]]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fieldnames: list[str] = []
        for row in rows:
            for key in row:
                if key not in fieldnames:
                    fieldnames.append(key)
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)

    def _write_jsonl(self, path: Path, rows: list[dict[str, Any]]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            for row in rows:
                f.write(json.dumps(row, ensure_ascii=False) + "\n")

    def _write_json(self, path: Path, payload: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
