from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from rtsched.io import ConfigError, ConfigLoader


EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def _base_payload() -> dict:
    return {
        "version": "0.1",
        "tasks": [
            {"period": 3, "cost": 2},
            {"period": 6, "deadline": 5, "cost": 1},
        ],
        "platform": {"processors": 2},
        "scheduler": {"name": "gedf", "params": {}},
        "sim": {"horizon": 30, "seed": 1},
    }


def test_load_data_applies_defaults() -> None:
    spec = ConfigLoader().load_data(_base_payload())
    assert spec.tasks[0].deadline == 3
    assert spec.tasks[1].deadline == 5
    assert spec.platform.processors == 2
    assert spec.sim.event_id_mode == "deterministic"
    assert spec.analysis.algorithms == ["devi_anderson", "compliant_vector"]
    assert spec.analysis.max_iterations == 1000


def test_load_example_files() -> None:
    loader = ConfigLoader()
    spec = loader.load(str(EXAMPLES / "gedf_three_tasks.yaml"))
    assert len(spec.tasks) == 3
    assert spec.tasks.utilization() == 2

    lehoczky = loader.load(str(EXAMPLES / "lehoczky_fp.yaml"))
    assert lehoczky.scheduler.name == "gfp"
    assert lehoczky.scheduler.params == {}


def test_missing_version_defaults_to_supported() -> None:
    payload = _base_payload()
    payload.pop("version")
    assert ConfigLoader().load_data(payload).version == "0.1"


def test_unsupported_version_rejected() -> None:
    payload = _base_payload()
    payload["version"] = "9.9"
    with pytest.raises(ConfigError, match="unsupported config version"):
        ConfigLoader().load_data(payload)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda payload: payload["platform"].update(processors=0),
        lambda payload: payload["tasks"][0].update(cost=-1),
        lambda payload: payload["tasks"][0].update(priority=3),
        lambda payload: payload["sim"].update(horizon=0),
        lambda payload: payload.update(tasks=[]),
    ],
)
def test_schema_violations_rejected(mutate) -> None:
    payload = _base_payload()
    mutate(payload)
    with pytest.raises(ConfigError, match="schema validation failed"):
        ConfigLoader().load_data(payload)


def test_unknown_algorithm_rejected_by_model() -> None:
    payload = _base_payload()
    payload["analysis"] = {"algorithms": ["holistic"]}
    with pytest.raises(ConfigError, match="unknown bound algorithm"):
        ConfigLoader().load_data(payload)


def test_validate_reports_missing_file(tmp_path: Path) -> None:
    issues = ConfigLoader().validate(str(tmp_path / "missing.yaml"))
    assert len(issues) == 1
    assert "not found" in issues[0].message


def test_invalid_syntax_rejected(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("tasks: [\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid config syntax"):
        ConfigLoader().load(str(path))


def test_save_and_reload_yaml(tmp_path: Path) -> None:
    loader = ConfigLoader()
    spec = loader.load_data(_base_payload())
    path = tmp_path / "saved.yaml"
    loader.save(spec, str(path))

    saved = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert saved["tasks"][0] == {"period": 3, "deadline": 3, "cost": 2}
    assert loader.load(str(path)) == spec
