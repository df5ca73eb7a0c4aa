from __future__ import annotations

import logging
import textwrap

import pytest

from flight4d.safety.separation_config import SeparationMinima, SimulationConfig


def test_defaults():
    config = SimulationConfig()
    assert config.trajectory_step_sec == 60
    assert config.scan_step_sec == 60
    assert config.minima == SeparationMinima(horizontal_nm=5.0, vertical_ft=2000.0)


def test_yaml_roundtrip(tmp_path):
    yaml_text = textwrap.dedent(
        """
        scan_step_sec: 30
        horizontal_nm: 3
        vertical_ft: 1000
        """
    ).strip()
    config_path = tmp_path / "sim.yaml"
    config_path.write_text(yaml_text, encoding="utf-8")
    config = SimulationConfig.from_yaml(config_path)
    assert config.scan_step_sec == 30
    assert config.trajectory_step_sec == 60
    assert config.minima.horizontal_nm == 3
    assert config.minima.vertical_ft == 1000

    roundtrip_path = tmp_path / "nested" / "roundtrip.yaml"
    config.to_yaml(roundtrip_path)
    assert SimulationConfig.from_yaml(roundtrip_path) == config


def test_empty_yaml_gives_defaults(tmp_path):
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")
    assert SimulationConfig.from_yaml(config_path) == SimulationConfig()


def test_unknown_keys_are_ignored_with_warning(caplog):
    with caplog.at_level(logging.WARNING):
        config = SimulationConfig.from_mapping({"scan_step_sec": 10, "colour": "red"})
    assert config.scan_step_sec == 10
    assert "colour" in caplog.text


@pytest.mark.parametrize(
    "mapping, error",
    [
        ({"scan_step_sec": 0}, ValueError),
        ({"horizontal_nm": -1}, ValueError),
        ({"vertical_ft": "high"}, TypeError),
        ({"trajectory_step_sec": True}, TypeError),
    ],
)
def test_invalid_values_rejected(mapping, error):
    with pytest.raises(error):
        SimulationConfig.from_mapping(mapping)


def test_yaml_must_be_a_mapping(tmp_path):
    config_path = tmp_path / "list.yaml"
    config_path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(TypeError):
        SimulationConfig.from_yaml(config_path)
    with pytest.raises(FileNotFoundError):
        SimulationConfig.from_yaml(tmp_path / "missing.yaml")


def test_minima_must_be_positive():
    with pytest.raises(ValueError):
        SeparationMinima(horizontal_nm=0)
