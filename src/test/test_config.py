"""
Test configuration schemas, YAML case loading and presets.
"""

import pytest
import numpy as np
import yaml
from pathlib import Path
from pydantic import ValidationError

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import (
    ConstantsConfig,
    SamplingConfig,
    TracingConfig,
    EquilibriumConfig,
    SimulationConfig,
)
from core.geometry import FieldMode, Vector3
from core.io import Case, CaseLoader, available_presets, load_preset
from physics import DEFAULT_CONSTANTS


def write_case(directory: Path, data: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "case.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(data, f)
    return path


class TestSchemas:
    """Pydantic validation of kernel parameters."""

    def test_defaults(self):
        assert SamplingConfig().half_extent == 8.0
        assert SamplingConfig().max_samples == 500
        assert TracingConfig().max_steps == 600
        assert TracingConfig().step_size == 0.05
        assert EquilibriumConfig().method == "newton"

    def test_constants_roundtrip(self):
        constants = ConstantsConfig().to_constants()
        assert constants == DEFAULT_CONSTANTS

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            SamplingConfig(step=0.0)
        with pytest.raises(ValidationError):
            TracingConfig(max_steps=0)
        with pytest.raises(ValidationError):
            EquilibriumConfig(method="bisection")
        with pytest.raises(ValidationError):
            ConstantsConfig(min_distance=-1.0)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            SimulationConfig(name="x", solver={"type": "spm"})

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            SimulationConfig(name="  ")

    def test_duplicate_source_ids(self):
        with pytest.raises(ValidationError):
            SimulationConfig(name="x", sources=[
                {"id": "a", "position": [0, 0, 0], "value": 1.0},
                {"id": "a", "position": [1, 0, 0], "value": 1.0},
            ])

    def test_preset_and_sources_exclusive(self):
        with pytest.raises(ValidationError):
            SimulationConfig(name="x", preset="dipole", sources=[
                {"position": [0, 0, 0], "value": 1.0},
            ])

    def test_mode_parsed(self):
        config = SimulationConfig(name="x", mode="gravity")
        assert config.mode is FieldMode.GRAVITY


class TestPresets:
    """Built-in classroom presets."""

    def test_available(self):
        names = available_presets()
        for name in ["single_source", "dipole", "two_like_charges",
                     "planet_test_mass", "sample_problem_1"]:
            assert name in names

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            load_preset("quadrupole")

    def test_mode_override(self):
        assert load_preset("planet_test_mass").mode is FieldMode.GRAVITY
        assert load_preset("dipole").mode is FieldMode.ELECTRIC

    def test_mode_kept_from_base(self):
        base = load_preset("planet_test_mass")
        scene = load_preset("two_like_charges", base=base)
        assert scene.mode is FieldMode.GRAVITY

    def test_sample_problem_positions(self):
        scene = load_preset("sample_problem_1")
        np.testing.assert_allclose(scene.positions[:, 0], [-2.7, 1.8])
        np.testing.assert_allclose(scene.values, [3.3e-9, -1.0e-8])
        assert scene.probe.value == 2.0e-12
        assert scene.probe.position == Vector3(0.0, 0.0, 0.0)

    def test_generated_ids(self):
        scene = load_preset("dipole")
        assert [s.id for s in scene.sources] == ["source-1", "source-2"]


class TestCaseLoader:
    """YAML cases."""

    def test_load_explicit_sources(self, tmp_path):
        path = write_case(tmp_path / "pair", {
            "name": "pair",
            "mode": "electric",
            "sources": [
                {"id": "a", "position": [-1, 0, 0], "value": 1e-9},
                {"id": "b", "position": [1, 0, 0], "value": -2e-9},
            ],
            "probe": {"position": [0, 2, 0], "value": 1e-12},
        })
        scene, config = CaseLoader.load(path)

        assert scene.name == "pair"
        assert scene.num_sources == 2
        assert scene.get_source("b").value == -2e-9
        assert scene.probe.position == Vector3(0.0, 2.0, 0.0)
        assert config.sampling == SamplingConfig()

    def test_meter_units_converted(self, tmp_path):
        path = write_case(tmp_path / "m", {
            "name": "m",
            "sources": [{"position": [0.3, 0.0, 0.0], "value": 1.0, "units": "meters"}],
            "probe": {"position": [0.0, 0.1, 0.0], "units": "meters"},
        })
        scene, _ = CaseLoader.load(path)

        np.testing.assert_allclose(scene.positions[0], [3.0, 0.0, 0.0])
        np.testing.assert_allclose(scene.probe.position.to_array(), [0.0, 1.0, 0.0])

    def test_preset_case(self, tmp_path):
        path = write_case(tmp_path / "p", {"name": "from_preset", "preset": "planet_test_mass"})
        scene, _ = CaseLoader.load(path)

        assert scene.name == "from_preset"
        assert scene.mode is FieldMode.GRAVITY
        assert scene.num_sources == 1
        assert scene.probe is not None

    def test_unknown_preset_case(self, tmp_path):
        path = write_case(tmp_path / "bad", {"name": "bad", "preset": "nope"})
        with pytest.raises(KeyError):
            CaseLoader.load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CaseLoader.load(tmp_path / "missing.yaml")
        with pytest.raises(FileNotFoundError):
            CaseLoader.load_case(tmp_path)

    def test_validate(self, tmp_path):
        good = write_case(tmp_path / "good", {"name": "good"})
        assert CaseLoader.validate(good)

        bad = write_case(tmp_path / "bad", {"name": "bad", "sampling": {"step": -1}})
        with pytest.raises(ValidationError):
            CaseLoader.validate(bad)

    def test_load_case(self, tmp_path):
        write_case(tmp_path / "case_dir", {
            "name": "cd",
            "mode": "gravity",
            "sources": [{"position": [0, 0, 0], "value": 5.0}],
            "constants": {"gravitational": 1.0},
            "tracing": {"seed_count": 50},
            "output": {"directory": "results"},
        })
        case = CaseLoader.load_case(tmp_path / "case_dir")

        assert isinstance(case, Case)
        assert case.name == "cd"
        assert case.mode is FieldMode.GRAVITY
        assert case.num_sources == 1
        assert case.constants.gravitational == 1.0
        assert case.tracing.seed_count == 50
        assert case.output_dir == tmp_path / "case_dir" / "results"

    def test_bundled_cases_load(self):
        cases_dir = Path(__file__).parent.parent.parent / "cases"
        for case_dir in sorted(p for p in cases_dir.iterdir() if p.is_dir()):
            case = CaseLoader.load_case(case_dir)
            assert case.num_sources > 0
