"""
Lift Force and Shipped Configurations
=====================================

The deterministic configuration must reproduce the plain float evaluation of
Fl = rho * A * (v_over^2 - v_under^2) / 2 and be identical across runs. The
environment configuration must reproduce the same Empirical density and lift
under a fixed seed. The aoa configuration must produce an Empirical lift from
the loaded three-condition table.
"""

import json
import math
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from config import Configuration  # noqa: E402
from lift.coefficients import (  # noqa: E402
    AOA_SAMPLE_ORDER,
    NACA2412_AOA10_LOWER,
    NACA2412_AOA10_UPPER,
)
from lift.errors import DomainError, MissingInputError  # noqa: E402
from lift.lift_force import LiftForceCalculator  # noqa: E402
from lift.report import diagnostic_lines, export_json  # noqa: E402
from lift.scenarios import LiftPipeline, aoa_inputs, build_inputs  # noqa: E402
from lift.table_loader import CoefficientTableLoader  # noqa: E402
from lift.uncertain import Distribution, SamplingPolicy  # noqa: E402

sys.path.insert(0, str(Path(__file__).parent))
from test_coefficients import write_table  # noqa: E402

POLICY = SamplingPolicy(sample_count=1000, seed=2412)


def _plain_lift() -> float:
    """Deterministic configuration evaluated with ordinary floats."""
    kelvin = 15.0 + 273.15
    pair = 101325.0 * math.exp(-9.80665 * 0.0289644 * 0.0 / (8.31432 * kelvin))
    rho = pair / (287.058 * kelvin)
    v_over = sum(30.0 * math.sqrt(abs(1 - cp)) for cp in NACA2412_AOA10_UPPER) / len(NACA2412_AOA10_UPPER)
    v_under = sum(30.0 * math.sqrt(abs(1 - cp)) for cp in NACA2412_AOA10_LOWER) / len(NACA2412_AOA10_LOWER)
    return rho * 0.23 * (v_over ** 2 - v_under ** 2) / 2.0


class TestLiftForceCalculator:

    def test_formula(self):
        lift = LiftForceCalculator(0.5).lift_force(1.2, 40.0, 30.0)
        assert lift.expected_value() == pytest.approx(1.2 * 0.5 * (1600.0 - 900.0) / 2.0)

    def test_area_outside_range_raises(self):
        with pytest.raises(DomainError):
            LiftForceCalculator(2.0)

    def test_estimate_keeps_inputs(self):
        estimate = LiftForceCalculator().estimate(1.225, 40.0, 30.0)
        assert estimate.area.expected_value() == 0.23
        assert estimate.samples is None
        assert estimate.value > 0


class TestDeterministicScenario:

    def test_density_is_standard_sea_level(self):
        result = LiftPipeline().run_configuration(Configuration.DETERMINISTIC, policy=POLICY)
        assert result.atmosphere.density.expected_value() == pytest.approx(1.2250, abs=5e-4)

    def test_lift_matches_plain_arithmetic(self):
        result = LiftPipeline().run_configuration(Configuration.DETERMINISTIC, policy=POLICY)
        assert result.lift_force.kind is Distribution.FIXED
        assert result.estimate.value == pytest.approx(_plain_lift(), rel=1e-12)
        assert result.estimate.value > 0, "Suction side is faster, lift must be positive"

    def test_lift_reproducible_bit_for_bit(self):
        first = LiftPipeline().run_configuration(Configuration.DETERMINISTIC, policy=POLICY)
        second = LiftPipeline().run_configuration(Configuration.DETERMINISTIC, policy=POLICY)
        assert first.estimate.value == second.estimate.value

    def test_diagnostic_lines(self):
        result = LiftPipeline().run_configuration(Configuration.DETERMINISTIC, policy=POLICY)
        lines = diagnostic_lines(result)
        names = [line.split("=")[0] for line in lines[:-1]]
        assert names == [
            "T", "h", "Rh", "Pair", "Psat", "Pv", "Pd",
            "v_over", "v_under", "area", "density",
        ]
        assert lines[-1] == f"Lift force = {result.estimate.value:f} N"


class TestEnvironmentScenario:

    def test_density_and_lift_reproducible_under_seed(self):
        first = LiftPipeline().run_configuration(Configuration.ENVIRONMENT, policy=POLICY)
        second = LiftPipeline().run_configuration(Configuration.ENVIRONMENT, policy=POLICY)

        assert first.atmosphere.density.kind is Distribution.EMPIRICAL
        np.testing.assert_array_equal(
            first.atmosphere.density.samples, second.atmosphere.density.samples
        )
        np.testing.assert_array_equal(first.estimate.samples, second.estimate.samples)

    def test_inputs_follow_configuration(self):
        inputs = build_inputs(Configuration.ENVIRONMENT, policy=POLICY)
        assert inputs.elevation.kind is Distribution.UNIFORM
        assert inputs.elevation.params == (0.0, 11019.2)
        assert inputs.temperature.kind is Distribution.GAUSSIAN
        assert inputs.temperature.params == (0.0, 50.0)
        assert inputs.relative_humidity.params == (0.0, 1.0)
        assert inputs.freestream.is_fixed

    def test_uncertain_velocity_option(self):
        inputs = build_inputs(Configuration.DETERMINISTIC, policy=POLICY, uncertain_velocity=True)
        assert inputs.freestream.kind is Distribution.UNIFORM
        result = LiftPipeline().run(inputs)
        assert result.lift_force.kind is Distribution.EMPIRICAL


class TestAoaScenario:

    def test_requires_table(self):
        with pytest.raises(MissingInputError):
            build_inputs(Configuration.AOA, policy=POLICY)

    def test_lift_is_empirical(self, tmp_path):
        table = CoefficientTableLoader().load(write_table(tmp_path / "all_angles.csv"), POLICY)
        result = LiftPipeline().run_configuration(Configuration.AOA, table, POLICY)

        assert result.atmosphere.density.is_fixed
        assert result.velocities.upper.kind is Distribution.EMPIRICAL
        assert result.lift_force.kind is Distribution.EMPIRICAL
        assert result.estimate.samples.size == POLICY.sample_count
        assert np.all(np.isfinite(result.estimate.samples))

    def test_run_all_skips_aoa_without_table(self):
        results = LiftPipeline().run_all(policy=POLICY)
        assert [r.inputs.configuration for r in results] == [
            Configuration.DETERMINISTIC, Configuration.ENVIRONMENT,
        ]

    def test_json_report(self, tmp_path):
        table = CoefficientTableLoader().load(write_table(tmp_path / "all_angles.csv"), POLICY)
        result = LiftPipeline().run_configuration(Configuration.AOA, table, POLICY)
        path = export_json(result, tmp_path / "reports" / "lift.json")

        data = json.loads(path.read_text())
        assert data["configuration"] == "aoa"
        assert data["lift_force"]["distribution"] == "empirical"
        assert data["lift_force"]["sample_count"] == POLICY.sample_count
        assert data["quantities"]["density"]["distribution"] == "fixed"

    def test_station_mixing_narrows_lift_spread(self, tmp_path):
        # Stations draw their angle independently, so samples do not span
        # the per-angle lifts
        table = CoefficientTableLoader().load(write_table(tmp_path / "all_angles.csv"), POLICY)
        pipeline = LiftPipeline()
        per_angle = [
            pipeline.run(aoa_inputs(POLICY, table.at_condition(c))).estimate.value
            for c in AOA_SAMPLE_ORDER
        ]
        samples = pipeline.run_configuration(Configuration.AOA, table, POLICY).estimate.samples

        assert samples.max() - samples.min() < max(per_angle) - min(per_angle)
