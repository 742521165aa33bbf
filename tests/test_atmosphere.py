"""
Atmospheric Density Model
=========================

At h=0 m, T=15 C and dry air the model must reproduce the standard sea-level
density of 1.2250 kg/m^3. Fixed inputs must give exactly the plain float
evaluation of the same formulas, and absolute zero must raise instead of
returning NaN or Inf.
"""

import math
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from lift.atmosphere import AtmosphericModel  # noqa: E402
from lift.errors import DomainError, LiftArithmeticError  # noqa: E402
from lift.uncertain import Distribution, SamplingPolicy, UncertainScalar  # noqa: E402


def _plain_density(h: float, t: float, rh: float) -> float:
    """Reference evaluation with ordinary floats."""
    kelvin = t + 273.15
    pair = 101325.0 * math.exp(-9.80665 * 0.0289644 * h / (8.31432 * kelvin))
    psat = 6.1078 * 10.0 ** (7.5 * t / (t + 237.3))
    pv = psat * rh
    pd = pair - pv
    return pd / (287.058 * kelvin) + pv / (461.495 * kelvin)


class TestDeterministicAtmosphere:

    def test_standard_sea_level_density(self):
        rho = AtmosphericModel().density(0.0, 15.0, 0.0)
        assert rho.kind is Distribution.FIXED
        assert rho.expected_value() == pytest.approx(1.2250, abs=5e-4), (
            f"Sea-level dry-air density should be ~1.2250 kg/m^3, got {rho.expected_value():.5f}"
        )

    @pytest.mark.parametrize(
        "h, t, rh",
        [(0.0, 15.0, 0.0), (1500.0, -10.0, 0.4), (11000.0, 45.0, 1.0)],
    )
    def test_fixed_inputs_match_plain_arithmetic(self, h, t, rh):
        rho = AtmosphericModel().density(h, t, rh)
        assert rho.expected_value() == pytest.approx(_plain_density(h, t, rh), rel=1e-12)

    def test_state_carries_intermediates(self):
        state = AtmosphericModel().evaluate(0.0, 15.0, 0.5)
        values = state.expected_values()

        assert values["air_pressure"] == pytest.approx(101325.0)
        assert values["vapor_pressure"] == pytest.approx(
            values["saturation_vapor_pressure"] * 0.5
        )
        assert values["dry_air_pressure"] == pytest.approx(
            values["air_pressure"] - values["vapor_pressure"]
        )

    def test_density_falls_with_elevation(self):
        model = AtmosphericModel()
        low = model.density(0.0, 15.0, 0.0).expected_value()
        high = model.density(5000.0, 15.0, 0.0).expected_value()
        assert high < low


class TestDomain:

    @pytest.mark.parametrize(
        "h, t, rh",
        [(-1.0, 15.0, 0.0), (12000.0, 15.0, 0.0), (0.0, 60.0, 0.0),
         (0.0, -51.0, 0.0), (0.0, 15.0, 1.2)],
    )
    def test_out_of_range_inputs_raise_domain_error(self, h, t, rh):
        with pytest.raises(DomainError):
            AtmosphericModel().evaluate(h, t, rh)

    def test_absolute_zero_raises_arithmetic_error(self):
        model = AtmosphericModel(enforce_domain=False)
        with pytest.raises(ArithmeticError) as excinfo:
            model.evaluate(0.0, -273.15, 0.0)
        assert isinstance(excinfo.value, LiftArithmeticError)
        assert excinfo.value.stage == "atmosphere"

    def test_absolute_zero_raises_arithmetic_error_by_default(self):
        with pytest.raises(ArithmeticError) as excinfo:
            AtmosphericModel().density(0.0, -273.15, 0.0)
        assert isinstance(excinfo.value, LiftArithmeticError)
        assert (excinfo.value.stage, excinfo.value.quantity) == ("atmosphere", "temperature")

    def test_uniform_reaching_absolute_zero_raises(self):
        with pytest.raises(LiftArithmeticError):
            AtmosphericModel().evaluate(0.0, UncertainScalar.uniform(-300.0, 15.0), 0.0)

    def test_cold_but_physical_temperature_is_domain_error(self):
        with pytest.raises(DomainError):
            AtmosphericModel().evaluate(0.0, -100.0, 0.0)


class TestUncertainAtmosphere:

    POLICY = SamplingPolicy(sample_count=1000, seed=2412)

    def _environment(self):
        return AtmosphericModel().evaluate(
            UncertainScalar.uniform(0.0, 11019.2, self.POLICY),
            UncertainScalar.gaussian(0.0, 50.0, self.POLICY),
            UncertainScalar.uniform(0.0, 1.0, self.POLICY),
        )

    def test_environment_density_is_empirical(self):
        rho = self._environment().density
        assert rho.kind is Distribution.EMPIRICAL
        assert rho.samples.size == self.POLICY.sample_count
        assert 0.2 < rho.expected_value() < 2.0

    def test_environment_density_reproducible(self):
        first = self._environment().density
        second = self._environment().density
        np.testing.assert_array_equal(first.samples, second.samples)

    def test_uncertain_elevation_only(self):
        rho = AtmosphericModel().density(
            UncertainScalar.uniform(0.0, 2000.0, self.POLICY), 15.0, 0.0
        )
        assert rho.kind is Distribution.EMPIRICAL
        # Every sample lies between the densities at the range ends
        assert rho.samples.max() <= _plain_density(0.0, 15.0, 0.0) + 1e-9
        assert rho.samples.min() >= _plain_density(2000.0, 15.0, 0.0) - 1e-9
