"""
Bernoulli Lift UQ: Atmosphere Module
====================================

AtmosphericModel: humid-air density from elevation, temperature and
relative humidity. Every stage is evaluated with UncertainScalar arithmetic so
uncertainty in any input composes through to the density.

    Pair = P0 * exp(-g * M * h / (R * (T + 273.15)))      barometric formula
    Psat = 6.1078 * 10 ** (7.5 * T / (T + 237.3))         Magnus-Tetens
    Pv   = Psat * Rh
    Pd   = Pair - Pv
    rho  = Pd / (Rd * (T + 273.15)) + Pv / (Rv * (T + 273.15))

Reference level h0 is sea level and P0 is 1 atm.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from config import config, AtmosphereParams
from .errors import LiftArithmeticError, failing_stage
from .uncertain import (
    Distribution, ScalarLike, UncertainScalar, as_uncertain, require_within,
)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class AtmosphericState:
    """Inputs and every derived quantity of one density evaluation."""

    elevation: UncertainScalar
    temperature: UncertainScalar
    relative_humidity: UncertainScalar
    air_pressure: UncertainScalar
    saturation_vapor_pressure: UncertainScalar
    vapor_pressure: UncertainScalar
    dry_air_pressure: UncertainScalar
    density: UncertainScalar

    def expected_values(self) -> Dict[str, float]:
        """Representative value of every field, keyed by field name."""
        return {
            "elevation": self.elevation.expected_value(),
            "temperature": self.temperature.expected_value(),
            "relative_humidity": self.relative_humidity.expected_value(),
            "air_pressure": self.air_pressure.expected_value(),
            "saturation_vapor_pressure": self.saturation_vapor_pressure.expected_value(),
            "vapor_pressure": self.vapor_pressure.expected_value(),
            "dry_air_pressure": self.dry_air_pressure.expected_value(),
            "density": self.density.expected_value(),
        }


class AtmosphericModel:
    """
    Humid-air density model.

    Domain checks reject inputs outside the documented ranges with
    DomainError. A temperature at or below absolute zero makes the Kelvin
    divisors vanish and raises LiftArithmeticError (an ArithmeticError)
    whether or not the domain is enforced.
    """

    def __init__(self, params: Optional[AtmosphereParams] = None, enforce_domain: bool = True):
        """
        Args:
            params: Physical constants and domains (defaults to config.atmosphere)
            enforce_domain: Reject inputs outside the documented ranges
        """
        self.params = params or config.atmosphere
        self.enforce_domain = enforce_domain

    def _check_absolute_zero(self, temperature: UncertainScalar) -> None:
        """Raise LiftArithmeticError when T + 273.15 can reach zero or below."""
        if temperature.kind is Distribution.GAUSSIAN:
            coldest = temperature.expected_value()
        else:
            coldest = temperature.low
        if coldest + self.params.kelvin_offset <= 0.0:
            raise LiftArithmeticError(
                f"temperature {temperature!r} reaches absolute zero, "
                "Kelvin divisors vanish",
                stage="atmosphere", quantity="temperature",
            )

    def _check_inputs(
        self,
        elevation: UncertainScalar,
        temperature: UncertainScalar,
        relative_humidity: UncertainScalar,
    ) -> None:
        p = self.params
        with failing_stage("atmosphere"):
            require_within(elevation, "elevation", p.elevation_limits)
            require_within(temperature, "temperature", p.temperature_limits)
            require_within(relative_humidity, "relative_humidity", p.humidity_limits)

    def air_pressure(self, elevation: ScalarLike, temperature: ScalarLike) -> UncertainScalar:
        """Barometric air pressure in Pa."""
        p = self.params
        h = as_uncertain(elevation)
        kelvin = as_uncertain(temperature) + p.kelvin_offset
        with failing_stage("atmosphere", "Pair"):
            exponent = (-p.gravity * p.molar_mass_air) * h / (p.universal_gas_constant * kelvin)
            return p.sea_level_pressure * exponent.exp()

    def saturation_vapor_pressure(self, temperature: ScalarLike) -> UncertainScalar:
        """Magnus-Tetens saturation vapor pressure."""
        p = self.params
        t = as_uncertain(temperature)
        with failing_stage("atmosphere", "Psat"):
            return p.magnus_base_pressure * 10.0 ** (p.magnus_a * t / (t + p.magnus_b))

    def evaluate(
        self,
        elevation: ScalarLike,
        temperature: ScalarLike,
        relative_humidity: ScalarLike,
    ) -> AtmosphericState:
        """
        Compute every atmospheric quantity for one set of conditions.

        Args:
            elevation: Height above sea level in m
            temperature: Ambient temperature in deg C
            relative_humidity: Relative humidity in [0, 1]

        Returns:
            AtmosphericState with density as an UncertainScalar (Fixed when
            every input is Fixed)

        Raises:
            DomainError: If an input lies outside its documented range
            LiftArithmeticError: At or below absolute zero, on division by
                zero or on non-finite results
        """
        p = self.params
        h = as_uncertain(elevation)
        t = as_uncertain(temperature)
        rh = as_uncertain(relative_humidity)

        self._check_absolute_zero(t)
        if self.enforce_domain:
            self._check_inputs(h, t, rh)

        pair = self.air_pressure(h, t)
        psat = self.saturation_vapor_pressure(t)
        with failing_stage("atmosphere", "Pv"):
            pv = psat * rh
        with failing_stage("atmosphere", "Pd"):
            pd = pair - pv

        kelvin = t + p.kelvin_offset
        with failing_stage("atmosphere", "density"):
            density = (
                pd / (p.dry_air_gas_constant * kelvin)
                + pv / (p.vapor_gas_constant * kelvin)
            )

        logger.debug(
            "Atmosphere: Pair=%.3f Psat=%.3f Pv=%.3f Pd=%.3f rho=%.5f",
            pair.expected_value(), psat.expected_value(), pv.expected_value(),
            pd.expected_value(), density.expected_value(),
        )

        return AtmosphericState(
            elevation=h,
            temperature=t,
            relative_humidity=rh,
            air_pressure=pair,
            saturation_vapor_pressure=psat,
            vapor_pressure=pv,
            dry_air_pressure=pd,
            density=density,
        )

    def density(
        self,
        elevation: ScalarLike,
        temperature: ScalarLike,
        relative_humidity: ScalarLike,
    ) -> UncertainScalar:
        """Air density in kg/m^3."""
        return self.evaluate(elevation, temperature, relative_humidity).density
