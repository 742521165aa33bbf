"""
Bernoulli Lift UQ: Surface Velocity Module
==========================================

VelocityModel: local surface velocity from the free stream and the pressure
coefficient, reduced to one representative velocity per surface.

    v_i = V_free * sqrt(|1 - Cp_i|)

The representative velocity of a surface is the arithmetic mean of its
stations: the v_i are accumulated first and divided by the station count once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from config import config
from .coefficients import AirfoilCoefficientTable, Surface
from .errors import DomainError, failing_stage
from .uncertain import ScalarLike, UncertainScalar, as_uncertain, require_within, total

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class SurfaceVelocities:
    """Representative velocities over and under the section."""

    upper: UncertainScalar
    lower: UncertainScalar
    upper_stations: int
    lower_stations: int


class VelocityModel:
    """Convert pressure coefficients into surface velocities."""

    def __init__(
        self,
        freestream: ScalarLike = None,
        velocity_limits: Optional[Tuple[float, float]] = None,
    ):
        """
        Args:
            freestream: Free-stream speed in m/s, Fixed or uncertain
                (defaults to config.flow.freestream_velocity)
            velocity_limits: Valid free-stream range (defaults to config)
        """
        if freestream is None:
            freestream = config.flow.freestream_velocity
        limits = velocity_limits or config.flow.velocity_limits
        with failing_stage("velocity", "V_free"):
            self.freestream = require_within(as_uncertain(freestream), "freestream_velocity", limits)

    def local_velocity(self, coefficient: ScalarLike) -> UncertainScalar:
        """Surface velocity at a station with pressure coefficient ``coefficient``."""
        cp = as_uncertain(coefficient)
        return self.freestream * (1.0 - cp).abs().sqrt()

    def station_velocities(self, coefficients: Sequence[ScalarLike]) -> List[UncertainScalar]:
        return [self.local_velocity(cp) for cp in coefficients]

    @staticmethod
    def mean_velocity(velocities: Sequence[UncertainScalar]) -> UncertainScalar:
        """Arithmetic mean: accumulate every velocity, then divide once."""
        if not velocities:
            raise DomainError("Cannot average an empty set of station velocities")
        return total(velocities) / len(velocities)

    def surface_velocity(
        self, table: AirfoilCoefficientTable, surface: Surface
    ) -> UncertainScalar:
        quantity = "v_over" if surface is Surface.UPPER else "v_under"
        with failing_stage("velocity", quantity):
            velocities = self.station_velocities(table.coefficients(surface))
            return self.mean_velocity(velocities)

    def surface_velocities(self, table: AirfoilCoefficientTable) -> SurfaceVelocities:
        """
        Representative upper and lower surface velocities.

        Args:
            table: Pressure coefficient table (literal or loaded)

        Returns:
            SurfaceVelocities with v_over from the upper surface and v_under
            from the lower surface
        """
        upper = self.surface_velocity(table, Surface.UPPER)
        lower = self.surface_velocity(table, Surface.LOWER)
        logger.debug(
            "Surface velocities: v_over=%.4f v_under=%.4f",
            upper.expected_value(), lower.expected_value(),
        )
        return SurfaceVelocities(
            upper=upper,
            lower=lower,
            upper_stations=table.station_count(Surface.UPPER),
            lower_stations=table.station_count(Surface.LOWER),
        )
