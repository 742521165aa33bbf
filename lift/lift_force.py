"""
Bernoulli Lift UQ: Lift Force Module
====================================

LiftForceCalculator: net pressure force on the section from Bernoulli's
equation.

With the hydrostatic term neglected across the section thickness,
P_lower - P_upper = rho * (v_over**2 - v_under**2) / 2, and the lift force is
that pressure difference acting on the planform area:

    Fl = rho * A * (v_over**2 - v_under**2) / 2
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from config import config
from .errors import failing_stage
from .uncertain import ScalarLike, UncertainScalar, as_uncertain, require_within


@dataclass(frozen=True)
class LiftEstimate:
    """Terminal result of one lift evaluation."""

    density: UncertainScalar
    area: UncertainScalar
    upper_velocity: UncertainScalar
    lower_velocity: UncertainScalar
    lift_force: UncertainScalar

    @property
    def value(self) -> float:
        """Representative lift force in N."""
        return self.lift_force.expected_value()

    @property
    def samples(self) -> Optional[np.ndarray]:
        """Empirical lift samples, or None when the estimate is not sampled."""
        return self.lift_force.samples


class LiftForceCalculator:
    """Combine density, area and surface velocities into a lift force."""

    def __init__(
        self,
        area: ScalarLike = None,
        area_limits: Optional[Tuple[float, float]] = None,
    ):
        """
        Args:
            area: Planform area in m^2 (defaults to config.flow.planform_area)
            area_limits: Valid area range (defaults to config.flow.area_limits)
        """
        if area is None:
            area = config.flow.planform_area
        limits = area_limits or config.flow.area_limits
        with failing_stage("lift", "area"):
            self.area = require_within(as_uncertain(area), "planform_area", limits)

    def lift_force(
        self,
        density: ScalarLike,
        upper_velocity: ScalarLike,
        lower_velocity: ScalarLike,
    ) -> UncertainScalar:
        """Lift force in N."""
        rho = as_uncertain(density)
        v_over = as_uncertain(upper_velocity)
        v_under = as_uncertain(lower_velocity)
        with failing_stage("lift", "Fl"):
            return rho * self.area * (v_over ** 2 - v_under ** 2) / 2.0

    def estimate(
        self,
        density: ScalarLike,
        upper_velocity: ScalarLike,
        lower_velocity: ScalarLike,
    ) -> LiftEstimate:
        rho = as_uncertain(density)
        v_over = as_uncertain(upper_velocity)
        v_under = as_uncertain(lower_velocity)
        return LiftEstimate(
            density=rho,
            area=self.area,
            upper_velocity=v_over,
            lower_velocity=v_under,
            lift_force=self.lift_force(rho, v_over, v_under),
        )
