"""
Bernoulli Lift UQ: Single Source of Truth (SSOT)
================================================

This configuration file defines ALL parametric constants for the NACA-2412
lift estimate. NEVER hard-code physical constants or input ranges elsewhere.
The atmosphere, velocity and lift modules, the three shipped configurations
and the CLI all derive from these variables.

Model scope: inviscid, incompressible flow over a 2D section. Pressure
coefficients are digitized plot data, not calibrated measurements.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class Configuration(Enum):
    """Shipped input configurations for the lift pipeline."""
    DETERMINISTIC = "deterministic"      # All inputs fixed
    ENVIRONMENT = "environment"          # h, T, Rh uncertain
    AOA = "aoa"                          # Angle of attack uncertain (0/5/10 deg)


@dataclass
class AtmosphereParams:
    """Ambient conditions and physical constants for the density model."""

    # === NOMINAL CONDITIONS (deterministic / AOA configurations) ===
    elevation: float = 0.0                # m above sea level
    temperature: float = 15.0             # deg C
    relative_humidity: float = 0.0        # dry air

    # === UNCERTAIN CONDITIONS (environment configuration) ===
    elevation_range: Tuple[float, float] = (0.0, 11019.2)
    temperature_mean: float = 0.0         # deg C
    temperature_stddev: float = 50.0      # deg C, admits values beyond the domain
    humidity_range: Tuple[float, float] = (0.0, 1.0)

    # === VALID INPUT DOMAIN ===
    elevation_limits: Tuple[float, float] = (0.0, 11019.2)    # troposphere
    temperature_limits: Tuple[float, float] = (-50.0, 50.0)
    humidity_limits: Tuple[float, float] = (0.0, 1.0)

    # === BAROMETRIC FORMULA ===
    sea_level_pressure: float = 101325.0  # Pa (1 atm)
    gravity: float = 9.80665              # m/s^2
    molar_mass_air: float = 0.0289644     # kg/mol
    universal_gas_constant: float = 8.31432  # N m/(mol K)
    kelvin_offset: float = 273.15

    # === HUMID AIR ===
    dry_air_gas_constant: float = 287.058    # J/(kg K)
    vapor_gas_constant: float = 461.495      # J/(kg K)
    magnus_base_pressure: float = 6.1078
    magnus_a: float = 7.5
    magnus_b: float = 237.3                  # deg C


@dataclass
class FlowParams:
    """Free-stream and section geometry."""

    freestream_velocity: float = 30.0                     # m/s
    velocity_limits: Tuple[float, float] = (10.0, 343.0)  # below supersonic
    planform_area: float = 0.23                           # m^2
    area_limits: Tuple[float, float] = (0.1, 1.0)


@dataclass
class SamplingParams:
    """Sampling budget for combining independent uncertain scalars."""

    sample_count: int = 1000
    seed: int = 2412


@dataclass
class TableParams:
    """Shape of the multi-AOA pressure coefficient table."""

    station_count: int = 139
    header_rows: int = 1
    field_delimiter: str = ";"
    decimal_separator: str = ","
    coefficient_columns: int = 6


@dataclass
class LiftConfig:
    """
    Master configuration singleton.

    ALL downstream modules import this. Changes here propagate through:
    - Atmospheric density model
    - Surface velocity model and coefficient table loading
    - Lift force estimate and the CLI report
    """

    atmosphere: AtmosphereParams = field(default_factory=AtmosphereParams)
    flow: FlowParams = field(default_factory=FlowParams)
    sampling: SamplingParams = field(default_factory=SamplingParams)
    table: TableParams = field(default_factory=TableParams)

    # Project metadata
    project_name: str = "Bernoulli Lift UQ"
    version: str = "0.1.0"
    airfoil: str = "NACA 2412"

    def validate(self) -> List[str]:
        """Validate configuration against the documented input domains."""
        errors = []
        atm = self.atmosphere

        checks = [
            ("elevation", atm.elevation, atm.elevation_limits),
            ("temperature", atm.temperature, atm.temperature_limits),
            ("relative_humidity", atm.relative_humidity, atm.humidity_limits),
            ("freestream_velocity", self.flow.freestream_velocity, self.flow.velocity_limits),
            ("planform_area", self.flow.planform_area, self.flow.area_limits),
        ]
        for name, value, (low, high) in checks:
            if not low <= value <= high:
                errors.append(
                    f"DOMAIN VIOLATION: {name}={value} outside [{low}, {high}]"
                )

        for name, (low, high) in (
            ("elevation_range", atm.elevation_range),
            ("humidity_range", atm.humidity_range),
        ):
            if low > high:
                errors.append(f"RANGE VIOLATION: {name} low {low} exceeds high {high}")

        if atm.temperature_stddev < 0:
            errors.append("RANGE VIOLATION: temperature_stddev must be non-negative")

        if self.sampling.sample_count < 1:
            errors.append(
                f"SAMPLING VIOLATION: sample_count={self.sampling.sample_count} must be positive"
            )
        if self.sampling.seed < 0:
            errors.append("SAMPLING VIOLATION: seed must be non-negative")

        if self.table.station_count < 1:
            errors.append("TABLE VIOLATION: station_count must be positive")

        return errors

    def summary(self) -> str:
        """Generate human-readable configuration summary."""
        atm = self.atmosphere
        return f"""
Bernoulli Lift UQ Configuration Summary
=======================================
Airfoil: {self.airfoil}
Version: {self.version}

ATMOSPHERE
----------
Elevation: {atm.elevation:.1f} m (uncertain: U{atm.elevation_range})
Temperature: {atm.temperature:.1f} C (uncertain: N({atm.temperature_mean}, {atm.temperature_stddev}))
Humidity: {atm.relative_humidity:.2f} (uncertain: U{atm.humidity_range})

FLOW
----
Free-stream Velocity: {self.flow.freestream_velocity:.1f} m/s
Planform Area: {self.flow.planform_area:.3f} m^2

SAMPLING
--------
Samples per Combination: {self.sampling.sample_count}
Seed: {self.sampling.seed}

COEFFICIENT TABLE
-----------------
Stations: {self.table.station_count}
Columns: {self.table.coefficient_columns} (delimiter '{self.table.field_delimiter}', decimal '{self.table.decimal_separator}')
"""


# Singleton instance - import this throughout the project
config = LiftConfig()

# Validate on import
_errors = config.validate()
if _errors:
    import warnings
    for err in _errors:
        warnings.warn(err, UserWarning)
