"""Lift pipeline and the shipped input configurations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from config import config, Configuration
from .atmosphere import AtmosphericModel, AtmosphericState
from .coefficients import AirfoilCoefficientTable
from .errors import MissingInputError
from .lift_force import LiftEstimate, LiftForceCalculator
from .uncertain import SamplingPolicy, UncertainScalar
from .velocity import SurfaceVelocities, VelocityModel

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class ScenarioInputs:
    """Everything one lift evaluation consumes."""

    configuration: Configuration
    elevation: UncertainScalar
    temperature: UncertainScalar
    relative_humidity: UncertainScalar
    freestream: UncertainScalar
    area: UncertainScalar
    table: AirfoilCoefficientTable


@dataclass(frozen=True)
class ScenarioResult:
    """Output of one lift evaluation."""

    inputs: ScenarioInputs
    atmosphere: AtmosphericState
    velocities: SurfaceVelocities
    estimate: LiftEstimate

    @property
    def lift_force(self) -> UncertainScalar:
        return self.estimate.lift_force


@dataclass
class ConfigurationSpec:
    name: Configuration
    description: str
    build: Callable[[SamplingPolicy, Optional[AirfoilCoefficientTable], bool], ScenarioInputs]


def _freestream(policy: SamplingPolicy, uncertain_velocity: bool) -> UncertainScalar:
    if uncertain_velocity:
        low, high = config.flow.velocity_limits
        return UncertainScalar.uniform(low, high, policy)
    return UncertainScalar.fixed(config.flow.freestream_velocity, policy)


def _nominal_atmosphere(policy: SamplingPolicy) -> Dict[str, UncertainScalar]:
    atm = config.atmosphere
    return {
        "elevation": UncertainScalar.fixed(atm.elevation, policy),
        "temperature": UncertainScalar.fixed(atm.temperature, policy),
        "relative_humidity": UncertainScalar.fixed(atm.relative_humidity, policy),
    }


def deterministic_inputs(
    policy: SamplingPolicy,
    table: Optional[AirfoilCoefficientTable] = None,
    uncertain_velocity: bool = False,
) -> ScenarioInputs:
    """h=0, T=15 C, Rh=0, V=30 m/s, literal 10 deg AOA coefficients."""
    return ScenarioInputs(
        configuration=Configuration.DETERMINISTIC,
        freestream=_freestream(policy, uncertain_velocity),
        area=UncertainScalar.fixed(config.flow.planform_area, policy),
        table=table or AirfoilCoefficientTable.literal(policy),
        **_nominal_atmosphere(policy),
    )


def environment_inputs(
    policy: SamplingPolicy,
    table: Optional[AirfoilCoefficientTable] = None,
    uncertain_velocity: bool = False,
) -> ScenarioInputs:
    """Uncertain elevation, temperature and humidity; literal coefficients."""
    atm = config.atmosphere
    return ScenarioInputs(
        configuration=Configuration.ENVIRONMENT,
        elevation=UncertainScalar.uniform(*atm.elevation_range, policy=policy),
        temperature=UncertainScalar.gaussian(
            atm.temperature_mean, atm.temperature_stddev, policy
        ),
        relative_humidity=UncertainScalar.uniform(*atm.humidity_range, policy=policy),
        freestream=_freestream(policy, uncertain_velocity),
        area=UncertainScalar.fixed(config.flow.planform_area, policy),
        table=table or AirfoilCoefficientTable.literal(policy),
    )


def aoa_inputs(
    policy: SamplingPolicy,
    table: Optional[AirfoilCoefficientTable] = None,
    uncertain_velocity: bool = False,
) -> ScenarioInputs:
    """
    Nominal atmosphere; coefficients from the three-condition table.

    Each station carries its own Empirical coefficient, and stations are
    combined as independent scalars. A lift sample therefore mixes angles
    across stations instead of following one angle of attack, so the lift
    spread is much narrower than the range of the per-angle lifts and must
    not be read as the lift range over 0 to 10 deg.
    """
    if table is None:
        raise MissingInputError(
            "The AOA configuration requires a coefficient table file",
            stage="input", quantity="table",
        )
    if not table.uncertain_aoa:
        logger.warning("Table %s holds a single AOA condition", table.source)
    return ScenarioInputs(
        configuration=Configuration.AOA,
        freestream=_freestream(policy, uncertain_velocity),
        area=UncertainScalar.fixed(config.flow.planform_area, policy),
        table=table,
        **_nominal_atmosphere(policy),
    )


CONFIGURATIONS: Dict[Configuration, ConfigurationSpec] = {
    Configuration.DETERMINISTIC: ConfigurationSpec(
        name=Configuration.DETERMINISTIC,
        description="All inputs fixed at standard sea-level conditions",
        build=deterministic_inputs,
    ),
    Configuration.ENVIRONMENT: ConfigurationSpec(
        name=Configuration.ENVIRONMENT,
        description="Elevation, temperature and humidity uncertain",
        build=environment_inputs,
    ),
    Configuration.AOA: ConfigurationSpec(
        name=Configuration.AOA,
        description="Angle of attack uncertain over 0, 5 and 10 deg",
        build=aoa_inputs,
    ),
}


def build_inputs(
    configuration: Configuration,
    table: Optional[AirfoilCoefficientTable] = None,
    policy: Optional[SamplingPolicy] = None,
    uncertain_velocity: bool = False,
) -> ScenarioInputs:
    """Assemble the inputs of a named configuration."""
    entry = CONFIGURATIONS[configuration]
    logger.info("Configuration %s: %s", configuration.value, entry.description)
    return entry.build(policy or SamplingPolicy.from_config(), table, uncertain_velocity)


class LiftPipeline:
    """Run atmosphere -> velocity -> lift for one set of inputs."""

    def __init__(self, atmosphere_model: Optional[AtmosphericModel] = None):
        self.atmosphere_model = atmosphere_model or AtmosphericModel()

    def run(self, inputs: ScenarioInputs) -> ScenarioResult:
        """
        Evaluate one configuration.

        Raises:
            DomainError, LiftArithmeticError: Tagged with the failing stage
        """
        atmosphere = self.atmosphere_model.evaluate(
            inputs.elevation, inputs.temperature, inputs.relative_humidity
        )
        velocities = VelocityModel(inputs.freestream).surface_velocities(inputs.table)
        estimate = LiftForceCalculator(inputs.area).estimate(
            atmosphere.density, velocities.upper, velocities.lower
        )
        logger.info(
            "Lift (%s): %.6f N", inputs.configuration.value, estimate.value
        )
        return ScenarioResult(
            inputs=inputs,
            atmosphere=atmosphere,
            velocities=velocities,
            estimate=estimate,
        )

    def run_configuration(
        self,
        configuration: Configuration,
        table: Optional[AirfoilCoefficientTable] = None,
        policy: Optional[SamplingPolicy] = None,
        uncertain_velocity: bool = False,
    ) -> ScenarioResult:
        return self.run(build_inputs(configuration, table, policy, uncertain_velocity))

    def run_all(
        self,
        table: Optional[AirfoilCoefficientTable] = None,
        policy: Optional[SamplingPolicy] = None,
    ) -> List[ScenarioResult]:
        """Run every configuration; AOA is skipped without a table."""
        results: List[ScenarioResult] = []
        for configuration in CONFIGURATIONS:
            if configuration is Configuration.AOA and table is None:
                logger.info("Skipping AOA configuration: no coefficient table")
                continue
            base_table = table if configuration is Configuration.AOA else None
            results.append(self.run_configuration(configuration, base_table, policy))
        return results
