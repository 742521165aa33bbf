# Bernoulli Lift UQ Core Module
from .errors import (
    LiftModelError, DomainError, LiftArithmeticError,
    MalformedRowError, MissingInputError
)
from .uncertain import Distribution, SamplingPolicy, UncertainScalar
from .atmosphere import AtmosphericModel, AtmosphericState
from .coefficients import AirfoilCoefficientTable, AngleOfAttack, Surface
from .table_loader import CoefficientTableLoader, load_table
from .velocity import VelocityModel, SurfaceVelocities
from .lift_force import LiftForceCalculator, LiftEstimate
from .scenarios import LiftPipeline, ScenarioInputs, ScenarioResult, build_inputs

__all__ = [
    "LiftModelError",
    "DomainError",
    "LiftArithmeticError",
    "MalformedRowError",
    "MissingInputError",
    "Distribution",
    "SamplingPolicy",
    "UncertainScalar",
    "AtmosphericModel",
    "AtmosphericState",
    "AirfoilCoefficientTable",
    "AngleOfAttack",
    "Surface",
    "CoefficientTableLoader",
    "load_table",
    "VelocityModel",
    "SurfaceVelocities",
    "LiftForceCalculator",
    "LiftEstimate",
    "LiftPipeline",
    "ScenarioInputs",
    "ScenarioResult",
    "build_inputs",
]
