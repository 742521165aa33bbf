# Bernoulli Lift UQ Configuration Module
from .lift_config import (
    LiftConfig, config, Configuration,
    AtmosphereParams, FlowParams, SamplingParams, TableParams
)

__all__ = [
    "LiftConfig", "config", "Configuration",
    "AtmosphereParams", "FlowParams", "SamplingParams", "TableParams"
]
