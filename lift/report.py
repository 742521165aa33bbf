"""
Bernoulli Lift UQ: Diagnostic Report
====================================

Renders a ScenarioResult after the fact: the human-readable diagnostic lines
printed by the CLI and a JSON summary with distribution statistics. Nothing
here feeds back into the computation.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Tuple

from config import config
from .scenarios import ScenarioResult
from .uncertain import UncertainScalar


def _quantities(result: ScenarioResult) -> List[Tuple[str, UncertainScalar]]:
    atm = result.atmosphere
    return [
        ("T", atm.temperature),
        ("h", atm.elevation),
        ("Rh", atm.relative_humidity),
        ("Pair", atm.air_pressure),
        ("Psat", atm.saturation_vapor_pressure),
        ("Pv", atm.vapor_pressure),
        ("Pd", atm.dry_air_pressure),
        ("v_over", result.velocities.upper),
        ("v_under", result.velocities.lower),
        ("area", result.estimate.area),
        ("density", result.estimate.density),
    ]


def diagnostic_lines(result: ScenarioResult) -> List[str]:
    """Intermediate quantities followed by the final lift line."""
    lines = [f"{name}={scalar.describe()}" for name, scalar in _quantities(result)]
    lines.append(f"Lift force = {result.estimate.value:f} N")
    return lines


def write_diagnostics(result: ScenarioResult, stream: Optional[TextIO] = None) -> None:
    stream = stream or sys.stdout
    for line in diagnostic_lines(result):
        print(line, file=stream)


def scalar_summary(scalar: UncertainScalar) -> Dict[str, Any]:
    """Statistics of one scalar, JSON-serializable."""
    summary: Dict[str, Any] = {
        "distribution": scalar.kind.value,
        "expected_value": scalar.expected_value(),
        "stddev": scalar.stddev(),
    }
    if not scalar.is_fixed:
        summary["p05"] = scalar.percentile(5.0)
        summary["p95"] = scalar.percentile(95.0)
    if scalar.samples is not None:
        summary["sample_count"] = int(scalar.samples.size)
    return summary


def to_dict(result: ScenarioResult) -> Dict[str, Any]:
    """JSON-ready summary of a scenario result."""
    return {
        "project": config.project_name,
        "version": config.version,
        "airfoil": config.airfoil,
        "configuration": result.inputs.configuration.value,
        "coefficient_source": result.inputs.table.source,
        "sampling": {
            "sample_count": result.lift_force.policy.sample_count,
            "seed": result.lift_force.policy.seed,
        },
        "quantities": {
            name: scalar_summary(scalar) for name, scalar in _quantities(result)
        },
        "lift_force": scalar_summary(result.lift_force),
        "generated": datetime.now().isoformat(),
    }


def export_json(result: ScenarioResult, target: Path) -> Path:
    """Write the JSON summary to ``target`` and return the path."""
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        json.dump(to_dict(result), f, indent=2)
    return target
