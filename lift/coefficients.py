"""
Bernoulli Lift UQ: Pressure Coefficient Module
==============================================

AirfoilCoefficientTable: pressure coefficients of the NACA-2412 section
indexed by surface, chordwise station and angle-of-attack condition.

Two construction modes:
- Literal: the digitized 10 deg AOA plots shipped with the package
- Loaded: the 139-station, three-condition table read by table_loader

For a table with several AOA conditions, ``coefficient_at`` returns an
Empirical scalar with one sample per condition (10, 5, 0 deg). That models
an angle of attack that takes one of three discrete values with equal
probability.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .errors import DomainError
from .uncertain import SamplingPolicy, UncertainScalar


class Surface(Enum):
    """Airfoil surface side."""
    UPPER = "upper"      # Suction side
    LOWER = "lower"      # Pressure side


class AngleOfAttack(Enum):
    """Angle-of-attack conditions covered by the digitized data (degrees)."""
    DEG_0 = 0
    DEG_5 = 5
    DEG_10 = 10


# Sample order of the Empirical AOA scalars
AOA_SAMPLE_ORDER: Tuple[AngleOfAttack, ...] = (
    AngleOfAttack.DEG_10,
    AngleOfAttack.DEG_5,
    AngleOfAttack.DEG_0,
)

# Coefficient columns 1-6 of the multi-AOA table, in file order
TABLE_COLUMN_LAYOUT: Tuple[Tuple[Surface, AngleOfAttack], ...] = (
    (Surface.UPPER, AngleOfAttack.DEG_10),
    (Surface.UPPER, AngleOfAttack.DEG_5),
    (Surface.UPPER, AngleOfAttack.DEG_0),
    (Surface.LOWER, AngleOfAttack.DEG_0),
    (Surface.LOWER, AngleOfAttack.DEG_5),
    (Surface.LOWER, AngleOfAttack.DEG_10),
)

LITERAL_TABLE_VERSION = "naca2412-aoa10-digitized-1"

# Digitized Cp over the upper surface at 10 deg AOA, leading to trailing edge
NACA2412_AOA10_UPPER: Tuple[float, ...] = (
    -2.3444, -2.4402, -2.5411, -2.577, -2.7322, -2.7316, -2.5977,
    -2.575, -2.5415, -2.3405, -2.3121, -2.2061, -2.1597, -2.0826,
    -1.9988, -1.9037, -1.7997, -1.7692, -1.63, -1.6235, -1.4999,
    -1.4769, -1.4098, -1.3809, -1.3528, -1.3367, -1.3181, -1.2695,
    -1.239, -1.1633, -1.1599, -1.0807, -1.0715, -1.0127, -0.9936,
    -0.9336, -0.8987, -0.8544, -0.8222, -0.7642, -0.7355, -0.6851,
    -0.645, -0.6061, -0.5636, -0.538, -0.4927, -0.4825, -0.4468,
    -0.4431, -0.4454, -0.444, -0.4329, -0.4205, -0.4094, -0.3889,
    -0.3636, -0.349, -0.3179, -0.2992, -0.2832, -0.2727, -0.2596,
    -0.2451, -0.2248, -0.2195, -0.2012, -0.1998, -0.1808, -0.1781,
    -0.1831, -0.1885, -0.1837, -0.1769, -0.1889, -0.1865, -0.1799,
    -0.1841, -0.1785, -0.1838, -0.1742, -0.1779, -0.1823, -0.1789,
)

# Digitized Cp over the lower surface at 10 deg AOA, leading to trailing edge
NACA2412_AOA10_LOWER: Tuple[float, ...] = (
    0.8111, 0.9226, 1.0007, 0.9934, 0.8905, 0.8737, 0.7471,
    0.7336, 0.714, 0.6252, 0.6152, 0.5857, 0.5611, 0.4833,
    0.429, 0.403, 0.3861, 0.3781, 0.3431, 0.3423, 0.3439,
    0.3448, 0.3393, 0.3353, 0.3354, 0.3368, 0.3345, 0.3272,
    0.3228, 0.3067, 0.3057, 0.2782, 0.275, 0.2539, 0.2432,
    0.2017, 0.1893, 0.2187, 0.2461, 0.2578, 0.2585, 0.2675,
    0.2711, 0.2632, 0.2392, 0.2206, 0.1912, 0.1853, 0.1643,
    0.1539, 0.1427, 0.1439, 0.1585, 0.1679, 0.1675, 0.1579,
    0.1564, 0.159, 0.164, 0.1606, 0.1438, 0.1286, 0.1278,
    0.1299, 0.1214, 0.1199, 0.1316, 0.1322, 0.1217, 0.1134,
    0.1001, 0.102, 0.1118, 0.1173, 0.1216, 0.1122, 0.1017,
    0.1134, 0.1031, 0.1022, 0.1164, 0.1036, 0.1032, 0.1174,
)


@dataclass(frozen=True)
class CoefficientStation:
    """Single pressure coefficient sample."""
    station: int
    surface: Surface
    condition: AngleOfAttack
    value: float


class AirfoilCoefficientTable:
    """
    Pressure coefficients per (surface, AOA condition), one value per station.

    Tables holding a single AOA condition yield Fixed coefficients; tables
    holding several conditions yield Empirical coefficients with one sample
    per condition.
    """

    def __init__(
        self,
        values: Mapping[Tuple[Surface, AngleOfAttack], Sequence[float]],
        source: str = "<memory>",
        policy: Optional[SamplingPolicy] = None,
    ):
        """
        Args:
            values: Coefficients keyed by (surface, condition); every condition
                must be present for both surfaces with matching lengths
            source: Description of where the values came from
            policy: Sampling policy attached to generated scalars
        """
        if not values:
            raise DomainError("Coefficient table requires at least one column")

        self.source = source
        self.policy = policy
        self._values: Dict[Tuple[Surface, AngleOfAttack], np.ndarray] = {}
        for key, column in values.items():
            array = np.array(column, dtype=float)
            if array.ndim != 1 or array.size == 0:
                raise DomainError(f"Coefficient column {key} must be a non-empty sequence")
            array.setflags(write=False)
            self._values[key] = array

        self._conditions = tuple(
            c for c in AOA_SAMPLE_ORDER
            if any(cond is c for _, cond in self._values)
        )
        for surface in Surface:
            lengths = set()
            for condition in self._conditions:
                if (surface, condition) not in self._values:
                    raise DomainError(
                        f"Missing {surface.value} coefficients at {condition.value} deg"
                    )
                lengths.add(self._values[(surface, condition)].size)
            if len(lengths) != 1:
                raise DomainError(
                    f"{surface.value} coefficient columns differ in length: {sorted(lengths)}"
                )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def literal(cls, policy: Optional[SamplingPolicy] = None) -> "AirfoilCoefficientTable":
        """Digitized NACA-2412 tables at 10 deg AOA."""
        return cls(
            {
                (Surface.UPPER, AngleOfAttack.DEG_10): NACA2412_AOA10_UPPER,
                (Surface.LOWER, AngleOfAttack.DEG_10): NACA2412_AOA10_LOWER,
            },
            source=LITERAL_TABLE_VERSION,
            policy=policy,
        )

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[float]],
        source: str = "<rows>",
        policy: Optional[SamplingPolicy] = None,
    ) -> "AirfoilCoefficientTable":
        """Build a multi-AOA table from rows laid out as TABLE_COLUMN_LAYOUT."""
        columns: Dict[Tuple[Surface, AngleOfAttack], List[float]] = {
            key: [] for key in TABLE_COLUMN_LAYOUT
        }
        for index, row in enumerate(rows):
            if len(row) != len(TABLE_COLUMN_LAYOUT):
                raise DomainError(
                    f"Row {index} has {len(row)} coefficients, "
                    f"expected {len(TABLE_COLUMN_LAYOUT)}"
                )
            for key, value in zip(TABLE_COLUMN_LAYOUT, row):
                columns[key].append(value)
        return cls(columns, source=source, policy=policy)

    def at_condition(self, condition: AngleOfAttack) -> "AirfoilCoefficientTable":
        """Collapse to a single-condition table (Fixed coefficients)."""
        if condition not in self._conditions:
            raise DomainError(f"No coefficients at {condition.value} deg in {self.source}")
        return AirfoilCoefficientTable(
            {(s, condition): self._values[(s, condition)] for s in Surface},
            source=f"{self.source}@{condition.value}deg",
            policy=self.policy,
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    @property
    def conditions(self) -> Tuple[AngleOfAttack, ...]:
        """AOA conditions present, in Empirical sample order."""
        return self._conditions

    @property
    def uncertain_aoa(self) -> bool:
        return len(self._conditions) > 1

    def station_count(self, surface: Surface) -> int:
        return self._values[(surface, self._conditions[0])].size

    def column(self, surface: Surface, condition: AngleOfAttack) -> np.ndarray:
        """Read-only coefficients of one surface at one condition."""
        try:
            return self._values[(surface, condition)]
        except KeyError:
            raise DomainError(
                f"No {surface.value} coefficients at {condition.value} deg in {self.source}"
            ) from None

    def value(self, station: int, surface: Surface, condition: AngleOfAttack) -> float:
        column = self.column(surface, condition)
        self._check_station(station, surface)
        return float(column[station])

    def coefficient_at(self, station: int, surface: Surface) -> UncertainScalar:
        """
        Pressure coefficient at one station.

        Returns:
            Fixed scalar for single-condition tables, otherwise an Empirical
            scalar with one sample per condition in AOA_SAMPLE_ORDER
        """
        self._check_station(station, surface)
        if not self.uncertain_aoa:
            return UncertainScalar.fixed(
                self._values[(surface, self._conditions[0])][station], self.policy
            )
        return UncertainScalar.empirical(
            (self._values[(surface, c)][station] for c in self._conditions),
            self.policy,
        )

    def coefficients(self, surface: Surface) -> List[UncertainScalar]:
        """Coefficients of every station on one surface, leading edge first."""
        return [self.coefficient_at(i, surface) for i in range(self.station_count(surface))]

    def stations(self) -> Iterator[CoefficientStation]:
        for (surface, condition), column in self._values.items():
            for index, value in enumerate(column):
                yield CoefficientStation(index, surface, condition, float(value))

    def _check_station(self, station: int, surface: Surface) -> None:
        count = self.station_count(surface)
        if not 0 <= station < count:
            raise DomainError(
                f"Station {station} outside [0, {count}) on {surface.value} surface",
                quantity="station",
            )

    def __repr__(self) -> str:
        conditions = ", ".join(str(c.value) for c in self._conditions)
        return (
            f"AirfoilCoefficientTable(source={self.source!r}, "
            f"conditions=[{conditions}], stations={self.station_count(Surface.UPPER)})"
        )
