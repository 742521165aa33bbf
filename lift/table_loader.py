"""
Bernoulli Lift UQ: Coefficient Table Loader
===========================================

Parses the multi-AOA pressure coefficient table exported from digitized
plots. File format:

- One header row, discarded
- 139 data rows, one per chordwise station
- Fields separated by ';', decimal comma (normalized to '.')
- Column 0: station label
- Columns 1-6: Upper-10, Upper-5, Upper-0, Lower-0, Lower-5, Lower-10

Any malformed row aborts the load; downstream indexing assumes every row
has the full width.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Iterable, List, Optional, Union

from config import config, TableParams
from .coefficients import AirfoilCoefficientTable
from .errors import MalformedRowError, MissingInputError
from .uncertain import SamplingPolicy

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class CoefficientTableLoader:
    """Load AirfoilCoefficientTable instances from delimited text files."""

    def __init__(self, params: Optional[TableParams] = None):
        """
        Args:
            params: Table shape and delimiters (defaults to config.table)
        """
        self.params = params or config.table

    @property
    def fields_per_row(self) -> int:
        """Station label plus the coefficient columns."""
        return 1 + self.params.coefficient_columns

    def load(
        self,
        filepath: Union[str, Path],
        policy: Optional[SamplingPolicy] = None,
    ) -> AirfoilCoefficientTable:
        """
        Load a coefficient table from disk.

        Args:
            filepath: Path to the semicolon-delimited table
            policy: Sampling policy attached to generated scalars

        Returns:
            Multi-AOA AirfoilCoefficientTable

        Raises:
            MissingInputError: If the file is absent or unreadable
            MalformedRowError: If any row fails to parse
        """
        filepath = Path(filepath)
        if not filepath.is_file():
            raise MissingInputError(
                f"Coefficient table not found: {filepath}",
                stage="input", quantity="table",
            )

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as exc:
            raise MissingInputError(
                f"Coefficient table unreadable: {filepath} ({exc})",
                stage="input", quantity="table",
            ) from exc

        rows = self.parse_lines(lines)
        logger.info("Loaded %d coefficient rows from %s", len(rows), filepath)
        return AirfoilCoefficientTable.from_rows(rows, source=str(filepath), policy=policy)

    def parse_lines(self, lines: Iterable[str]) -> List[List[float]]:
        """
        Parse table lines into coefficient rows (station label dropped).

        Raises:
            MalformedRowError: On a short or non-numeric row, or when the
                number of data rows differs from the configured station count
        """
        p = self.params
        lines = list(lines)
        # Blank lines at the end of the file are not rows
        while lines and not lines[-1].strip():
            lines.pop()

        data_lines = lines[p.header_rows:]
        rows = [
            self._parse_row(line, number)
            for number, line in enumerate(data_lines, start=p.header_rows + 1)
        ]

        if len(rows) != p.station_count:
            raise MalformedRowError(
                f"Expected {p.station_count} data rows, found {len(rows)}",
                stage="input", quantity="table",
            )
        return rows

    def _parse_row(self, line: str, line_number: int) -> List[float]:
        p = self.params
        tokens = [
            tok.strip()
            for tok in line.strip().split(p.field_delimiter)
            if tok.strip()
        ]
        if len(tokens) < self.fields_per_row:
            raise MalformedRowError(
                f"Line {line_number}: expected {self.fields_per_row} fields, "
                f"parsed {len(tokens)}",
                line_number=line_number, stage="input", quantity="table",
            )

        values = []
        for tok in tokens[1:self.fields_per_row]:
            try:
                value = float(tok.replace(p.decimal_separator, "."))
            except ValueError:
                value = math.nan
            if not math.isfinite(value):
                raise MalformedRowError(
                    f"Line {line_number}: non-numeric field {tok!r}",
                    line_number=line_number, stage="input", quantity="table",
                )
            values.append(value)
        return values


def load_table(
    filepath: Union[str, Path], policy: Optional[SamplingPolicy] = None
) -> AirfoilCoefficientTable:
    """Load a coefficient table with the configured format."""
    return CoefficientTableLoader().load(filepath, policy)
