"""Error taxonomy for the lift pipeline.

Every error is fatal to the evaluation in progress. Pipeline stages tag the
errors they raise with the stage and quantity that failed so the CLI can
report where the computation stopped.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional


class LiftModelError(Exception):
    """Base class for all lift pipeline failures."""

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        quantity: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.quantity = quantity

    def describe(self) -> str:
        """Return the message prefixed with the failing stage and quantity."""
        where = "/".join(part for part in (self.stage, self.quantity) if part)
        if where:
            return f"[{where}] {self.message}"
        return self.message

    def __str__(self) -> str:
        return self.describe()


class DomainError(LiftModelError, ValueError):
    """Input outside its documented physical range."""


class LiftArithmeticError(LiftModelError, ArithmeticError):
    """Division by zero, overflow or an invalid real-valued operation."""


class MalformedRowError(LiftModelError, ValueError):
    """Coefficient table row that does not parse to the expected columns."""

    def __init__(self, message: str, *, line_number: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.line_number = line_number


class MissingInputError(LiftModelError, OSError):
    """Required input file absent or unreadable."""


@contextmanager
def failing_stage(stage: str, quantity: Optional[str] = None) -> Iterator[None]:
    """Tag lift errors raised inside the block with a stage and quantity.

    Errors already tagged by an inner stage keep their original location.
    """
    try:
        yield
    except LiftModelError as exc:
        if exc.stage is None:
            exc.stage = stage
            exc.quantity = exc.quantity or quantity
        raise
