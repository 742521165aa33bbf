"""
Bernoulli Lift UQ: Uncertain Scalar Module
==========================================

UncertainScalar: a real quantity that is either fixed or described by a
distribution, and that propagates its uncertainty through arithmetic.

Supported families:
- Fixed: a single value
- Uniform: (low, high)
- Gaussian: (mean, stddev)
- Empirical: an ordered set of samples

Combination rules:
- Fixed with Fixed is ordinary float arithmetic
- Fixed with Uniform/Gaussian keeps the family for +, -, * and X / c
- Fixed with Empirical is applied elementwise to the samples
- Independent Gaussians add and subtract in closed form
- Everything else falls back to sampling: independent draws per operand,
  elementwise operation, Empirical result

Sampling is seeded from the configured base seed and a digest of the
operation and its operands, so identical inputs always reproduce identical
samples.
"""

from __future__ import annotations

import hashlib
import logging
import math
import operator
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple, Union

import numpy as np
from scipy import stats

from config import config
from .errors import DomainError, LiftArithmeticError

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

Number = Union[int, float]


class Distribution(Enum):
    """Distribution family of an UncertainScalar."""
    FIXED = "fixed"
    UNIFORM = "uniform"
    GAUSSIAN = "gaussian"
    EMPIRICAL = "empirical"


@dataclass(frozen=True)
class SamplingPolicy:
    """Sample budget and base seed used by the sampling fallback."""

    sample_count: int = 1000
    seed: int = 2412

    def __post_init__(self):
        if self.sample_count < 1:
            raise DomainError(f"sample_count must be positive, got {self.sample_count}")
        if self.seed < 0:
            raise DomainError(f"seed must be non-negative, got {self.seed}")

    @classmethod
    def from_config(cls) -> "SamplingPolicy":
        return cls(
            sample_count=config.sampling.sample_count,
            seed=config.sampling.seed,
        )


_FLOAT_OPS: Dict[str, Callable[[float, float], float]] = {
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "div": operator.truediv,
    "pow": math.pow,
}

_ARRAY_OPS: Dict[str, Callable] = {
    "add": np.add,
    "sub": np.subtract,
    "mul": np.multiply,
    "div": np.divide,
    "pow": np.power,
}

_FLOAT_UNARY: Dict[str, Callable[[float], float]] = {
    "sqrt": math.sqrt,
    "abs": abs,
    "exp": math.exp,
}

_ARRAY_UNARY: Dict[str, Callable] = {
    "sqrt": np.sqrt,
    "abs": np.abs,
    "exp": np.exp,
}


def _apply_float(name: str, func: Callable, *args: float) -> float:
    """Evaluate a float operation, raising LiftArithmeticError on any failure."""
    try:
        result = func(*args)
    except (ArithmeticError, ValueError) as exc:
        raise LiftArithmeticError(
            f"{name}{args} is undefined over the reals: {exc}"
        ) from exc
    if isinstance(result, complex) or not math.isfinite(result):
        raise LiftArithmeticError(f"{name}{args} produced non-finite result {result}")
    return float(result)


def _apply_array(name: str, func: Callable, *args) -> np.ndarray:
    """Evaluate an elementwise operation with floating-point errors raised."""
    try:
        with np.errstate(divide="raise", over="raise", invalid="raise", under="ignore"):
            result = np.asarray(func(*args), dtype=float)
    except FloatingPointError as exc:
        raise LiftArithmeticError(f"{name} failed on sampled values: {exc}") from exc
    if not np.all(np.isfinite(result)):
        raise LiftArithmeticError(f"{name} produced non-finite samples")
    return result


class UncertainScalar:
    """
    Immutable real quantity with an attached distribution.

    Build instances with the ``fixed``, ``uniform``, ``gaussian`` and
    ``empirical`` constructors. Arithmetic never mutates an operand; each
    operation returns a new UncertainScalar.
    """

    __slots__ = ("_kind", "_params", "_samples", "_policy", "_digest")

    def __init__(
        self,
        kind: Distribution,
        params: Tuple[float, ...] = (),
        samples: Optional[np.ndarray] = None,
        policy: Optional[SamplingPolicy] = None,
    ):
        self._kind = kind
        self._params = tuple(float(p) for p in params)
        if samples is not None:
            samples = np.array(samples, dtype=float)
            samples.setflags(write=False)
        self._samples = samples
        self._policy = policy or SamplingPolicy.from_config()
        self._digest: Optional[bytes] = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def fixed(cls, value: Number, policy: Optional[SamplingPolicy] = None) -> "UncertainScalar":
        value = float(value)
        if not math.isfinite(value):
            raise DomainError(f"Fixed value must be finite, got {value}")
        return cls(Distribution.FIXED, (value,), policy=policy)

    @classmethod
    def uniform(
        cls, low: Number, high: Number, policy: Optional[SamplingPolicy] = None
    ) -> "UncertainScalar":
        low, high = float(low), float(high)
        if not (math.isfinite(low) and math.isfinite(high)):
            raise DomainError(f"Uniform bounds must be finite, got ({low}, {high})")
        if low > high:
            raise DomainError(f"Uniform requires low <= high, got ({low}, {high})")
        return cls(Distribution.UNIFORM, (low, high), policy=policy)

    @classmethod
    def gaussian(
        cls, mean: Number, stddev: Number, policy: Optional[SamplingPolicy] = None
    ) -> "UncertainScalar":
        mean, stddev = float(mean), float(stddev)
        if not (math.isfinite(mean) and math.isfinite(stddev)):
            raise DomainError(f"Gaussian parameters must be finite, got ({mean}, {stddev})")
        if stddev < 0:
            raise DomainError(f"Gaussian requires stddev >= 0, got {stddev}")
        return cls(Distribution.GAUSSIAN, (mean, stddev), policy=policy)

    @classmethod
    def empirical(
        cls, samples: Iterable[Number], policy: Optional[SamplingPolicy] = None
    ) -> "UncertainScalar":
        values = np.array(list(samples), dtype=float)
        if values.ndim != 1 or values.size == 0:
            raise DomainError("Empirical requires a non-empty sequence of samples")
        if not np.all(np.isfinite(values)):
            raise DomainError("Empirical samples must be finite")
        return cls(Distribution.EMPIRICAL, samples=values, policy=policy)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def kind(self) -> Distribution:
        return self._kind

    @property
    def params(self) -> Tuple[float, ...]:
        return self._params

    @property
    def policy(self) -> SamplingPolicy:
        return self._policy

    @property
    def is_fixed(self) -> bool:
        return self._kind is Distribution.FIXED

    @property
    def samples(self) -> Optional[np.ndarray]:
        """Read-only sample array for Empirical scalars, else None."""
        return self._samples

    @property
    def low(self) -> float:
        """Smallest value the scalar can take (Gaussian: -inf)."""
        if self._kind is Distribution.FIXED:
            return self._params[0]
        if self._kind is Distribution.UNIFORM:
            return self._params[0]
        if self._kind is Distribution.GAUSSIAN:
            return self._params[0] if self._params[1] == 0 else -math.inf
        return float(np.min(self._samples))

    @property
    def high(self) -> float:
        """Largest value the scalar can take (Gaussian: +inf)."""
        if self._kind is Distribution.FIXED:
            return self._params[0]
        if self._kind is Distribution.UNIFORM:
            return self._params[1]
        if self._kind is Distribution.GAUSSIAN:
            return self._params[0] if self._params[1] == 0 else math.inf
        return float(np.max(self._samples))

    def expected_value(self) -> float:
        """Resolve to a single representative value by expectation."""
        if self._kind is Distribution.FIXED:
            return self._params[0]
        if self._kind is Distribution.UNIFORM:
            low, high = self._params
            return (low + high) / 2.0
        if self._kind is Distribution.GAUSSIAN:
            return self._params[0]
        return float(np.mean(self._samples))

    def stddev(self) -> float:
        """Standard deviation of the distribution (population form for samples)."""
        if self._kind is Distribution.FIXED:
            return 0.0
        if self._kind is Distribution.UNIFORM:
            low, high = self._params
            return (high - low) / math.sqrt(12.0)
        if self._kind is Distribution.GAUSSIAN:
            return self._params[1]
        return float(np.std(self._samples))

    def percentile(self, q: float) -> float:
        """Return the q-th percentile (0-100) of the distribution."""
        if not 0.0 <= q <= 100.0:
            raise DomainError(f"Percentile must lie in [0, 100], got {q}")
        if self._kind is Distribution.FIXED:
            return self._params[0]
        if self._kind is Distribution.UNIFORM:
            low, high = self._params
            return low + (high - low) * q / 100.0
        if self._kind is Distribution.GAUSSIAN:
            mean, std = self._params
            if std == 0:
                return mean
            return float(stats.norm(loc=mean, scale=std).ppf(q / 100.0))
        return float(np.percentile(self._samples, q))

    def describe(self, fmt: str = ".6f") -> str:
        """One-line text form used by the diagnostic report."""
        if self._kind is Distribution.FIXED:
            return format(self._params[0], fmt)
        return (
            f"{format(self.expected_value(), fmt)} "
            f"(+/- {format(self.stddev(), fmt)}, {self._kind.value}"
            f"{'' if self._samples is None else f', n={self._samples.size}'})"
        )

    def __float__(self) -> float:
        return self.expected_value()

    def __repr__(self) -> str:
        if self._kind is Distribution.EMPIRICAL:
            return (
                f"UncertainScalar.empirical(n={self._samples.size}, "
                f"mean={self.expected_value():.6g})"
            )
        args = ", ".join(f"{p:.6g}" for p in self._params)
        return f"UncertainScalar.{self._kind.value}({args})"

    # ------------------------------------------------------------------
    # Sampling support
    # ------------------------------------------------------------------
    def fingerprint(self) -> bytes:
        """Stable digest of the family and payload, used to seed sampling."""
        if self._digest is None:
            h = hashlib.blake2b(digest_size=16)
            h.update(self._kind.value.encode("ascii"))
            h.update(np.asarray(self._params, dtype=float).tobytes())
            if self._samples is not None:
                h.update(self._samples.tobytes())
            self._digest = h.digest()
        return self._digest

    def draw(self, rng: np.random.Generator, size: int) -> np.ndarray:
        """Draw ``size`` independent samples from the distribution."""
        if self._kind is Distribution.FIXED:
            return np.full(size, self._params[0])
        if self._kind is Distribution.UNIFORM:
            low, high = self._params
            if high == low:
                return np.full(size, low)
            return stats.uniform(loc=low, scale=high - low).rvs(size=size, random_state=rng)
        if self._kind is Distribution.GAUSSIAN:
            mean, std = self._params
            if std == 0:
                return np.full(size, mean)
            return stats.norm(loc=mean, scale=std).rvs(size=size, random_state=rng)
        return rng.choice(self._samples, size=size, replace=True)

    def _generator(self, op: str, *others: "UncertainScalar") -> np.random.Generator:
        h = hashlib.blake2b(digest_size=16)
        h.update(op.encode("ascii"))
        h.update(self.fingerprint())
        for other in others:
            h.update(other.fingerprint())
        entropy = [self._policy.seed, int.from_bytes(h.digest(), "little")]
        return np.random.default_rng(np.random.SeedSequence(entropy))

    # ------------------------------------------------------------------
    # Binary operations
    # ------------------------------------------------------------------
    def add(self, other) -> "UncertainScalar":
        return self._binary("add", as_uncertain(other, self._policy))

    def sub(self, other) -> "UncertainScalar":
        return self._binary("sub", as_uncertain(other, self._policy))

    def mul(self, other) -> "UncertainScalar":
        return self._binary("mul", as_uncertain(other, self._policy))

    def div(self, other) -> "UncertainScalar":
        return self._binary("div", as_uncertain(other, self._policy))

    def pow(self, other) -> "UncertainScalar":
        return self._binary("pow", as_uncertain(other, self._policy))

    def _binary(self, op: str, other: "UncertainScalar") -> "UncertainScalar":
        policy = self._policy if not self.is_fixed or other.is_fixed else other._policy

        if self.is_fixed and other.is_fixed:
            value = _apply_float(op, _FLOAT_OPS[op], self._params[0], other._params[0])
            return UncertainScalar.fixed(value, policy)

        if other.is_fixed:
            closed = self._fixed_right(op, other._params[0], policy)
            if closed is not None:
                return closed
        if self.is_fixed:
            closed = other._fixed_left(op, self._params[0], policy)
            if closed is not None:
                return closed

        if (
            op in ("add", "sub")
            and self._kind is Distribution.GAUSSIAN
            and other._kind is Distribution.GAUSSIAN
        ):
            mean = _FLOAT_OPS[op](self._params[0], other._params[0])
            std = math.hypot(self._params[1], other._params[1])
            return UncertainScalar.gaussian(mean, std, policy)

        return self._sampled(op, other, policy)

    def _fixed_right(
        self, op: str, c: float, policy: SamplingPolicy
    ) -> Optional["UncertainScalar"]:
        """Closed form for ``self (op) c`` with a fixed right operand."""
        if op == "div" and c == 0:
            raise LiftArithmeticError(f"division of {self!r} by zero")

        if self._kind is Distribution.EMPIRICAL:
            values = _apply_array(op, _ARRAY_OPS[op], self._samples, c)
            return UncertainScalar(Distribution.EMPIRICAL, samples=values, policy=policy)

        if op == "pow":
            return None

        if self._kind is Distribution.UNIFORM:
            low, high = self._params
            a = _apply_float(op, _FLOAT_OPS[op], low, c)
            b = _apply_float(op, _FLOAT_OPS[op], high, c)
            return UncertainScalar.uniform(min(a, b), max(a, b), policy)

        mean, std = self._params
        new_mean = _apply_float(op, _FLOAT_OPS[op], mean, c)
        if op in ("add", "sub"):
            new_std = std
        elif op == "mul":
            new_std = std * abs(c)
        else:
            new_std = std / abs(c)
        return UncertainScalar.gaussian(new_mean, new_std, policy)

    def _fixed_left(
        self, op: str, c: float, policy: SamplingPolicy
    ) -> Optional["UncertainScalar"]:
        """Closed form for ``c (op) self`` with a fixed left operand."""
        if self._kind is Distribution.EMPIRICAL:
            values = _apply_array(op, _ARRAY_OPS[op], c, self._samples)
            return UncertainScalar(Distribution.EMPIRICAL, samples=values, policy=policy)

        if op not in ("add", "sub", "mul"):
            return None

        if self._kind is Distribution.UNIFORM:
            low, high = self._params
            a = _apply_float(op, _FLOAT_OPS[op], c, low)
            b = _apply_float(op, _FLOAT_OPS[op], c, high)
            return UncertainScalar.uniform(min(a, b), max(a, b), policy)

        mean, std = self._params
        new_mean = _apply_float(op, _FLOAT_OPS[op], c, mean)
        new_std = std * abs(c) if op == "mul" else std
        return UncertainScalar.gaussian(new_mean, new_std, policy)

    def _sampled(
        self, op: str, other: "UncertainScalar", policy: SamplingPolicy
    ) -> "UncertainScalar":
        rng = self._generator(op, other)
        n = policy.sample_count
        left = self.draw(rng, n)
        right = other.draw(rng, n)
        logger.debug(
            "Sampling fallback: %s(%s, %s) with n=%d", op, self._kind.value, other._kind.value, n
        )
        values = _apply_array(op, _ARRAY_OPS[op], left, right)
        return UncertainScalar(Distribution.EMPIRICAL, samples=values, policy=policy)

    # ------------------------------------------------------------------
    # Unary operations
    # ------------------------------------------------------------------
    def sqrt(self) -> "UncertainScalar":
        return self._unary("sqrt")

    def abs(self) -> "UncertainScalar":
        if self._kind is Distribution.UNIFORM and self._params[0] >= 0:
            return self
        return self._unary("abs")

    def exp(self) -> "UncertainScalar":
        return self._unary("exp")

    def _unary(self, op: str) -> "UncertainScalar":
        if self.is_fixed:
            value = _apply_float(op, _FLOAT_UNARY[op], self._params[0])
            return UncertainScalar.fixed(value, self._policy)

        if self._kind is Distribution.EMPIRICAL:
            base = self._samples
        else:
            base = self.draw(self._generator(op), self._policy.sample_count)
            logger.debug(
                "Sampling fallback: %s(%s) with n=%d", op, self._kind.value, base.size
            )
        values = _apply_array(op, _ARRAY_UNARY[op], base)
        return UncertainScalar(Distribution.EMPIRICAL, samples=values, policy=self._policy)

    # ------------------------------------------------------------------
    # Operator protocol
    # ------------------------------------------------------------------
    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return as_uncertain(other, self._policy).add(self)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return as_uncertain(other, self._policy).sub(self)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return as_uncertain(other, self._policy).mul(self)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return as_uncertain(other, self._policy).div(self)

    def __pow__(self, other):
        return self.pow(other)

    def __rpow__(self, other):
        return as_uncertain(other, self._policy).pow(self)

    def __neg__(self):
        return self.mul(-1.0)

    def __abs__(self):
        return self.abs()


ScalarLike = Union[UncertainScalar, Number]


def as_uncertain(
    value: ScalarLike, policy: Optional[SamplingPolicy] = None
) -> UncertainScalar:
    """Coerce a plain number to a Fixed scalar; pass scalars through."""
    if isinstance(value, UncertainScalar):
        return value
    if isinstance(value, (int, float, np.floating, np.integer)) and not isinstance(value, bool):
        return UncertainScalar.fixed(float(value), policy)
    raise TypeError(f"Cannot interpret {value!r} as an uncertain scalar")


def sqrt(value: ScalarLike) -> UncertainScalar:
    return as_uncertain(value).sqrt()


def exp(value: ScalarLike) -> UncertainScalar:
    return as_uncertain(value).exp()


def total(values: Sequence[ScalarLike]) -> UncertainScalar:
    """Sum values with UncertainScalar addition, independent of their order.

    Fixed values are added left to right as plain floats. Uncertain values
    are accumulated in fingerprint order, so every partial sum, and therefore
    every sampling seed, is the same for any permutation of ``values``.
    """
    if not values:
        raise DomainError("Cannot accumulate an empty sequence")
    scalars = [as_uncertain(v) for v in values]
    fixed = [s for s in scalars if s.is_fixed]
    uncertain = sorted(
        (s for s in scalars if not s.is_fixed), key=UncertainScalar.fingerprint
    )

    result: Optional[UncertainScalar] = None
    for value in fixed + uncertain:
        result = value if result is None else result + value
    return result


def require_within(
    value: UncertainScalar, name: str, limits: Tuple[float, float]
) -> UncertainScalar:
    """Raise DomainError unless ``value`` lies inside ``limits``.

    Fixed values, Uniform bounds and every Empirical sample are checked.
    Gaussians are unbounded, so only their mean is checked.
    """
    low, high = limits
    if value.kind is Distribution.GAUSSIAN:
        lo = hi = value.expected_value()
    else:
        lo, hi = value.low, value.high
    if lo < low or hi > high:
        raise DomainError(
            f"{name} {value!r} outside valid range [{low}, {high}]", quantity=name
        )
    return value
