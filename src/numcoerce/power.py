"""
Exponentiation over dynamic values.

Both operands are always coerced so that diagnostics from each surface.
Integral operands with a non-negative exponent stay exact while the
result fits a 64-bit integer; everything else follows C `pow` semantics
(NaN for domain errors, signed infinity on overflow, never complex).
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .values import Value, INT64_MIN, INT64_MAX
from .coercion import CoercionEngine, CoercionResult, ResultStatus, get_engine
from .errors import Diagnostic, ErrorKind, UnsupportedOperandTypeError

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True)
class Outcome:
    """Result of a power operation."""
    status: ResultStatus
    value: Optional[Number] = None
    warnings: Tuple[Diagnostic, ...] = ()
    error: Optional[ErrorKind] = None
    diagnostic: Optional[Diagnostic] = None

    @property
    def is_fatal(self) -> bool:
        return self.status == ResultStatus.FATAL

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def unwrap(self) -> Number:
        """Return the numeric result, raising for a fatal outcome."""
        if self.is_fatal:
            raise UnsupportedOperandTypeError(self.diagnostic)
        return self.value


def _is_odd_integer(y: float) -> bool:
    return math.isfinite(y) and y == math.floor(y) and math.fmod(y, 2.0) != 0.0


def float_pow(x: float, y: float) -> float:
    """`x ** y` with C `pow` semantics instead of Python exceptions."""
    try:
        return math.pow(x, y)
    except OverflowError:
        if x < 0 and _is_odd_integer(y):
            return -math.inf
        return math.inf
    except ValueError:
        if x == 0.0 and y < 0:
            # pow(+-0, negative odd) is +-inf, otherwise +inf
            return math.copysign(math.inf, x) if _is_odd_integer(y) else math.inf
        return math.nan


def int_pow(base: int, exp: int) -> Number:
    """Exact power for a non-negative exponent, float once past 64 bits."""
    if exp < 0:
        raise ValueError("int_pow requires a non-negative exponent")
    if base in (0, 1) or exp == 0:
        return base ** exp
    if base == -1:
        return 1 if exp % 2 == 0 else -1
    # |base| >= 2**(bits - 1), so this bound proves overflow
    if exp * (abs(base).bit_length() - 1) >= 64:
        return float_pow(float(base), float(exp))
    result = base ** exp
    if INT64_MIN <= result <= INT64_MAX:
        return result
    return float(result)


def combine(base: CoercionResult, exponent: CoercionResult) -> Outcome:
    """Combine two coercion results into an outcome."""
    warnings = tuple(
        r.diagnostic.with_operand(position)
        for position, r in (("base", base), ("exponent", exponent))
        if r.status == ResultStatus.NUMERIC_WITH_WARNING
    )

    # Base is checked first so its fatal wins
    for position, r in (("base", base), ("exponent", exponent)):
        if r.is_fatal:
            return Outcome(
                ResultStatus.FATAL,
                warnings=warnings,
                error=r.error,
                diagnostic=r.diagnostic.with_operand(position),
            )

    if base.is_integral and exponent.is_integral and exponent.exact >= 0:
        value = int_pow(base.exact, exponent.exact)
    else:
        value = float_pow(base.value, exponent.value)

    status = ResultStatus.NUMERIC_WITH_WARNING if warnings else ResultStatus.NUMERIC
    return Outcome(status, value, warnings)


def power(base: Value, exp: Value, engine: Optional[CoercionEngine] = None) -> Outcome:
    """
    Raise `base` to `exp` after coercing both.

    Args:
        base: The base operand (any kind)
        exp: The exponent operand (any kind)
        engine: Optional engine; the shared one is used by default

    Returns:
        Outcome with the number, or a fatal outcome with no number
    """
    engine = engine or get_engine()
    base_result = engine.coerce(base)
    exp_result = engine.coerce(exp)
    outcome = combine(base_result, exp_result)
    if outcome.is_fatal:
        logger.debug("power(%r, %r) is fatal: %s", base, exp, outcome.diagnostic.message)
    return outcome
