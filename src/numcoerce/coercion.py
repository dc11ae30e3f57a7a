"""
Coercion engine: turns dynamic values into numeric operands.

Every kind falls in one of three tiers:
- silent best-effort: int, float, null, bool, string, resource
- tolerated with a diagnostic: list (treated as 1)
- fatal: object

The rule table is keyed by Kind and must cover every kind.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from .values import Value, Kind
from .numeric_string import parse_numeric_prefix
from .errors import (
    Diagnostic, WarningKind, ErrorKind,
    warning_non_numeric_operand, error_unsupported_operand_type,
)

logger = logging.getLogger(__name__)

# Value every aggregate coerces to
AGGREGATE_SENTINEL = 1.0


class ResultStatus(Enum):
    NUMERIC = "numeric"
    NUMERIC_WITH_WARNING = "numeric_with_warning"
    FATAL = "fatal"


@dataclass(frozen=True)
class CoercionResult:
    """
    Outcome of coercing a single value.

    `exact` holds the exact integer operand when the source is integral,
    so integer powers can stay exact beyond 2**53.
    """
    status: ResultStatus
    value: Optional[float] = None
    exact: Optional[int] = None
    warning: Optional[WarningKind] = None
    error: Optional[ErrorKind] = None
    diagnostic: Optional[Diagnostic] = None

    @property
    def is_fatal(self) -> bool:
        return self.status == ResultStatus.FATAL

    @property
    def is_integral(self) -> bool:
        return self.exact is not None


def numeric(value: float, exact: Optional[int] = None) -> CoercionResult:
    return CoercionResult(ResultStatus.NUMERIC, float(value), exact)


def numeric_with_warning(value: float, warning: WarningKind,
                         diagnostic: Diagnostic) -> CoercionResult:
    return CoercionResult(ResultStatus.NUMERIC_WITH_WARNING, float(value),
                          warning=warning, diagnostic=diagnostic)


def fatal(error: ErrorKind, diagnostic: Diagnostic) -> CoercionResult:
    return CoercionResult(ResultStatus.FATAL, error=error, diagnostic=diagnostic)


CoercionRule = Callable[[Value], CoercionResult]


class CoercionEngine:
    """
    Registry of per-kind coercion rules.

    Rules are registered by kind; `coerce` dispatches on `Value.kind`.
    """

    def __init__(self):
        self._rules: Dict[Kind, CoercionRule] = {}
        self._register_all()
        missing = [k.value for k in Kind if k not in self._rules]
        if missing:
            raise RuntimeError(f"no coercion rule for kind(s): {', '.join(missing)}")

    def register(self, kind: Kind, rule: CoercionRule) -> None:
        """Register (or replace) the rule for a kind."""
        self._rules[kind] = rule

    def get_rule(self, kind: Kind) -> Optional[CoercionRule]:
        return self._rules.get(kind)

    def coerce(self, value: Value) -> CoercionResult:
        """Coerce a value to a numeric operand. Never mutates `value`."""
        result = self._rules[value.kind](value)
        logger.debug("coerce %r -> %s %r", value, result.status.value, result.value)
        return result

    def _register_all(self) -> None:
        self._register_scalar_rules()
        self._register_aggregate_rules()
        self._register_opaque_rules()

    # --- Silent best-effort ---

    def _register_scalar_rules(self) -> None:

        def _int(v: Value) -> CoercionResult:
            return numeric(v.data, v.data)

        def _float(v: Value) -> CoercionResult:
            return numeric(v.data)

        def _null(v: Value) -> CoercionResult:
            return numeric(0.0, 0)

        def _bool(v: Value) -> CoercionResult:
            return numeric(1.0, 1) if v.data else numeric(0.0, 0)

        def _string(v: Value) -> CoercionResult:
            parsed = parse_numeric_prefix(v.data)
            return numeric(parsed.value, parsed.integer)

        self.register(Kind.INT, _int)
        self.register(Kind.FLOAT, _float)
        self.register(Kind.NULL, _null)
        self.register(Kind.BOOL, _bool)
        self.register(Kind.STRING, _string)

    # --- Tolerated with a diagnostic ---

    def _register_aggregate_rules(self) -> None:

        def _list(v: Value) -> CoercionResult:
            # Content-independent: [] and [x, y] coerce alike
            return numeric_with_warning(
                AGGREGATE_SENTINEL,
                WarningKind.NON_NUMERIC_OPERAND,
                warning_non_numeric_operand(v.kind.value),
            )

        self.register(Kind.LIST, _list)

    # --- Opaque values ---

    def _register_opaque_rules(self) -> None:

        def _object(v: Value) -> CoercionResult:
            return fatal(
                ErrorKind.UNSUPPORTED_OPERAND_TYPE,
                error_unsupported_operand_type(v.kind.value, str(v.data)),
            )

        def _resource(v: Value) -> CoercionResult:
            handle_id = v.data.id
            return numeric(handle_id, handle_id)

        self.register(Kind.OBJECT, _object)
        self.register(Kind.RESOURCE, _resource)


_default_engine: Optional[CoercionEngine] = None


def get_engine() -> CoercionEngine:
    """Get the shared engine instance. Rules are stateless."""
    global _default_engine
    if _default_engine is None:
        _default_engine = CoercionEngine()
    return _default_engine


def coerce(value: Value) -> CoercionResult:
    """Coerce a value with the shared engine."""
    return get_engine().coerce(value)
