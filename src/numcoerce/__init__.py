"""
numcoerce - dynamic value coercion for exponentiation.

This package provides:
- Value: Tagged runtime values (int, float, null, bool, string, list,
  object, resource)
- CoercionEngine: Per-kind rules turning values into numeric operands
- power: Exponentiation over dynamic values with diagnostics
- Printer: var_dump style rendering of values and outcomes
- Fixtures/runner: YAML operand catalogs and the iteration harness

Usage:
    from numcoerce import power, float_val, string_val, list_val, object_val

    outcome = power(float_val(20.3), string_val("12.5abc"))
    print(outcome.value)

    outcome = power(float_val(20.3), list_val([]))
    for warning in outcome.warnings:
        print(warning.format())

    outcome = power(float_val(20.3), object_val("classA"))
    assert outcome.is_fatal
"""

__version__ = "0.1.0"

from .values import (
    Kind,
    Value,
    ObjectRef,
    int_val,
    float_val,
    null_val,
    bool_val,
    string_val,
    list_val,
    object_val,
    resource_val,
    from_python,
)

from .errors import (
    ErrorSeverity,
    WarningKind,
    ErrorKind,
    Diagnostic,
    DiagnosticCollector,
    CoercionError,
    UnsupportedOperandTypeError,
)

from .numeric_string import (
    ParsedNumber,
    parse_numeric_prefix,
)

from .coercion import (
    CoercionEngine,
    CoercionResult,
    ResultStatus,
    coerce,
    get_engine,
)

from .power import (
    Outcome,
    power,
    float_pow,
    int_pow,
)

from .resources import (
    ResourceHandle,
    ResourceProvider,
)

from .printer import (
    dump_value,
    dump_outcome,
    format_float,
)

from .fixtures import (
    FixtureCatalog,
    FixtureEntry,
    load_catalog,
    list_catalogs,
)

from .runner import (
    FatalPolicy,
    RunConfig,
    RunResult,
    run,
)

__all__ = [
    # Values
    'Kind',
    'Value',
    'ObjectRef',
    'int_val',
    'float_val',
    'null_val',
    'bool_val',
    'string_val',
    'list_val',
    'object_val',
    'resource_val',
    'from_python',

    # Errors
    'ErrorSeverity',
    'WarningKind',
    'ErrorKind',
    'Diagnostic',
    'DiagnosticCollector',
    'CoercionError',
    'UnsupportedOperandTypeError',

    # Coercion
    'ParsedNumber',
    'parse_numeric_prefix',
    'CoercionEngine',
    'CoercionResult',
    'ResultStatus',
    'coerce',
    'get_engine',

    # Power
    'Outcome',
    'power',
    'float_pow',
    'int_pow',

    # Resources
    'ResourceHandle',
    'ResourceProvider',

    # Printer
    'dump_value',
    'dump_outcome',
    'format_float',

    # Fixtures and runner
    'FixtureCatalog',
    'FixtureEntry',
    'load_catalog',
    'list_catalogs',
    'FatalPolicy',
    'RunConfig',
    'RunResult',
    'run',
]
