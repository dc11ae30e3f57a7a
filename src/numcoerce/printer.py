"""
Dump formatting for values and power outcomes.

Output follows the `var_dump` layout:

    int(8)
    float(1.1E+23)
    string(3) "abc"
    array(1) {
      [0]=>
      int(1)
    }
"""

import math
from typing import List, Union

from .values import Value, Kind
from .power import Outcome
from .errors import Diagnostic

# Significant digits for floats
FLOAT_PRECISION = 14


def format_float(x: float, precision: int = FLOAT_PRECISION) -> str:
    """Format a float with %G at the given precision (INF, -INF, NAN).

    A bare single-digit mantissa keeps a fraction: 1e25 is "1.0E+25".
    """
    if x == 0.0:
        x = 0.0  # so to avoid "-0" output
    if math.isnan(x):
        return "NAN"
    text = "%.*G" % (precision, x)
    mantissa, sep, exponent = text.partition("E")
    if sep and "." not in mantissa:
        text = f"{mantissa}.0E{exponent}"
    return text


def dump_number(n: Union[int, float]) -> str:
    if isinstance(n, bool):
        raise TypeError("booleans are not numeric results")
    if isinstance(n, int):
        return f"int({n})"
    return f"float({format_float(n)})"


class DumpWriter:
    """Accumulates dump lines with nesting indentation."""

    def __init__(self, indent: int = 0):
        self.indent = indent
        self.lines: List[str] = []

    def _emit(self, text: str) -> None:
        self.lines.append("  " * self.indent + text)

    def write(self, value: Value) -> None:
        kind = value.kind
        if kind == Kind.INT:
            self._emit(f"int({value.data})")
        elif kind == Kind.FLOAT:
            self._emit(f"float({format_float(value.data)})")
        elif kind == Kind.NULL:
            self._emit("NULL")
        elif kind == Kind.BOOL:
            self._emit(f"bool({'true' if value.data else 'false'})")
        elif kind == Kind.STRING:
            text = value.data.decode("utf-8", errors="replace")
            self._emit(f'string({len(value.data)}) "{text}"')
        elif kind == Kind.LIST:
            self._emit(f"array({len(value.data)}) {{")
            self.indent += 1
            for index, item in enumerate(value.data):
                self._emit(f"[{index}]=>")
                self.write(item)
            self.indent -= 1
            self._emit("}")
        elif kind == Kind.OBJECT:
            ref = value.data
            self._emit(f"object({ref.class_name})#{ref.object_id} (0) {{")
            self._emit("}")
        elif kind == Kind.RESOURCE:
            handle = value.data
            resource_type = getattr(handle, "resource_type", "stream")
            self._emit(f"resource({handle.id}) of type ({resource_type})")
        else:
            raise ValueError(f"Unknown value kind: {kind}")

    def getvalue(self) -> str:
        return "\n".join(self.lines)


def dump_value(value: Value) -> str:
    """Render a Value in dump format (no trailing newline)."""
    writer = DumpWriter()
    writer.write(value)
    return writer.getvalue()


def format_warning(diagnostic: Diagnostic) -> str:
    where = f" in {diagnostic.operand}" if diagnostic.operand else ""
    return f"Warning: {diagnostic.message}{where}"


def format_fatal(diagnostic: Diagnostic) -> str:
    where = f" in {diagnostic.operand}" if diagnostic.operand else ""
    return f"Fatal error: {diagnostic.message}{where}"


def dump_outcome(outcome: Outcome) -> str:
    """Render an outcome: warnings first, then the number or the fatal error."""
    lines = [format_warning(w) for w in outcome.warnings]
    if outcome.is_fatal:
        lines.append(format_fatal(outcome.diagnostic))
    else:
        lines.append(dump_number(outcome.value))
    return "\n".join(lines)
