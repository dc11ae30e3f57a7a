"""
Leading numeric prefix parser for string operands.

Strings coerce to the number spelled by their longest valid prefix:

    [+-]? (digits ('.' digits?)? | '.' digits) ([eE] [+-]? digits)?

Nothing is skipped before the prefix, so " 5" has no numeric prefix. A
string with no prefix coerces to 0.0 rather than failing.
"""

from typing import NamedTuple, Optional, Union

from .values import INT64_MIN, INT64_MAX

_DIGITS = b"0123456789"
_INT64_DIGITS = 19


class ParsedNumber(NamedTuple):
    """Result of scanning a numeric prefix."""
    value: float
    consumed: int               # bytes consumed; 0 means no numeric prefix
    integer: Optional[int]      # exact value when the prefix is integer-shaped

    @property
    def is_numeric(self) -> bool:
        return self.consumed > 0

    @property
    def is_integer(self) -> bool:
        return self.integer is not None


def _scan_digits(data: bytes, pos: int) -> int:
    while pos < len(data) and data[pos] in _DIGITS:
        pos += 1
    return pos


def parse_numeric_prefix(data: Union[str, bytes]) -> ParsedNumber:
    """Scan the numeric prefix of `data`, returning value and length."""
    if isinstance(data, str):
        data = data.encode("utf-8")

    pos = 0
    if pos < len(data) and data[pos] in b"+-":
        pos += 1

    int_start = pos
    pos = _scan_digits(data, pos)
    int_digits = pos - int_start

    # Fraction: "5." is accepted, "." alone is not
    frac_digits = 0
    is_float = False
    if pos < len(data) and data[pos:pos + 1] == b".":
        frac_end = _scan_digits(data, pos + 1)
        frac_digits = frac_end - (pos + 1)
        if int_digits or frac_digits:
            is_float = True
            pos = frac_end

    if int_digits == 0 and frac_digits == 0:
        return ParsedNumber(0.0, 0, None)

    # Exponent is only consumed when at least one digit follows
    if pos < len(data) and data[pos:pos + 1] in (b"e", b"E"):
        exp_pos = pos + 1
        if exp_pos < len(data) and data[exp_pos:exp_pos + 1] in (b"+", b"-"):
            exp_pos += 1
        exp_end = _scan_digits(data, exp_pos)
        if exp_end > exp_pos:
            is_float = True
            pos = exp_end

    text = data[:pos].decode("ascii")
    # More than 19 digits never fits i64; int() also caps digit count
    if not is_float and int_digits <= _INT64_DIGITS:
        n = int(text)
        if INT64_MIN <= n <= INT64_MAX:
            return ParsedNumber(float(n), pos, n)
    return ParsedNumber(float(text), pos, None)
