"""
Coercion diagnostics and exceptions.

Diagnostic code ranges:
- W1xx: Recoverable coercion warnings
- E2xx: Fatal operand errors
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"


class WarningKind(Enum):
    """Recoverable coercion problems."""
    NON_NUMERIC_OPERAND = "W101"


class ErrorKind(Enum):
    """Coercion problems that abort the enclosing operation."""
    UNSUPPORTED_OPERAND_TYPE = "E201"


@dataclass(frozen=True)
class Diagnostic:
    """A single diagnostic message (error or warning)."""
    code: str                       # W101, E201
    message: str                    # Human-readable message
    severity: ErrorSeverity
    operand: Optional[str] = None   # "base" or "exponent"
    hints: tuple = ()

    @property
    def is_error(self) -> bool:
        return self.severity == ErrorSeverity.ERROR

    def format(self) -> str:
        """Format the diagnostic for display."""
        where = f" ({self.operand})" if self.operand else ""
        parts = [f"{self.severity.value}[{self.code}]{where}: {self.message}"]
        for hint in self.hints:
            parts.append(f"    = hint: {hint}")
        return "\n".join(parts)

    def with_operand(self, operand: str) -> "Diagnostic":
        """Copy of this diagnostic attributed to an operand position."""
        return Diagnostic(self.code, self.message, self.severity, operand, self.hints)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "operand": self.operand,
            "hints": list(self.hints),
        }


class CoercionError(Exception):
    """Base exception for coercion errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.format()


class UnsupportedOperandTypeError(CoercionError):
    """An operand has no numeric meaning at all (E2xx)."""
    pass


# --- Warnings ---

def warning_non_numeric_operand(kind_name: str) -> Diagnostic:
    """W101: Aggregate operand used in arithmetic."""
    return Diagnostic(
        code=WarningKind.NON_NUMERIC_OPERAND.value,
        message=f"non-numeric value of kind '{kind_name}' used as an operand",
        severity=ErrorSeverity.WARNING,
        hints=("the operand was treated as 1",),
    )


# --- Errors ---

def error_unsupported_operand_type(kind_name: str, detail: str = "") -> Diagnostic:
    """E201: Operand type cannot take part in arithmetic."""
    message = f"Unsupported operand types: {kind_name}"
    if detail:
        message = f"{message} ({detail})"
    return Diagnostic(
        code=ErrorKind.UNSUPPORTED_OPERAND_TYPE.value,
        message=message,
        severity=ErrorSeverity.ERROR,
    )


class DiagnosticCollector:
    """Collects diagnostics over a run."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []
        self._error_count = 0

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)
        if diagnostic.is_error:
            self._error_count += 1

    def extend(self, diagnostics) -> None:
        for diagnostic in diagnostics:
            self.add(diagnostic)

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == ErrorSeverity.WARNING)

    def summary(self) -> str:
        return f"{self._error_count} error(s), {self.warning_count} warning(s)"

    def to_json(self) -> dict:
        """Convert all diagnostics to JSON format."""
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self._error_count,
            "warning_count": self.warning_count,
        }
