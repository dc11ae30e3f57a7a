"""
Iteration harness: raises a fixed base to every operand of a catalog.

Each operand produces one block framed by an iteration counter. What a
fatal outcome does to the rest of the run is set by `FatalPolicy`.
"""

import logging
import os
import sys
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import List, Optional, TextIO

from .values import Value, Kind, float_val
from .power import Outcome, power
from .printer import dump_outcome
from .errors import DiagnosticCollector
from .resources import ResourceProvider
from .fixtures import (
    DEFAULT_CATALOG, FixtureEntry, load_catalog, build_value, build_inputs,
)

logger = logging.getLogger(__name__)

NUMCOERCE_ON_FATAL = "NUMCOERCE_ON_FATAL"

DONE_MARKER = "===Done==="

EXIT_OK = 0
# Exit status of a script stopped by a fatal error
EXIT_FATAL = 255


class FatalPolicy(Enum):
    """What a fatal outcome does to the remaining operands."""
    HALT = "halt"           # stop the run, no completion marker
    CONTINUE = "continue"   # report it and move on

    @classmethod
    def parse(cls, text: str) -> "FatalPolicy":
        try:
            return cls(text.strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown fatal policy '{text}' (expected one of: {choices})")


@dataclass
class RunConfig:
    """Settings for a run. CLI flags override environment values."""
    catalog: str = DEFAULT_CATALOG
    fixtures_path: Optional[Path] = None
    base: Optional[float] = None            # None: use the catalog's base
    fatal_policy: FatalPolicy = FatalPolicy.HALT
    resource_path: Optional[Path] = None    # overrides resource entry paths

    @classmethod
    def from_env(cls, **overrides) -> "RunConfig":
        config = cls()
        policy = os.environ.get(NUMCOERCE_ON_FATAL)
        if policy:
            config.fatal_policy = FatalPolicy.parse(policy)
        for name, value in overrides.items():
            if value is not None:
                setattr(config, name, value)
        return config


@dataclass
class IterationRecord:
    """One operand and its outcome."""
    index: int
    entry: FixtureEntry
    operand: Value
    outcome: Outcome


@dataclass
class RunResult:
    """Result of a run."""
    records: List[IterationRecord] = field(default_factory=list)
    halted: bool = False
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)

    @property
    def exit_code(self) -> int:
        return EXIT_FATAL if self.halted else EXIT_OK

    @property
    def outcomes(self) -> List[Outcome]:
        return [r.outcome for r in self.records]


def run(config: Optional[RunConfig] = None, out: Optional[TextIO] = None) -> RunResult:
    """
    Run every operand of the configured catalog against the base.

    Args:
        config: Run settings (environment defaults when omitted)
        out: Stream for the dump output (stdout by default)

    Returns:
        RunResult with one record per processed operand
    """
    config = config or RunConfig.from_env()
    out = out or sys.stdout
    catalog = load_catalog(config.catalog, config.fixtures_path)
    result = RunResult()

    provider = ResourceProvider()
    try:
        if config.base is not None:
            base = float_val(config.base)
        else:
            base = build_value(catalog.base, catalog, provider)

        if config.resource_path is not None:
            resource_path = str(Path(config.resource_path).resolve())
            catalog = replace(catalog, inputs=[
                replace(e, path=resource_path) if e.kind == Kind.RESOURCE else e
                for e in catalog.inputs
            ])

        if catalog.description:
            out.write(f"{catalog.description}\n")

        for index, (entry, operand) in enumerate(build_inputs(catalog, provider), start=1):
            outcome = power(base, operand)
            result.records.append(IterationRecord(index, entry, operand, outcome))
            result.diagnostics.extend(outcome.warnings)

            out.write(f"\n-- Iteration {index} --\n")
            out.write(dump_outcome(outcome) + "\n")
            logger.debug("iteration %d (%s): %s", index, entry.describe(), outcome.status.value)

            if outcome.is_fatal:
                result.diagnostics.add(outcome.diagnostic)
                if config.fatal_policy == FatalPolicy.HALT:
                    logger.warning("halting at iteration %d: %s", index, outcome.diagnostic.message)
                    result.halted = True
                    return result

        out.write(DONE_MARKER + "\n")
        return result
    finally:
        provider.close_all()

