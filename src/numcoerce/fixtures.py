"""Fixture catalog loading with bundled data and external override support.

A fixture catalog is a YAML file naming a base operand and an ordered list
of exponent operands, one per kind of interest:

    schema_version: "1.0"
    name: pow_variation
    base: {kind: float, value: 20.3}
    inputs:
      - {kind: int, value: 0}
      - {kind: list, value: []}
      - {kind: object, class: classA}
      - {kind: resource}          # no path: the catalog file itself

Environment Variables:
    NUMCOERCE_FIXTURE_DATA: Colon-separated (or semicolon on Windows) paths
                            to directories containing custom YAML catalogs.
                            These are searched before bundled data.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .values import (
    Value, Kind,
    int_val, float_val, null_val, bool_val, string_val, list_val,
    object_val, resource_val, from_python, INT64_MIN, INT64_MAX,
)
from .resources import ResourceProvider

__all__ = [
    "NUMCOERCE_FIXTURE_DATA",
    "DEFAULT_CATALOG",
    "FixtureEntry",
    "FixtureCatalog",
    "parse_catalog",
    "load_catalog",
    "list_catalogs",
    "build_value",
    "build_inputs",
    "catalog_summary",
    "clear_cache",
]

# Environment variable name for custom data paths
NUMCOERCE_FIXTURE_DATA = "NUMCOERCE_FIXTURE_DATA"

DEFAULT_CATALOG = "pow_variation"

# Bundled data location (relative to this file)
_BUNDLED_DATA_DIR = Path(__file__).parent / "data"

_KINDS = {k.value: k for k in Kind}


@dataclass(frozen=True)
class FixtureEntry:
    """One operand described by a catalog."""
    kind: Kind
    value: Any = None
    label: Optional[str] = None
    class_name: str = "stdClass"
    path: Optional[str] = None

    def describe(self) -> str:
        if self.label is not None:
            return self.label
        if self.kind == Kind.OBJECT:
            return f"new {self.class_name}()"
        if self.kind == Kind.RESOURCE:
            return f"resource({self.path or '<catalog>'})"
        if self.kind == Kind.STRING:
            return repr(self.value)
        return str(self.value)


@dataclass
class FixtureCatalog:
    """A parsed fixture catalog."""
    name: str
    base: FixtureEntry
    inputs: List[FixtureEntry] = field(default_factory=list)
    description: str = ""
    source_path: Optional[Path] = None

    def resolve_path(self, entry: FixtureEntry) -> Path:
        """File backing a resource entry; relative paths follow the catalog."""
        if entry.path is None:
            if self.source_path is None:
                raise ValueError("resource entry without a path in an in-memory catalog")
            return self.source_path
        path = Path(entry.path).expanduser()
        if not path.is_absolute() and self.source_path is not None:
            path = self.source_path.parent / path
        return path


def clear_cache() -> None:
    """Clear all cached catalog data.

    Call this if you modify external catalog files and want to reload.
    """
    _get_data_dirs.cache_clear()
    _load_catalog_cached.cache_clear()


@lru_cache(maxsize=None)
def _get_data_dirs() -> Tuple[Path, ...]:
    """Return tuple of data directories to search, in priority order.

    Search order:
        1. Directories from NUMCOERCE_FIXTURE_DATA environment variable
        2. Bundled data directory
    """
    dirs: List[Path] = []

    env_path = os.environ.get(NUMCOERCE_FIXTURE_DATA)
    if env_path:
        sep = ";" if sys.platform == "win32" else ":"
        for p in env_path.split(sep):
            p = p.strip()
            if p:
                path = Path(p).expanduser().resolve()
                if path.is_dir():
                    dirs.append(path)

    if _BUNDLED_DATA_DIR.is_dir():
        dirs.append(_BUNDLED_DATA_DIR)

    return tuple(dirs)


def _parse_entry(raw: Any, where: str) -> FixtureEntry:
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: expected a mapping, got {type(raw).__name__}")
    kind_name = raw.get("kind")
    if kind_name not in _KINDS:
        raise ValueError(
            f"{where}: unknown kind {kind_name!r}. Available: {sorted(_KINDS)}"
        )
    kind = _KINDS[kind_name]
    value = raw.get("value")
    _check_value(kind, value, where)

    class_name = raw.get("class", "stdClass")
    if not isinstance(class_name, str) or not class_name:
        raise ValueError(f"{where}: 'class' must be a non-empty string")
    path = raw.get("path")
    if path is not None and not isinstance(path, str):
        raise ValueError(f"{where}: 'path' must be a string")

    return FixtureEntry(
        kind=kind,
        value=value,
        label=raw.get("label"),
        class_name=class_name,
        path=path,
    )


def _check_value(kind: Kind, value: Any, where: str) -> None:
    """Reject payloads that would silently change meaning when built."""
    def bad(expected: str) -> ValueError:
        return ValueError(
            f"{where}: {kind.value} entry needs {expected}, got {value!r}"
        )

    if kind == Kind.INT:
        if isinstance(value, bool) or not isinstance(value, int):
            raise bad("an integer value")
        if value < INT64_MIN or value > INT64_MAX:
            raise bad("a 64-bit integer value")
    elif kind == Kind.FLOAT:
        # Floats may be quoted so YAML keeps forms like ".5" or "1e10" intact
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise bad("a number")
        if isinstance(value, str):
            try:
                float(value)
            except ValueError:
                raise bad("a number") from None
    elif kind == Kind.BOOL:
        if not isinstance(value, bool):
            raise bad("true or false")
    elif kind == Kind.STRING:
        if value is not None and not isinstance(value, str):
            raise bad("a string value")
    elif kind == Kind.LIST:
        if value is not None and not isinstance(value, list):
            raise bad("a list value")


def parse_catalog(data: Any, source_path: Optional[Path] = None) -> FixtureCatalog:
    """Validate a loaded YAML document and build a catalog."""
    origin = source_path or "<memory>"
    if not isinstance(data, dict):
        raise ValueError(f"Invalid catalog format in {origin}: expected dict at root")

    schema_version = data.get("schema_version", "1.0")
    if not isinstance(schema_version, str) or not schema_version.startswith("1."):
        raise ValueError(
            f"Unsupported schema version '{schema_version}' in {origin}. "
            f"Expected version 1.x"
        )

    if "inputs" not in data or not isinstance(data["inputs"], list):
        raise ValueError(f"Catalog {origin} missing required 'inputs' list")

    base = _parse_entry(data.get("base", {"kind": "float", "value": 20.3}), "base")
    inputs = [_parse_entry(raw, f"inputs[{i}]") for i, raw in enumerate(data["inputs"])]
    return FixtureCatalog(
        name=data.get("name", source_path.stem if source_path else "catalog"),
        base=base,
        inputs=inputs,
        description=data.get("description", ""),
        source_path=source_path,
    )


def _load_yaml(path: Path) -> FixtureCatalog:
    """Load and validate a YAML catalog file."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    return parse_catalog(data, path.resolve())


@lru_cache(maxsize=32)
def _load_catalog_cached(name: str, custom_path_str: Optional[str]) -> FixtureCatalog:
    """Cached catalog loading (string path for hashability)."""
    if custom_path_str:
        custom_path = Path(custom_path_str)
        if not custom_path.exists():
            raise FileNotFoundError(f"Custom catalog not found: {custom_path}")
        return _load_yaml(custom_path)

    filename = f"{name}.yaml"
    for data_dir in _get_data_dirs():
        path = data_dir / filename
        if path.exists():
            return _load_yaml(path)

    searched = [str(d) for d in _get_data_dirs()]
    raise FileNotFoundError(
        f"No catalog found for '{name}'.\n"
        f"Searched directories: {searched}"
    )


def load_catalog(
    name: str = DEFAULT_CATALOG,
    custom_path: Optional[Path] = None,
) -> FixtureCatalog:
    """Load a fixture catalog by name or explicit path.

    Args:
        name: Catalog name (file stem) to look up in the search directories
        custom_path: Optional explicit path to a YAML file (overrides search)

    Raises:
        FileNotFoundError: If no catalog is found
        ValueError: If the catalog has an invalid format

    Search order (unless custom_path specified):
        1. $NUMCOERCE_FIXTURE_DATA directories
        2. Bundled data
    """
    custom_str = str(custom_path) if custom_path else None
    return _load_catalog_cached(name, custom_str)


def list_catalogs() -> List[str]:
    """Names of all catalogs visible in the search directories."""
    names = set()
    for data_dir in _get_data_dirs():
        names.update(p.stem for p in data_dir.glob("*.yaml"))
    return sorted(names)


def build_value(
    entry: FixtureEntry,
    catalog: FixtureCatalog,
    provider: ResourceProvider,
    object_id: int = 1,
) -> Value:
    """Turn a catalog entry into a Value. Resource entries acquire a handle."""
    kind = entry.kind
    if kind == Kind.INT:
        return int_val(entry.value)
    if kind == Kind.FLOAT:
        return float_val(float(entry.value))
    if kind == Kind.NULL:
        return null_val()
    if kind == Kind.BOOL:
        return bool_val(entry.value)
    if kind == Kind.STRING:
        return string_val("" if entry.value is None else str(entry.value))
    if kind == Kind.LIST:
        return list_val(from_python(item) for item in (entry.value or []))
    if kind == Kind.OBJECT:
        return object_val(entry.class_name, object_id)
    if kind == Kind.RESOURCE:
        return resource_val(provider.acquire(catalog.resolve_path(entry)))
    raise ValueError(f"Unknown fixture kind: {kind}")


def build_inputs(
    catalog: FixtureCatalog,
    provider: ResourceProvider,
) -> List[Tuple[FixtureEntry, Value]]:
    """Build every input of a catalog, numbering objects from 1."""
    built = []
    object_id = 0
    for entry in catalog.inputs:
        if entry.kind == Kind.OBJECT:
            object_id += 1
        built.append((entry, build_value(entry, catalog, provider, object_id or 1)))
    return built


def catalog_summary(catalog: FixtureCatalog) -> Dict[str, int]:
    """Count of inputs per kind."""
    counts: Dict[str, int] = {}
    for entry in catalog.inputs:
        counts[entry.kind.value] = counts.get(entry.kind.value, 0) + 1
    return counts
