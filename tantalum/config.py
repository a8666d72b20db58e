"""
Tantalum Configuration
======================

Extra units and prefixes can be declared in a YAML file and merged into the
process-wide registry when it is first built.

Usage:
    export TANTALUM_UNITS_FILE=units.yaml

    # units.yaml
    units:
      - symbol: furlong
        name: furlong
        definition: "201.168 m"
      - symbol: kn
        name: knot
        dimensions: {length: 1, time: -1}
        scale: "463/900"
    prefixes:
      - symbol: my
        name: myria
        factor: 10000

Scales, factors and offsets must be integers or quoted strings. A bare YAML
float like 1609.344 is rejected because it has already been rounded to a
binary float by the time it is read.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .dimensions import Dimensions
from .errors import ConfigurationError, TantalumError
from .numeric import to_rational
from .registry import BUILTIN_REGISTRY
from .units import PrefixDef, UnitDef

logger = logging.getLogger(__name__)

ENV_UNITS_FILE = "TANTALUM_UNITS_FILE"


# Required fields per entry kind
REQUIRED_FIELDS = {
    'unit': ['symbol', 'name'],
    'unit_explicit': ['dimensions', 'scale'],
    'prefix': ['symbol', 'name', 'factor'],
}


@dataclass(frozen=True)
class TantalumConfig:
    """Validated contents of a units file."""
    units: Tuple[UnitDef, ...] = ()
    prefixes: Tuple[PrefixDef, ...] = ()
    source: Optional[Path] = None


def validate_required(
    entry: Dict[str, Any],
    required_keys: List[str],
    kind: str,
    config_path: Optional[Path] = None,
) -> None:
    """
    Validate that all required keys are present.

    Args:
        entry: One unit or prefix mapping from the file
        required_keys: Keys that must be present and not None
        kind: 'unit' or 'prefix' (for the error message)
        config_path: Path to the file (for the error message)

    Raises:
        ConfigurationError: If any required key is missing or None
    """
    missing = [key for key in required_keys if entry.get(key) is None]

    if missing:
        location = f"File: {config_path}\n" if config_path else ""
        label = entry.get('symbol') or entry.get('name') or '<unnamed>'
        raise ConfigurationError(
            f"\n{'='*60}\n"
            f"CONFIGURATION ERROR: Missing required fields\n"
            f"{'='*60}\n"
            f"{location}"
            f"Entry: {kind} '{label}'\n\n"
            f"Missing fields:\n"
            f"{''.join(f'  - {k}' + chr(10) for k in missing)}"
            f"{'='*60}"
        )


def _exact(value: Any, field: str, label: str):
    if isinstance(value, float):
        raise ConfigurationError(
            f"{field} of '{label}' is a float ({value!r}); quote it to keep it exact"
        )
    try:
        return to_rational(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid {field} for '{label}': {e}") from e


def _aliases(entry: Dict[str, Any]) -> Tuple[str, ...]:
    aliases = entry.get('aliases') or ()
    if isinstance(aliases, str):
        return (aliases,)
    return tuple(str(a) for a in aliases)


def parse_unit_entry(entry: Dict[str, Any], config_path: Optional[Path] = None) -> UnitDef:
    """
    Build a UnitDef from one 'units' entry.

    Either 'definition' (a quantity string resolved against the built-in
    registry) or both 'dimensions' and 'scale' must be given.
    """
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Unit entries must be mappings, got {entry!r}")
    validate_required(entry, REQUIRED_FIELDS['unit'], 'unit', config_path)
    symbol = str(entry['symbol'])
    offset = _exact(entry.get('offset', 0), 'offset', symbol)

    if entry.get('definition') is not None:
        from .quantity import Quantity
        try:
            defined = Quantity.parse(str(entry["definition"]), registry=BUILTIN_REGISTRY)
        except TantalumError as e:
            raise ConfigurationError(f"Invalid definition for '{symbol}': {e}") from e
        dimensions = defined.dimensions
        scale = defined.magnitude * defined.unit.scale
    else:
        validate_required(entry, REQUIRED_FIELDS['unit_explicit'], 'unit', config_path)
        if not isinstance(entry['dimensions'], dict):
            raise ConfigurationError(f"dimensions of '{symbol}' must be a mapping")
        try:
            dimensions = Dimensions.from_mapping(entry['dimensions'])
        except ValueError as e:
            raise ConfigurationError(f"Invalid dimensions for '{symbol}': {e}") from e
        scale = _exact(entry['scale'], 'scale', symbol)

    if scale == 0:
        raise ConfigurationError(f"Unit '{symbol}' has a zero scale")
    return UnitDef(symbol, str(entry['name']), dimensions, scale, offset, _aliases(entry))


def parse_prefix_entry(entry: Dict[str, Any], config_path: Optional[Path] = None) -> PrefixDef:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Prefix entries must be mappings, got {entry!r}")
    validate_required(entry, REQUIRED_FIELDS['prefix'], 'prefix', config_path)
    symbol = str(entry['symbol'])
    factor = _exact(entry['factor'], 'factor', symbol)
    if factor == 0:
        raise ConfigurationError(f"Prefix '{symbol}' has a zero factor")
    return PrefixDef(symbol, str(entry['name']), factor, _aliases(entry))


def load_config(config_path: Union[str, Path]) -> TantalumConfig:
    """
    Load and validate a units file.

    Raises:
        ConfigurationError: If the file is missing, not a mapping, or any entry is invalid
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Units file not found: {path}")

    with open(path) as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a mapping with 'units' and/or 'prefixes'")

    unknown = set(raw) - {'units', 'prefixes'}
    if unknown:
        raise ConfigurationError(f"Unknown sections in {path}: {sorted(unknown)}")

    units = tuple(parse_unit_entry(e, path) for e in raw.get('units') or [])
    prefixes = tuple(parse_prefix_entry(e, path) for e in raw.get('prefixes') or [])
    logger.debug(f"Parsed {path}: {len(units)} units, {len(prefixes)} prefixes")
    return TantalumConfig(units=units, prefixes=prefixes, source=path)


def config_from_env() -> Optional[TantalumConfig]:
    """Load the file named by TANTALUM_UNITS_FILE, or None when it is unset."""
    config_path = os.environ.get(ENV_UNITS_FILE)
    if not config_path:
        return None
    logger.info(f"Reading units from {config_path} ({ENV_UNITS_FILE})")
    return load_config(config_path)


__all__ = ['ENV_UNITS_FILE', 'REQUIRED_FIELDS', 'TantalumConfig', 'ConfigurationError',
           'validate_required', 'parse_unit_entry', 'parse_prefix_entry',
           'load_config', 'config_from_env']
