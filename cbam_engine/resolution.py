# -*- coding: utf-8 -*-
"""
Emission Factor Resolution

Every aggregator resolves the factor it multiplies by through the same
ordered fallback chain:

    1. EXPLICIT  - the record's own factor, when present and > 0
    2. OVERRIDE  - the user's override table, matched on category,
                   case-insensitive name and gas type
    3. DEFAULT   - the built-in table for the category
    4. FALLBACK  - the category constant (process 0.1, embedded 0.5, fuel 0)

The chain is a list of lookup closures evaluated in order; the first one
returning a value wins. Resolution never raises and always returns a
finite number.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from cbam_engine.coercion import parse_number, safe_bool, safe_text
from cbam_engine.defaults import lookup_default
from cbam_engine.metrics import record_factor_fallback

logger = logging.getLogger(__name__)

Lookup = Callable[[], Optional[float]]


class FactorSource(str, Enum):
    """Chain link that produced a resolved factor"""
    EXPLICIT = "explicit"  # Value carried by the record itself
    OVERRIDE = "override"  # User override table
    DEFAULT_TABLE = "default_table"  # Built-in defaults
    CATEGORY_FALLBACK = "category_fallback"  # Last resort constant


@dataclass(frozen=True)
class FactorResolution:
    """
    Tracks how an emission factor was resolved.
    Fallbacks are counted in the gl_cbam_factor_fallbacks_total metric.
    """
    value: float
    source: FactorSource
    category: str
    name: str
    gas_type: str


# ---------------------------------------------------------------------------
# Chain primitives
# ---------------------------------------------------------------------------


def resolve_chain(
    lookups: Sequence[Tuple[FactorSource, Lookup]], fallback: float = 0.0,
) -> Tuple[float, FactorSource]:
    """Evaluate ``lookups`` in order; the first non-None value wins.

    Returns:
        ``(value, source)``, or ``(fallback, CATEGORY_FALLBACK)`` when every
        lookup comes back empty.
    """
    for source, lookup in lookups:
        value = lookup()
        if value is not None:
            return value, source
    return fallback, FactorSource.CATEGORY_FALLBACK


def explicit_lookup(explicit_value: Any) -> Lookup:
    """Accept the record's own factor only when it is a positive number."""
    def _lookup() -> Optional[float]:
        value = parse_number(explicit_value)
        if value is not None and value > 0:
            return value
        return None
    return _lookup


def _override_value(override: Any, attr: str, key: str) -> Any:
    if isinstance(override, Mapping):
        return override.get(key, override.get(attr))
    return getattr(override, attr, None)


def find_override(
    overrides: Optional[Iterable[Any]],
    category: str,
    name: str,
    gas_type: str = "CO2",
    biogenic_only: bool = False,
) -> Optional[float]:
    """Find the first usable override for ``(category, name, gas_type)``.

    Names match case-insensitively, an override without a gas type counts
    as CO2. Overrides whose value is not a finite non-negative number are
    skipped.
    """
    if not overrides or not name:
        return None
    wanted_name = name.strip().lower()
    wanted_gas = (gas_type or "CO2").strip().lower()
    wanted_category = category.strip().lower()
    for override in overrides:
        if safe_text(_override_value(override, "category", "category")).lower() != wanted_category:
            continue
        if safe_text(_override_value(override, "name", "name")).lower() != wanted_name:
            continue
        override_gas = safe_text(_override_value(override, "gas_type", "gasType")) or "CO2"
        if override_gas.lower() != wanted_gas:
            continue
        if biogenic_only and not safe_bool(_override_value(override, "is_biogenic", "isBiogenic")):
            continue
        value = parse_number(_override_value(override, "value", "value"))
        if value is None or value < 0:
            continue
        return value
    return None


def override_lookup(
    overrides: Optional[Iterable[Any]],
    category: str,
    name: str,
    gas_type: str = "CO2",
    biogenic_only: bool = False,
) -> Lookup:
    return lambda: find_override(overrides, category, name, gas_type, biogenic_only)


def table_lookup(table: Optional[Mapping[str, float]], name: str) -> Lookup:
    def _lookup() -> Optional[float]:
        if table is None:
            return None
        return lookup_default(table, name)
    return _lookup


# ---------------------------------------------------------------------------
# Public resolution API
# ---------------------------------------------------------------------------


def build_chain(
    category: str,
    name: str,
    gas_type: str = "CO2",
    explicit_value: Any = None,
    overrides: Optional[Iterable[Any]] = None,
    defaults_table: Optional[Mapping[str, float]] = None,
    biogenic_only: bool = False,
) -> List[Tuple[FactorSource, Lookup]]:
    """The standard explicit -> override -> default table chain."""
    return [
        (FactorSource.EXPLICIT, explicit_lookup(explicit_value)),
        (FactorSource.OVERRIDE, override_lookup(overrides, category, name, gas_type, biogenic_only)),
        (FactorSource.DEFAULT_TABLE, table_lookup(defaults_table, name)),
    ]


def resolve_factor_detailed(
    category: str,
    name: Any,
    gas_type: str = "CO2",
    explicit_value: Any = None,
    overrides: Optional[Iterable[Any]] = None,
    defaults_table: Optional[Mapping[str, float]] = None,
    fallback: float = 0.0,
    biogenic_only: bool = False,
) -> FactorResolution:
    """Resolve a factor and report which chain link produced it."""
    key = safe_text(name)
    chain = build_chain(
        category, key, gas_type, explicit_value, overrides, defaults_table, biogenic_only,
    )
    value, source = resolve_chain(chain, fallback)
    if source is FactorSource.CATEGORY_FALLBACK and defaults_table is not None:
        logger.debug(
            "No %s factor for %r (%s), using fallback %s", category, key, gas_type, fallback,
        )
        record_factor_fallback(category)
    return FactorResolution(value, source, category, key, gas_type)


def resolve_factor(
    category: str,
    name: Any,
    gas_type: str = "CO2",
    explicit_value: Any = None,
    overrides: Optional[Iterable[Any]] = None,
    defaults_table: Optional[Mapping[str, float]] = None,
    fallback: float = 0.0,
    biogenic_only: bool = False,
) -> float:
    """Resolve the effective factor for one record.

    Args:
        category: Override category (Fuel, Process, Embedded, Transport).
        name: Fuel type, process type, material name or transport mode.
        gas_type: Gas the factor applies to (CO2, CH4, N2O, OtherGWP).
        explicit_value: The record's own factor, used when > 0.
        overrides: User override table (models or mappings).
        defaults_table: Built-in table for the category, or None.
        fallback: Category constant used when nothing else matches.
        biogenic_only: Only consider overrides flagged biogenic.

    Returns:
        The resolved factor, always a finite float.
    """
    return resolve_factor_detailed(
        category, name, gas_type, explicit_value, overrides, defaults_table,
        fallback, biogenic_only,
    ).value


__all__ = [
    "FactorSource",
    "FactorResolution",
    "resolve_chain",
    "explicit_lookup",
    "find_override",
    "override_lookup",
    "table_lookup",
    "build_chain",
    "resolve_factor_detailed",
    "resolve_factor",
]
