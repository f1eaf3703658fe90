# -*- coding: utf-8 -*-
"""
Snapshot loading from JSON or YAML files.

The file format is picked from the extension (``.yaml``/``.yml`` read with
PyYAML, everything else as JSON). The decoded document goes through the
same lenient coercion as in-memory data, so a structurally valid file
never fails on malformed records; only unreadable or unparseable files
raise :class:`~cbam_engine.exceptions.SnapshotLoadError`.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Union

import yaml

from cbam_engine.exceptions import SnapshotLoadError
from cbam_engine.models import CBAMDataSnapshot, EmissionFactorOverride, coerce_records

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_YAML_SUFFIXES = (".yaml", ".yml")


def _read_document(path: PathLike) -> Any:
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotLoadError(
            message=f"Cannot read {file_path}",
            path=str(file_path),
            reason=str(exc),
        ) from exc

    try:
        if file_path.suffix.lower() in _YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise SnapshotLoadError(
            message=f"Cannot parse {file_path}",
            path=str(file_path),
            reason=str(exc),
        ) from exc


def load_snapshot(path: PathLike) -> CBAMDataSnapshot:
    """Load a data snapshot from a JSON or YAML file.

    Args:
        path: Path to the snapshot file.

    Returns:
        CBAMDataSnapshot built from the file's top-level mapping.

    Raises:
        SnapshotLoadError: The file is missing, unreadable, not valid
            JSON/YAML, or its top level is not a mapping.
    """
    document = _read_document(path)
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise SnapshotLoadError(
            message=f"Snapshot {path} must contain a mapping at the top level",
            path=str(path),
            reason=f"got {type(document).__name__}",
        )
    snapshot = CBAMDataSnapshot.coerce(document)
    logger.debug(
        "Loaded snapshot %s: %d fuels, %d processes",
        path, len(snapshot.energy_fuel_data), len(snapshot.process_production_data),
    )
    return snapshot


def load_overrides(path: PathLike) -> List[EmissionFactorOverride]:
    """Load emission factor overrides from a JSON or YAML file.

    The file holds either a list of override records or a mapping with an
    ``emissionFactors`` list.

    Raises:
        SnapshotLoadError: The file cannot be read or parsed, or holds
            neither a list nor a mapping.
    """
    document = _read_document(path)
    if isinstance(document, dict):
        document = document.get("emissionFactors", document.get("emission_factors", []))
    if document is None:
        document = []
    if not isinstance(document, list):
        raise SnapshotLoadError(
            message=f"Override file {path} must contain a list of emission factors",
            path=str(path),
            reason=f"got {type(document).__name__}",
        )
    overrides = coerce_records(document, EmissionFactorOverride)
    logger.debug("Loaded %d emission factor overrides from %s", len(overrides), path)
    return overrides


__all__ = ["load_snapshot", "load_overrides"]
