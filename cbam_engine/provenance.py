# -*- coding: utf-8 -*-
"""
CBAM Calculation Provenance

SHA-256 hashing of calculation inputs and outputs. The hash covers the
canonical JSON of the input snapshot and of every result value, so two
runs on the same snapshot produce the same hash and any change to an input
or a result changes it. No timestamps enter the hash.

Example:
    >>> from cbam_engine.provenance import hash_payload
    >>> hash_payload({"b": 1, "a": 2}) == hash_payload({"a": 2, "b": 1})
    True

Author: GreenLang Platform Team
Status: Production Ready
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict

from pydantic import BaseModel

logger = logging.getLogger(__name__)


def canonical_json(data: Any) -> str:
    """Serialize ``data`` deterministically (sorted keys, compact separators)."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)


def hash_payload(data: Any) -> str:
    """SHA-256 hex digest of the canonical JSON of ``data``."""
    return hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()


def calculation_hash(inputs: Any, results: Dict[str, Any]) -> str:
    """Provenance hash binding a data snapshot to its results.

    Args:
        inputs: The data snapshot (model or mapping).
        results: Result values, without the provenance hash itself.

    Returns:
        64 character hex digest.
    """
    input_hash = hash_payload(inputs)
    result_hash = hash_payload(results)
    combined = f"{input_hash}:{result_hash}"
    digest = hashlib.sha256(combined.encode("utf-8")).hexdigest()
    logger.debug("Provenance hash %s (inputs %s)", digest[:16], input_hash[:16])
    return digest


__all__ = [
    "canonical_json",
    "hash_payload",
    "calculation_hash",
]
