"""CBAM Engine Exception Hierarchy.

The calculation and validation paths never raise on malformed records;
these exceptions cover the outer surfaces (file loading, CLI, service).

Exception Hierarchy:
    CBAMEngineError (base)
    └── SnapshotLoadError

Example:
    >>> from cbam_engine.exceptions import SnapshotLoadError
    >>> raise SnapshotLoadError(
    ...     message="Snapshot file not found",
    ...     path="data/snapshot.json",
    ... )

Author: GreenLang Platform Team
Status: Production Ready
"""

import json
import re
from datetime import datetime
from typing import Any, Dict, Optional


class CBAMEngineError(Exception):
    """Base exception for all CBAM engine errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier (e.g., "GL_CBAM_SNAPSHOT_LOAD_ERROR")
        context: Dictionary with error-specific details
        timestamp: When the error occurred
    """

    ERROR_PREFIX = "GL_CBAM"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.context = context or {}
        self.timestamp = datetime.now()

    def _generate_error_code(self) -> str:
        # CamelCase to SCREAMING_SNAKE_CASE
        error_type = re.sub(r"(?<!^)(?=[A-Z])", "_", self.__class__.__name__).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        return f"[{self.error_code}] - {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}')"
        )


class SnapshotLoadError(CBAMEngineError):
    """A snapshot or override file could not be read or parsed.

    Example:
        >>> raise SnapshotLoadError(
        ...     message="Invalid JSON",
        ...     path="snapshot.json",
        ...     reason="Expecting value: line 1 column 1",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        path: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        context = context or {}
        if path:
            context["path"] = path
        if reason:
            context["reason"] = reason
        super().__init__(message, context=context)


__all__ = [
    "CBAMEngineError",
    "SnapshotLoadError",
]
