"""Error types and advisory results for layout operations.

Registry and geometry code raises `LayoutError` subclasses. The interaction
layer catches them and reports an `OperationResult` instead, so no fault ever
escapes an interaction and the room state always stays renderable.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class LayoutError(ValueError):
    """Base class for recoverable layout errors."""


class InvalidGeometryError(LayoutError):
    """Raised for geometry that cannot be created (e.g., a too-short wall)."""


class UnknownWallError(LayoutError):
    """Raised when an operation names a wall number that does not exist."""


class LayoutErrorType(str, Enum):
    """Types of errors that can occur in layout operations."""

    INVALID_GEOMETRY = "invalid_geometry"
    ILLEGAL_PLACEMENT = "illegal_placement"
    STALE_REFERENCE = "stale_reference"
    MISSING_CATALOG_ENTRY = "missing_catalog_entry"


@dataclass
class OperationResult:
    """Outcome of a single interaction, with advisory text for the user."""

    success: bool
    """Whether the requested change was committed."""

    message: str = ""
    """Advisory text. Empty on a clean success."""

    error_type: LayoutErrorType | None = None
    """Error category when success is False, or for a success with a warning."""

    data: dict[str, Any] = field(default_factory=dict)
    """Operation-specific payload (e.g., new ids, committed position)."""

    def to_dict(self) -> dict[str, Any]:
        """Serialize result to a JSON-compatible dictionary."""
        return {
            "success": self.success,
            "message": self.message,
            "error_type": self.error_type.value if self.error_type else None,
            "data": self.data,
        }

    @classmethod
    def ok(cls, message: str = "", **data: Any) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def failure(
        cls, error_type: LayoutErrorType, message: str, **data: Any
    ) -> "OperationResult":
        return cls(success=False, message=message, error_type=error_type, data=data)
