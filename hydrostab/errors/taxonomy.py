"""
errors/taxonomy.py - Hydrostatics error taxonomy

Structured error types carrying a code, category, recovery hint and
details for API responses.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
from enum import Enum


# =============================================================================
# ERROR CATEGORIES
# =============================================================================

class ErrorCategory(Enum):
    """Categories of hydrostatics errors."""
    NOT_FOUND = "not_found"                    # Vessel or loadcase absent
    INCOMPLETE_GEOMETRY = "incomplete_geometry"  # Missing / non-rectangular grid
    INVALID_ARGUMENT = "invalid_argument"      # Bad ranges, increments, inputs
    NUMERIC_DOMAIN = "numeric_domain"          # Quadrature domain violation
    CANCELLED = "cancelled"                    # Cooperative cancellation


# =============================================================================
# BASE ERROR CLASS
# =============================================================================

class HydroError(Exception):
    """
    Base class for hydrostatics errors.

    Provides structured error information with:
    - Error code for programmatic handling
    - Human-readable message
    - Recovery hint for the caller
    - Detailed context for debugging
    """

    code: str = "HYD_000"
    category: ErrorCategory = ErrorCategory.INVALID_ARGUMENT
    http_status: int = 400

    def __init__(
        self,
        message: str = "",
        *,
        recovery_hint: str = "",
        details: Optional[Dict[str, Any]] = None,
        **kwargs,
    ):
        self.message = message or self.__class__.__doc__ or "Hydrostatics error"
        self.recovery_hint = recovery_hint
        self.details = details or {}
        self.details.update(kwargs)

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "recovery_hint": self.recovery_hint,
            "details": self.details,
        }

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.recovery_hint:
            parts.append(f"Hint: {self.recovery_hint}")
        return " ".join(parts)


# =============================================================================
# SPECIFIC ERROR TYPES
# =============================================================================

class NotFoundError(HydroError, LookupError):
    """Requested vessel or loadcase does not exist."""

    code = "HYD_001"
    category = ErrorCategory.NOT_FOUND
    http_status = 404

    def __init__(self, kind: str, identifier: Any, **kwargs):
        super().__init__(
            message=f"{kind.capitalize()} {identifier} not found",
            recovery_hint=f"Check the {kind} id.",
            kind=kind,
            identifier=str(identifier),
            **kwargs,
        )


class IncompleteGeometryError(HydroError):
    """Vessel geometry is missing or is not a full station x waterline grid."""

    code = "HYD_002"
    category = ErrorCategory.INCOMPLETE_GEOMETRY
    http_status = 422

    def __init__(self, reason: str, problems: Optional[List[str]] = None, **kwargs):
        super().__init__(
            message=f"Vessel geometry is incomplete: {reason}",
            recovery_hint="Provide stations, waterlines and one offset for every station/waterline pair.",
            problems=list(problems or []),
            **kwargs,
        )


class InvalidArgumentError(HydroError, ValueError):
    """Invalid input arguments."""

    code = "HYD_003"
    category = ErrorCategory.INVALID_ARGUMENT
    http_status = 400

    def __init__(self, message: str, *, param: str = "", **kwargs):
        super().__init__(message=message, param=param, **kwargs)
        self.param = param


class NumericDomainError(InvalidArgumentError):
    """Numerical method invoked outside its mathematical domain."""

    code = "HYD_004"
    category = ErrorCategory.NUMERIC_DOMAIN

    def __init__(self, message: str, *, method: str = "", **kwargs):
        super().__init__(message, method=method, **kwargs)
        self.method = method


class OperationCancelledError(HydroError):
    """Computation was cancelled by the caller."""

    code = "HYD_005"
    category = ErrorCategory.CANCELLED
    http_status = 499

    def __init__(self, operation: str = "", reason: str = "", **kwargs):
        message = "Computation cancelled"
        if operation:
            message += f" during {operation}"
        if reason:
            message += f": {reason}"
        super().__init__(message=message, operation=operation, reason=reason, **kwargs)


# =============================================================================
# HELPERS
# =============================================================================

def error_response(error: HydroError) -> Dict[str, Any]:
    """Build an API error body from a HydroError."""
    return {
        "success": False,
        "error": error.to_dict(),
    }
