"""
errors/ - Error taxonomy

Typed, synchronous failures raised by the hydrostatic and stability core.
None of them are retried: every one is a deterministic function of its input.
"""

from .taxonomy import (
    ErrorCategory,
    HydroError,
    NotFoundError,
    IncompleteGeometryError,
    InvalidArgumentError,
    NumericDomainError,
    OperationCancelledError,
    error_response,
)

__all__ = [
    "ErrorCategory",
    "HydroError",
    "NotFoundError",
    "IncompleteGeometryError",
    "InvalidArgumentError",
    "NumericDomainError",
    "OperationCancelledError",
    "error_response",
]
