"""Psychro Exception Hierarchy.

This module provides the exception hierarchy for the psychrometric engine with
rich error context for debugging and for presentation layers that catch and
display failures.

Exception Hierarchy:
    PsychroException (base)
    ├── InputException
    │   ├── InvalidRange        (also a ValueError)
    │   ├── MissingArgument     (also a TypeError)
    │   └── InvalidInputPair    (also a ValueError)
    └── SolverException         (also an ArithmeticError)
        ├── ConvergenceFailure
        └── InvalidBracket

All exceptions include rich context:
- error_code: Unique error identifier
- operation: Name of the engine operation that raised the error
- context: Dictionary with error-specific details
- timestamp: When the error occurred

Every failure is raised at the point of detection. The engine never clamps,
retries, or recovers on its own.

Example:
    >>> from psychro.exceptions import InvalidRange
    >>> raise InvalidRange(
    ...     message="Relative humidity must be between 0 and 1",
    ...     operation="vapor_pressure_from_temp_rh",
    ...     value=1.5,
    ... )
"""

import json
import re
from datetime import datetime
from typing import Any, Dict, Optional


# ==============================================================================
# Base Exception
# ==============================================================================

class PsychroException(Exception):
    """Base exception for all psychrometric engine errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier (e.g., "PSY_INPUT_INVALID_RANGE")
        operation: Name of the operation that raised the error (optional)
        context: Dictionary with error-specific details
        timestamp: When the error occurred
    """

    ERROR_PREFIX = "PSY"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception with rich context.

        Args:
            message: Human-readable error message
            error_code: Unique error identifier (auto-generated if not provided)
            operation: Name of the operation that raised the error
            context: Dictionary with error-specific details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.operation = operation
        self.context = context or {}
        self.timestamp = datetime.now()

    def _generate_error_code(self) -> str:
        """Generate error code based on exception class.

        Returns:
            Error code like "PSY_SOLVER_CONVERGENCE_FAILURE"
        """
        error_type = re.sub(r'(?<!^)(?=[A-Z])', '_', self.__class__.__name__).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "operation": self.operation,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        """String representation with error code and message."""
        parts = [f"[{self.error_code}]"]
        if self.operation:
            parts.append(f"Operation: {self.operation}")
        parts.append(self.message)
        return " - ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"operation='{self.operation}')"
        )


# ==============================================================================
# Input Exceptions
# ==============================================================================

class InputException(PsychroException):
    """Base exception for bad arguments passed to an engine operation."""
    ERROR_PREFIX = "PSY_INPUT"


class InvalidRange(InputException, ValueError):
    """A fractional input (relative humidity) is outside its allowed range.

    Example:
        >>> raise InvalidRange(
        ...     message="RH value must be between 0-1",
        ...     operation="d_partial_pressure_dt",
        ...     value=-0.1,
        ...     allowed="[0, 1]",
        ... )
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        value: Optional[float] = None,
        allowed: Optional[str] = None,
    ):
        """Initialize range error.

        Args:
            message: Error message
            operation: Name of the operation
            context: Error context
            value: The rejected value
            allowed: Human-readable allowed interval
        """
        context = context or {}
        if value is not None:
            context["value"] = value
        if allowed:
            context["allowed"] = allowed
        super().__init__(message, operation=operation, context=context)


class MissingArgument(InputException, TypeError):
    """A conversion was called without one of its mandatory arguments.

    Total pressure in particular never defaults silently.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        missing: Optional[list] = None,
    ):
        """Initialize missing argument error.

        Args:
            message: Error message
            operation: Name of the operation
            context: Error context
            missing: Names of the arguments that were not supplied
        """
        context = context or {}
        if missing:
            context["missing"] = missing
        super().__init__(message, operation=operation, context=context)


class InvalidInputPair(InputException, ValueError):
    """The calculator was asked to resolve a state from an unsupported pair."""
    pass


# ==============================================================================
# Solver Exceptions
# ==============================================================================

class SolverException(PsychroException, ArithmeticError):
    """Base exception for numerical solver failures."""
    ERROR_PREFIX = "PSY_SOLVER"


class ConvergenceFailure(SolverException):
    """An iterative solver did not meet its tolerance.

    Raised when the iteration cap is exhausted, when a Newton step would
    divide by a (near) zero derivative, or when an iterate is not finite.

    Example:
        >>> raise ConvergenceFailure(
        ...     message="Bisection exceeded 500 iterations",
        ...     operation="saturation_temp_at_enthalpy",
        ...     iterations=500,
        ...     last_estimate=71.2,
        ...     last_residual=1.2e-4,
        ... )
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        iterations: Optional[int] = None,
        last_estimate: Optional[float] = None,
        last_residual: Optional[float] = None,
    ):
        """Initialize convergence failure.

        Args:
            message: Error message
            operation: Name of the operation
            context: Error context
            iterations: Iterations performed before giving up
            last_estimate: Final iterate
            last_residual: Residual at the final iterate
        """
        context = context or {}
        if iterations is not None:
            context["iterations"] = iterations
        if last_estimate is not None:
            context["last_estimate"] = last_estimate
        if last_residual is not None:
            context["last_residual"] = last_residual
        super().__init__(message, operation=operation, context=context)


class InvalidBracket(SolverException):
    """A bisection bracket does not enclose a sign change of the residual."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        bracket: Optional[tuple] = None,
        residuals: Optional[tuple] = None,
    ):
        """Initialize bracket error.

        Args:
            message: Error message
            operation: Name of the operation
            context: Error context
            bracket: (lo, hi) search interval
            residuals: Residual values at (lo, hi)
        """
        context = context or {}
        if bracket is not None:
            context["bracket"] = list(bracket)
        if residuals is not None:
            context["residuals"] = list(residuals)
        super().__init__(message, operation=operation, context=context)


# ==============================================================================
# Exception Utilities
# ==============================================================================

def format_exception_chain(exc: Exception) -> str:
    """Format exception chain for logging/display.

    Args:
        exc: Exception to format

    Returns:
        Formatted string with full exception chain
    """
    lines = []
    current = exc

    while current is not None:
        if isinstance(current, PsychroException):
            lines.append(str(current))
            lines.append(f"  Context: {current.context}")
        else:
            lines.append(f"{type(current).__name__}: {current}")
        current = getattr(current, "__cause__", None)

    return "\n".join(lines)


__all__ = [
    "PsychroException",
    "InputException",
    "InvalidRange",
    "MissingArgument",
    "InvalidInputPair",
    "SolverException",
    "ConvergenceFailure",
    "InvalidBracket",
    "format_exception_chain",
]
