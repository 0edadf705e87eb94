"""
Psychro - Moist-Air Property Engine (Imperial Units)

Derives the full thermodynamic state of an air/water-vapor mixture from any
two independent properties plus total pressure, using the ASHRAE saturation
correlation, closed-form conversions and bounded iterative solvers.

Example:
    >>> from psychro import resolve_state
    >>> result = resolve_state("dry_bulb+relative_humidity", (75.0, 0.5))
    >>> print(f"{result.state.enthalpy:.2f} BTU/lb")
"""

from psychro.calculator import PsychrometricCalculator, psychrometric_state, resolve_state
from psychro.config import PsychroConfig, get_config, reset_config, set_config
from psychro.constants import ASHRAEConstants
from psychro.exceptions import (
    ConvergenceFailure,
    InputException,
    InvalidBracket,
    InvalidInputPair,
    InvalidRange,
    MissingArgument,
    PsychroException,
    SolverException,
)
from psychro.models import ChartLimits, InputPair, MoistAirState, ResolvedState

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Calculator
    "PsychrometricCalculator",
    "psychrometric_state",
    "resolve_state",
    # Configuration
    "PsychroConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Constants
    "ASHRAEConstants",
    # Models
    "InputPair",
    "MoistAirState",
    "ResolvedState",
    "ChartLimits",
    # Exceptions
    "PsychroException",
    "InputException",
    "InvalidRange",
    "MissingArgument",
    "InvalidInputPair",
    "SolverException",
    "ConvergenceFailure",
    "InvalidBracket",
]
