"""
Bounded Numerical Root Finders

Two generic primitives used by the state-derivation routines:

- Newton-Raphson: x <- x - f(x)/f'(x) until |f(x)| < tolerance
- Bisection: halve a bracket [lo, hi] until |f(mid)| < tolerance

Every loop is capped. A solver either converges or raises a typed
ConvergenceFailure; it never spins indefinitely and never divides by a
vanishing derivative.

Bisection sign convention: the residual must be decreasing over the
bracket, so f(lo) >= 0 >= f(hi). When f(mid) > 0 the midpoint becomes the
new lower bound, otherwise it becomes the new upper bound. Callers orient
their residual accordingly.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from psychro.exceptions import ConvergenceFailure, InvalidBracket

logger = logging.getLogger(__name__)

Residual = Callable[[float], float]

DEFAULT_NEWTON_TOLERANCE = 1e-4
DEFAULT_MAX_ITERATIONS = 500

# Newton steps with |f'(x)| below this are rejected
MIN_DERIVATIVE = 1e-12


@dataclass(frozen=True)
class SolverRequest:
    """A single root-finding problem, created per call and then discarded.

    Attributes:
        residual: Function whose root is sought
        tolerance: Convergence threshold on |residual|
        max_iterations: Iteration cap
        derivative: Derivative of residual (Newton only)
        initial_guess: Starting point (Newton only)
        bracket: (lo, hi) search interval (bisection only)
        operation: Name of the calling operation, used in logs and errors
    """

    residual: Residual
    tolerance: float
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    derivative: Optional[Residual] = None
    initial_guess: Optional[float] = None
    bracket: Optional[Tuple[float, float]] = None
    operation: str = "solve"


@dataclass(frozen=True)
class SolverResult:
    """Outcome of a converged solve."""

    root: float
    iterations: int
    residual: float


def run_newton(request: SolverRequest) -> SolverResult:
    """
    Newton-Raphson iteration for a SolverRequest.

    Args:
        request: Request carrying residual, derivative and initial guess

    Returns:
        SolverResult at the first iterate with |residual| < tolerance

    Raises:
        ConvergenceFailure: If the cap is exceeded, the derivative vanishes,
            or an iterate is not finite
    """
    if request.derivative is None or request.initial_guess is None:
        raise ValueError("Newton-Raphson requires a derivative and an initial guess")

    x = request.initial_guess
    for iteration in range(request.max_iterations + 1):
        value = request.residual(x)
        if not math.isfinite(value):
            raise ConvergenceFailure(
                f"Newton-Raphson residual is not finite at x={x}",
                operation=request.operation,
                iterations=iteration,
                last_estimate=x,
            )
        if abs(value) < request.tolerance:
            logger.debug(
                "%s: Newton-Raphson converged to %.6f in %d iterations",
                request.operation, x, iteration,
            )
            return SolverResult(root=x, iterations=iteration, residual=value)
        if iteration == request.max_iterations:
            break

        slope = request.derivative(x)
        if not math.isfinite(slope) or abs(slope) < MIN_DERIVATIVE:
            raise ConvergenceFailure(
                f"Newton-Raphson derivative vanished at x={x} (f'={slope})",
                operation=request.operation,
                iterations=iteration,
                last_estimate=x,
                last_residual=value,
            )
        x = x - value / slope

    logger.warning(
        "%s: Newton-Raphson exceeded %d iterations (x=%s, residual=%s)",
        request.operation, request.max_iterations, x, value,
    )
    raise ConvergenceFailure(
        f"Newton-Raphson did not converge within {request.max_iterations} iterations",
        operation=request.operation,
        iterations=request.max_iterations,
        last_estimate=x,
        last_residual=value,
    )


def run_bisection(request: SolverRequest) -> SolverResult:
    """
    Bisection iteration for a SolverRequest.

    Args:
        request: Request carrying residual and (lo, hi) bracket

    Returns:
        SolverResult at the first midpoint with |residual| < tolerance

    Raises:
        InvalidBracket: If the residual does not go from >= 0 at lo to
            <= 0 at hi
        ConvergenceFailure: If the cap is exceeded
    """
    if request.bracket is None:
        raise ValueError("Bisection requires a (lo, hi) bracket")

    lo, hi = request.bracket
    f_lo = request.residual(lo)
    f_hi = request.residual(hi)
    # An endpoint already within tolerance is the root (e.g. saturated air)
    for endpoint, value in ((lo, f_lo), (hi, f_hi)):
        if abs(value) < request.tolerance:
            return SolverResult(root=endpoint, iterations=0, residual=value)
    if f_lo * f_hi > 0:
        raise InvalidBracket(
            f"Residual has the same sign at both ends of [{lo}, {hi}]",
            operation=request.operation,
            bracket=(lo, hi),
            residuals=(f_lo, f_hi),
        )
    if f_lo < 0 or f_hi > 0:
        raise InvalidBracket(
            f"Residual must decrease over [{lo}, {hi}] (got {f_lo} -> {f_hi})",
            operation=request.operation,
            bracket=(lo, hi),
            residuals=(f_lo, f_hi),
        )

    mid = (lo + hi) / 2
    value = f_lo
    for iteration in range(1, request.max_iterations + 1):
        mid = (lo + hi) / 2
        value = request.residual(mid)
        if abs(value) < request.tolerance:
            logger.debug(
                "%s: bisection converged to %.6f in %d iterations",
                request.operation, mid, iteration,
            )
            return SolverResult(root=mid, iterations=iteration, residual=value)
        if value > 0:
            lo = mid
        else:
            hi = mid

    logger.warning(
        "%s: bisection exceeded %d iterations (x=%s, residual=%s)",
        request.operation, request.max_iterations, mid, value,
    )
    raise ConvergenceFailure(
        f"Bisection did not converge within {request.max_iterations} iterations",
        operation=request.operation,
        iterations=request.max_iterations,
        last_estimate=mid,
        last_residual=value,
    )


def solve_newton(
    residual: Residual,
    derivative: Residual,
    x0: float,
    tolerance: float = DEFAULT_NEWTON_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    operation: str = "solve_newton",
) -> float:
    """
    Find x with |residual(x)| < tolerance by Newton-Raphson from x0.

    The caller supplies an initial guess close enough for the iteration
    to converge.

    Example:
        >>> root = solve_newton(lambda x: x * x - 2, lambda x: 2 * x, 1.0, 1e-10)
    """
    request = SolverRequest(
        residual=residual,
        derivative=derivative,
        initial_guess=x0,
        tolerance=tolerance,
        max_iterations=max_iterations,
        operation=operation,
    )
    return run_newton(request).root


def solve_bisection(
    residual: Residual,
    lo: float,
    hi: float,
    tolerance: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    operation: str = "solve_bisection",
) -> float:
    """
    Find x in [lo, hi] with |residual(x)| < tolerance by bisection.

    The residual must be decreasing over the bracket.
    """
    request = SolverRequest(
        residual=residual,
        bracket=(lo, hi),
        tolerance=tolerance,
        max_iterations=max_iterations,
        operation=operation,
    )
    return run_bisection(request).root


__all__ = [
    "SolverRequest",
    "SolverResult",
    "run_newton",
    "run_bisection",
    "solve_newton",
    "solve_bisection",
    "DEFAULT_NEWTON_TOLERANCE",
    "DEFAULT_MAX_ITERATIONS",
]
