"""
State Derivation - Iterative Psychrometric Inversions

Routines for property pairs that cannot be inverted in closed form. Each
builds a residual (and, for Newton-Raphson, an analytic derivative) from the
saturation correlation and the closed-form conversions, then hands it to a
bounded solver from psychro.solvers.

Method summary:
- temp_from_rh_and_vapor_pressure: Newton, Psat(T) - pv/rh = 0
- temp_and_vapor_pressure_from_volume_rh: Newton, combined v/RH residual
- dry_bulb_from_wet_bulb_and_rh: bisection over [0, min(200, Tboil - 0.5)] F
- wet_bulb_from_temp_and_humidity_ratio: bisection over [0, T] F
- saturation_temp_at_enthalpy: bisection over [0, min(200, Tboil - 0.5)] F

All routines are pure: intermediates are local to each call.
"""

import logging
from typing import NamedTuple

from psychro.constants import ASHRAEConstants
from psychro.conversions import (
    humidity_ratio_from_enthalpy_temp,
    humidity_ratio_from_vapor_pressure,
    saturation_humidity_ratio,
    vapor_pressure_from_temp_rh,
    wet_bulb_humidity_ratio,
)
from psychro.correlation import d_partial_pressure_dt, saturation_pressure
from psychro.exceptions import InvalidRange
from psychro.solvers import DEFAULT_MAX_ITERATIONS, solve_bisection, solve_newton
from psychro.units import (
    Enthalpy,
    HumidityRatio,
    Pressure,
    RelativeHumidity,
    SpecificVolume,
    Temperature,
)

logger = logging.getLogger(__name__)

_C = ASHRAEConstants

# Newton starting point, F
INITIAL_TEMP_GUESS = 80.0

# Temperature search interval for bracketed solves, F
MIN_SEARCH_TEMP = 0.0
MAX_SEARCH_TEMP = 200.0

# Bracket upper ends stay this far below the boiling point at total pressure, F
BOILING_MARGIN = 0.5


class TempVaporPressure(NamedTuple):
    """Dry-bulb temperature (F) and vapor pressure (psia) of a solved state."""

    temperature: Temperature
    vapor_pressure: Pressure


def temp_from_rh_and_vapor_pressure(
    rh: RelativeHumidity,
    vapor_pressure: Pressure,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Temperature:
    """
    Dry-bulb temperature at which vapor pressure pv corresponds to rh.

    Solves Psat(T) - pv/rh = 0 by Newton-Raphson from 80F. The target has
    already been divided through by rh, so the derivative is that of Psat
    itself.

    Args:
        rh: Relative humidity, in (0, 1]
        vapor_pressure: Vapor pressure (psia)
        max_iterations: Iteration cap

    Returns:
        Dry-bulb temperature (F)

    Raises:
        InvalidRange: If rh is 0 or outside (0, 1]
        ConvergenceFailure: If Newton-Raphson does not converge
    """
    if not rh or rh < 0 or rh > 1:
        raise InvalidRange(
            "RH value must be between 0-1",
            operation="temp_from_rh_and_vapor_pressure",
            value=rh,
            allowed="(0, 1]",
        )
    goal_p_sat = vapor_pressure / rh

    def residual(temp: float) -> float:
        return saturation_pressure(temp) - goal_p_sat

    def derivative(temp: float) -> float:
        return d_partial_pressure_dt(1, temp)

    return solve_newton(
        residual,
        derivative,
        INITIAL_TEMP_GUESS,
        tolerance=1e-5,
        max_iterations=max_iterations,
        operation="temp_from_rh_and_vapor_pressure",
    )


def _max_search_temp(total_pressure: Pressure, max_iterations: int) -> Temperature:
    """Upper end of a temperature bracket at the given total pressure.

    Where Psat(T) reaches P the humidity ratio diverges and turns negative
    beyond, so brackets end just below the boiling point when it lies under
    MAX_SEARCH_TEMP.
    """
    if saturation_pressure(MAX_SEARCH_TEMP) < total_pressure:
        return MAX_SEARCH_TEMP
    boiling_point = solve_bisection(
        lambda temp: total_pressure - saturation_pressure(temp),
        MIN_SEARCH_TEMP,
        MAX_SEARCH_TEMP,
        tolerance=1e-6,
        max_iterations=max_iterations,
        operation="boiling_point",
    )
    return boiling_point - BOILING_MARGIN


def dew_point_from_vapor_pressure(
    vapor_pressure: Pressure,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Temperature:
    """Dew-point temperature: where pv equals the saturation pressure."""
    return temp_from_rh_and_vapor_pressure(1, vapor_pressure, max_iterations)


def temp_and_vapor_pressure_from_volume_rh(
    volume: SpecificVolume,
    rh: RelativeHumidity,
    total_pressure: Pressure,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> TempVaporPressure:
    """
    State on the intersection of a specific-volume line and an RH curve.

    The ideal-gas relation for the dry-air partial pressure gives
    pv = P - Rda*(T + 459.67)/(144*v); the 144 converts psf to psi. Newton
    solves rh*Psat(T) - pv(T) = 0 from 80F with the analytic derivative
    d(rh*Psat)/dT + Rda/(144*v).

    Returns:
        TempVaporPressure(temperature, vapor_pressure)

    Raises:
        InvalidRange: If rh is outside [0, 1]
        ConvergenceFailure: If Newton-Raphson does not converge
    """
    if rh < 0 or rh > 1:
        raise InvalidRange(
            "RH value must be between 0-1",
            operation="temp_and_vapor_pressure_from_volume_rh",
            value=rh,
            allowed="[0, 1]",
        )
    dry_air_slope = _C.R_DRY_AIR / (_C.IN2_PER_FT2 * volume)

    def residual(temp: float) -> float:
        vapor_on_rh_curve = rh * saturation_pressure(temp)
        vapor_on_volume_line = total_pressure - dry_air_slope * (temp + _C.RANKINE_OFFSET)
        return vapor_on_rh_curve - vapor_on_volume_line

    def derivative(temp: float) -> float:
        return d_partial_pressure_dt(rh, temp) + dry_air_slope

    temp = solve_newton(
        residual,
        derivative,
        INITIAL_TEMP_GUESS,
        max_iterations=max_iterations,
        operation="temp_and_vapor_pressure_from_volume_rh",
    )
    return TempVaporPressure(temp, vapor_pressure_from_temp_rh(temp, rh))


def dry_bulb_from_wet_bulb_and_rh(
    wet_bulb: Temperature,
    rh: RelativeHumidity,
    total_pressure: Pressure,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> TempVaporPressure:
    """
    Dry-bulb temperature consistent with a wet-bulb temperature and RH.

    Bisects T from 0F up to 200F, or to just below the boiling point at P
    when that is lower, on the difference between the humidity ratio implied
    by the wet bulb and the one implied by the RH. The first falls and the
    second rises with T, so the residual is decreasing.

    Returns:
        TempVaporPressure(temperature, vapor_pressure)

    Raises:
        InvalidRange: If rh is outside [0, 1]
        InvalidBracket: If no dry bulb in the bracket matches
        ConvergenceFailure: If the iteration cap is exceeded
    """
    if rh < 0 or rh > 1:
        raise InvalidRange(
            "RH expected to be between 0 and 1",
            operation="dry_bulb_from_wet_bulb_and_rh",
            value=rh,
            allowed="[0, 1]",
        )

    def residual(temp: float) -> float:
        w_from_wet_bulb = wet_bulb_humidity_ratio(wet_bulb, temp, total_pressure)
        w_from_rh = humidity_ratio_from_vapor_pressure(
            rh * saturation_pressure(temp), total_pressure
        )
        return w_from_wet_bulb - w_from_rh

    temp = solve_bisection(
        residual,
        MIN_SEARCH_TEMP,
        _max_search_temp(total_pressure, max_iterations),
        tolerance=1e-5,
        max_iterations=max_iterations,
        operation="dry_bulb_from_wet_bulb_and_rh",
    )
    return TempVaporPressure(temp, vapor_pressure_from_temp_rh(temp, rh))


def wet_bulb_from_temp_and_humidity_ratio(
    temp: Temperature,
    humidity_ratio: HumidityRatio,
    total_pressure: Pressure,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Temperature:
    """
    Wet-bulb temperature from dry-bulb temperature and humidity ratio.

    The ASHRAE wet-bulb relation cannot be solved for T_wb, so T_wb is
    bisected over [0, T]. The humidity ratio it predicts rises with T_wb,
    hence W - W(T_wb) is decreasing.

    Raises:
        InvalidBracket: If no wet bulb in [0, T] matches
        ConvergenceFailure: If the iteration cap is exceeded
    """

    def residual(wet_bulb: float) -> float:
        return humidity_ratio - wet_bulb_humidity_ratio(wet_bulb, temp, total_pressure)

    return solve_bisection(
        residual,
        MIN_SEARCH_TEMP,
        temp,
        tolerance=1e-6,
        max_iterations=max_iterations,
        operation="wet_bulb_from_temp_and_humidity_ratio",
    )


def saturation_temp_at_enthalpy(
    h: Enthalpy,
    total_pressure: Pressure,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Temperature:
    """
    Dry-bulb temperature where the enthalpy line h meets the saturation curve.

    Bisects from 0F up to 200F, or to just below the boiling point at P when
    that is lower. Along the enthalpy line the humidity ratio falls with T
    while the saturation humidity ratio rises, so W_h(T) - W_sat(T) is
    decreasing.

    Raises:
        InvalidBracket: If the crossing is outside the bracket
        ConvergenceFailure: If the iteration cap is exceeded
    """

    def residual(temp: float) -> float:
        return humidity_ratio_from_enthalpy_temp(h, temp) - saturation_humidity_ratio(
            temp, total_pressure
        )

    return solve_bisection(
        residual,
        MIN_SEARCH_TEMP,
        _max_search_temp(total_pressure, max_iterations),
        tolerance=5e-5,
        max_iterations=max_iterations,
        operation="saturation_temp_at_enthalpy",
    )


__all__ = [
    "TempVaporPressure",
    "temp_from_rh_and_vapor_pressure",
    "dew_point_from_vapor_pressure",
    "temp_and_vapor_pressure_from_volume_rh",
    "dry_bulb_from_wet_bulb_and_rh",
    "wet_bulb_from_temp_and_humidity_ratio",
    "saturation_temp_at_enthalpy",
]
