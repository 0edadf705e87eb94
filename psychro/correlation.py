"""
Saturation Vapor Pressure Correlation

The single empirical curve the rest of the engine depends on:

    ln(Psat) = C8/Tr + C9 + C10*Tr + C11*Tr^2 + C12*Tr^3 + C13*ln(Tr)

with Tr = T + 459.67 (Rankine) and Psat in psia. Valid over the
engineering range used here (roughly 0-200F), where it is strictly
increasing in T. Every inversion that brackets on temperature relies on
that monotonicity.
"""

import math

from psychro.constants import ASHRAEConstants
from psychro.exceptions import InvalidRange
from psychro.units import Pressure, RelativeHumidity, Temperature

_C = ASHRAEConstants


def saturation_pressure(temp: Temperature) -> Pressure:
    """
    Saturation vapor pressure of water at dry-bulb temperature.

    No input validation is performed.

    Args:
        temp: Dry-bulb temperature (F)

    Returns:
        Saturation pressure (psia)

    Example:
        >>> p_sat = saturation_pressure(77.0)
        >>> print(f"P_sat = {p_sat:.4f} psia")
    """
    t = temp + _C.RANKINE_OFFSET
    ln_p_sat = (
        _C.C8 / t
        + _C.C9
        + _C.C10 * t
        + _C.C11 * t ** 2
        + _C.C12 * t ** 3
        + _C.C13 * math.log(t)
    )
    return math.exp(ln_p_sat)


def d_partial_pressure_dt(rh: RelativeHumidity, temp: Temperature) -> float:
    """
    Derivative of vapor pressure with respect to temperature at fixed RH.

    Differentiates the correlation term by term:

        d(rh * Psat)/dT = rh * Psat(T) * (-C8/Tr^2 + C10 + 2*C11*Tr
                                          + 3*C12*Tr^2 + C13/Tr)

    Args:
        rh: Relative humidity (0-1)
        temp: Dry-bulb temperature (F)

    Returns:
        Slope in psia per F

    Raises:
        InvalidRange: If rh is outside [0, 1]
    """
    if rh < 0 or rh > 1:
        raise InvalidRange(
            "rh should be specified 0-1",
            operation="d_partial_pressure_dt",
            value=rh,
            allowed="[0, 1]",
        )
    t = temp + _C.RANKINE_OFFSET
    d_ln_p_sat = (
        -_C.C8 / (t * t)
        + _C.C10
        + 2 * _C.C11 * t
        + 3 * _C.C12 * t * t
        + _C.C13 / t
    )
    return rh * saturation_pressure(temp) * d_ln_p_sat


__all__ = ["saturation_pressure", "d_partial_pressure_dt"]
