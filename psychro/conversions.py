"""
Closed-Form Psychrometric Conversions (Imperial Units)

Non-iterative formulas relating vapor pressure, humidity ratio, relative
humidity, enthalpy, specific volume and wet-bulb temperature at a given
total pressure.

KEY FORMULAS IMPLEMENTED:
- Humidity ratio: W = 0.621945 * P_w / (P - P_w)
- Enthalpy: h = 0.24 * T + W * (1061 + 0.445 * T)
- Specific volume: v = 0.370486 * (T + 459.67) * (1 + 1.607858 * W) / P
- Wet bulb (ASHRAE approximation):
      W = ((1093 - 0.556*T_wb) * W_s* - 0.24*(T - T_wb)) / (1093 + 0.444*T - T_wb)

Functions that take total pressure check for it explicitly: omitting it is
an error, never an implicit default.
"""

from typing import Any, Optional, Union

from psychro.constants import ASHRAEConstants
from psychro.correlation import saturation_pressure
from psychro.exceptions import InvalidRange, MissingArgument
from psychro.units import (
    Enthalpy,
    HumidityRatio,
    Pressure,
    RelativeHumidity,
    SpecificVolume,
    Temperature,
)

_C = ASHRAEConstants


def _require(operation: str, **arguments: Any) -> None:
    """Raise MissingArgument naming every argument that was not supplied."""
    missing = [name for name, value in arguments.items() if value is None]
    if missing:
        supplied = "; ".join(f"{name}: {value}" for name, value in arguments.items())
        raise MissingArgument(
            f"Not all parameters specified. {supplied}",
            operation=operation,
            missing=missing,
        )


def _check_rh(operation: str, rh: float) -> None:
    if rh < 0 or rh > 1:
        raise InvalidRange(
            "RH value must be between 0-1",
            operation=operation,
            value=rh,
            allowed="[0, 1]",
        )


# =============================================================================
# HUMIDITY RATIO <-> VAPOR PRESSURE
# =============================================================================

def saturation_humidity_ratio(
    temp: Optional[Temperature] = None,
    total_pressure: Optional[Pressure] = None,
) -> HumidityRatio:
    """
    Humidity ratio of saturated air at a dry-bulb temperature.

    Args:
        temp: Dry-bulb temperature (F), mandatory
        total_pressure: Total pressure (psia), mandatory

    Returns:
        Saturation humidity ratio (lb/lb)

    Raises:
        MissingArgument: If either argument is absent
    """
    _require("saturation_humidity_ratio", temp=temp, total_pressure=total_pressure)
    p_sat = saturation_pressure(temp)
    return _C.EPSILON * p_sat / (total_pressure - p_sat)


def humidity_ratio_from_vapor_pressure(
    vapor_pressure: Optional[Pressure] = None,
    total_pressure: Optional[Pressure] = None,
) -> HumidityRatio:
    """
    Humidity ratio from the partial pressure of water vapor.

    Args:
        vapor_pressure: Vapor pressure (psia), mandatory
        total_pressure: Total pressure (psia), mandatory

    Returns:
        Humidity ratio (lb/lb)

    Raises:
        MissingArgument: If either argument is absent
    """
    _require(
        "humidity_ratio_from_vapor_pressure",
        vapor_pressure=vapor_pressure,
        total_pressure=total_pressure,
    )
    return _C.EPSILON * vapor_pressure / (total_pressure - vapor_pressure)


def vapor_pressure_from_humidity_ratio(
    humidity_ratio: Union[HumidityRatio, str],
    total_pressure: Pressure,
) -> Pressure:
    """
    Vapor pressure from humidity ratio.

    Humidity ratios below 1e-6 are treated as dry air and return exactly 0,
    which keeps the 0.621945 / W term from blowing up. Numeric strings are
    accepted, as chart inputs often arrive as text.

    Args:
        humidity_ratio: Humidity ratio (lb/lb)
        total_pressure: Total pressure (psia)

    Returns:
        Vapor pressure (psia)
    """
    if isinstance(humidity_ratio, str):
        humidity_ratio = float(humidity_ratio)
    if humidity_ratio < _C.DRY_AIR_THRESHOLD:
        return 0.0
    return total_pressure / (1 + _C.EPSILON / humidity_ratio)


# =============================================================================
# RELATIVE HUMIDITY
# =============================================================================

def vapor_pressure_from_temp_rh(temp: Temperature, rh: RelativeHumidity) -> Pressure:
    """
    Partial pressure of vapor from dry-bulb temperature and relative humidity.

    Raises:
        InvalidRange: If rh is outside [0, 1]
    """
    _check_rh("vapor_pressure_from_temp_rh", rh)
    return rh * saturation_pressure(temp)


def relative_humidity_from_vapor_pressure(
    temp: Temperature,
    vapor_pressure: Pressure,
) -> RelativeHumidity:
    """Relative humidity (0-1) of air at temp holding the given vapor pressure."""
    return vapor_pressure / saturation_pressure(temp)


# =============================================================================
# ENTHALPY
# =============================================================================

def enthalpy(temp: Temperature, vapor_pressure: Pressure, total_pressure: Pressure) -> Enthalpy:
    """
    Specific enthalpy of moist air.

    Formula:
        h = 0.24 * T + W * (1061 + 0.445 * T)

    Args:
        temp: Dry-bulb temperature (F)
        vapor_pressure: Vapor pressure (psia)
        total_pressure: Total pressure (psia)

    Returns:
        Enthalpy (BTU/lb dry air)
    """
    w = humidity_ratio_from_vapor_pressure(vapor_pressure, total_pressure)
    return _C.CP_DRY_AIR * temp + w * (_C.LATENT_HEAT_0F + _C.CP_WATER_VAPOR * temp)


def humidity_ratio_from_enthalpy_temp(h: Enthalpy, temp: Temperature) -> HumidityRatio:
    """Humidity ratio on the constant-enthalpy line h at dry-bulb temp."""
    return (h - _C.CP_DRY_AIR * temp) / (_C.LATENT_HEAT_0F + _C.CP_WATER_VAPOR * temp)


def vapor_pressure_from_enthalpy_temp(
    h: Enthalpy,
    temp: Temperature,
    total_pressure: Pressure,
) -> Pressure:
    """Vapor pressure on the constant-enthalpy line h at dry-bulb temp."""
    return vapor_pressure_from_humidity_ratio(
        humidity_ratio_from_enthalpy_temp(h, temp), total_pressure
    )


def temp_from_enthalpy_vapor_pressure(
    h: Enthalpy,
    vapor_pressure: Pressure,
    total_pressure: Pressure,
) -> Temperature:
    """Dry-bulb temperature where the enthalpy line h crosses vapor pressure pv."""
    w = humidity_ratio_from_vapor_pressure(vapor_pressure, total_pressure)
    return (h - w * _C.LATENT_HEAT_0F) / (_C.CP_DRY_AIR + w * _C.CP_WATER_VAPOR)


# =============================================================================
# SPECIFIC VOLUME
# =============================================================================

def specific_volume(
    temp: Temperature,
    humidity_ratio: HumidityRatio,
    total_pressure: Pressure,
) -> SpecificVolume:
    """
    Specific volume of moist air per lb of dry air.

    Formula:
        v = 0.370486 * (T + 459.67) * (1 + 1.607858 * W) / P
    """
    return (
        _C.R_DA_FT3_PSIA
        * (temp + _C.RANKINE_OFFSET)
        * (1 + _C.INVERSE_EPSILON * humidity_ratio)
        / total_pressure
    )


def temp_from_specific_volume(
    volume: SpecificVolume,
    humidity_ratio: HumidityRatio,
    total_pressure: Pressure,
) -> Temperature:
    """Dry-bulb temperature at which air of humidity ratio W has volume v."""
    return (
        volume * total_pressure
        / (_C.R_DA_FT3_PSIA * (1 + _C.INVERSE_EPSILON * humidity_ratio))
        - _C.RANKINE_OFFSET
    )


def humidity_ratio_from_specific_volume(
    temp: Temperature,
    volume: SpecificVolume,
    total_pressure: Pressure,
) -> HumidityRatio:
    """Humidity ratio at which air at dry-bulb temp has volume v."""
    numerator = (total_pressure * volume) / (_C.R_DA_FT3_PSIA * (temp + _C.RANKINE_OFFSET)) - 1
    return numerator / _C.INVERSE_EPSILON


# =============================================================================
# WET BULB
# =============================================================================

def wet_bulb_humidity_ratio(
    wet_bulb: Temperature,
    temp: Temperature,
    total_pressure: Pressure,
) -> HumidityRatio:
    """
    Humidity ratio from wet-bulb and dry-bulb temperatures.

    ASHRAE approximate psychrometric equation:
        W = ((1093 - 0.556*T_wb) * W_s* - 0.24*(T - T_wb)) /
            (1093 + 0.444*T - T_wb)

    where W_s* is the saturation humidity ratio at the wet bulb.
    """
    w_sat_wet_bulb = saturation_humidity_ratio(wet_bulb, total_pressure)
    numerator = (
        (_C.WB_LATENT - _C.WB_LIQUID * wet_bulb) * w_sat_wet_bulb
        - _C.CP_DRY_AIR * (temp - wet_bulb)
    )
    denominator = _C.WB_LATENT + _C.WB_VAPOR * temp - wet_bulb
    return numerator / denominator


def temp_from_wet_bulb_humidity_ratio(
    wet_bulb: Temperature,
    humidity_ratio: HumidityRatio,
    total_pressure: Pressure,
) -> Temperature:
    """
    Dry-bulb temperature from wet-bulb temperature and humidity ratio.

    The wet-bulb relation is linear in T, so this direction solves in
    closed form:
        T = ((1093 - 0.556*T_wb) * W_s* + 0.24*T_wb - W*(1093 - T_wb)) /
            (0.444*W + 0.24)
    """
    w_sat_wet_bulb = saturation_humidity_ratio(wet_bulb, total_pressure)
    numerator = (
        (_C.WB_LATENT - _C.WB_LIQUID * wet_bulb) * w_sat_wet_bulb
        + _C.CP_DRY_AIR * wet_bulb
        - humidity_ratio * (_C.WB_LATENT - wet_bulb)
    )
    return numerator / (_C.WB_VAPOR * humidity_ratio + _C.CP_DRY_AIR)


__all__ = [
    "saturation_humidity_ratio",
    "humidity_ratio_from_vapor_pressure",
    "vapor_pressure_from_humidity_ratio",
    "vapor_pressure_from_temp_rh",
    "relative_humidity_from_vapor_pressure",
    "enthalpy",
    "humidity_ratio_from_enthalpy_temp",
    "vapor_pressure_from_enthalpy_temp",
    "temp_from_enthalpy_vapor_pressure",
    "specific_volume",
    "temp_from_specific_volume",
    "humidity_ratio_from_specific_volume",
    "wet_bulb_humidity_ratio",
    "temp_from_wet_bulb_humidity_ratio",
]
