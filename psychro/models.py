# -*- coding: utf-8 -*-
"""
Psychrometric Value Objects

Pydantic models for moist-air states and the calculator's outputs. All
models are immutable: a state is computed on demand from two independent
properties plus total pressure and is never updated in place.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from psychro.units import (
    Enthalpy,
    HumidityRatio,
    Pressure,
    RelativeHumidity,
    SpecificVolume,
    Temperature,
)


# =============================================================================
# ENUMERATIONS
# =============================================================================

class InputPair(str, Enum):
    """Independent property pairs the calculator can resolve a state from."""

    DRY_BULB_RELATIVE_HUMIDITY = "dry_bulb+relative_humidity"
    DRY_BULB_HUMIDITY_RATIO = "dry_bulb+humidity_ratio"
    DRY_BULB_WET_BULB = "dry_bulb+wet_bulb"
    DRY_BULB_DEW_POINT = "dry_bulb+dew_point"
    DRY_BULB_ENTHALPY = "dry_bulb+enthalpy"
    DRY_BULB_SPECIFIC_VOLUME = "dry_bulb+specific_volume"
    DRY_BULB_VAPOR_PRESSURE = "dry_bulb+vapor_pressure"
    SPECIFIC_VOLUME_RELATIVE_HUMIDITY = "specific_volume+relative_humidity"
    WET_BULB_RELATIVE_HUMIDITY = "wet_bulb+relative_humidity"
    VAPOR_PRESSURE_RELATIVE_HUMIDITY = "vapor_pressure+relative_humidity"
    ENTHALPY_HUMIDITY_RATIO = "enthalpy+humidity_ratio"


# =============================================================================
# STATE MODELS
# =============================================================================

class MoistAirState(BaseModel):
    """
    Complete thermodynamic state of an air/water-vapor mixture.

    Invariants:
        - relative_humidity lies in [0, 1]; supersaturated states are not
          modelled
        - wet_bulb and dew_point do not exceed dry_bulb
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dry_bulb: Temperature
    total_pressure: Pressure
    vapor_pressure: Pressure
    humidity_ratio: HumidityRatio
    relative_humidity: RelativeHumidity
    wet_bulb: Temperature
    dew_point: Optional[Temperature] = Field(
        default=None, description="Dew point (F); None for perfectly dry air"
    )
    enthalpy: Enthalpy
    specific_volume: SpecificVolume

    @model_validator(mode="after")
    def validate_temperatures(self) -> "MoistAirState":
        """Wet bulb and dew point cannot exceed the dry bulb."""
        # Solver tolerances allow a few thousandths of a degree of overshoot
        slack = 1e-3
        if self.wet_bulb > self.dry_bulb + slack:
            raise ValueError(
                f"Wet-bulb temperature ({self.wet_bulb}F) cannot exceed "
                f"dry-bulb temperature ({self.dry_bulb}F)"
            )
        if self.dew_point is not None and self.dew_point > self.dry_bulb + slack:
            raise ValueError(
                f"Dew point temperature ({self.dew_point}F) cannot exceed "
                f"dry-bulb temperature ({self.dry_bulb}F)"
            )
        return self


class ResolvedState(BaseModel):
    """A MoistAirState together with how it was obtained."""

    model_config = ConfigDict(frozen=True)

    state: MoistAirState
    input_pair: InputPair
    inputs: Dict[str, float] = Field(
        ..., description="Input property values keyed by property name"
    )
    provenance_hash: str = Field(
        ..., description="SHA-256 hash for audit trail"
    )
    processing_time_ms: float = Field(
        ..., ge=0.0, description="Processing time in milliseconds"
    )


class ChartLimits(BaseModel):
    """
    Engine-derived limits for a chart drawn at one total pressure.

    max_vapor_pressure is the vapor pressure at the configured maximum
    humidity ratio; cutoff_temp is where that vapor pressure meets the
    saturation curve.
    """

    model_config = ConfigDict(frozen=True)

    total_pressure: Pressure
    max_temp: Temperature
    max_humidity_ratio: HumidityRatio
    max_vapor_pressure: Pressure
    cutoff_temp: Temperature


__all__ = [
    "InputPair",
    "MoistAirState",
    "ResolvedState",
    "ChartLimits",
]
