"""
Semantic unit types for psychrometric quantities.

Each quantity is a float annotated with its unit and, where physics imposes
one, its valid range. Pydantic models enforce the constraints; plain engine
functions use the annotations as documentation of the unit convention.
"""

from typing import Annotated

from pydantic import Field

Temperature = Annotated[float, Field(description="Temperature in degrees Fahrenheit")]

Pressure = Annotated[float, Field(ge=0.0, description="Pressure in psia")]

HumidityRatio = Annotated[
    float,
    Field(ge=0.0, description="Humidity ratio in lb_water per lb_dry_air"),
]

RelativeHumidity = Annotated[
    float,
    Field(ge=0.0, le=1.0, description="Relative humidity as a fraction (0-1)"),
]

Enthalpy = Annotated[float, Field(description="Specific enthalpy in BTU per lb_dry_air")]

SpecificVolume = Annotated[
    float,
    Field(gt=0.0, description="Specific volume in ft3 per lb_dry_air"),
]

__all__ = [
    "Temperature",
    "Pressure",
    "HumidityRatio",
    "RelativeHumidity",
    "Enthalpy",
    "SpecificVolume",
]
