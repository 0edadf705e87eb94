"""
ASHRAE Psychrometric Constants (Imperial Units)

Physical and empirical constants used by the moist-air property engine.
Temperatures are in degrees Fahrenheit, pressures in psia, enthalpy in
BTU per lb of dry air and specific volume in ft3 per lb of dry air.

These values are physical constants, not configuration. Nothing in the
package mutates them.
"""


class ASHRAEConstants:
    """
    ASHRAE Handbook of Fundamentals constants for Imperial psychrometrics.

    Each value carries a one-line note on what it physically represents.
    """

    # Saturation pressure over liquid water, ln(Psat [psia]) vs T [R]
    # (ASHRAE Handbook Fundamentals, IP form of Equation 6)
    C8 = -1.0440397e4
    C9 = -1.129465e1
    C10 = -2.7022355e-2
    C11 = 1.289036e-5
    C12 = -2.4780681e-9
    C13 = 6.5459673

    # Fahrenheit to Rankine offset
    RANKINE_OFFSET = 459.67

    # Molecular weight ratio MW_water / MW_air = 18.01528 / 28.9647
    EPSILON = 0.621945

    # Gas constant for dry air, ft*lbf/(lb*R)
    R_DRY_AIR = 53.35

    # Square inches per square foot (psf to psi)
    IN2_PER_FT2 = 144.0

    # Enthalpy: specific heat of dry air, BTU/(lb*F)
    CP_DRY_AIR = 0.24

    # Enthalpy: latent heat of vaporization referenced to 0F, BTU/lb
    LATENT_HEAT_0F = 1061.0

    # Enthalpy: specific heat of water vapor, BTU/(lb*F)
    CP_WATER_VAPOR = 0.445

    # Wet-bulb relation: empirical latent heat term at the wet bulb, BTU/lb
    WB_LATENT = 1093.0

    # Wet-bulb relation: liquid-water correction on the latent term, BTU/(lb*F)
    WB_LIQUID = 0.556

    # Wet-bulb relation: vapor specific heat used in the denominator, BTU/(lb*F)
    WB_VAPOR = 0.444

    # Specific volume: R_DRY_AIR / IN2_PER_FT2, ft3*psia/(lb*R)
    R_DA_FT3_PSIA = 0.370486

    # Specific volume: 1 / EPSILON, moist-air expansion per unit humidity ratio
    INVERSE_EPSILON = 1.607858

    # Humidity ratios below this are treated as dry air
    DRY_AIR_THRESHOLD = 1e-6

    # Standard atmospheric pressure at sea level, psia
    STD_PRESSURE_PSIA = 14.696


__all__ = ["ASHRAEConstants"]
