"""
Psychrometric Calculator - State Resolution Facade

Resolves a complete moist-air state from any supported pair of independent
properties plus total pressure. Every pair is first reduced to dry-bulb
temperature and humidity ratio, the canonical path from which all other
properties follow.

Each resolved state carries a SHA-256 provenance hash over the operation,
its inputs and its outputs, so the same inputs always reproduce the same
hash.

Example:
    >>> calc = PsychrometricCalculator()
    >>> result = calc.resolve_state(InputPair.DRY_BULB_RELATIVE_HUMIDITY, (75.0, 0.5))
    >>> print(f"Wet-bulb: {result.state.wet_bulb:.1f}F")
"""

import hashlib
import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Optional, Tuple, Union

from psychro.config import PsychroConfig, get_config
from psychro.conversions import (
    enthalpy,
    humidity_ratio_from_enthalpy_temp,
    humidity_ratio_from_specific_volume,
    humidity_ratio_from_vapor_pressure,
    saturation_humidity_ratio,
    specific_volume,
    temp_from_enthalpy_vapor_pressure,
    vapor_pressure_from_humidity_ratio,
    vapor_pressure_from_temp_rh,
    wet_bulb_humidity_ratio,
)
from psychro.correlation import saturation_pressure
from psychro.derivation import (
    dew_point_from_vapor_pressure,
    dry_bulb_from_wet_bulb_and_rh,
    temp_and_vapor_pressure_from_volume_rh,
    temp_from_rh_and_vapor_pressure,
    wet_bulb_from_temp_and_humidity_ratio,
)
from psychro.exceptions import InvalidInputPair, InvalidRange
from psychro.models import ChartLimits, InputPair, MoistAirState, ResolvedState

logger = logging.getLogger(__name__)

# Rounding allowed above saturation before a state counts as supersaturated
_SATURATION_SLACK = 1e-9

TempHumidityRatio = Tuple[float, float]


class PsychrometricCalculator:
    """
    Moist-air state calculator (Imperial units).

    Key Features:
    - Imperial unit system (F, psia, BTU/lb, ft3/lb)
    - Complete state from any supported property pair
    - Bounded iterative solvers with typed failures
    - SHA-256 provenance tracking

    Example:
        >>> calc = PsychrometricCalculator()
        >>> state = calc.state_from_temp_humidity_ratio(80.0, 0.0110)
        >>> print(f"Enthalpy: {state.enthalpy:.2f} BTU/lb")
    """

    def __init__(self, config: Optional[PsychroConfig] = None):
        """
        Initialize the calculator.

        Args:
            config: Calculator configuration (defaults to the process config)
        """
        self.config = config or get_config()
        self._resolvers: Dict[InputPair, Callable[[float, float, float], TempHumidityRatio]] = {
            InputPair.DRY_BULB_RELATIVE_HUMIDITY: self._from_dry_bulb_rh,
            InputPair.DRY_BULB_HUMIDITY_RATIO: self._from_dry_bulb_humidity_ratio,
            InputPair.DRY_BULB_WET_BULB: self._from_dry_bulb_wet_bulb,
            InputPair.DRY_BULB_DEW_POINT: self._from_dry_bulb_dew_point,
            InputPair.DRY_BULB_ENTHALPY: self._from_dry_bulb_enthalpy,
            InputPair.DRY_BULB_SPECIFIC_VOLUME: self._from_dry_bulb_specific_volume,
            InputPair.DRY_BULB_VAPOR_PRESSURE: self._from_dry_bulb_vapor_pressure,
            InputPair.SPECIFIC_VOLUME_RELATIVE_HUMIDITY: self._from_specific_volume_rh,
            InputPair.WET_BULB_RELATIVE_HUMIDITY: self._from_wet_bulb_rh,
            InputPair.VAPOR_PRESSURE_RELATIVE_HUMIDITY: self._from_vapor_pressure_rh,
            InputPair.ENTHALPY_HUMIDITY_RATIO: self._from_enthalpy_humidity_ratio,
        }
        logger.info(
            f"PsychrometricCalculator initialized with "
            f"pressure={self.config.default_total_pressure} psia, "
            f"max_iterations={self.config.max_iterations}"
        )

    def _total_pressure(self, total_pressure: Optional[float]) -> float:
        if total_pressure is None:
            return self.config.default_total_pressure
        return total_pressure

    def _apply_precision(self, value: float) -> Decimal:
        """Round a float to the configured number of decimal places."""
        if self.config.precision == 0:
            return Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        quantize_str = "0." + "0" * self.config.precision
        return Decimal(str(value)).quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)

    def _calculate_provenance(
        self,
        function_name: str,
        inputs: Dict[str, Any],
        outputs: Dict[str, Any],
    ) -> str:
        """
        Calculate SHA-256 hash for the audit trail.

        Outputs are rounded to the configured precision first so that the
        hash identifies the result rather than its last floating-point bits.
        """
        provenance_data = {
            "standard": "ASHRAE_Psychrometrics_IP",
            "function": function_name,
            "inputs": {k: str(v) for k, v in inputs.items()},
            "outputs": {
                k: str(self._apply_precision(v)) if isinstance(v, float) else str(v)
                for k, v in outputs.items()
            },
        }
        provenance_str = str(sorted(provenance_data.items()))
        return hashlib.sha256(provenance_str.encode()).hexdigest()

    # =========================================================================
    # CANONICAL PATH: DRY BULB + HUMIDITY RATIO
    # =========================================================================

    def state_from_temp_humidity_ratio(
        self,
        dry_bulb: float,
        humidity_ratio: float,
        total_pressure: Optional[float] = None,
    ) -> MoistAirState:
        """
        Calculate every property from dry-bulb temperature and humidity ratio.

        Args:
            dry_bulb: Dry-bulb temperature (F)
            humidity_ratio: Humidity ratio (lb/lb)
            total_pressure: Total pressure (psia), defaults to the configured one

        Returns:
            Immutable MoistAirState

        Raises:
            InvalidRange: If the humidity ratio is negative or the state is
                supersaturated
        """
        p = self._total_pressure(total_pressure)
        max_iterations = self.config.max_iterations

        if humidity_ratio < 0:
            raise InvalidRange(
                f"Humidity ratio {humidity_ratio} is negative; the state lies "
                f"outside the moist-air region",
                operation="state_from_temp_humidity_ratio",
                value=humidity_ratio,
                allowed="[0, W_sat]",
            )

        pv = vapor_pressure_from_humidity_ratio(humidity_ratio, p)
        rh = pv / saturation_pressure(dry_bulb)
        if rh > 1 + _SATURATION_SLACK:
            raise InvalidRange(
                f"State at {dry_bulb}F with W={humidity_ratio} is supersaturated "
                f"(RH={rh:.4f})",
                operation="state_from_temp_humidity_ratio",
                value=rh,
                allowed="[0, 1]",
            )

        if rh >= 1.0:
            # Saturated: wet bulb and dew point coincide with the dry bulb
            rh = 1.0
            pv = saturation_pressure(dry_bulb)
            humidity_ratio = saturation_humidity_ratio(dry_bulb, p)
            wet_bulb = dew_point = dry_bulb
        else:
            wet_bulb = wet_bulb_from_temp_and_humidity_ratio(
                dry_bulb, humidity_ratio, p, max_iterations
            )
            dew_point = dew_point_from_vapor_pressure(pv, max_iterations) if pv > 0 else None

        return MoistAirState(
            dry_bulb=dry_bulb,
            total_pressure=p,
            vapor_pressure=pv,
            humidity_ratio=humidity_ratio,
            relative_humidity=rh,
            wet_bulb=wet_bulb,
            dew_point=dew_point,
            enthalpy=enthalpy(dry_bulb, pv, p),
            specific_volume=specific_volume(dry_bulb, humidity_ratio, p),
        )

    # =========================================================================
    # PAIR REDUCTIONS TO (DRY BULB, HUMIDITY RATIO)
    # =========================================================================

    def _from_dry_bulb_rh(self, dry_bulb: float, rh: float, p: float) -> TempHumidityRatio:
        pv = vapor_pressure_from_temp_rh(dry_bulb, rh)
        return dry_bulb, humidity_ratio_from_vapor_pressure(pv, p)

    def _from_dry_bulb_humidity_ratio(self, dry_bulb: float, w: float, p: float) -> TempHumidityRatio:
        return dry_bulb, w

    def _from_dry_bulb_wet_bulb(self, dry_bulb: float, wet_bulb: float, p: float) -> TempHumidityRatio:
        if wet_bulb > dry_bulb:
            raise InvalidRange(
                f"Wet-bulb temperature ({wet_bulb}F) cannot exceed "
                f"dry-bulb temperature ({dry_bulb}F)",
                operation="resolve_state",
                value=wet_bulb,
                allowed=f"<= {dry_bulb}",
            )
        return dry_bulb, wet_bulb_humidity_ratio(wet_bulb, dry_bulb, p)

    def _from_dry_bulb_dew_point(self, dry_bulb: float, dew_point: float, p: float) -> TempHumidityRatio:
        if dew_point > dry_bulb:
            raise InvalidRange(
                f"Dew point temperature ({dew_point}F) cannot exceed "
                f"dry-bulb temperature ({dry_bulb}F)",
                operation="resolve_state",
                value=dew_point,
                allowed=f"<= {dry_bulb}",
            )
        return dry_bulb, humidity_ratio_from_vapor_pressure(saturation_pressure(dew_point), p)

    def _from_dry_bulb_enthalpy(self, dry_bulb: float, h: float, p: float) -> TempHumidityRatio:
        return dry_bulb, humidity_ratio_from_enthalpy_temp(h, dry_bulb)

    def _from_dry_bulb_specific_volume(self, dry_bulb: float, v: float, p: float) -> TempHumidityRatio:
        return dry_bulb, humidity_ratio_from_specific_volume(dry_bulb, v, p)

    def _from_dry_bulb_vapor_pressure(self, dry_bulb: float, pv: float, p: float) -> TempHumidityRatio:
        return dry_bulb, humidity_ratio_from_vapor_pressure(pv, p)

    def _from_specific_volume_rh(self, v: float, rh: float, p: float) -> TempHumidityRatio:
        solved = temp_and_vapor_pressure_from_volume_rh(v, rh, p, self.config.max_iterations)
        return solved.temperature, humidity_ratio_from_vapor_pressure(solved.vapor_pressure, p)

    def _from_wet_bulb_rh(self, wet_bulb: float, rh: float, p: float) -> TempHumidityRatio:
        solved = dry_bulb_from_wet_bulb_and_rh(wet_bulb, rh, p, self.config.max_iterations)
        return solved.temperature, humidity_ratio_from_vapor_pressure(solved.vapor_pressure, p)

    def _from_vapor_pressure_rh(self, pv: float, rh: float, p: float) -> TempHumidityRatio:
        dry_bulb = temp_from_rh_and_vapor_pressure(rh, pv, self.config.max_iterations)
        # Re-derive pv on the RH curve so Newton error cannot push it past Psat(T)
        return dry_bulb, humidity_ratio_from_vapor_pressure(
            vapor_pressure_from_temp_rh(dry_bulb, rh), p
        )

    def _from_enthalpy_humidity_ratio(self, h: float, w: float, p: float) -> TempHumidityRatio:
        pv = vapor_pressure_from_humidity_ratio(w, p)
        return temp_from_enthalpy_vapor_pressure(h, pv, p), w

    # =========================================================================
    # PUBLIC RESOLUTION API
    # =========================================================================

    def resolve_state(
        self,
        input_pair: Union[InputPair, str],
        values: Tuple[float, float],
        total_pressure: Optional[float] = None,
    ) -> ResolvedState:
        """
        Resolve a complete state from two independent properties.

        Args:
            input_pair: Which two properties ``values`` holds, in order
            values: The two property values (F, psia, lb/lb, BTU/lb, ft3/lb;
                relative humidity as a 0-1 fraction)
            total_pressure: Total pressure (psia), defaults to the configured one

        Returns:
            ResolvedState with the state and its provenance

        Raises:
            InvalidInputPair: If the pair is not supported
            InvalidRange: If a value is outside its physical range
            ConvergenceFailure: If an iterative inversion does not converge
            InvalidBracket: If no solution exists in the search interval

        Example:
            >>> calc = PsychrometricCalculator()
            >>> result = calc.resolve_state("wet_bulb+relative_humidity", (62.6, 0.5))
            >>> print(f"Dry-bulb: {result.state.dry_bulb:.1f}F")
        """
        start_time = datetime.now()

        try:
            pair = InputPair(input_pair)
        except ValueError as exc:
            raise InvalidInputPair(
                f"Unsupported input pair: {input_pair!r}",
                operation="resolve_state",
                context={"supported": [p.value for p in InputPair]},
            ) from exc

        p = self._total_pressure(total_pressure)
        values = tuple(values)
        if len(values) != 2:
            raise InvalidInputPair(
                f"Input pair {pair.value} takes exactly two values, got {len(values)}",
                operation="resolve_state",
                context={"input_pair": pair.value, "values": list(values)},
            )
        first, second = values
        dry_bulb, humidity_ratio = self._resolvers[pair](first, second, p)
        state = self.state_from_temp_humidity_ratio(dry_bulb, humidity_ratio, p)

        first_name, second_name = pair.value.split("+")
        inputs = {first_name: first, second_name: second, "total_pressure": p}

        provenance_hash = ""
        if self.config.enable_provenance:
            provenance_hash = self._calculate_provenance(
                "resolve_state", {"input_pair": pair.value, **inputs}, state.model_dump()
            )

        processing_time = (datetime.now() - start_time).total_seconds() * 1000
        logger.debug(
            f"Resolved {pair.value}={values} at {p} psia in {processing_time:.3f} ms"
        )

        return ResolvedState(
            state=state,
            input_pair=pair,
            inputs=inputs,
            provenance_hash=provenance_hash,
            processing_time_ms=processing_time,
        )

    def chart_limits(self, total_pressure: Optional[float] = None) -> ChartLimits:
        """
        Limits of a chart bounded by the configured max temp and humidity ratio.

        Returns:
            ChartLimits with the maximum vapor pressure and the temperature
            at which it meets the saturation curve
        """
        p = self._total_pressure(total_pressure)
        max_pv = vapor_pressure_from_humidity_ratio(self.config.max_humidity_ratio, p)
        return ChartLimits(
            total_pressure=p,
            max_temp=self.config.max_temp,
            max_humidity_ratio=self.config.max_humidity_ratio,
            max_vapor_pressure=max_pv,
            cutoff_temp=temp_from_rh_and_vapor_pressure(1, max_pv, self.config.max_iterations),
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def psychrometric_state(
    dry_bulb: float,
    humidity_ratio: float,
    total_pressure: Optional[float] = None,
) -> MoistAirState:
    """
    Calculate the complete state from dry-bulb temperature and humidity ratio.

    Convenience function that creates a calculator and performs the calculation.

    Example:
        >>> state = psychrometric_state(80.0, 0.011, 14.696)
        >>> print(f"RH: {state.relative_humidity:.2%}")
    """
    calc = PsychrometricCalculator()
    return calc.state_from_temp_humidity_ratio(dry_bulb, humidity_ratio, total_pressure)


def resolve_state(
    input_pair: Union[InputPair, str],
    values: Tuple[float, float],
    total_pressure: Optional[float] = None,
) -> ResolvedState:
    """
    Resolve a complete state from any supported property pair.

    Convenience function that creates a calculator and performs the calculation.
    """
    calc = PsychrometricCalculator()
    return calc.resolve_state(input_pair, values, total_pressure)


__all__ = [
    "PsychrometricCalculator",
    "psychrometric_state",
    "resolve_state",
]
