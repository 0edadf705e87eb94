"""Tests for the PsychrometricCalculator facade.

Covers:
- State resolution from every supported property pair
- Reference properties at 75F / 50% RH
- Boundary states (dry air, saturation, supersaturation)
- Provenance hashing and configuration handling
- Module-level convenience functions
"""

import logging

import pytest
from pydantic import ValidationError

from psychro.calculator import PsychrometricCalculator, psychrometric_state, resolve_state
from psychro.config import PsychroConfig
from psychro.conversions import (
    humidity_ratio_from_vapor_pressure,
    vapor_pressure_from_humidity_ratio,
)
from psychro.correlation import saturation_pressure
from psychro.exceptions import InvalidInputPair, InvalidRange, PsychroException
from psychro.models import ChartLimits, InputPair, MoistAirState, ResolvedState


def _pair_values(state):
    """Input values for every supported pair, taken from one state."""
    return {
        InputPair.DRY_BULB_RELATIVE_HUMIDITY: (state.dry_bulb, state.relative_humidity),
        InputPair.DRY_BULB_HUMIDITY_RATIO: (state.dry_bulb, state.humidity_ratio),
        InputPair.DRY_BULB_WET_BULB: (state.dry_bulb, state.wet_bulb),
        InputPair.DRY_BULB_DEW_POINT: (state.dry_bulb, state.dew_point),
        InputPair.DRY_BULB_ENTHALPY: (state.dry_bulb, state.enthalpy),
        InputPair.DRY_BULB_SPECIFIC_VOLUME: (state.dry_bulb, state.specific_volume),
        InputPair.DRY_BULB_VAPOR_PRESSURE: (state.dry_bulb, state.vapor_pressure),
        InputPair.SPECIFIC_VOLUME_RELATIVE_HUMIDITY: (state.specific_volume, state.relative_humidity),
        InputPair.WET_BULB_RELATIVE_HUMIDITY: (state.wet_bulb, state.relative_humidity),
        InputPair.VAPOR_PRESSURE_RELATIVE_HUMIDITY: (state.vapor_pressure, state.relative_humidity),
        InputPair.ENTHALPY_HUMIDITY_RATIO: (state.enthalpy, state.humidity_ratio),
    }


# ==============================================================================
# Reference State
# ==============================================================================

class TestReferenceState:
    """Tests for the 75F / 50% RH state at sea level."""

    def test_is_moist_air_state(self, reference_state):
        """Resolution returns an immutable MoistAirState."""
        assert isinstance(reference_state, MoistAirState)

        with pytest.raises(ValidationError):
            reference_state.dry_bulb = 80.0

    def test_properties(self, reference_state, std_pressure):
        """Derived properties match psychrometric chart readings."""
        assert reference_state.total_pressure == std_pressure
        assert reference_state.relative_humidity == pytest.approx(0.5)
        assert reference_state.humidity_ratio == pytest.approx(0.00924, rel=1e-2)
        assert reference_state.wet_bulb == pytest.approx(62.6, abs=0.3)
        assert reference_state.dew_point == pytest.approx(55.1, abs=0.5)
        assert reference_state.enthalpy == pytest.approx(28.1, rel=1e-2)
        assert reference_state.specific_volume == pytest.approx(13.68, rel=2e-3)

    def test_temperature_ordering(self, reference_state):
        """Dew point <= wet bulb <= dry bulb."""
        assert reference_state.dew_point <= reference_state.wet_bulb <= reference_state.dry_bulb


# ==============================================================================
# Pair Resolution
# ==============================================================================

class TestResolveState:
    """Tests for PsychrometricCalculator.resolve_state."""

    @pytest.mark.parametrize("pair", list(InputPair))
    def test_every_pair_recovers_reference(self, calculator, reference_state, pair):
        """Each supported pair resolves the reference state back to itself."""
        values = _pair_values(reference_state)[pair]

        result = calculator.resolve_state(pair, values)

        assert isinstance(result, ResolvedState)
        assert result.input_pair == pair
        assert result.state.humidity_ratio == pytest.approx(
            reference_state.humidity_ratio, abs=2e-5
        )
        assert result.state.dry_bulb == pytest.approx(75.0, abs=0.05)

    def test_accepts_pair_string(self, calculator):
        """Pairs may be given by their string value."""
        result = calculator.resolve_state("dry_bulb+relative_humidity", (75.0, 0.5))

        assert result.input_pair is InputPair.DRY_BULB_RELATIVE_HUMIDITY

    def test_records_inputs(self, calculator, std_pressure):
        """Inputs are keyed by property name and include total pressure."""
        result = calculator.resolve_state(InputPair.WET_BULB_RELATIVE_HUMIDITY, (62.6, 0.5))

        assert result.inputs == {
            "wet_bulb": 62.6,
            "relative_humidity": 0.5,
            "total_pressure": std_pressure,
        }
        assert result.processing_time_ms >= 0

    def test_unknown_pair_raises(self, calculator):
        """Unsupported pairs raise InvalidInputPair."""
        with pytest.raises(InvalidInputPair) as exc_info:
            calculator.resolve_state("wet_bulb+dew_point", (60.0, 50.0))

        assert isinstance(exc_info.value, ValueError)
        assert "dry_bulb+relative_humidity" in exc_info.value.context["supported"]

    @pytest.mark.parametrize("values", [(75.0,), (75.0, 0.5, 0.1), ()])
    def test_wrong_value_count_raises(self, calculator, values):
        """A pair takes exactly two values."""
        with pytest.raises(InvalidInputPair) as exc_info:
            calculator.resolve_state(InputPair.DRY_BULB_RELATIVE_HUMIDITY, values)

        assert exc_info.value.operation == "resolve_state"
        assert exc_info.value.context["values"] == list(values)
        assert exc_info.value.context["input_pair"] == "dry_bulb+relative_humidity"

    def test_wet_bulb_above_dry_bulb_raises(self, calculator):
        """A wet bulb above the dry bulb is not a physical state."""
        with pytest.raises(InvalidRange):
            calculator.resolve_state(InputPair.DRY_BULB_WET_BULB, (70.0, 75.0))

    def test_dew_point_above_dry_bulb_raises(self, calculator):
        """A dew point above the dry bulb is not a physical state."""
        with pytest.raises(InvalidRange):
            calculator.resolve_state(InputPair.DRY_BULB_DEW_POINT, (70.0, 75.0))

    def test_negative_humidity_ratio_raises(self, calculator):
        """An enthalpy below that of dry air at T is outside the moist-air region."""
        with pytest.raises(InvalidRange) as exc_info:
            calculator.resolve_state(InputPair.DRY_BULB_ENTHALPY, (75.0, 5.0))

        assert "outside the moist-air region" in exc_info.value.message

    def test_rh_out_of_range_raises(self, calculator):
        """RH outside [0, 1] surfaces as InvalidRange."""
        with pytest.raises(InvalidRange):
            calculator.resolve_state(InputPair.DRY_BULB_RELATIVE_HUMIDITY, (75.0, 1.5))

    def test_custom_total_pressure(self, calculator):
        """Lower total pressure raises the humidity ratio at the same RH."""
        sea_level = calculator.resolve_state(InputPair.DRY_BULB_RELATIVE_HUMIDITY, (75.0, 0.5))
        altitude = calculator.resolve_state(
            InputPair.DRY_BULB_RELATIVE_HUMIDITY, (75.0, 0.5), total_pressure=12.0
        )

        assert altitude.state.total_pressure == 12.0
        assert altitude.state.humidity_ratio > sea_level.state.humidity_ratio


# ==============================================================================
# Boundary States
# ==============================================================================

class TestBoundaryStates:
    """Tests for dry, saturated and supersaturated inputs."""

    def test_dry_air_has_no_dew_point(self, calculator):
        """Perfectly dry air has zero RH and no dew point."""
        state = calculator.state_from_temp_humidity_ratio(75.0, 0.0)

        assert state.vapor_pressure == 0.0
        assert state.relative_humidity == 0.0
        assert state.dew_point is None
        assert state.wet_bulb < 75.0

    def test_saturated_air(self, calculator):
        """At 100% RH wet bulb and dew point equal the dry bulb."""
        state = calculator.resolve_state(InputPair.DRY_BULB_RELATIVE_HUMIDITY, (70.0, 1.0)).state

        assert state.relative_humidity == pytest.approx(1.0)
        assert state.wet_bulb == pytest.approx(70.0, abs=1e-3)
        assert state.dew_point == pytest.approx(70.0, abs=1e-3)

    def test_supersaturated_raises(self, calculator):
        """More water than saturation allows is rejected."""
        with pytest.raises(InvalidRange) as exc_info:
            calculator.state_from_temp_humidity_ratio(75.0, 0.05)

        assert isinstance(exc_info.value, PsychroException)
        assert "supersaturated" in exc_info.value.message

    def test_slightly_supersaturated_humidity_ratio_raises(self, calculator, std_pressure):
        """A humidity ratio just above saturation is rejected, not clamped."""
        w = humidity_ratio_from_vapor_pressure(1.0008 * saturation_pressure(70.0), std_pressure)

        with pytest.raises(InvalidRange):
            calculator.state_from_temp_humidity_ratio(70.0, w)

    def test_slightly_supersaturated_vapor_pressure_raises(self, calculator):
        """A vapor pressure just above Psat(T) is rejected, not clamped."""
        with pytest.raises(InvalidRange):
            calculator.resolve_state(
                InputPair.DRY_BULB_VAPOR_PRESSURE, (70.0, 1.0008 * saturation_pressure(70.0))
            )

    @pytest.mark.parametrize("pair,values", [
        (InputPair.DRY_BULB_VAPOR_PRESSURE, (70.0, saturation_pressure(70.0))),
        (InputPair.DRY_BULB_RELATIVE_HUMIDITY, (70.0, 1.0)),
        (InputPair.VAPOR_PRESSURE_RELATIVE_HUMIDITY, (saturation_pressure(70.0), 1.0)),
    ])
    def test_saturated_state_is_consistent(self, calculator, pair, values):
        """At saturation RH stays pv / Psat(T) and never exceeds 1."""
        state = calculator.resolve_state(pair, values).state

        assert state.relative_humidity <= 1.0
        assert state.relative_humidity == pytest.approx(
            state.vapor_pressure / saturation_pressure(state.dry_bulb)
        )
        assert state.vapor_pressure <= saturation_pressure(state.dry_bulb) * (1 + 1e-9)


class TestLowPressure:
    """Tests for total pressures where water boils below 200F."""

    @pytest.mark.parametrize("total_pressure", [10.5, 11.0])
    def test_wet_bulb_relative_humidity(self, total_pressure):
        """The wet-bulb + RH pair resolves with the configured low pressure."""
        calc = PsychrometricCalculator(PsychroConfig(default_total_pressure=total_pressure))

        state = calc.resolve_state(InputPair.WET_BULB_RELATIVE_HUMIDITY, (60.0, 0.95)).state

        assert state.total_pressure == total_pressure
        assert state.dry_bulb > 60.0
        assert state.wet_bulb == pytest.approx(60.0, abs=0.05)
        assert state.relative_humidity == pytest.approx(0.95, abs=1e-6)


# ==============================================================================
# Provenance
# ==============================================================================

class TestProvenance:
    """Tests for the SHA-256 audit hash."""

    def test_hash_is_deterministic(self, calculator):
        """Same inputs produce the same hash."""
        first = calculator.resolve_state(InputPair.DRY_BULB_WET_BULB, (80.0, 65.0))
        second = calculator.resolve_state(InputPair.DRY_BULB_WET_BULB, (80.0, 65.0))

        assert first.provenance_hash == second.provenance_hash
        assert len(first.provenance_hash) == 64

    def test_hash_tracks_inputs(self, calculator):
        """Different inputs produce different hashes."""
        first = calculator.resolve_state(InputPair.DRY_BULB_WET_BULB, (80.0, 65.0))
        second = calculator.resolve_state(InputPair.DRY_BULB_WET_BULB, (80.0, 66.0))

        assert first.provenance_hash != second.provenance_hash

    def test_provenance_can_be_disabled(self):
        """With provenance off the hash is empty."""
        calc = PsychrometricCalculator(PsychroConfig(enable_provenance=False))

        result = calc.resolve_state(InputPair.DRY_BULB_RELATIVE_HUMIDITY, (75.0, 0.5))

        assert result.provenance_hash == ""


# ==============================================================================
# Configuration and Chart Limits
# ==============================================================================

class TestCalculatorConfiguration:
    """Tests for configuration handling in the calculator."""

    def test_uses_process_config_by_default(self, config):
        """Without an explicit config the singleton is used."""
        assert PsychrometricCalculator().config is config

    def test_default_pressure_from_config(self):
        """Omitted total pressure comes from the configuration."""
        calc = PsychrometricCalculator(PsychroConfig(default_total_pressure=12.5))

        state = calc.state_from_temp_humidity_ratio(70.0, 0.008)

        assert state.total_pressure == 12.5

    def test_instance_config_leaves_logger_alone(self, config):
        """A per-instance config does not change the package log level."""
        package_logger = logging.getLogger("psychro")
        before = package_logger.level

        PsychrometricCalculator(PsychroConfig(log_level="ERROR"))

        assert package_logger.level == before
        assert logging.getLogger("psychro.calculator").level == logging.NOTSET

    def test_chart_limits(self, calculator, std_pressure):
        """Cutoff temperature is where the max vapor pressure saturates."""
        limits = calculator.chart_limits()

        assert isinstance(limits, ChartLimits)
        assert limits.max_temp == 100.0
        assert limits.max_humidity_ratio == 0.03
        assert limits.max_vapor_pressure == pytest.approx(
            vapor_pressure_from_humidity_ratio(0.03, std_pressure)
        )
        assert saturation_pressure(limits.cutoff_temp) == pytest.approx(
            limits.max_vapor_pressure, rel=1e-4
        )


# ==============================================================================
# Convenience Functions
# ==============================================================================

class TestConvenienceFunctions:
    """Tests for the module-level helpers."""

    def test_psychrometric_state(self, config):
        """psychrometric_state matches the calculator method."""
        state = psychrometric_state(80.0, 0.011, 14.696)

        assert state == PsychrometricCalculator(config).state_from_temp_humidity_ratio(
            80.0, 0.011, 14.696
        )

    def test_resolve_state(self, config):
        """resolve_state accepts pair strings."""
        result = resolve_state("dry_bulb+dew_point", (75.0, 55.0))

        assert result.state.dew_point == pytest.approx(55.0, abs=1e-3)
