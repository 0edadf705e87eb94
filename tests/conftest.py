# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

import os

import pytest

from psychro.calculator import PsychrometricCalculator
from psychro.config import PsychroConfig, reset_config, set_config
from psychro.constants import ASHRAEConstants
from psychro.models import InputPair


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Start every test from a clean configuration singleton and environment."""
    for name in list(os.environ):
        if name.startswith("PSYCHRO_"):
            monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def std_pressure():
    """Standard atmospheric pressure at sea level (psia)."""
    return ASHRAEConstants.STD_PRESSURE_PSIA


@pytest.fixture
def config():
    """Default configuration installed as the process singleton."""
    cfg = PsychroConfig()
    set_config(cfg)
    return cfg


@pytest.fixture
def calculator(config):
    """Calculator bound to the default configuration."""
    return PsychrometricCalculator(config)


@pytest.fixture
def reference_state(calculator):
    """Resolved 75F / 50% RH state at standard pressure."""
    return calculator.resolve_state(InputPair.DRY_BULB_RELATIVE_HUMIDITY, (75.0, 0.5)).state
