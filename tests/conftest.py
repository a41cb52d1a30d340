# ABOUTME: Shared test fixtures for the SkyCast test suite.
# ABOUTME: Provides a pinned clock, seeded random sources, and a ready-made session.

import random
from datetime import datetime, timezone

import pydantic_ai.models
import pytest

from skycast.clock import FixedClock
from skycast.geocoding import Geocoder
from skycast.orchestrator import Orchestrator
from skycast.synthesizer import WeatherSynthesizer

# Prevent accidental LLM calls during testing
pydantic_ai.models.ALLOW_MODEL_REQUESTS = False

# 2025-03-12 14:20 UTC: mid-afternoon in London, no DST change within the next ten days there.
FIXED_NOW = datetime(2025, 3, 12, 14, 20, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(FIXED_NOW)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def geocoder(rng) -> Geocoder:
    return Geocoder(rng=rng, default_timezone="UTC")


@pytest.fixture
def synthesizer(rng, clock) -> WeatherSynthesizer:
    return WeatherSynthesizer(rng=rng, clock=clock, forecast_days=10)


@pytest.fixture
def session(geocoder, synthesizer, clock) -> Orchestrator:
    return Orchestrator(geocoder, synthesizer, clock=clock)
