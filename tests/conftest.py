"""
Pytest Configuration and Fixtures

Shared fixtures for the route engine and explanation tests.
"""
import pytest
from typing import Optional

from medisense.config import Settings
from medisense.core.llm import GeminiResponse
from medisense.core.optimization import (
    PriorityInputs,
    PriorityTier,
    RiskInputs,
    Route,
)
from medisense.utils import ExternalServiceError


class FakeTextClient:
    """Stands in for GeminiClient; returns canned text or raises."""

    def __init__(self, text: str = "", available: bool = True, error: Optional[Exception] = None):
        self.text = text
        self.available = available
        self.error = error
        self.prompts = []

    @property
    def is_available(self) -> bool:
        return self.available

    async def generate_async(self, prompt: str, system_instruction: Optional[str] = None) -> GeminiResponse:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return GeminiResponse(text=self.text, model="fake-gemini", latency_ms=5.0)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with no credential and a fixed telemetry seed."""
    return Settings(gemini_api_key=None, telemetry_seed=7, log_level="WARNING")


@pytest.fixture
def example_risk() -> RiskInputs:
    """Inputs whose delay risk score is 0.266."""
    return RiskInputs(
        traffic_risk=0.5,
        weather_risk=0.1,
        historical_delay_rate=0.18,
        incident_density=0.1,
    )


@pytest.fixture
def example_priority() -> PriorityInputs:
    return PriorityInputs(emergency_level=0.9, time_sensitivity=0.8, critical_supply_factor=0.7)


@pytest.fixture
def alpha_route() -> Route:
    return Route(
        id="route-alpha",
        name="Medical Emergency Corridor (Alpha)",
        distance_label="8.2 km",
        base_time=12,
        risk_factor=0.1,
        priority_penalty=0,
        color_tag="#10b981",
        priority_tier=PriorityTier.CRITICAL,
    )


@pytest.fixture
def beta_route() -> Route:
    return Route(
        id="route-beta",
        name="Standard Urban Route (Beta)",
        distance_label="7.5 km",
        base_time=28,
        risk_factor=0.8,
        priority_penalty=15,
        color_tag="#f59e0b",
        priority_tier=PriorityTier.STANDARD,
    )


@pytest.fixture
def failing_client() -> FakeTextClient:
    return FakeTextClient(error=ExternalServiceError("connection reset", details={"reason": "network"}))


@pytest.fixture
def unconfigured_client() -> FakeTextClient:
    return FakeTextClient(available=False)


@pytest.fixture
def make_client():
    """Factory for fake text-generation clients."""
    return FakeTextClient
