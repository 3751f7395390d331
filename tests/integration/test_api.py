"""
Integration Tests for the FastAPI Backend

Telemetry, optimization, analysis and risk simulation endpoints.
Uses async httpx for ASGI app testing.
"""
import pytest
import httpx
from pydantic import ValidationError

from medisense.config import Settings
from medisense.core.llm import ExplanationGenerator
from medisense.core.optimization import TimeSavedStrategy
from medisense.main import build_service, create_app
from medisense.services import LogisticsService, TelemetrySimulator


EXAMPLE_INPUTS = {
    "trafficRisk": 0.5,
    "weatherRisk": 0.1,
    "historicalDelayRate": 0.18,
    "incidentDensity": 0.1,
    "emergencyLevel": 0.9,
    "timeSensitivity": 0.8,
    "criticalSupplyFactor": 0.7,
    "modelVersion": "2.2.0-HC-CORE",
    "accuracy": "94.8%",
    "activeFleets": 10,
    "onTimeRate": "98.4%",
}


@pytest.fixture
def app(test_settings):
    return create_app(settings=test_settings)


@pytest.fixture
async def async_client(app):
    """Create async test client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.mark.asyncio
class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_root_endpoint(self, async_client):
        response = await async_client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    async def test_health_reports_rule_based_backend(self, async_client):
        response = await async_client.get("/health")
        assert response.status_code == 200
        assert response.json()["explanation_backend"] == "rule-based"


@pytest.mark.asyncio
class TestLogisticsEndpoints:
    """Tests for telemetry, catalog and fleet endpoints."""

    async def test_status(self, async_client):
        response = await async_client.get("/api/logistics/status")
        assert response.status_code == 200

        data = response.json()
        for key in EXAMPLE_INPUTS:
            assert key in data
        assert data["historicalDelayRate"] == 0.18
        assert data["delayRiskScore"] == round(data["delayRiskScore"], 2)

    async def test_routes(self, async_client):
        response = await async_client.get("/api/logistics/routes")
        assert response.status_code == 200

        routes = response.json()
        assert len(routes) == 4
        assert routes[0] == {
            "id": "route-alpha",
            "name": "Medical Emergency Corridor (Alpha)",
            "distance": "8.2 km",
            "baseTime": 12,
            "riskFactor": 0.1,
            "priorityPenalty": 0,
            "color": "#10b981",
            "priority": "Critical",
        }

    async def test_dispatch_grows_fleet(self, async_client):
        before = (await async_client.get("/api/logistics/fleet")).json()

        response = await async_client.post("/api/logistics/dispatch")
        assert response.status_code == 200
        unit = response.json()

        after = (await async_client.get("/api/logistics/fleet")).json()
        assert len(after) == len(before) + 1
        assert after[0]["id"] == unit["id"]

        status = (await async_client.get("/api/logistics/status")).json()
        assert status["activeFleets"] == len(after)


@pytest.mark.asyncio
class TestOptimizationEndpoints:
    """Tests for optimize and analyze."""

    async def test_optimize_worked_example(self, async_client):
        response = await async_client.post("/api/logistics/optimize", json=EXAMPLE_INPUTS)
        assert response.status_code == 200

        data = response.json()
        assert data["delayRiskScore"] == pytest.approx(0.266)
        assert data["recommendedRoute"]["id"] == "route-alpha"
        assert data["recommendedRoute"]["objectiveValue"] == pytest.approx(12.0266)
        assert data["timeSaved"] == 3
        assert data["medicalPriorityScore"] == pytest.approx(0.83)

    async def test_optimize_with_route_override(self, async_client):
        payload = dict(EXAMPLE_INPUTS, routes=[
            {"id": "route-beta", "name": "Beta", "baseTime": 28, "riskFactor": 0.8, "priorityPenalty": 15},
            {"id": "route-alpha", "name": "Alpha", "baseTime": 12, "riskFactor": 0.1, "priority": "Critical"},
        ])
        data = (await async_client.post("/api/logistics/optimize", json=payload)).json()

        assert data["recommendedRoute"]["id"] == "route-alpha"
        assert data["comparisonRoute"]["id"] == "route-beta"
        assert data["timeSaved"] == 18

    async def test_optimize_empty_routes_is_400(self, async_client):
        payload = dict(EXAMPLE_INPUTS, routes=[])
        response = await async_client.post("/api/logistics/optimize", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_INPUT"

    async def test_optimize_missing_field_is_422(self, async_client):
        payload = {k: v for k, v in EXAMPLE_INPUTS.items() if k != "trafficRisk"}
        response = await async_client.post("/api/logistics/optimize", json=payload)
        assert response.status_code == 422

    async def test_analyze_without_credential(self, async_client):
        response = await async_client.post("/api/logistics/analyze", json=EXAMPLE_INPUTS)
        assert response.status_code == 200

        data = response.json()
        assert data["delayRiskScore"] == 0.27
        assert data["timeSaved"] == 3
        assert data["explanation"]["path"] == "fallback"
        assert data["explanation"]["fallback_reason"] == "configuration_absent"

        markdown = data["explanation"]["markdown"]
        assert "### Recommended Route\n**Medical Emergency Corridor (Alpha)**" in markdown
        assert "### Estimated Time Saved\n**3 minutes**" in markdown
        assert "stable" in markdown
        assert "Life-Critical" in markdown
        assert "### Model Confidence Score\n**94.8%**" in markdown

    async def test_analyze_masks_external_failure(self, test_settings, failing_client):
        service = build_service(test_settings, gemini_client=failing_client)
        app = create_app(settings=test_settings, service=service)

        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test"
        ) as client:
            response = await client.post("/api/logistics/analyze", json=EXAMPLE_INPUTS)

        assert response.status_code == 200
        explanation = response.json()["explanation"]
        assert explanation["path"] == "fallback"
        assert explanation["fallback_reason"] == "external_failure"

    async def test_analyze_external_path(self, test_settings, make_client):
        service = LogisticsService(
            telemetry=TelemetrySimulator.seeded(1),
            explainer=ExplanationGenerator(make_client(text="### Recommended Route\n**Alpha**")),
        )
        app = create_app(settings=test_settings, service=service)

        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test"
        ) as client:
            response = await client.post("/api/logistics/analyze", json=EXAMPLE_INPUTS)
            health = (await client.get("/health")).json()

        explanation = response.json()["explanation"]
        assert explanation["path"] == "external"
        assert explanation["markdown"] == "### Recommended Route\n**Alpha**"
        assert health["explanation_backend"] == "gemini"
        assert health["stats"]["external_reports"] == 1


@pytest.mark.asyncio
class TestRiskSimulation:
    """Tests for the what-if endpoint."""

    async def test_simulate(self, async_client):
        response = await async_client.post(
            "/api/risk/simulate", json={"precipLevel": 45, "congestionLevel": 78}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "Cautionary Warning"
        assert data["precipAdvisory"] == "Moderate impact on braking distance"

    async def test_simulate_rejects_out_of_range(self, async_client):
        response = await async_client.post(
            "/api/risk/simulate", json={"precipLevel": 140, "congestionLevel": 78}
        )
        assert response.status_code == 422


@pytest.mark.asyncio
class TestAPIDocumentation:
    """Tests for API documentation availability."""

    async def test_docs_endpoint(self, async_client):
        response = await async_client.get("/docs")
        assert response.status_code == 200


class TestServiceWiring:
    """Tests for building the service from settings."""

    def test_default_strategy(self, test_settings):
        service = build_service(test_settings)
        assert service.strategy == TimeSavedStrategy.FIRST_ALTERNATIVE

    def test_strategy_from_settings(self):
        settings = Settings(gemini_api_key=None, time_saved_strategy="second_best", log_level="WARNING")
        service = build_service(settings)
        assert service.strategy == TimeSavedStrategy.SECOND_BEST

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValidationError):
            Settings(time_saved_strategy="fastest")
