"""
API request/response schemas.

Field names on the wire are camelCase to match the dashboard.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from medisense.core.optimization import PriorityInputs, PriorityTier, RiskInputs, Route


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class RouteInput(CamelModel):
    """Catalog entry supplied by the caller instead of the built-in catalog."""
    id: str
    name: str
    distance: str = ""
    base_time: float
    risk_factor: float
    priority_penalty: float = 0.0
    color: str = ""
    priority: PriorityTier = PriorityTier.STANDARD

    def to_route(self) -> Route:
        return Route(
            id=self.id,
            name=self.name,
            distance_label=self.distance,
            base_time=self.base_time,
            risk_factor=self.risk_factor,
            priority_penalty=self.priority_penalty,
            color_tag=self.color,
            priority_tier=self.priority,
        )


class LogisticsInputs(CamelModel):
    """
    Raw inputs for optimize/analyze.

    Values are not range-checked; scores are computed as given.
    """
    traffic_risk: float
    weather_risk: float
    historical_delay_rate: float
    incident_density: float
    emergency_level: float
    time_sensitivity: float
    critical_supply_factor: float

    # Passthrough display fields
    model_version: Optional[str] = None
    accuracy: str = "94.8%"
    active_fleets: Optional[int] = None
    on_time_rate: Optional[str] = None

    routes: Optional[List[RouteInput]] = Field(
        default=None, description="Override the built-in route catalog"
    )

    def risk_inputs(self) -> RiskInputs:
        return RiskInputs(
            traffic_risk=self.traffic_risk,
            weather_risk=self.weather_risk,
            historical_delay_rate=self.historical_delay_rate,
            incident_density=self.incident_density,
        )

    def priority_inputs(self) -> PriorityInputs:
        return PriorityInputs(
            emergency_level=self.emergency_level,
            time_sensitivity=self.time_sensitivity,
            critical_supply_factor=self.critical_supply_factor,
        )

    def route_overrides(self) -> Optional[List[Route]]:
        if self.routes is None:
            return None
        return [r.to_route() for r in self.routes]


class ScenarioRequest(CamelModel):
    precip_level: float = Field(ge=0, le=100)
    congestion_level: float = Field(ge=0, le=100)


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    uptime_seconds: float
    explanation_backend: str
    stats: Dict[str, int] = Field(default_factory=dict)
