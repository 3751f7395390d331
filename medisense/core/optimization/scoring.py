"""
Risk & Score Calculator

Weighted composites for delay risk and medical priority, and the per-route
metrics the selector minimises. All functions are pure and accept values
outside [0, 1] unchanged; rounding happens only when values are displayed.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Iterable, List

# ── Weights ──────────────────────────────────────────────────────────────
# Each set sums to 1.0, so in-range inputs give an in-range score.
DELAY_RISK_WEIGHTS = {
    "traffic_risk": 0.4,
    "weather_risk": 0.3,
    "historical_delay_rate": 0.2,
    "incident_density": 0.1,
}

PRIORITY_WEIGHTS = {
    "emergency_level": 0.5,
    "time_sensitivity": 0.3,
    "critical_supply_factor": 0.2,
}

# Minutes of extra travel per unit of route delay risk
DELAY_MINUTES_PER_RISK = 10

DISPLAY_DECIMALS = 2


class PriorityTier(str, Enum):
    """Clinical tier a corridor is cleared for."""
    CRITICAL = "Critical"
    STANDARD = "Standard"


@dataclass(frozen=True)
class RiskInputs:
    """Raw delay-risk factors, conventionally in [0, 1]."""
    traffic_risk: float
    weather_risk: float
    historical_delay_rate: float
    incident_density: float


@dataclass(frozen=True)
class PriorityInputs:
    """Raw clinical-urgency factors, conventionally in [0, 1]."""
    emergency_level: float
    time_sensitivity: float
    critical_supply_factor: float


@dataclass(frozen=True)
class Route:
    """Catalog entry for one transport corridor."""
    id: str
    name: str
    distance_label: str
    base_time: float          # minutes
    risk_factor: float        # multiplier on the delay risk score
    priority_penalty: float
    color_tag: str
    priority_tier: PriorityTier

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Route":
        """Build a Route from the catalog wire shape."""
        return cls(
            id=data["id"],
            name=data["name"],
            distance_label=data.get("distance", ""),
            base_time=float(data["baseTime"]),
            risk_factor=float(data["riskFactor"]),
            priority_penalty=float(data.get("priorityPenalty", 0.0)),
            color_tag=data.get("color", ""),
            priority_tier=PriorityTier(data.get("priority", PriorityTier.STANDARD.value)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "distance": self.distance_label,
            "baseTime": self.base_time,
            "riskFactor": self.risk_factor,
            "priorityPenalty": self.priority_penalty,
            "color": self.color_tag,
            "priority": self.priority_tier.value,
        }


@dataclass(frozen=True)
class ScoredRoute(Route):
    """A Route evaluated against one delay risk score."""
    delay_risk: float = 0.0
    objective_value: float = 0.0
    estimated_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "delayRisk": self.delay_risk,
            "objectiveValue": self.objective_value,
            "estimatedTime": self.estimated_time,
        })
        return data


def compute_delay_risk(inputs: RiskInputs) -> float:
    """Delay Risk Score: weighted sum of traffic, weather, history and incidents."""
    return sum(getattr(inputs, name) * weight for name, weight in DELAY_RISK_WEIGHTS.items())


def compute_priority_score(inputs: PriorityInputs) -> float:
    """Medical Priority Score: weighted sum of emergency, time and supply factors."""
    return sum(getattr(inputs, name) * weight for name, weight in PRIORITY_WEIGHTS.items())


def score_route(route: Route, delay_risk_score: float) -> ScoredRoute:
    """Attach delay risk, objective value and estimated time to a route."""
    delay_risk = delay_risk_score * route.risk_factor
    base = {f.name: getattr(route, f.name) for f in fields(Route)}
    return ScoredRoute(
        **base,
        delay_risk=delay_risk,
        objective_value=delay_risk + route.base_time + route.priority_penalty,
        estimated_time=route.base_time + delay_risk * DELAY_MINUTES_PER_RISK,
    )


def score_routes(routes: Iterable[Route], delay_risk_score: float) -> List[ScoredRoute]:
    """Score every route, keeping catalog order."""
    return [score_route(route, delay_risk_score) for route in routes]


def round_for_display(value: float, decimals: int = DISPLAY_DECIMALS) -> float:
    """Round a score for presentation only."""
    return round(value, decimals)
