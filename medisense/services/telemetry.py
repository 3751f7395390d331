"""
Mock Telemetry, Route Catalog and Fleet Roster

Stand-ins for live feeds. All randomness flows through one
numpy Generator so a fixed seed reproduces every draw.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from medisense.core.optimization import (
    PriorityInputs,
    PriorityTier,
    RiskInputs,
    Route,
    compute_delay_risk,
    compute_priority_score,
    round_for_display,
)
from medisense.utils import get_logger

logger = get_logger(__name__)

MODEL_VERSION = "2.2.0-HC-CORE"
MODEL_ACCURACY = "94.8%"
ON_TIME_RATE = "98.4%"
HISTORICAL_DELAY_RATE = 0.18

# ── Route catalog ────────────────────────────────────────────────────────
ROUTE_CATALOG: List[Route] = [
    Route(
        id="route-alpha",
        name="Medical Emergency Corridor (Alpha)",
        distance_label="8.2 km",
        base_time=12,
        risk_factor=0.1,
        priority_penalty=0,
        color_tag="#10b981",
        priority_tier=PriorityTier.CRITICAL,
    ),
    Route(
        id="route-gamma",
        name="Bypass Expressway (Gamma)",
        distance_label="12.4 km",
        base_time=15,
        risk_factor=0.05,
        priority_penalty=5,
        color_tag="#0ea5e9",
        priority_tier=PriorityTier.CRITICAL,
    ),
    Route(
        id="route-beta",
        name="Standard Urban Route (Beta)",
        distance_label="7.5 km",
        base_time=28,
        risk_factor=0.8,
        # standard corridors are penalised for medical cargo
        priority_penalty=15,
        color_tag="#f59e0b",
        priority_tier=PriorityTier.STANDARD,
    ),
    Route(
        id="route-delta",
        name="Residential Backroads (Delta)",
        distance_label="6.8 km",
        base_time=35,
        risk_factor=0.4,
        priority_penalty=20,
        color_tag="#64748b",
        priority_tier=PriorityTier.STANDARD,
    ),
]

UNIT_TYPES = ["Organ Transport", "Blood Supply", "Emergency Plasma", "Medicine Delivery"]
DISPATCH_DESTINATIONS = ["Central General", "St. Jude Medical", "City Hospital", "Trauma Center"]


@dataclass
class FleetUnit:
    id: str
    type: str
    destination: str
    status: str
    eta: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "destination": self.destination,
            "status": self.status,
            "eta": self.eta,
        }


def _initial_fleet() -> List[FleetUnit]:
    seed = [
        ("Organ Transport", "St. Jude Medical", "In Transit", 8),
        ("Blood Supply", "City General", "Loading", 15),
        ("Emergency Plasma", "Central Hospital", "In Transit", 4),
        ("Critical Equipment", "North Clinic", "In Transit", 12),
        ("Blood Supply", "East Medical Center", "Loading", 20),
        ("Organ Transport", "West Surgical", "In Transit", 6),
        ("Medicine Delivery", "Childrens Hospital", "In Transit", 10),
        ("Emergency Plasma", "Trauma Center", "Loading", 18),
        ("Blood Supply", "General Clinic", "In Transit", 5),
        ("Organ Transport", "Heart Institute", "In Transit", 9),
    ]
    return [
        FleetUnit(id=f"MED-{100 + i}", type=t, destination=d, status=s, eta=f"{eta} mins")
        for i, (t, d, s, eta) in enumerate(seed)
    ]


@dataclass
class LogisticsStatus:
    """One telemetry snapshot: raw inputs plus display fields."""
    risk: RiskInputs
    priority: PriorityInputs
    active_fleets: int
    model_version: str = MODEL_VERSION
    accuracy: str = MODEL_ACCURACY
    on_time_rate: str = ON_TIME_RATE

    @property
    def delay_risk_score(self) -> float:
        return compute_delay_risk(self.risk)

    @property
    def medical_priority_score(self) -> float:
        return compute_priority_score(self.priority)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trafficRisk": self.risk.traffic_risk,
            "weatherRisk": self.risk.weather_risk,
            "historicalDelayRate": self.risk.historical_delay_rate,
            "incidentDensity": self.risk.incident_density,
            "delayRiskScore": round_for_display(self.delay_risk_score),
            "emergencyLevel": self.priority.emergency_level,
            "timeSensitivity": self.priority.time_sensitivity,
            "criticalSupplyFactor": self.priority.critical_supply_factor,
            "medicalPriorityScore": round_for_display(self.medical_priority_score),
            "modelVersion": self.model_version,
            "accuracy": self.accuracy,
            "activeFleets": self.active_fleets,
            "onTimeRate": self.on_time_rate,
        }


@dataclass
class TelemetrySimulator:
    """
    Draws operating conditions and owns the in-memory fleet roster.

    The roster is shared by all requests; writes are last-write-wins.
    """
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    fleet: List[FleetUnit] = field(default_factory=_initial_fleet)
    routes: List[Route] = field(default_factory=lambda: list(ROUTE_CATALOG))

    @classmethod
    def seeded(cls, seed: Optional[int]) -> "TelemetrySimulator":
        return cls(rng=np.random.default_rng(seed))

    def _uniform(self, low: float, high: float) -> float:
        return float(self.rng.uniform(low, high))

    def sample_status(self) -> LogisticsStatus:
        risk = RiskInputs(
            traffic_risk=self._uniform(0.2, 0.7),
            weather_risk=self._uniform(0.05, 0.25),
            historical_delay_rate=HISTORICAL_DELAY_RATE,
            incident_density=self._uniform(0.0, 0.4),
        )
        priority = PriorityInputs(
            emergency_level=self._uniform(0.6, 1.0),
            time_sensitivity=self._uniform(0.7, 1.0),
            critical_supply_factor=self._uniform(0.5, 1.0),
        )
        return LogisticsStatus(risk=risk, priority=priority, active_fleets=len(self.fleet))

    def dispatch(self) -> FleetUnit:
        """Put a new unit on the road at the head of the roster."""
        unit = FleetUnit(
            id=f"MED-{100 + len(self.fleet)}",
            type=UNIT_TYPES[int(self.rng.integers(len(UNIT_TYPES)))],
            destination=DISPATCH_DESTINATIONS[int(self.rng.integers(len(DISPATCH_DESTINATIONS)))],
            status="In Transit",
            eta=f"{int(self.rng.integers(5, 25))} mins",
        )
        self.fleet = [unit, *self.fleet]
        logger.info(f"Dispatched {unit.id} ({unit.type}) to {unit.destination}")
        return unit
