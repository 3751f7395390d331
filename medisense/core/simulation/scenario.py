"""
Risk Scenario Simulator

What-if forecast behind the Risk Intelligence view: operators move
precipitation and congestion sliders (0-100) and get a delay outlook.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

PRECIPITATION_WEIGHT = 0.4
CONGESTION_WEIGHT = 0.6


class AlertLevel(str, Enum):
    CRITICAL = "Critical Alert"
    CAUTION = "Cautionary Warning"
    OPTIMAL = "Optimal Conditions"


class SeverityTier(str, Enum):
    """Colour band for a single 0-100 factor."""
    CRITICAL = "critical"
    ELEVATED = "elevated"
    NOMINAL = "nominal"


@dataclass
class ScenarioPrediction:
    precipitation_level: float
    congestion_level: float
    total_risk: float
    alert: AlertLevel
    message: str
    precipitation_tier: SeverityTier
    congestion_tier: SeverityTier
    congestion_advisory: str
    precipitation_advisory: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "precipLevel": self.precipitation_level,
            "congestionLevel": self.congestion_level,
            "totalRisk": round(self.total_risk, 2),
            "type": self.alert.value,
            "text": self.message,
            "precipTier": self.precipitation_tier.value,
            "congestionTier": self.congestion_tier.value,
            "congestionAdvisory": self.congestion_advisory,
            "precipAdvisory": self.precipitation_advisory,
        }


def severity_tier(level: float) -> SeverityTier:
    if level > 80:
        return SeverityTier.CRITICAL
    if level > 50:
        return SeverityTier.ELEVATED
    return SeverityTier.NOMINAL


def congestion_advisory(congestion_level: float) -> str:
    if congestion_level > 90:
        return "Critical gridlock in sector B"
    if congestion_level > 60:
        return "Urban corridor B at high capacity"
    return "Fluid traffic flow detected"


def precipitation_advisory(precipitation_level: float) -> str:
    if precipitation_level > 70:
        return "Severe impact on braking & visibility"
    if precipitation_level > 30:
        return "Moderate impact on braking distance"
    return "Minimal environmental impact"


def predict_scenario(precipitation_level: float, congestion_level: float) -> ScenarioPrediction:
    """Blend the two sliders and classify the expected delay impact."""
    total = precipitation_level * PRECIPITATION_WEIGHT + congestion_level * CONGESTION_WEIGHT

    if total > 75:
        alert = AlertLevel.CRITICAL
        # half-up, so 23.5 reads as 24
        increase = int(total / 4 + 0.5)
        message = (
            f"Extreme Risk: Predicted {increase}% increase in delay risk for organ transport "
            "units. Immediate intervention required."
        )
    elif total > 40:
        alert = AlertLevel.CAUTION
        message = (
            "Moderate Risk: System predicts potential 10-15% delays in urban corridors due to "
            "current environmental and traffic synergy."
        )
    else:
        alert = AlertLevel.OPTIMAL
        message = (
            "System integrity stable. No significant delay vectors detected for the next "
            "60-minute window."
        )

    return ScenarioPrediction(
        precipitation_level=precipitation_level,
        congestion_level=congestion_level,
        total_risk=total,
        alert=alert,
        message=message,
        precipitation_tier=severity_tier(precipitation_level),
        congestion_tier=severity_tier(congestion_level),
        congestion_advisory=congestion_advisory(congestion_level),
        precipitation_advisory=precipitation_advisory(precipitation_level),
    )
