from .scenario import (
    AlertLevel,
    SeverityTier,
    ScenarioPrediction,
    severity_tier,
    congestion_advisory,
    precipitation_advisory,
    predict_scenario,
)

__all__ = [
    "AlertLevel",
    "SeverityTier",
    "ScenarioPrediction",
    "severity_tier",
    "congestion_advisory",
    "precipitation_advisory",
    "predict_scenario",
]
