from .logistics import (
    RouteInput,
    LogisticsInputs,
    ScenarioRequest,
    HealthResponse,
)

__all__ = [
    "RouteInput",
    "LogisticsInputs",
    "ScenarioRequest",
    "HealthResponse",
]
