"""
Services Package - collaborators the HTTP layer talks to
"""
from .telemetry import TelemetrySimulator, LogisticsStatus, FleetUnit, ROUTE_CATALOG
from .logistics import LogisticsService, RouteAnalysis

__all__ = [
    "TelemetrySimulator",
    "LogisticsStatus",
    "FleetUnit",
    "ROUTE_CATALOG",
    "LogisticsService",
    "RouteAnalysis",
]
