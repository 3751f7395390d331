"""
Route Optimization

Usage:
    from medisense.core.optimization import evaluate_routes

    evaluation = evaluate_routes(risk_inputs, catalog)
    evaluation.recommended.name, evaluation.time_saved
"""
from .scoring import (
    PriorityTier,
    RiskInputs,
    PriorityInputs,
    Route,
    ScoredRoute,
    compute_delay_risk,
    compute_priority_score,
    score_route,
    score_routes,
    round_for_display,
)
from .selector import (
    TimeSavedStrategy,
    RouteEvaluation,
    select_recommended,
    find_comparison_route,
    compute_time_saved,
    evaluate_routes,
)

__all__ = [
    "PriorityTier",
    "RiskInputs",
    "PriorityInputs",
    "Route",
    "ScoredRoute",
    "compute_delay_risk",
    "compute_priority_score",
    "score_route",
    "score_routes",
    "round_for_display",
    "TimeSavedStrategy",
    "RouteEvaluation",
    "select_recommended",
    "find_comparison_route",
    "compute_time_saved",
    "evaluate_routes",
]
