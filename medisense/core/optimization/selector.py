"""
Route Selector

Picks the route with the lowest objective value and estimates the minutes it
saves against a comparison route.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from medisense.utils import get_logger, NoCandidatesError
from .scoring import (
    Route,
    RiskInputs,
    ScoredRoute,
    compute_delay_risk,
    score_routes,
)

logger = get_logger(__name__)


class TimeSavedStrategy(str, Enum):
    """
    How the comparison route for time saved is chosen.

    FIRST_ALTERNATIVE – first route in list order with a different id
                        (what the dashboard has always shown)
    SECOND_BEST       – lowest objective value among the other routes,
                        independent of catalog order
    """
    FIRST_ALTERNATIVE = "first_alternative"
    SECOND_BEST = "second_best"


@dataclass
class RouteEvaluation:
    """Outcome of one scoring + selection pass."""
    delay_risk_score: float
    scored_routes: List[ScoredRoute]
    recommended: ScoredRoute
    time_saved: int
    comparison: Optional[ScoredRoute] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "delayRiskScore": self.delay_risk_score,
            "routes": [r.to_dict() for r in self.scored_routes],
            "recommendedRoute": self.recommended.to_dict(),
            "comparisonRoute": self.comparison.to_dict() if self.comparison else None,
            "timeSaved": self.time_saved,
        }


def _round_half_up(value: float) -> int:
    # Half-up, not banker's rounding: 2.5 -> 3
    return int(math.floor(value + 0.5))


def select_recommended(routes: Sequence[ScoredRoute]) -> ScoredRoute:
    """
    Return the route with the minimum objective value.

    Ties go to the route that appears first.

    Raises:
        NoCandidatesError: if routes is empty
    """
    if not routes:
        raise NoCandidatesError()
    # min() keeps the first of equal keys
    return min(routes, key=lambda r: r.objective_value)


def find_comparison_route(
    routes: Sequence[ScoredRoute],
    recommended: ScoredRoute,
    strategy: TimeSavedStrategy = TimeSavedStrategy.FIRST_ALTERNATIVE
) -> Optional[ScoredRoute]:
    """Pick the route the recommendation is measured against, if any."""
    others = [r for r in routes if r.id != recommended.id]
    if not others:
        return None
    if strategy == TimeSavedStrategy.SECOND_BEST:
        return select_recommended(others)
    return others[0]


def compute_time_saved(
    routes: Sequence[ScoredRoute],
    recommended: ScoredRoute,
    strategy: TimeSavedStrategy = TimeSavedStrategy.FIRST_ALTERNATIVE
) -> int:
    """Whole minutes saved versus the comparison route, never negative."""
    comparison = find_comparison_route(routes, recommended, strategy)
    if comparison is None:
        return 0
    return max(0, _round_half_up(comparison.estimated_time - recommended.estimated_time))


def evaluate_routes(
    risk: RiskInputs,
    routes: Sequence[Route],
    strategy: TimeSavedStrategy = TimeSavedStrategy.FIRST_ALTERNATIVE
) -> RouteEvaluation:
    """Score the catalog against the current risk and pick a route."""
    delay_risk_score = compute_delay_risk(risk)
    scored = score_routes(routes, delay_risk_score)
    recommended = select_recommended(scored)
    comparison = find_comparison_route(scored, recommended, strategy)
    time_saved = compute_time_saved(scored, recommended, strategy)

    logger.debug(
        f"Recommended {recommended.id} (objective={recommended.objective_value:.4f}) "
        f"from {len(scored)} routes, time saved {time_saved} min [{strategy.value}]"
    )

    return RouteEvaluation(
        delay_risk_score=delay_risk_score,
        scored_routes=scored,
        recommended=recommended,
        time_saved=time_saved,
        comparison=comparison,
    )
