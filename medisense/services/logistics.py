"""
Logistics Service

Single entry point the API uses: telemetry snapshots, route evaluation and
explanation generation, wired together from injected collaborators.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from medisense.core.llm import ExplanationContext, ExplanationGenerator, ExplanationReport
from medisense.core.optimization import (
    PriorityInputs,
    RiskInputs,
    Route,
    RouteEvaluation,
    TimeSavedStrategy,
    compute_priority_score,
    evaluate_routes,
    round_for_display,
)
from medisense.services.telemetry import FleetUnit, LogisticsStatus, TelemetrySimulator
from medisense.utils import get_logger

logger = get_logger(__name__)


@dataclass
class RouteAnalysis:
    """Evaluation of the catalog plus its explanation."""
    evaluation: RouteEvaluation
    medical_priority_score: float
    report: ExplanationReport

    def to_dict(self) -> Dict[str, Any]:
        return {
            "delayRiskScore": round_for_display(self.evaluation.delay_risk_score),
            "medicalPriorityScore": round_for_display(self.medical_priority_score),
            "recommendedRoute": self.evaluation.recommended.to_dict(),
            "timeSaved": self.evaluation.time_saved,
            "explanation": self.report.to_dict(),
        }


class LogisticsService:
    """Stateless apart from the telemetry simulator's fleet roster."""

    def __init__(
        self,
        telemetry: TelemetrySimulator,
        explainer: ExplanationGenerator,
        strategy: TimeSavedStrategy = TimeSavedStrategy.FIRST_ALTERNATIVE
    ):
        self.telemetry = telemetry
        self.explainer = explainer
        self.strategy = strategy

    def get_status(self) -> LogisticsStatus:
        return self.telemetry.sample_status()

    def list_routes(self) -> List[Route]:
        return list(self.telemetry.routes)

    def list_fleet(self) -> List[FleetUnit]:
        return list(self.telemetry.fleet)

    def dispatch(self) -> FleetUnit:
        return self.telemetry.dispatch()

    def optimize(
        self,
        risk: RiskInputs,
        routes: Optional[Sequence[Route]] = None
    ) -> RouteEvaluation:
        """
        Score routes (the catalog by default) and pick one.

        Raises:
            NoCandidatesError: if there are no routes to choose from
        """
        candidates = self.list_routes() if routes is None else list(routes)
        return evaluate_routes(risk, candidates, self.strategy)

    async def analyze(
        self,
        risk: RiskInputs,
        priority: PriorityInputs,
        accuracy: str,
        routes: Optional[Sequence[Route]] = None
    ) -> RouteAnalysis:
        """Full pipeline: score, select, explain."""
        evaluation = self.optimize(risk, routes)
        context = ExplanationContext.from_evaluation(risk, priority, evaluation, accuracy)
        report = await self.explainer.explain(context)

        logger.info(
            f"Analysis complete: {evaluation.recommended.id}, "
            f"{evaluation.time_saved} min saved, report via {report.path.value}"
        )
        return RouteAnalysis(
            evaluation=evaluation,
            medical_priority_score=compute_priority_score(priority),
            report=report,
        )
