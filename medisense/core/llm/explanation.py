"""
Route Explanation Generator

Turns computed scores and the selected route into a four-section markdown
report. The LLM is NON-DECISIONAL: it explains a route that has already
been chosen and never alters scores or the selection.

Paths:
    EXTERNAL  – Gemini writes the risk explanation, returned verbatim
    FALLBACK  – deterministic template, used when no credential is
                configured or the external call fails
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
from enum import Enum
from datetime import datetime

from medisense.core.optimization import (
    RiskInputs,
    PriorityInputs,
    RouteEvaluation,
    compute_priority_score,
)
from medisense.utils import get_logger, ExternalServiceError

logger = get_logger(__name__)

REPORT_SECTIONS = (
    "Recommended Route",
    "Estimated Time Saved",
    "Operational Risk Explanation",
    "Model Confidence Score",
)

# Fallback thresholds (strict greater-than, checked top-down)
CRITICAL_DELAY_RISK = 0.7
MODERATE_DELAY_RISK = 0.4
LIFE_CRITICAL_PRIORITY = 0.8
ADVERSE_WEATHER_RISK = 0.5


class ExplanationPath(str, Enum):
    """Which branch produced a report."""
    EXTERNAL = "external"
    FALLBACK = "fallback"


class FallbackReason(str, Enum):
    """Why the deterministic branch was taken."""
    CONFIGURATION_ABSENT = "configuration_absent"
    EXTERNAL_FAILURE = "external_failure"


@dataclass
class ExplanationContext:
    """Everything the report may mention, already computed."""
    risk: RiskInputs
    priority: PriorityInputs
    delay_risk_score: float
    medical_priority_score: float
    recommended_route_name: str
    time_saved: int
    accuracy: str

    @classmethod
    def from_evaluation(
        cls,
        risk: RiskInputs,
        priority: PriorityInputs,
        evaluation: RouteEvaluation,
        accuracy: str
    ) -> "ExplanationContext":
        return cls(
            risk=risk,
            priority=priority,
            delay_risk_score=evaluation.delay_risk_score,
            medical_priority_score=compute_priority_score(priority),
            recommended_route_name=evaluation.recommended.name,
            time_saved=evaluation.time_saved,
            accuracy=accuracy,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExplanationContext":
        """Build from the dashboard's merged camelCase payload."""
        return cls(
            risk=RiskInputs(
                traffic_risk=data["trafficRisk"],
                weather_risk=data["weatherRisk"],
                historical_delay_rate=data["historicalDelayRate"],
                incident_density=data["incidentDensity"],
            ),
            priority=PriorityInputs(
                emergency_level=data["emergencyLevel"],
                time_sensitivity=data["timeSensitivity"],
                critical_supply_factor=data["criticalSupplyFactor"],
            ),
            delay_risk_score=data["delayRiskScore"],
            medical_priority_score=data["medicalPriorityScore"],
            recommended_route_name=data["recommendedRoute"]["name"],
            time_saved=int(data["timeSaved"]),
            accuracy=str(data["accuracy"]),
        )


@dataclass
class ExplanationReport:
    """Markdown report plus how it was produced."""
    markdown: str
    path: ExplanationPath
    fallback_reason: Optional[FallbackReason] = None
    model: str = "rule-based"
    latency_ms: float = 0.0
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_fallback(self) -> bool:
        return self.path == ExplanationPath.FALLBACK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "markdown": self.markdown,
            "path": self.path.value,
            "fallback_reason": self.fallback_reason.value if self.fallback_reason else None,
            "model": self.model,
            "latency_ms": round(self.latency_ms, 2),
            "generated_at": self.generated_at.isoformat(),
        }


class ExplanationGenerator:
    """
    Produces route explanations from an injected text-generation client.

    The client needs an ``is_available`` property and an async
    ``generate_async(prompt, system_instruction)`` returning an object with
    a ``text`` attribute (see GeminiClient). Any exception from the client,
    or a blank ``text``, yields the deterministic report.
    """

    SYSTEM_INSTRUCTION = """You are a healthcare logistics intelligence assistant explaining a transport route that has ALREADY been selected.

CONSTRAINTS:
1. Explain operational impact in clear, clinical language.
2. Prioritize medical urgency over cost or distance.
3. Avoid speculative or emotional statements.
4. Do NOT change the recommended route, the scores or the time saved.
"""

    def __init__(self, client):
        self.client = client
        self._external_count = 0
        self._fallback_count = 0

    async def explain(self, context: ExplanationContext) -> ExplanationReport:
        """
        Generate the report for one evaluation.

        Never raises for generation problems; the worst case is the
        deterministic report.
        """
        if not self.client.is_available:
            return self._fallback(context, FallbackReason.CONFIGURATION_ABSENT)

        prompt = self.build_prompt(context)
        try:
            response = await self.client.generate_async(prompt, self.SYSTEM_INSTRUCTION)
        except ExternalServiceError as e:
            logger.warning(f"External explanation failed, using rule-based report: {e.message}")
            return self._fallback(context, FallbackReason.EXTERNAL_FAILURE)
        except Exception as e:
            logger.warning(
                f"External explanation raised {type(e).__name__}, using rule-based report: {e}"
            )
            return self._fallback(context, FallbackReason.EXTERNAL_FAILURE)

        text = getattr(response, "text", None)
        if not isinstance(text, str) or not text.strip():
            logger.warning("External explanation returned no text, using rule-based report")
            return self._fallback(context, FallbackReason.EXTERNAL_FAILURE)

        self._external_count += 1
        return ExplanationReport(
            markdown=text,
            path=ExplanationPath.EXTERNAL,
            model=getattr(response, "model", "external"),
            latency_ms=getattr(response, "latency_ms", 0.0),
        )

    def _fallback(self, context: ExplanationContext, reason: FallbackReason) -> ExplanationReport:
        self._fallback_count += 1
        logger.debug(f"Rule-based explanation ({reason.value}) for {context.recommended_route_name}")
        return ExplanationReport(
            markdown=self.build_fallback_report(context),
            path=ExplanationPath.FALLBACK,
            fallback_reason=reason,
        )

    def build_prompt(self, context: ExplanationContext) -> str:
        """Prompt embedding every input, both scores and the output format."""
        risk = context.risk
        priority = context.priority
        route = context.recommended_route_name

        return f"""Analyze the following operational data for a medical transport and explain the route decision.

SYSTEM LOGIC:
- Delay Risk Score = (Traffic Risk x 0.4) + (Weather Risk x 0.3) + (Historical Delay Rate x 0.2) + (Incident Density x 0.1)
- Medical Priority Score = (Emergency Level x 0.5) + (Time Sensitivity x 0.3) + (Critical Supply Factor x 0.2)
- Optimization Objective: minimize (Delay Risk + Time + Medical Priority Penalty)

DELAY RISK INPUTS:
- Traffic Risk: {risk.traffic_risk}
- Weather Risk: {risk.weather_risk}
- Historical Delay Rate: {risk.historical_delay_rate}
- Incident Density: {risk.incident_density}
- Delay Risk Score: {context.delay_risk_score:.2f}

MEDICAL PRIORITY INPUTS:
- Emergency Level: {priority.emergency_level}
- Time Sensitivity: {priority.time_sensitivity}
- Critical Supply Factor: {priority.critical_supply_factor}
- Medical Priority Score: {context.medical_priority_score:.2f}

DECISION:
- Recommended Route: {route}
- Estimated Time Saved: {context.time_saved} minutes
- Model Confidence: {context.accuracy}

Respond in exactly this markdown format:

### Recommended Route
**{route}**

### Estimated Time Saved
**{context.time_saved} minutes**

### Operational Risk Explanation
[Concise clinical explanation of why this route was chosen from the Delay Risk and Medical Priority scores, focused on patient outcomes or supply integrity.]

### Model Confidence Score
**{context.accuracy}**"""

    def build_fallback_report(self, context: ExplanationContext) -> str:
        """Deterministic report; identical inputs always give identical text."""
        explanation: List[str] = [
            self._risk_sentence(context.delay_risk_score),
            self._priority_sentence(context.medical_priority_score),
        ]
        if context.risk.weather_risk > ADVERSE_WEATHER_RISK:
            explanation.append(
                f"Weather risk of **{context.risk.weather_risk:.2f}** adds further uncertainty, "
                "so corridors with lower environmental exposure were weighted favourably."
            )
        explanation.append(
            f"**{context.recommended_route_name}** offers the lowest combined delay, "
            "transit time and priority penalty and is the recommended dispatch corridor."
        )

        sections = [
            f"**{context.recommended_route_name}**",
            f"**{context.time_saved} minutes**",
            " ".join(explanation),
            f"**{context.accuracy}**",
        ]
        return "\n\n".join(
            f"### {title}\n{body}" for title, body in zip(REPORT_SECTIONS, sections)
        )

    @staticmethod
    def _risk_sentence(delay_risk_score: float) -> str:
        if delay_risk_score > CRITICAL_DELAY_RISK:
            return (
                f"Delay risk is elevated at **{delay_risk_score:.2f}**, indicating critical congestion "
                "on primary urban corridors; the recommendation avoids high-friction segments."
            )
        if delay_risk_score > MODERATE_DELAY_RISK:
            return (
                f"Delay risk of **{delay_risk_score:.2f}** reflects moderate friction on standard "
                "corridors; the recommendation balances transit time against residual congestion."
            )
        return (
            f"Delay risk of **{delay_risk_score:.2f}** indicates stable network conditions "
            "with no significant delay vectors detected."
        )

    @staticmethod
    def _priority_sentence(medical_priority_score: float) -> str:
        if medical_priority_score > LIFE_CRITICAL_PRIORITY:
            return (
                f"A medical priority score of **{medical_priority_score:.2f}** classifies this consignment "
                "as Life-Critical; clinical urgency outweighs distance and cost."
            )
        return (
            f"A medical priority score of **{medical_priority_score:.2f}** classifies this consignment "
            "as Time-Sensitive; the delivery window remains the governing constraint."
        )

    def get_stats(self) -> Dict[str, Any]:
        return {
            "external_reports": self._external_count,
            "fallback_reports": self._fallback_count,
            "external_available": self.client.is_available,
        }
