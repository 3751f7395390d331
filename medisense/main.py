"""
MediSense Logistics API - FastAPI Application

Endpoints for:
- Mock telemetry, route catalog and fleet roster
- Route optimization and explained recommendations
- Risk scenario simulation

Run with:
    uvicorn medisense.main:app --reload --host 0.0.0.0 --port 3000
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from medisense.config import Settings, settings as default_settings
from medisense.core.llm import ExplanationGenerator, GeminiClient, GeminiConfig
from medisense.core.optimization import TimeSavedStrategy, compute_priority_score
from medisense.core.simulation import predict_scenario
from medisense.models import HealthResponse, LogisticsInputs, ScenarioRequest
from medisense.services import LogisticsService, TelemetrySimulator
from medisense.utils import (
    InvalidInputError,
    MediSenseError,
    get_logger,
    setup_logging,
)

logger = get_logger(__name__)


def build_service(settings: Settings, gemini_client=None) -> LogisticsService:
    """Construct the service graph; the Gemini client is created here once."""
    client = gemini_client or GeminiClient(GeminiConfig.from_settings(settings))
    return LogisticsService(
        telemetry=TelemetrySimulator.seeded(settings.telemetry_seed),
        explainer=ExplanationGenerator(client),
        strategy=TimeSavedStrategy(settings.time_saved_strategy),
    )


def get_service(request: Request) -> LogisticsService:
    return request.app.state.logistics_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    backend = "gemini" if app.state.logistics_service.explainer.client.is_available else "rule-based"
    logger.info(f"MediSense API ready (explanations: {backend})")
    yield
    logger.info("MediSense API shut down.")


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[LogisticsService] = None
) -> FastAPI:
    """Application factory; tests pass their own settings or service."""
    settings = settings or default_settings
    setup_logging(level=settings.log_level, log_file=settings.log_file)

    app = FastAPI(
        title=settings.app_name,
        description="Medical logistics route risk scoring, selection and explanation",
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.logistics_service = service or build_service(settings)
    app.state.started_at = datetime.now()

    @app.exception_handler(MediSenseError)
    async def medisense_error_handler(request: Request, exc: MediSenseError):
        status_code = 400 if isinstance(exc, InvalidInputError) else 500
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    # ---- Health ----

    def _health(request: Request) -> HealthResponse:
        svc = get_service(request)
        stats = svc.explainer.get_stats()
        return HealthResponse(
            status="healthy",
            version=settings.version,
            timestamp=datetime.now().isoformat(),
            uptime_seconds=(datetime.now() - request.app.state.started_at).total_seconds(),
            explanation_backend="gemini" if stats["external_available"] else "rule-based",
            stats={
                "external_reports": stats["external_reports"],
                "fallback_reports": stats["fallback_reports"],
            },
        )

    @app.get("/", response_model=HealthResponse, tags=["Health"])
    async def root(request: Request):
        """API root - health check."""
        return _health(request)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        return _health(request)

    # ---- Telemetry & fleet ----

    @app.get("/api/logistics/status", tags=["Logistics"])
    async def get_status(svc: LogisticsService = Depends(get_service)):
        """Current (simulated) operating conditions with rounded scores."""
        return svc.get_status().to_dict()

    @app.get("/api/logistics/routes", tags=["Logistics"])
    async def get_routes(svc: LogisticsService = Depends(get_service)):
        return [route.to_dict() for route in svc.list_routes()]

    @app.get("/api/logistics/fleet", tags=["Logistics"])
    async def get_fleet(svc: LogisticsService = Depends(get_service)):
        return [unit.to_dict() for unit in svc.list_fleet()]

    @app.post("/api/logistics/dispatch", tags=["Logistics"])
    async def dispatch_unit(svc: LogisticsService = Depends(get_service)):
        return svc.dispatch().to_dict()

    # ---- Optimization ----

    @app.post("/api/logistics/optimize", tags=["Optimization"])
    async def optimize(inputs: LogisticsInputs, svc: LogisticsService = Depends(get_service)):
        """Score the routes and return the recommendation without an explanation."""
        evaluation = svc.optimize(inputs.risk_inputs(), inputs.route_overrides())
        result = evaluation.to_dict()
        result["medicalPriorityScore"] = compute_priority_score(inputs.priority_inputs())
        return result

    @app.post("/api/logistics/analyze", tags=["Optimization"])
    async def analyze(inputs: LogisticsInputs, svc: LogisticsService = Depends(get_service)):
        """Score, select and explain in one call."""
        analysis = await svc.analyze(
            inputs.risk_inputs(),
            inputs.priority_inputs(),
            inputs.accuracy,
            inputs.route_overrides(),
        )
        return analysis.to_dict()

    # ---- Risk intelligence ----

    @app.post("/api/risk/simulate", tags=["Risk Intelligence"])
    async def simulate_risk(request: ScenarioRequest):
        """What-if delay outlook for precipitation/congestion sliders."""
        return predict_scenario(request.precip_level, request.congestion_level).to_dict()

    return app


app = create_app()
