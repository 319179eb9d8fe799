"""FastAPI application entrypoint for phaseplan service mode."""

from __future__ import annotations

import asyncio
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..codegen import parse_generated_files
from ..concept import concept_from_dict
from ..config import ContextConfig, PlannerConfig
from ..context import IncrementalCodeContextBuilder
from ..errors import ConceptError
from ..planner import PhasePlanner


class PlanRequest(BaseModel):
    concept: Dict[str, Any]
    planner: Dict[str, Any] = Field(default_factory=dict)


class PlanResponse(BaseModel):
    success: bool
    plan: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
    analysis_details: Dict[str, Any] = Field(default_factory=dict)


class ContextRequest(BaseModel):
    generated: str
    phase_number: int = 1
    max_chars: Optional[int] = None


class FileSummary(BaseModel):
    path: str
    type: str
    exports: List[str]
    summary: str


class ContractSummary(BaseModel):
    endpoint: str
    method: str
    authentication: bool
    request_schema: Optional[str] = None
    response_schema: Optional[str] = None


class ContextResponse(BaseModel):
    context: str
    files: List[FileSummary]
    api_contracts: List[ContractSummary]
    established_patterns: List[str]


class HealthResponse(BaseModel):
    status: str


_OVERRIDABLE = (
    "min_phases",
    "max_phases",
    "max_tokens_per_phase",
    "max_features_per_phase",
    "token_estimates",
)


def _default_planner() -> PhasePlanner:
    return PhasePlanner()


def create_app(
    planner_factory: Callable[[], PhasePlanner] = _default_planner,
    context_config: ContextConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing phaseplan operations."""

    app = FastAPI(title="PhasePlan Service", version="1.0.0")
    window_config = context_config or ContextConfig()

    async def get_planner() -> PhasePlanner:
        return planner_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/plan", response_model=PlanResponse)
    async def plan(
        payload: PlanRequest,
        planner: PhasePlanner = Depends(get_planner),
    ) -> PlanResponse:
        concept = concept_from_dict(payload.concept)
        if payload.planner:
            planner = PhasePlanner(
                _planner_overrides(planner.config, payload.planner), planner.context_config
            )

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, planner.generate_plan, concept)

        return PlanResponse(**asdict(result))

    @app.post("/context", response_model=ContextResponse)
    async def context(payload: ContextRequest) -> ContextResponse:
        files = parse_generated_files(payload.generated)
        builder = IncrementalCodeContextBuilder(window_config)
        analysis = builder.record_phase(payload.phase_number, files)
        return ContextResponse(
            context=builder.build_phase_context(payload.max_chars),
            files=[
                FileSummary(path=item.path, type=item.type, exports=item.exports, summary=item.summary)
                for item in analysis.accumulated_files
            ],
            api_contracts=[
                ContractSummary(
                    endpoint=contract.endpoint,
                    method=contract.method,
                    authentication=contract.authentication,
                    request_schema=contract.request_schema,
                    response_schema=contract.response_schema,
                )
                for contract in analysis.api_contracts
            ],
            established_patterns=analysis.established_patterns,
        )

    @app.exception_handler(ConceptError)
    async def concept_error_handler(_: Any, exc: ConceptError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def _planner_overrides(config: PlannerConfig, overrides: Dict[str, Any]) -> PlannerConfig:
    known = {key: value for key, value in overrides.items() if key in _OVERRIDABLE}
    unknown = sorted(set(overrides) - set(known))
    if unknown:
        raise ValueError(f"Unknown planner settings: {', '.join(unknown)}")
    return config.with_overrides(**known)


def run_service(host: str = "0.0.0.0", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
