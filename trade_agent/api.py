"""
FastAPI Application for Trade Agent.

HTTP layer over the orchestrator. Handlers only translate between HTTP and
run_negotiation: request bodies are EqualizeRequest, failures map to status
codes, and completed or failed runs are kept in the run store.

Endpoints:
    GET /health - Health check
    POST /equalize - Run a negotiation and return the result directly
    POST /api/runs - Create and execute a negotiation run
    GET /api/runs/{run_id} - Get a single run by ID
    GET /api/runs - List runs
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, NoReturn, Optional
from uuid import uuid4

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, status
from pydantic import BaseModel

from trade_agent.config import DEFAULT_ENGINE_CONFIG
from trade_agent.exceptions import InfrastructureError
from trade_agent.llm.interface import LLMClient
from trade_agent.llm.mock import MockLLMClient
from trade_agent.llm.openai_client import OpenAILLMClient
from trade_agent.models import EqualizeRequest, EqualizeResponse, ErrorResponse
from trade_agent.orchestrator import run_negotiation
from trade_agent.run_store import RunRecord, run_store
from trade_agent.validation import ValidationError


logger = logging.getLogger(__name__)

ENV_PATH = Path(__file__).parent.parent / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)
    logger.info(f"Loaded environment from {ENV_PATH}")


def get_llm_client() -> LLMClient:
    """OpenAILLMClient when OPENAI_API_KEY is set, MockLLMClient otherwise."""
    if os.environ.get("OPENAI_API_KEY"):
        return OpenAILLMClient()
    logger.debug("OPENAI_API_KEY not set, using MockLLMClient")
    return MockLLMClient()


def _fail(status_code: int, error: str, detail: str, code: str) -> NoReturn:
    body = ErrorResponse(error=error, detail=detail, code=code)
    raise HTTPException(status_code=status_code, detail=body.model_dump())


# =============================================================================
# Response Models
# =============================================================================


RunStatus = Literal["completed", "failed"]


class RunCreated(BaseModel):
    """Body of POST /api/runs."""

    run_id: str
    status: RunStatus
    response: Optional[EqualizeResponse] = None
    error: Optional[str] = None


class RunSummary(BaseModel):
    """One entry of GET /api/runs (no negotiation payload)."""

    run_id: str
    league_id: Optional[str]
    requester_tid: int
    counterparty_tid: int
    status: RunStatus
    deal_status: Optional[str]
    created_at: str

    @classmethod
    def from_record(cls, record: RunRecord) -> "RunSummary":
        return cls(
            run_id=record.run_id,
            league_id=record.league_id,
            requester_tid=record.requester_tid,
            counterparty_tid=record.counterparty_tid,
            status="completed" if record.response else "failed",
            deal_status=record.response.outcome.status.value if record.response else None,
            created_at=record.created_at,
        )


class RunDetail(RunSummary):
    """Body of GET /api/runs/{run_id}: the summary plus the full result."""

    response: Optional[EqualizeResponse]
    error: Optional[str]

    @classmethod
    def from_record(cls, record: RunRecord) -> "RunDetail":
        summary = RunSummary.from_record(record)
        return cls(**summary.model_dump(), response=record.response, error=record.error)


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Trade Agent API",
    version="1.0.0",
    description="What would make this trade work? Grows a proposal until the other team accepts.",
)


@app.get("/health", tags=["System"])
def health_check() -> dict:
    return {"status": "healthy", "service": "Trade Agent API", "version": app.version}


@app.post(
    "/equalize",
    response_model=EqualizeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Proposal inconsistent with the rosters"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    tags=["Negotiation"],
)
def create_equalization(request: EqualizeRequest) -> EqualizeResponse:
    """
    Run a negotiation and return the adjusted trade.

    A no_deal outcome is still a 200; only bad input (400/422) and failures
    while running (500) are errors.
    """
    try:
        return run_negotiation(request=request, llm=get_llm_client(), config=DEFAULT_ENGINE_CONFIG)
    except ValidationError as e:
        _fail(status.HTTP_400_BAD_REQUEST, "Validation failed", str(e.errors), "VALIDATION_FAILED")
    except Exception as e:
        logger.exception("Negotiation failed")
        _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error", str(e), "INTERNAL_ERROR")


# =============================================================================
# Runs API Endpoints
# =============================================================================


@app.post(
    "/api/runs",
    response_model=RunCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create and execute a negotiation run",
    tags=["Runs"],
)
def create_run(
    request: EqualizeRequest,
    league_id: Optional[str] = Query(None, description="Optional league identifier"),
) -> RunCreated:
    """
    Create and execute a negotiation run.

    Status Codes:
        201: Run recorded, whether it completed or failed validation
        422: Malformed request body
        503: LLM unreachable or unexpected failure (nothing recorded)
    """
    record = RunRecord(
        run_id=str(uuid4()),
        league_id=league_id,
        requester_tid=request.teams[0].tid,
        counterparty_tid=request.teams[1].tid,
        response=None,
        error=None,
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    logger.info(f"Creating run {record.run_id} for league={league_id}")

    try:
        record.response = run_negotiation(request, get_llm_client(), DEFAULT_ENGINE_CONFIG)
    except ValidationError as e:
        record.error = str(e.errors)
        logger.info(f"Run {record.run_id} failed validation: {record.error}")
    except InfrastructureError as e:
        logger.error(f"Run {record.run_id} failed (infrastructure): {e}")
        _fail(status.HTTP_503_SERVICE_UNAVAILABLE, "Infrastructure error", str(e), "LLM_UNAVAILABLE")
    except Exception as e:
        logger.exception(f"Run {record.run_id} failed (unexpected)")
        _fail(status.HTTP_503_SERVICE_UNAVAILABLE, "Internal error", str(e), "INTERNAL_ERROR")

    run_store.create(record)
    if record.response is None:
        return RunCreated(run_id=record.run_id, status="failed", error=record.error)

    logger.info(f"Run {record.run_id} completed: {record.response.outcome.status.value}")
    return RunCreated(run_id=record.run_id, status="completed", response=record.response)


@app.get("/api/runs/{run_id}", response_model=RunDetail, tags=["Runs"])
def get_run(run_id: str) -> RunDetail:
    """Full run record including the search trace; 404 if unknown."""
    record = run_store.get(run_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Run not found")
    return RunDetail.from_record(record)


@app.get("/api/runs", response_model=list[RunSummary], tags=["Runs"])
def list_runs(
    league_id: Optional[str] = Query(None, description="Filter by league ID"),
    limit: int = Query(10, ge=1, le=100, description="Maximum runs to return"),
) -> list[RunSummary]:
    """Most recent runs first, without the negotiation payload."""
    return [
        RunSummary.from_record(r) for r in run_store.list_runs(league_id=league_id, limit=limit)
    ]
