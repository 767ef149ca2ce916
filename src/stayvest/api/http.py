# src/stayvest/api/http.py
from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from stayvest.adapters.config import config, maintenance_mode_enabled
from stayvest.adapters.logging_utils import get_logger
from stayvest.adapters.sql_repo import SqlMarketRepository
from stayvest.analysis.roi import calculate_roi
from stayvest.domain.analysis import AnalyzeResponse
from stayvest.domain.errors import AnalysisValidationError, InvalidRentalInputError
from stayvest.domain.ports import MarketCatalog, MarketRepository
from stayvest.domain.rental import RentalInputs, RentalResult
from stayvest.services.analysis_service import AnalysisService
from stayvest.services.validation import field_errors, parse_analyze_request
from .schemas import (
    ConfigurationsResponse,
    ErrorBody,
    MarketsResponse,
    NeighborhoodsResponse,
    NotFoundBody,
    ServerProblem,
    ServiceInfo,
    ValidationProblem,
)

logger = get_logger(__name__)

API_NAME = "Stayvest STR Analysis API"
API_VERSION = "v1"

MAINTENANCE_BODY = {"error": "API is currently undergoing maintenance", "status": "unavailable"}

app = FastAPI(title=API_NAME, version=API_VERSION)


# -------------------------------------------------------------------
# Dependencies (single repository per process, built on first use)
# -------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_market_repository() -> SqlMarketRepository:
    return SqlMarketRepository(config.DB_URI)


def get_analysis_service(repo: MarketRepository = Depends(get_market_repository)) -> AnalysisService:
    return AnalysisService(repo)


def _json(model: Any, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=model.model_dump(mode="json", by_alias=True, exclude_none=True))


# -------------------------------------------------------------------
# Middleware / error handlers
# -------------------------------------------------------------------
@app.middleware("http")
async def maintenance_mode(request: Request, call_next):
    if maintenance_mode_enabled() and request.url.path != "/health":
        logger.warning("maintenance_mode_block", extra={"context": {"path": request.url.path}})
        return JSONResponse(status_code=503, content=MAINTENANCE_BODY)
    return await call_next(request)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = field_errors(exc.errors())
    logger.warning("request_validation_failed", extra={"context": {"path": request.url.path, "errors": errors}})
    return _json(ValidationProblem(errors=errors), 400)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        exc_info=exc,
        extra={"context": {"path": request.url.path}},
    )
    return _json(ServerProblem(), 500)


# -------------------------------------------------------------------
# Service info
# -------------------------------------------------------------------
@app.get("/", response_model=ServiceInfo)
def root() -> ServiceInfo:
    return ServiceInfo(name=API_NAME, status="ok", version=API_VERSION)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "healthy"}


# -------------------------------------------------------------------
# Analysis
# -------------------------------------------------------------------
@app.post(
    "/api/v1/analyze",
    response_model=AnalyzeResponse,
    responses={400: {"model": ValidationProblem}, 404: {"model": NotFoundBody}, 503: {"model": ErrorBody}},
)
def analyze_endpoint(
    payload: dict[str, Any] = Body(...),
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalyzeResponse | JSONResponse:
    """
    Full investment analysis for one market / neighborhood / bed-bath combination.
    """
    try:
        request = parse_analyze_request(payload)
    except AnalysisValidationError as e:
        logger.warning("analyze_validation_failed", extra={"context": {"errors": e.errors}})
        return _json(ValidationProblem(errors=e.errors), 400)

    result = service.analyze(request)

    if result.status == "not_found":
        return _json(
            NotFoundBody(
                error=result.error_message or "",
                supported_combinations=result.supported_combinations,
            ),
            404,
        )
    if result.status == "upstream_error":
        return _json(ErrorBody(error=result.error_message or ""), 503)

    return result.response


# -------------------------------------------------------------------
# Simple ROI calculator
# -------------------------------------------------------------------
@app.post(
    "/api/calculator/roi",
    response_model=RentalResult,
    responses={400: {"model": ValidationProblem}},
)
def calculate_roi_endpoint(payload: dict[str, Any] = Body(...)) -> RentalResult | JSONResponse:
    try:
        inputs = RentalInputs.model_validate(payload)
        result = calculate_roi(inputs)
    except ValidationError as e:
        errors = field_errors(e.errors())
        logger.warning("roi_validation_failed", extra={"context": {"errors": errors}})
        return _json(ValidationProblem(title="Validation Error", detail=str(e), errors=errors), 400)
    except InvalidRentalInputError as e:
        logger.warning("roi_validation_failed", extra={"context": {"errors": e.errors}})
        return _json(ValidationProblem(title="Validation Error", detail=str(e), errors=e.errors), 400)

    logger.info(
        "roi_calculated",
        extra={
            "context": {
                "cap_rate_percent": str(result.cap_rate_percent),
                "monthly_profit": str(result.monthly_profit),
            }
        },
    )
    return result


# -------------------------------------------------------------------
# Market browsing
# -------------------------------------------------------------------
@app.get("/api/v1/markets", response_model=MarketsResponse)
def list_markets(repo: MarketCatalog = Depends(get_market_repository)) -> MarketsResponse:
    return MarketsResponse(markets=repo.list_markets())


@app.get("/api/v1/markets/{market}/neighborhoods", response_model=NeighborhoodsResponse)
def list_neighborhoods(
    market: str,
    repo: MarketCatalog = Depends(get_market_repository),
) -> NeighborhoodsResponse:
    return NeighborhoodsResponse(market=market, neighborhoods=repo.list_neighborhoods(market))


@app.get(
    "/api/v1/markets/{market}/neighborhoods/{neighborhood}/configurations",
    response_model=ConfigurationsResponse,
)
def list_configurations(
    market: str,
    neighborhood: str,
    repo: MarketCatalog = Depends(get_market_repository),
) -> ConfigurationsResponse:
    return ConfigurationsResponse(
        market=market,
        neighborhood=neighborhood,
        configurations=repo.list_configurations(market, neighborhood),
    )
