# src/stayvest/api/schemas.py
from __future__ import annotations

from pydantic import Field

from stayvest.domain.analysis import ConfigurationInfo, FrozenModel, MarketInfo, NeighborhoodInfo


# --------------------------------------------
# Error bodies
# --------------------------------------------

class ValidationProblem(FrozenModel):
    """400 body: every failed field with its messages."""

    title: str = "One or more validation errors occurred."
    status: int = 400
    detail: str | None = None
    errors: dict[str, list[str]] = Field(default_factory=dict)


class NotFoundBody(FrozenModel):
    error: str
    supported_combinations: list[str]


class ErrorBody(FrozenModel):
    error: str


class ServerProblem(FrozenModel):
    title: str = "Internal Server Error"
    status: int = 500
    detail: str = "An unexpected error occurred. Please try again later."


# --------------------------------------------
# Market browsing
# --------------------------------------------

class MarketsResponse(FrozenModel):
    markets: list[MarketInfo]


class NeighborhoodsResponse(FrozenModel):
    market: str
    neighborhoods: list[NeighborhoodInfo]


class ConfigurationsResponse(FrozenModel):
    market: str
    neighborhood: str
    configurations: list[ConfigurationInfo]


# --------------------------------------------
# Service info
# --------------------------------------------

class ServiceInfo(FrozenModel):
    name: str
    status: str
    version: str
