# src/stayvest/domain/analysis.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

# Decimals stay exact in Python and go out as JSON numbers.
JsonDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

Recommendation = Literal["buy", "consider", "caution"]
Confidence = Literal["high", "medium", "low"]
ProfileSource = Literal["combo", "neighborhood_fallback"]
AnalysisStatus = Literal["ok", "not_found", "upstream_error"]


class FrozenModel(BaseModel):
    """camelCase on the wire, snake_case in Python, immutable once built."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# --------------------------------------------
# Request
# --------------------------------------------

class AnalyzeRequest(FrozenModel):
    """
    Financing inputs for one market/neighborhood/bed/bath combination.

    Range checks live here; the "purchase price must be > 0" rule lives in
    services.validation because the field itself is optional.
    """

    market: str
    neighborhood: str
    bedrooms: int = 0
    bathrooms: JsonDecimal
    purchase_price: JsonDecimal | None = None
    down_payment_percent: JsonDecimal = Decimal("20")
    interest_rate: JsonDecimal | None = None
    loan_term_years: int = 30
    self_managed: bool = True
    hoa_monthly: JsonDecimal = Decimal("0")

    @field_validator("market")
    @classmethod
    def _market_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Market is required.")
        return v.strip()

    @field_validator("neighborhood")
    @classmethod
    def _neighborhood_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Neighborhood is required.")
        return v.strip()

    @field_validator("bedrooms")
    @classmethod
    def _bedrooms_range(cls, v: int) -> int:
        if not (0 <= v <= 10):
            raise ValueError("Bedrooms must be between 0 and 10.")
        return v

    @field_validator("bathrooms")
    @classmethod
    def _bathrooms_range(cls, v: Decimal) -> Decimal:
        if not (Decimal("0.5") <= v <= Decimal("10")):
            raise ValueError("Bathrooms must be between 0.5 and 10.")
        return v

    @field_validator("down_payment_percent")
    @classmethod
    def _down_payment_range(cls, v: Decimal) -> Decimal:
        if not (Decimal("0") <= v <= Decimal("100")):
            raise ValueError("DownPaymentPercent must be between 0 and 100.")
        return v

    @field_validator("interest_rate")
    @classmethod
    def _interest_rate_range(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and not (Decimal("0") <= v <= Decimal("30")):
            raise ValueError("InterestRate must be between 0 and 30.")
        return v

    @field_validator("loan_term_years")
    @classmethod
    def _loan_term_range(cls, v: int) -> int:
        if not (1 <= v <= 40):
            raise ValueError("LoanTermYears must be between 1 and 40.")
        return v

    @field_validator("hoa_monthly")
    @classmethod
    def _hoa_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("HoaMonthly cannot be negative.")
        return v


# --------------------------------------------
# Comparable statistics (inbound)
# --------------------------------------------

class ComparableStatistics(FrozenModel):
    combo_profile: str | None = None
    neighborhood_profile: str | None = None
    success_factors: list[str] = Field(default_factory=list)
    risk_factors: list[str] = Field(default_factory=list)
    premium_amenities: list[str] = Field(default_factory=list)
    review_count: int = 0
    computed_at: datetime | None = None
    neighborhood_generated_at: datetime | None = None
    avg_revenue: JsonDecimal = Decimal("0")
    avg_occupancy: JsonDecimal = Decimal("0")  # days booked per year
    avg_price: JsonDecimal = Decimal("0")
    avg_rating: JsonDecimal = Decimal("0")
    listing_count: int = 0


class PercentileStatistics(FrozenModel):
    revenue_p25: JsonDecimal = Decimal("0")
    revenue_p50: JsonDecimal = Decimal("0")
    revenue_p75: JsonDecimal = Decimal("0")
    price_p25: JsonDecimal = Decimal("0")
    price_p50: JsonDecimal = Decimal("0")
    price_p75: JsonDecimal = Decimal("0")
    comparables_count: int = 0


# --------------------------------------------
# Response sections
# --------------------------------------------

class SummarySection(FrozenModel):
    headline: str
    recommendation: Recommendation
    confidence: Confidence


class ProfileSection(FrozenModel):
    text: str
    source: ProfileSource
    generated_at: datetime


class InsightsSection(FrozenModel):
    success_factors: list[str]
    risk_factors: list[str]
    premium_amenities: list[str]
    source: ProfileSource


class MetricsSection(FrozenModel):
    cash_on_cash_return: JsonDecimal
    cap_rate: JsonDecimal
    net_operating_income: JsonDecimal
    annual_cash_flow: JsonDecimal
    break_even_occupancy: JsonDecimal
    gross_yield: JsonDecimal


class RangeInfo(FrozenModel):
    p25: JsonDecimal
    p50: JsonDecimal
    p75: JsonDecimal


class RateInfo(FrozenModel):
    value: JsonDecimal
    percentile: int
    range: RangeInfo


class SeasonalRange(FrozenModel):
    low: JsonDecimal
    high: JsonDecimal


class OccupancyInfo(FrozenModel):
    value: JsonDecimal
    seasonal_range: SeasonalRange


class RevenueSection(FrozenModel):
    nightly_rate: RateInfo
    occupancy_rate: OccupancyInfo
    gross_annual_revenue: JsonDecimal
    comparables_count: int


class ExpenseItem(FrozenModel):
    value: JsonDecimal
    monthly: bool
    source: str


class ExpensesSection(FrozenModel):
    annual_total: JsonDecimal
    monthly: JsonDecimal
    breakdown: dict[str, ExpenseItem]


class DataSourceInfo(FrozenModel):
    name: str
    date: str
    description: str


class MetadataSection(FrozenModel):
    analysis_date: datetime
    data_sources: list[DataSourceInfo]
    assumptions: list[str]


class AnalyzeResponse(FrozenModel):
    summary: SummarySection
    profile: ProfileSection
    insights: InsightsSection
    metrics: MetricsSection
    revenue: RevenueSection
    expenses: ExpensesSection
    metadata: MetadataSection


class AnalysisResult(FrozenModel):
    """
    Outcome of one analysis.

    ok             -> response is set
    not_found      -> error_message + supported_combinations
    upstream_error -> error_message (statistics lookup failed)
    """

    status: AnalysisStatus
    response: AnalyzeResponse | None = None
    error_message: str | None = None
    supported_combinations: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == "ok"

    @classmethod
    def ok(cls, response: AnalyzeResponse) -> "AnalysisResult":
        return cls(status="ok", response=response)

    @classmethod
    def not_found(cls, message: str, supported: list[str]) -> "AnalysisResult":
        return cls(status="not_found", error_message=message, supported_combinations=supported)

    @classmethod
    def upstream_error(cls, message: str) -> "AnalysisResult":
        return cls(status="upstream_error", error_message=message)


# --------------------------------------------
# Market browsing
# --------------------------------------------

class MarketInfo(FrozenModel):
    id: str
    name: str
    neighborhood_count: int
    listing_count: int


class NeighborhoodInfo(FrozenModel):
    name: str
    listing_count: int
    avg_price: JsonDecimal
    avg_occupancy: JsonDecimal


class ConfigurationInfo(FrozenModel):
    bedrooms: int
    bathrooms: JsonDecimal
    listing_count: int
    has_insights: bool
