from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

from stayvest.adapters.config import config
from stayvest.adapters.logging_utils import get_logger
from stayvest.analysis.finance import HUNDRED, calculate_metrics, fmt_number, fmt_percent, project_expenses
from stayvest.analysis.revenue import build_revenue_section, select_gross_revenue
from stayvest.analysis.scoring import build_headline, determine_confidence, determine_recommendation
from stayvest.domain.analysis import (
    AnalysisResult,
    AnalyzeRequest,
    AnalyzeResponse,
    ComparableStatistics,
    DataSourceInfo,
    InsightsSection,
    MetadataSection,
    PercentileStatistics,
    ProfileSection,
    SummarySection,
)
from stayvest.domain.assumptions import AnalysisAssumptions
from stayvest.domain.ports import MarketRepository
from stayvest.services.validation import ensure_valid

logger = get_logger(__name__)

NO_PROFILE_TEXT = "No profile available for this combination."

# Dataset vintages cited in the response metadata
LISTINGS_SOURCE_DATE = "2024-12-15"
RATE_SOURCE_DATE = "2025-01-09"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisService:
    """
    Turns comparable statistics + financing inputs into an investment analysis.

    The repository is the only I/O this class performs. Both lookups for a
    request are issued together and awaited before any math runs.
    """

    def __init__(
        self,
        repository: MarketRepository,
        assumptions: AnalysisAssumptions | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.repository = repository
        self.assumptions = assumptions or AnalysisAssumptions.from_config(config)
        self._clock = clock

    # -----------------------------------------------------------------
    # Public entrypoint
    # -----------------------------------------------------------------
    def analyze(self, request: AnalyzeRequest) -> AnalysisResult:
        ensure_valid(request)

        logger.info(
            "analysis_started",
            extra={
                "context": {
                    "market": request.market,
                    "neighborhood": request.neighborhood,
                    "bedrooms": request.bedrooms,
                    "bathrooms": str(request.bathrooms),
                }
            },
        )

        try:
            stats, percentiles = self._lookup(request)
        except Exception as e:
            logger.error("statistics_lookup_failed", extra={"context": {"error": str(e)}})
            return AnalysisResult.upstream_error(f"Comparable statistics lookup failed: {e}")

        if stats is None:
            return self._not_found(request)

        response = self._build_response(request, stats, percentiles)

        logger.info(
            "analysis_completed",
            extra={
                "context": {
                    "market": request.market,
                    "neighborhood": request.neighborhood,
                    "bedrooms": request.bedrooms,
                    "cash_on_cash": str(response.metrics.cash_on_cash_return),
                }
            },
        )
        return AnalysisResult.ok(response)

    # -----------------------------------------------------------------
    # Collaborator calls
    # -----------------------------------------------------------------
    def _lookup(
        self, request: AnalyzeRequest
    ) -> tuple[ComparableStatistics | None, PercentileStatistics | None]:
        # independent lookups; run them side by side
        with ThreadPoolExecutor(max_workers=2) as ex:
            stats_fut = ex.submit(
                self.repository.get_comparable_statistics,
                request.market,
                request.neighborhood,
                request.bedrooms,
                request.bathrooms,
            )
            pct_fut = ex.submit(
                self.repository.get_percentiles,
                request.market,
                request.neighborhood,
                request.bedrooms,
            )
            return stats_fut.result(), pct_fut.result()

    def _not_found(self, request: AnalyzeRequest) -> AnalysisResult:
        message = (
            f"No data available for {request.neighborhood} "
            f"{request.bedrooms}BR/{fmt_number(request.bathrooms)}BA in {request.market}"
        )
        try:
            supported = list(self.repository.get_supported_combinations())
        except Exception as e:
            logger.error("supported_combinations_failed", extra={"context": {"error": str(e)}})
            return AnalysisResult.upstream_error(f"Comparable statistics lookup failed: {e}")

        logger.warning(
            "analysis_no_data",
            extra={"context": {"message": message, "supported": len(supported)}},
        )
        return AnalysisResult.not_found(message, supported)

    # -----------------------------------------------------------------
    # Assembly
    # -----------------------------------------------------------------
    def _build_response(
        self,
        request: AnalyzeRequest,
        stats: ComparableStatistics,
        percentiles: PercentileStatistics | None,
    ) -> AnalyzeResponse:
        a = self.assumptions
        interest_rate = request.interest_rate if request.interest_rate is not None else a.default_interest_rate
        gross_revenue = select_gross_revenue(stats, percentiles)

        expenses = project_expenses(request, gross_revenue, stats.avg_price, interest_rate, a)
        metrics = calculate_metrics(request, gross_revenue, expenses, stats.avg_price)

        coc = metrics.cash_on_cash_return
        summary = SummarySection(
            headline=build_headline(coc, a),
            recommendation=determine_recommendation(coc, a),
            confidence=determine_confidence(stats.listing_count, a),
        )

        profile_source = "combo" if stats.combo_profile is not None else "neighborhood_fallback"
        profile = ProfileSection(
            text=stats.combo_profile or stats.neighborhood_profile or NO_PROFILE_TEXT,
            source=profile_source,
            generated_at=stats.computed_at or stats.neighborhood_generated_at or self._clock(),
        )
        insights = InsightsSection(
            success_factors=list(stats.success_factors),
            risk_factors=list(stats.risk_factors),
            premium_amenities=list(stats.premium_amenities),
            source=profile_source,
        )

        return AnalyzeResponse(
            summary=summary,
            profile=profile,
            insights=insights,
            metrics=metrics,
            revenue=build_revenue_section(stats, percentiles, gross_revenue, a),
            expenses=expenses.to_section(),
            metadata=self._build_metadata(request, stats, percentiles, interest_rate),
        )

    def _build_metadata(
        self,
        request: AnalyzeRequest,
        stats: ComparableStatistics,
        percentiles: PercentileStatistics | None,
        interest_rate: Decimal,
    ) -> MetadataSection:
        purchase_price = request.purchase_price or Decimal("0")
        down_payment = purchase_price * (request.down_payment_percent / HUNDRED)
        comparables = percentiles.comparables_count if percentiles is not None else stats.listing_count

        if request.self_managed:
            management = "Self-managed property"
        else:
            management = f"Professional management ({fmt_percent(self.assumptions.property_management_rate)})"

        return MetadataSection(
            analysis_date=self._clock(),
            data_sources=[
                DataSourceInfo(
                    name="Inside Airbnb",
                    date=LISTINGS_SOURCE_DATE,
                    description=f"{comparables} comparable listings, {stats.review_count} reviews analyzed",
                ),
                DataSourceInfo(
                    name="Freddie Mac PMMS",
                    date=RATE_SOURCE_DATE,
                    description=f"30-year fixed rate: {fmt_number(interest_rate)}%",
                ),
            ],
            assumptions=[
                f"{fmt_number(request.down_payment_percent)}% down payment (${down_payment:,.0f})",
                f"{request.loan_term_years}-year fixed mortgage",
                management,
                "Occupancy based on 12-month trailing average",
            ],
        )
