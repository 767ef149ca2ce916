from __future__ import annotations

from decimal import Decimal

from stayvest.analysis.finance import DAYS_PER_YEAR, ZERO, round_money
from stayvest.domain.analysis import (
    ComparableStatistics,
    OccupancyInfo,
    PercentileStatistics,
    RangeInfo,
    RateInfo,
    RevenueSection,
    SeasonalRange,
)
from stayvest.domain.assumptions import AnalysisAssumptions

NEUTRAL_PERCENTILE = 50


def select_gross_revenue(stats: ComparableStatistics, percentiles: PercentileStatistics | None) -> Decimal:
    """
    Authoritative annual gross revenue:
    comparable average -> median trailing-365 revenue -> 0.
    """
    if stats.avg_revenue > 0:
        return stats.avg_revenue
    if percentiles is not None:
        return percentiles.revenue_p50
    return ZERO


def occupancy_fraction(stats: ComparableStatistics) -> Decimal:
    # avg_occupancy is days booked per year, not a fraction
    if stats.avg_occupancy > 0:
        return stats.avg_occupancy / DAYS_PER_YEAR
    return ZERO


def price_percentile(avg_price: Decimal, percentiles: PercentileStatistics | None) -> int:
    if percentiles is None:
        return NEUTRAL_PERCENTILE
    if avg_price <= percentiles.price_p25:
        return 25
    if avg_price <= percentiles.price_p50:
        return 50
    if avg_price <= percentiles.price_p75:
        return 75
    return 90


def build_revenue_section(
    stats: ComparableStatistics,
    percentiles: PercentileStatistics | None,
    gross_revenue: Decimal,
    assumptions: AnalysisAssumptions,
) -> RevenueSection:
    if percentiles is not None:
        price_range = RangeInfo(p25=percentiles.price_p25, p50=percentiles.price_p50, p75=percentiles.price_p75)
        comparables = percentiles.comparables_count
    else:
        price_range = RangeInfo(p25=ZERO, p50=ZERO, p75=ZERO)
        comparables = stats.listing_count

    return RevenueSection(
        nightly_rate=RateInfo(
            value=round_money(stats.avg_price),
            percentile=price_percentile(stats.avg_price, percentiles),
            range=price_range,
        ),
        occupancy_rate=OccupancyInfo(
            value=round_money(occupancy_fraction(stats)),
            # table-driven reference band, not computed
            seasonal_range=SeasonalRange(
                low=assumptions.seasonal_occupancy_low,
                high=assumptions.seasonal_occupancy_high,
            ),
        ),
        gross_annual_revenue=round_money(gross_revenue),
        comparables_count=comparables,
    )
