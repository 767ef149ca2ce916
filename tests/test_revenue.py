from decimal import Decimal

import pytest

from fixtures.markets import sample_percentiles, sample_stats
from stayvest.analysis.revenue import (
    build_revenue_section,
    occupancy_fraction,
    price_percentile,
    select_gross_revenue,
)
from stayvest.domain.assumptions import AnalysisAssumptions


def test_gross_revenue_prefers_comparable_average():
    assert select_gross_revenue(sample_stats(), sample_percentiles()) == Decimal("60000")


def test_gross_revenue_falls_back_to_median():
    stats = sample_stats(avg_revenue=Decimal("0"))
    assert select_gross_revenue(stats, sample_percentiles()) == Decimal("58000")


def test_gross_revenue_zero_without_any_source():
    assert select_gross_revenue(sample_stats(avg_revenue=Decimal("0")), None) == Decimal("0")


def test_occupancy_is_days_over_year():
    assert occupancy_fraction(sample_stats(avg_occupancy=Decimal("365"))) == Decimal("1")
    assert occupancy_fraction(sample_stats(avg_occupancy=Decimal("0"))) == Decimal("0")


@pytest.mark.parametrize(
    "avg_price, bucket",
    [
        (Decimal("150"), 25),
        (Decimal("170"), 25),
        (Decimal("200"), 50),
        (Decimal("205"), 50),
        (Decimal("250"), 75),
        (Decimal("251"), 90),
    ],
)
def test_price_percentile_buckets(avg_price, bucket):
    assert price_percentile(avg_price, sample_percentiles()) == bucket


def test_price_percentile_neutral_without_percentiles():
    assert price_percentile(Decimal("999"), None) == 50


def test_revenue_section_with_percentiles():
    section = build_revenue_section(sample_stats(), sample_percentiles(), Decimal("60000"), AnalysisAssumptions())

    assert section.nightly_rate.value == Decimal("200.00")
    assert section.nightly_rate.percentile == 50
    assert section.nightly_rate.range.p75 == Decimal("250")
    assert section.occupancy_rate.value == Decimal("0.68")
    assert section.occupancy_rate.seasonal_range.low == Decimal("0.55")
    assert section.occupancy_rate.seasonal_range.high == Decimal("0.89")
    assert section.gross_annual_revenue == Decimal("60000.00")
    assert section.comparables_count == 60


def test_revenue_section_without_percentiles():
    stats = sample_stats(listing_count=17)
    section = build_revenue_section(stats, None, Decimal("60000"), AnalysisAssumptions())

    assert section.nightly_rate.range.p25 == Decimal("0")
    assert section.nightly_rate.range.p50 == Decimal("0")
    assert section.nightly_rate.range.p75 == Decimal("0")
    assert section.comparables_count == 17


def test_revenue_section_reports_selected_gross():
    stats = sample_stats(avg_revenue=Decimal("0"))
    gross = select_gross_revenue(stats, sample_percentiles())
    section = build_revenue_section(stats, sample_percentiles(), gross, AnalysisAssumptions())
    assert section.gross_annual_revenue == Decimal("58000.00")
