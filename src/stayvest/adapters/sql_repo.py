# src/stayvest/adapters/sql_repo.py
from __future__ import annotations

import json
from collections import defaultdict
from datetime import datetime, timezone
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any, Iterable, Sequence

import numpy as np
from sqlmodel import Field, Session, SQLModel, create_engine, select

from stayvest.adapters.logging_utils import get_logger
from stayvest.analysis.finance import format_combination
from stayvest.domain.analysis import (
    ComparableStatistics,
    ConfigurationInfo,
    MarketInfo,
    NeighborhoodInfo,
    PercentileStatistics,
)

logger = get_logger(__name__)

ENTIRE_HOME = "Entire home/apt"


# ---------- Tables ----------

class NeighborhoodMetricRow(SQLModel, table=True):
    """Pre-aggregated listing metrics per neighbourhood / bedrooms / property type."""

    __tablename__ = "neighborhood_metrics"

    id: int | None = Field(default=None, primary_key=True)
    market: str = Field(index=True)
    neighbourhood: str = Field(index=True)
    bedrooms: int = Field(index=True)
    room_type: str = ENTIRE_HOME
    property_type: str = "Entire home"

    listing_count: int = 0
    avg_revenue: float | None = None
    avg_occupancy: float | None = None  # days booked per year
    avg_price: float | None = None
    avg_rating: float | None = None


class NeighborhoodInsightRow(SQLModel, table=True):
    __tablename__ = "neighborhood_insights"

    id: int | None = Field(default=None, primary_key=True)
    market: str = Field(index=True)
    neighbourhood: str = Field(index=True)
    bedrooms: int
    bathrooms: float

    profile: str | None = None
    # JSON arrays stored as text
    success_factors: str | None = None
    risk_factors: str | None = None
    premium_amenities: str | None = None

    review_count: int | None = None
    computed_at: datetime | None = None


class NeighborhoodProfileRow(SQLModel, table=True):
    __tablename__ = "neighborhood_profiles"

    id: int | None = Field(default=None, primary_key=True)
    market: str = Field(index=True)
    neighbourhood: str = Field(index=True)
    profile: str | None = None
    generated_at: datetime | None = None


class ListingRow(SQLModel, table=True):
    __tablename__ = "listings"

    id: int | None = Field(default=None, primary_key=True)
    market: str = Field(index=True)
    neighbourhood: str = Field(index=True)
    bedrooms: int | None = Field(default=None, index=True)
    bathrooms: float | None = None
    room_type: str | None = None
    property_type: str | None = None

    price: float | None = None
    estimated_revenue_l365d: float | None = None
    estimated_occupancy_l365d: float | None = None


# ---------- Helpers ----------

def _dec(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _round(value: Decimal, places: str = "0.01") -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_EVEN)


def _weighted_avg(rows: Sequence[NeighborhoodMetricRow], attr: str, places: str = "0.01") -> Decimal:
    """
    SUM(value * listing_count) / SUM(listing_count).

    Rows with a null value still count in the denominator, same as the SQL
    aggregate would.
    """
    total = sum((r.listing_count or 0) for r in rows)
    if total <= 0:
        return Decimal("0")
    weighted = sum(
        (_dec(getattr(r, attr)) * (r.listing_count or 0) for r in rows if getattr(r, attr) is not None),
        Decimal("0"),
    )
    return _round(weighted / Decimal(total), places)


def _is_entire_home(row: NeighborhoodMetricRow) -> bool:
    return row.room_type == ENTIRE_HOME and (row.property_type or "").startswith("Entire")


def _parse_json_array(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        preview = raw if len(raw) <= 100 else raw[:100] + "..."
        logger.warning(
            "malformed_json_array",
            extra={"context": {"preview": preview, "error": str(e)}},
        )
        return []
    if not isinstance(parsed, list):
        logger.warning("malformed_json_array", extra={"context": {"preview": str(parsed)[:100]}})
        return []
    return [str(x) for x in parsed]


def _json_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(list(value))


def _with_utc(item: dict[str, Any], key: str) -> dict[str, Any]:
    value = item.get(key)
    if isinstance(value, datetime) and value.tzinfo is None:
        return {**item, key: value.replace(tzinfo=timezone.utc)}
    return item


def _percentile_triplet(values: list[float]) -> tuple[Decimal, Decimal, Decimal]:
    if not values:
        return Decimal("0"), Decimal("0"), Decimal("0")
    # numpy's default "linear" method matches percentile_cont
    p25, p50, p75 = np.percentile(np.asarray(values, dtype=float), [25, 50, 75])
    return _round(_dec(float(p25))), _round(_dec(float(p50))), _round(_dec(float(p75)))


def _market_name(market: str) -> str:
    return market.replace("-", " ").title()


# ---------- Repository ----------

class SqlMarketRepository:
    """
    Comparable-statistics lookup over the listings warehouse tables.

    Every call opens its own short-lived Session, so lookups are safe to run
    from worker threads.
    """

    def __init__(self, uri: str = "sqlite:///stayvest.db"):
        connect_args = {"check_same_thread": False} if uri.startswith("sqlite") else {}
        self.engine = create_engine(uri, echo=False, connect_args=connect_args)
        SQLModel.metadata.create_all(self.engine)

    # ----- analysis lookups -----

    def get_comparable_statistics(
        self,
        market: str,
        neighborhood: str,
        bedrooms: int,
        bathrooms: Decimal,
    ) -> ComparableStatistics | None:
        with Session(self.engine) as session:
            insight = session.exec(
                select(NeighborhoodInsightRow).where(
                    NeighborhoodInsightRow.market == market,
                    NeighborhoodInsightRow.neighbourhood == neighborhood,
                    NeighborhoodInsightRow.bedrooms == bedrooms,
                    NeighborhoodInsightRow.bathrooms == float(bathrooms),
                )
            ).first()

            profile = session.exec(
                select(NeighborhoodProfileRow).where(
                    NeighborhoodProfileRow.market == market,
                    NeighborhoodProfileRow.neighbourhood == neighborhood,
                )
            ).first()

            if insight is None and profile is None:
                return None

            metrics = [
                r
                for r in session.exec(
                    select(NeighborhoodMetricRow).where(
                        NeighborhoodMetricRow.market == market,
                        NeighborhoodMetricRow.neighbourhood == neighborhood,
                        NeighborhoodMetricRow.bedrooms == bedrooms,
                    )
                )
                if _is_entire_home(r)
            ]

        aggregates = dict(
            avg_revenue=_weighted_avg(metrics, "avg_revenue"),
            avg_occupancy=_weighted_avg(metrics, "avg_occupancy"),
            avg_price=_weighted_avg(metrics, "avg_price"),
            avg_rating=_weighted_avg(metrics, "avg_rating"),
            listing_count=sum((r.listing_count or 0) for r in metrics),
        )

        if insight is not None:
            return ComparableStatistics(
                combo_profile=insight.profile,
                neighborhood_profile=profile.profile if profile else None,
                success_factors=_parse_json_array(insight.success_factors),
                risk_factors=_parse_json_array(insight.risk_factors),
                premium_amenities=_parse_json_array(insight.premium_amenities),
                review_count=insight.review_count or 0,
                computed_at=insight.computed_at,
                neighborhood_generated_at=profile.generated_at if profile else None,
                **aggregates,
            )

        # no combo-level insight: neighbourhood profile only
        logger.info(
            "comparable_statistics_fallback",
            extra={"context": {"market": market, "neighborhood": neighborhood, "bedrooms": bedrooms}},
        )
        return ComparableStatistics(
            combo_profile=None,
            neighborhood_profile=profile.profile,
            neighborhood_generated_at=profile.generated_at,
            **aggregates,
        )

    def get_percentiles(self, market: str, neighborhood: str, bedrooms: int) -> PercentileStatistics | None:
        with Session(self.engine) as session:
            rows = list(
                session.exec(
                    select(ListingRow).where(
                        ListingRow.market == market,
                        ListingRow.neighbourhood == neighborhood,
                        ListingRow.bedrooms == bedrooms,
                        ListingRow.room_type == ENTIRE_HOME,
                        ListingRow.estimated_revenue_l365d.is_not(None),  # type: ignore[union-attr]
                    )
                )
            )

        if not rows:
            return None

        rev25, rev50, rev75 = _percentile_triplet([float(r.estimated_revenue_l365d) for r in rows])
        price25, price50, price75 = _percentile_triplet([float(r.price) for r in rows if r.price is not None])

        return PercentileStatistics(
            revenue_p25=rev25,
            revenue_p50=rev50,
            revenue_p75=rev75,
            price_p25=price25,
            price_p50=price50,
            price_p75=price75,
            comparables_count=len(rows),
        )

    def get_supported_combinations(self) -> list[str]:
        with Session(self.engine) as session:
            rows = list(session.exec(select(NeighborhoodInsightRow)))
        combos = {format_combination(r.neighbourhood, r.bedrooms, _dec(r.bathrooms)) for r in rows}
        return sorted(combos)

    # ----- market browsing -----

    def list_markets(self) -> list[MarketInfo]:
        with Session(self.engine) as session:
            rows = list(session.exec(select(NeighborhoodMetricRow)))

        by_market: dict[str, list[NeighborhoodMetricRow]] = defaultdict(list)
        for r in rows:
            if r.market:
                by_market[r.market].append(r)

        out = [
            MarketInfo(
                id=market,
                name=_market_name(market),
                neighborhood_count=len({r.neighbourhood for r in group}),
                listing_count=sum((r.listing_count or 0) for r in group),
            )
            for market, group in by_market.items()
        ]
        return sorted(out, key=lambda m: m.listing_count, reverse=True)

    def list_neighborhoods(self, market: str) -> list[NeighborhoodInfo]:
        with Session(self.engine) as session:
            rows = [
                r
                for r in session.exec(select(NeighborhoodMetricRow).where(NeighborhoodMetricRow.market == market))
                if _is_entire_home(r)
            ]

        by_hood: dict[str, list[NeighborhoodMetricRow]] = defaultdict(list)
        for r in rows:
            by_hood[r.neighbourhood].append(r)

        out = [
            NeighborhoodInfo(
                name=hood,
                listing_count=sum((r.listing_count or 0) for r in group),
                avg_price=_weighted_avg(group, "avg_price"),
                avg_occupancy=_weighted_avg(group, "avg_occupancy", places="0.1"),
            )
            for hood, group in by_hood.items()
        ]
        return sorted(out, key=lambda n: n.listing_count, reverse=True)

    def list_configurations(self, market: str, neighborhood: str) -> list[ConfigurationInfo]:
        with Session(self.engine) as session:
            insights = list(
                session.exec(
                    select(NeighborhoodInsightRow).where(
                        NeighborhoodInsightRow.market == market,
                        NeighborhoodInsightRow.neighbourhood == neighborhood,
                    )
                )
            )
            metrics = [
                r
                for r in session.exec(
                    select(NeighborhoodMetricRow).where(
                        NeighborhoodMetricRow.market == market,
                        NeighborhoodMetricRow.neighbourhood == neighborhood,
                    )
                )
                if _is_entire_home(r)
            ]

        counts: dict[int, int] = defaultdict(int)
        for r in metrics:
            counts[r.bedrooms] += r.listing_count or 0

        out = [
            ConfigurationInfo(
                bedrooms=i.bedrooms,
                bathrooms=_dec(i.bathrooms),
                listing_count=counts.get(i.bedrooms, 0),
                has_insights=i.profile is not None,
            )
            for i in insights
        ]
        return sorted(out, key=lambda c: (c.bedrooms, c.bathrooms))

    # ----- loading -----

    def seed(
        self,
        metrics: Iterable[dict[str, Any]] = (),
        insights: Iterable[dict[str, Any]] = (),
        profiles: Iterable[dict[str, Any]] = (),
        listings: Iterable[dict[str, Any]] = (),
    ) -> int:
        """
        Insert raw rows. Insight factor lists may be given as Python lists or
        as already-encoded JSON text.
        Naive timestamps are taken to be UTC.
        """
        written = 0
        with Session(self.engine) as session:
            for item in metrics:
                session.add(NeighborhoodMetricRow(**item))
                written += 1
            for item in insights:
                data = dict(item)
                for key in ("success_factors", "risk_factors", "premium_amenities"):
                    data[key] = _json_text(data.get(key))
                session.add(NeighborhoodInsightRow(**_with_utc(data, "computed_at")))
                written += 1
            for item in profiles:
                session.add(NeighborhoodProfileRow(**_with_utc(item, "generated_at")))
                written += 1
            for item in listings:
                session.add(ListingRow(**item))
                written += 1
            session.commit()

        logger.info("seed_completed", extra={"context": {"rows": written}})
        return written
