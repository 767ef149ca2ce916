from __future__ import annotations

from decimal import Decimal

from stayvest.analysis.finance import format_combination
from stayvest.domain.analysis import (
    ComparableStatistics,
    ConfigurationInfo,
    MarketInfo,
    NeighborhoodInfo,
    PercentileStatistics,
)


class InMemoryMarketRepository:
    def __init__(self) -> None:
        self._stats: dict[tuple[str, str, int, Decimal], ComparableStatistics] = {}
        self._percentiles: dict[tuple[str, str, int], PercentileStatistics] = {}
        self.calls: list[str] = []

    def add(
        self,
        market: str,
        neighborhood: str,
        bedrooms: int,
        bathrooms: Decimal,
        stats: ComparableStatistics,
        percentiles: PercentileStatistics | None = None,
    ) -> None:
        self._stats[(market, neighborhood, bedrooms, Decimal(bathrooms))] = stats
        if percentiles is not None:
            self._percentiles[(market, neighborhood, bedrooms)] = percentiles

    def get_comparable_statistics(
        self,
        market: str,
        neighborhood: str,
        bedrooms: int,
        bathrooms: Decimal,
    ) -> ComparableStatistics | None:
        self.calls.append("get_comparable_statistics")
        return self._stats.get((market, neighborhood, bedrooms, Decimal(bathrooms)))

    def get_percentiles(self, market: str, neighborhood: str, bedrooms: int) -> PercentileStatistics | None:
        self.calls.append("get_percentiles")
        return self._percentiles.get((market, neighborhood, bedrooms))

    def get_supported_combinations(self) -> list[str]:
        self.calls.append("get_supported_combinations")
        return sorted({format_combination(n, b, ba) for (_, n, b, ba) in self._stats})

    def list_markets(self) -> list[MarketInfo]:
        markets: dict[str, list[ComparableStatistics]] = {}
        hoods: dict[str, set[str]] = {}
        for (market, hood, _, _), stats in self._stats.items():
            markets.setdefault(market, []).append(stats)
            hoods.setdefault(market, set()).add(hood)
        out = [
            MarketInfo(
                id=m,
                name=m.replace("-", " ").title(),
                neighborhood_count=len(hoods[m]),
                listing_count=sum(s.listing_count for s in group),
            )
            for m, group in markets.items()
        ]
        return sorted(out, key=lambda m: m.listing_count, reverse=True)

    def list_neighborhoods(self, market: str) -> list[NeighborhoodInfo]:
        grouped: dict[str, list[ComparableStatistics]] = {}
        for (m, hood, _, _), stats in self._stats.items():
            if m == market:
                grouped.setdefault(hood, []).append(stats)
        out = []
        for hood, group in grouped.items():
            count = sum(s.listing_count for s in group)
            first = group[0]
            out.append(
                NeighborhoodInfo(
                    name=hood,
                    listing_count=count,
                    avg_price=first.avg_price,
                    avg_occupancy=first.avg_occupancy,
                )
            )
        return sorted(out, key=lambda n: n.listing_count, reverse=True)

    def list_configurations(self, market: str, neighborhood: str) -> list[ConfigurationInfo]:
        out = [
            ConfigurationInfo(
                bedrooms=b,
                bathrooms=ba,
                listing_count=stats.listing_count,
                has_insights=stats.combo_profile is not None,
            )
            for (m, hood, b, ba), stats in self._stats.items()
            if m == market and hood == neighborhood
        ]
        return sorted(out, key=lambda c: (c.bedrooms, c.bathrooms))
