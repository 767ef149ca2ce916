# src/stayvest/domain/ports.py
from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from stayvest.domain.analysis import (
    ComparableStatistics,
    ConfigurationInfo,
    MarketInfo,
    NeighborhoodInfo,
    PercentileStatistics,
)


# ----------------------------
# Comparable statistics lookup
# ----------------------------

class MarketRepository(Protocol):
    def get_comparable_statistics(
        self,
        market: str,
        neighborhood: str,
        bedrooms: int,
        bathrooms: Decimal,
    ) -> ComparableStatistics | None:
        ...

    def get_percentiles(
        self,
        market: str,
        neighborhood: str,
        bedrooms: int,
    ) -> PercentileStatistics | None:
        ...

    def get_supported_combinations(self) -> list[str]:
        """Strings shaped like "Mission Bay (2BR/2BA)"."""
        ...


# ----------------------------
# Market browsing
# ----------------------------

class MarketCatalog(Protocol):
    def list_markets(self) -> list[MarketInfo]:
        ...

    def list_neighborhoods(self, market: str) -> list[NeighborhoodInfo]:
        ...

    def list_configurations(self, market: str, neighborhood: str) -> list[ConfigurationInfo]:
        ...
