# src/stayvest/domain/assumptions.py
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


def _dec(value: float | int | str) -> Decimal:
    # via str so 0.0125 stays 0.0125 instead of its binary expansion
    return Decimal(str(value))


class AnalysisAssumptions(BaseModel):
    """Point-estimate rates, fees and thresholds used by the analysis engine."""

    model_config = ConfigDict(frozen=True)

    default_interest_rate: Decimal = Decimal("6.89")  # annual percent
    property_tax_rate: Decimal = Decimal("0.0125")
    annual_insurance: Decimal = Decimal("2400")
    annual_utilities: Decimal = Decimal("3000")
    cleaning_cost_per_turn: Decimal = Decimal("60")
    default_estimated_turns: Decimal = Decimal("80")
    platform_fee_rate: Decimal = Decimal("0.03")
    maintenance_rate: Decimal = Decimal("0.02")
    occupancy_tax_rate: Decimal = Decimal("0.105")
    permit_fee: Decimal = Decimal("125")
    property_management_rate: Decimal = Decimal("0.20")

    seasonal_occupancy_low: Decimal = Decimal("0.55")
    seasonal_occupancy_high: Decimal = Decimal("0.89")

    buy_threshold: Decimal = Decimal("0.08")
    consider_threshold: Decimal = Decimal("0.05")
    strong_investment_threshold: Decimal = Decimal("0.06")

    high_confidence_listing_count: int = 50
    medium_confidence_listing_count: int = 20

    @classmethod
    def from_config(cls, cfg) -> "AnalysisAssumptions":
        return cls(
            default_interest_rate=_dec(cfg.DEFAULT_INTEREST_RATE),
            property_tax_rate=_dec(cfg.PROPERTY_TAX_RATE),
            annual_insurance=_dec(cfg.ANNUAL_INSURANCE),
            annual_utilities=_dec(cfg.ANNUAL_UTILITIES),
            cleaning_cost_per_turn=_dec(cfg.CLEANING_COST_PER_TURN),
            default_estimated_turns=_dec(cfg.DEFAULT_ESTIMATED_TURNS),
            platform_fee_rate=_dec(cfg.PLATFORM_FEE_RATE),
            maintenance_rate=_dec(cfg.MAINTENANCE_RATE),
            occupancy_tax_rate=_dec(cfg.OCCUPANCY_TAX_RATE),
            permit_fee=_dec(cfg.PERMIT_FEE),
            property_management_rate=_dec(cfg.PROPERTY_MANAGEMENT_RATE),
            seasonal_occupancy_low=_dec(cfg.SEASONAL_OCCUPANCY_LOW),
            seasonal_occupancy_high=_dec(cfg.SEASONAL_OCCUPANCY_HIGH),
            buy_threshold=_dec(cfg.BUY_THRESHOLD),
            consider_threshold=_dec(cfg.CONSIDER_THRESHOLD),
            strong_investment_threshold=_dec(cfg.STRONG_INVESTMENT_THRESHOLD),
            high_confidence_listing_count=int(cfg.HIGH_CONFIDENCE_LISTING_COUNT),
            medium_confidence_listing_count=int(cfg.MEDIUM_CONFIDENCE_LISTING_COUNT),
        )
