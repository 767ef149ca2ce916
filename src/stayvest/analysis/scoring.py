# src/stayvest/analysis/scoring.py
from __future__ import annotations

from decimal import Decimal

from stayvest.domain.analysis import Confidence, Recommendation
from stayvest.domain.assumptions import AnalysisAssumptions


def determine_recommendation(cash_on_cash: Decimal, assumptions: AnalysisAssumptions) -> Recommendation:
    """
    Lower bounds are inclusive, so a tie lands in the higher tier:
      coc >= buy_threshold       -> buy
      coc >= consider_threshold  -> consider
      otherwise                  -> caution
    """
    if cash_on_cash >= assumptions.buy_threshold:
        return "buy"
    if cash_on_cash >= assumptions.consider_threshold:
        return "consider"
    return "caution"


def determine_confidence(listing_count: int, assumptions: AnalysisAssumptions) -> Confidence:
    if listing_count >= assumptions.high_confidence_listing_count:
        return "high"
    if listing_count >= assumptions.medium_confidence_listing_count:
        return "medium"
    return "low"


def build_headline(cash_on_cash: Decimal, assumptions: AnalysisAssumptions) -> str:
    strength = "Strong" if cash_on_cash >= assumptions.strong_investment_threshold else "Moderate"
    return f"{strength} investment potential with {cash_on_cash:.1%} cash-on-cash return"
