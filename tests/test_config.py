from decimal import Decimal

import pytest
from pydantic import ValidationError

from stayvest.adapters.config import AppConfig
from stayvest.domain.assumptions import AnalysisAssumptions


def test_defaults_match_assumption_defaults():
    assert AnalysisAssumptions.from_config(AppConfig()) == AnalysisAssumptions()


def test_percent_like_rates_become_fractions(monkeypatch):
    monkeypatch.setenv("STAYVEST_PLATFORM_FEE_RATE", "3%")
    monkeypatch.setenv("STAYVEST_PROPERTY_MANAGEMENT_RATE", "25")
    cfg = AppConfig()
    assert cfg.PLATFORM_FEE_RATE == pytest.approx(0.03)
    assert cfg.PROPERTY_MANAGEMENT_RATE == pytest.approx(0.25)


def test_amounts_accept_currency_strings(monkeypatch):
    monkeypatch.setenv("STAYVEST_ANNUAL_INSURANCE", "$3,100")
    assert AnalysisAssumptions.from_config(AppConfig()).annual_insurance == Decimal("3100.0")


def test_negative_rate_rejected(monkeypatch):
    monkeypatch.setenv("STAYVEST_MAINTENANCE_RATE", "-0.01")
    with pytest.raises(ValidationError):
        AppConfig()
