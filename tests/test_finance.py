from decimal import Decimal

import pytest

from fixtures.markets import sample_request
from stayvest.analysis.finance import (
    EXPENSE_KEYS,
    calculate_metrics,
    estimate_turns,
    fmt_percent,
    monthly_mortgage_payment,
    project_expenses,
    round_money,
)
from stayvest.domain.assumptions import AnalysisAssumptions

A = AnalysisAssumptions()
GROSS = Decimal("60000")
AVG_PRICE = Decimal("200")


def _project(request=None, gross=GROSS, avg_price=AVG_PRICE, rate=None):
    request = request or sample_request()
    rate = request.interest_rate if rate is None else rate
    return project_expenses(request, gross, avg_price, rate, A)


# ---------------------------------------------------------------------
# Mortgage
# ---------------------------------------------------------------------

def test_mortgage_standard_amortization():
    assert round_money(monthly_mortgage_payment(Decimal("200000"), Decimal("6"), 30)) == Decimal("1199.10")
    assert round_money(monthly_mortgage_payment(Decimal("100000"), Decimal("7"), 30)) == Decimal("665.30")


def test_mortgage_zero_rate_is_straight_line():
    assert monthly_mortgage_payment(Decimal("360000"), Decimal("0"), 30) == Decimal("1000")


@pytest.mark.parametrize("principal", [Decimal("0"), Decimal("-5")])
def test_mortgage_no_principal_is_zero(principal):
    assert monthly_mortgage_payment(principal, Decimal("6.5"), 30) == Decimal("0")


# ---------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------

def test_expense_lines_for_baseline_deal():
    section = _project().to_section()
    values = {k: item.value for k, item in section.breakdown.items()}

    assert tuple(section.breakdown) == EXPENSE_KEYS
    assert values == {
        "mortgage": Decimal("10000.00"),
        "propertyTax": Decimal("5000.00"),
        "insurance": Decimal("2400.00"),
        "hoa": Decimal("0.00"),
        "utilities": Decimal("3000.00"),
        "cleaning": Decimal("18000.00"),
        "platformFees": Decimal("1800.00"),
        "maintenance": Decimal("1200.00"),
        "occupancyTax": Decimal("6300.00"),
        "permit": Decimal("125.00"),
        "propertyManagement": Decimal("0.00"),
    }
    assert section.annual_total == Decimal("47825.00")
    assert section.monthly == Decimal("3985.42")
    assert all(item.monthly is False for item in section.breakdown.values())


def test_annual_total_equals_sum_of_rounded_lines():
    # odd numbers so individual lines carry fractional cents
    request = sample_request(purchase_price=Decimal("512345.67"), interest_rate=Decimal("6.89"))
    section = _project(request, gross=Decimal("48765.43"), avg_price=Decimal("187.31")).to_section()

    assert section.annual_total == sum(item.value for item in section.breakdown.values())
    assert section.monthly == round_money(section.annual_total / 12)


def test_professional_management_adds_twenty_percent_of_gross():
    section = _project(sample_request(self_managed=False)).to_section()
    mgmt = section.breakdown["propertyManagement"]
    assert mgmt.value == Decimal("12000.00")
    assert mgmt.source == "20% of gross revenue"
    assert section.annual_total == Decimal("59825.00")


def test_cleaning_falls_back_to_default_turns_without_price():
    projection = _project(avg_price=Decimal("0"))
    assert projection.estimated_turns == Decimal("80")
    assert projection.to_section().breakdown["cleaning"].value == Decimal("4800.00")


def test_estimate_turns_uses_average_price():
    assert estimate_turns(GROSS, AVG_PRICE, A) == Decimal("300")


def test_hoa_is_annualized():
    section = _project(sample_request(hoa_monthly=Decimal("350"))).to_section()
    hoa = section.breakdown["hoa"]
    assert hoa.value == Decimal("4200.00")
    assert hoa.source == "User provided: $350/month"


def test_provenance_strings():
    request = sample_request(interest_rate=Decimal("6.89"))
    sources = {k: item.source for k, item in _project(request).to_section().breakdown.items()}

    assert sources["mortgage"] == "Calculated: $300,000 loan @ 6.89% (Freddie Mac PMMS), 30yr"
    assert sources["propertyTax"] == "San Diego County 1.25% of purchase price"
    assert sources["insurance"] == "Estimated STR insurance, San Diego metro"
    assert sources["hoa"] == "None"
    assert sources["utilities"] == "SDG&E average 2BR, 2024"
    assert sources["cleaning"] == "Calculated: $60/turn x estimated 300 turns/year"
    assert sources["platformFees"] == "Airbnb 3% host-only fee"
    assert sources["maintenance"] == "2% of gross revenue (VRMA benchmark)"
    assert sources["occupancyTax"] == "San Diego TOT 10.5% (Municipal Code 35.0103)"
    assert sources["permit"] == "San Diego STRO annual renewal, 2024"
    assert sources["propertyManagement"] == "Self-managed (user selected)"


def test_full_down_payment_has_no_mortgage():
    projection = _project(sample_request(down_payment_percent=Decimal("100"), interest_rate=Decimal("7")))
    assert projection.loan_amount == Decimal("0")
    assert projection.mortgage == Decimal("0")


def test_fmt_percent_trims_trailing_zeros():
    assert fmt_percent(Decimal("0.20")) == "20%"
    assert fmt_percent(Decimal("0.0125")) == "1.25%"


# ---------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------

def test_metrics_for_baseline_deal():
    request = sample_request()
    m = calculate_metrics(request, GROSS, _project(request), AVG_PRICE)

    assert m.net_operating_income == Decimal("22175.00")
    assert m.annual_cash_flow == Decimal("12175.00")
    assert m.cash_on_cash_return == Decimal("0.1218")
    assert m.cap_rate == Decimal("0.0554")
    assert m.gross_yield == Decimal("0.1500")
    assert m.break_even_occupancy == Decimal("0.6551")


def test_noi_excludes_debt_service():
    request = sample_request(interest_rate=Decimal("7"))
    projection = _project(request)
    m = calculate_metrics(request, GROSS, projection, AVG_PRICE)
    assert m.net_operating_income == round_money(GROSS - (projection.total - projection.mortgage))


def test_metrics_zero_guards():
    request = sample_request(down_payment_percent=Decimal("0"))
    m = calculate_metrics(request, GROSS, _project(request), Decimal("0"))
    assert m.cash_on_cash_return == Decimal("0")
    assert m.break_even_occupancy == Decimal("0")


def test_metrics_without_purchase_price_do_not_raise():
    request = sample_request().model_copy(update={"purchase_price": None})
    m = calculate_metrics(request, GROSS, _project(request), AVG_PRICE)
    assert m.cap_rate == Decimal("0")
    assert m.gross_yield == Decimal("0")
    assert m.cash_on_cash_return == Decimal("0")
