from decimal import Decimal

import pytest

from fixtures.markets import sample_payload, sample_request
from stayvest.domain.errors import AnalysisValidationError
from stayvest.services.validation import ensure_valid, parse_analyze_request, validate_analyze_request


def test_valid_payload_parses_camel_case():
    req = parse_analyze_request(sample_payload(hoaMonthly=125, selfManaged=False))
    assert req.purchase_price == Decimal("400000")
    assert req.down_payment_percent == Decimal("25")
    assert req.hoa_monthly == Decimal("125")
    assert req.self_managed is False


def test_defaults_apply_when_optional_fields_omitted():
    payload = {"market": "san-diego", "neighborhood": "North Park", "bathrooms": 1, "purchasePrice": 550000}
    req = parse_analyze_request(payload)
    assert req.bedrooms == 0
    assert req.down_payment_percent == Decimal("20")
    assert req.interest_rate is None
    assert req.loan_term_years == 30
    assert req.self_managed is True


@pytest.mark.parametrize(
    "field, value, message",
    [
        ("bedrooms", 11, "Bedrooms must be between 0 and 10."),
        ("bathrooms", 0.25, "Bathrooms must be between 0.5 and 10."),
        ("downPaymentPercent", 101, "DownPaymentPercent must be between 0 and 100."),
        ("interestRate", 31, "InterestRate must be between 0 and 30."),
        ("loanTermYears", 0, "LoanTermYears must be between 1 and 40."),
        ("hoaMonthly", -1, "HoaMonthly cannot be negative."),
        ("market", "  ", "Market is required."),
        ("neighborhood", "", "Neighborhood is required."),
    ],
)
def test_range_violations_are_keyed_by_field(field, value, message):
    with pytest.raises(AnalysisValidationError) as exc:
        parse_analyze_request(sample_payload(**{field: value}))
    assert exc.value.errors[field] == [message]


@pytest.mark.parametrize("price", [0, -10, None])
def test_purchase_price_must_be_positive(price):
    with pytest.raises(AnalysisValidationError) as exc:
        parse_analyze_request(sample_payload(purchasePrice=price))
    assert exc.value.errors == {"purchasePrice": ["PurchasePrice must be greater than zero."]}


def test_price_rule_reported_alongside_range_failures():
    with pytest.raises(AnalysisValidationError) as exc:
        parse_analyze_request(sample_payload(purchasePrice=0, bedrooms=12))
    assert set(exc.value.errors) == {"purchasePrice", "bedrooms"}


def test_missing_required_fields():
    with pytest.raises(AnalysisValidationError) as exc:
        parse_analyze_request({"purchasePrice": 100000})
    assert exc.value.errors["market"] == ["Market is required."]
    assert exc.value.errors["neighborhood"] == ["Neighborhood is required."]
    assert exc.value.errors["bathrooms"] == ["Bathrooms is required."]


def test_business_rules_on_constructed_request():
    req = sample_request(purchase_price=None)
    assert validate_analyze_request(req) == {"purchasePrice": ["PurchasePrice must be greater than zero."]}
    with pytest.raises(AnalysisValidationError):
        ensure_valid(req)
    assert ensure_valid(sample_request()) == sample_request()
