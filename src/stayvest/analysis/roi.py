from __future__ import annotations

from stayvest.analysis.finance import HUNDRED, TWELVE, round_money
from stayvest.domain.errors import InvalidRentalInputError
from stayvest.domain.rental import RentalInputs, RentalResult

# attribute -> name reported in errors
_NON_NEGATIVE_FIELDS = (
    ("nightly_rate", "NightlyRate"),
    ("nights_booked_per_month", "NightsBookedPerMonth"),
    ("cleaning_fee_per_stay", "CleaningFeePerStay"),
    ("stays_per_month", "StaysPerMonth"),
    ("monthly_fixed_costs", "MonthlyFixedCosts"),
)


def _validate(inputs: RentalInputs) -> None:
    errors: dict[str, list[str]] = {}

    if inputs.purchase_price <= 0:
        errors["PurchasePrice"] = ["PurchasePrice must be greater than zero."]

    for attr, label in _NON_NEGATIVE_FIELDS:
        if getattr(inputs, attr) < 0:
            errors[label] = [f"{label} cannot be negative."]

    if errors:
        raise InvalidRentalInputError(errors)


def calculate_roi(inputs: RentalInputs) -> RentalResult:
    """
    Back-of-envelope STR return from fully specified monthly cash flows
    (no market lookup involved).
    """
    _validate(inputs)

    monthly_revenue = (
        inputs.nightly_rate * inputs.nights_booked_per_month
        + inputs.cleaning_fee_per_stay * inputs.stays_per_month
    )
    monthly_costs = inputs.monthly_fixed_costs
    monthly_profit = monthly_revenue - monthly_costs
    annual_profit = monthly_profit * TWELVE

    cap_rate_percent = round_money(annual_profit / inputs.purchase_price * HUNDRED)

    return RentalResult(
        monthly_revenue=monthly_revenue,
        monthly_costs=monthly_costs,
        monthly_profit=monthly_profit,
        annual_profit=annual_profit,
        cap_rate_percent=cap_rate_percent,
    )

