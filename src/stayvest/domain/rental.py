from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from stayvest.domain.analysis import JsonDecimal


class RentalInputs(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    nightly_rate: JsonDecimal = Decimal("0")
    nights_booked_per_month: int = 0
    cleaning_fee_per_stay: JsonDecimal = Decimal("0")
    stays_per_month: int = 0
    monthly_fixed_costs: JsonDecimal = Decimal("0")  # mortgage, utilities, etc.
    purchase_price: JsonDecimal = Decimal("0")


class RentalResult(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    monthly_revenue: JsonDecimal
    monthly_costs: JsonDecimal
    monthly_profit: JsonDecimal
    annual_profit: JsonDecimal
    cap_rate_percent: JsonDecimal
