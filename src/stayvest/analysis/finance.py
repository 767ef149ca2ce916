from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Decimal

from stayvest.domain.analysis import AnalyzeRequest, ExpenseItem, ExpensesSection, MetricsSection
from stayvest.domain.assumptions import AnalysisAssumptions

ZERO = Decimal("0")
HUNDRED = Decimal("100")
TWELVE = Decimal("12")
DAYS_PER_YEAR = Decimal("365")

_CENTS = Decimal("0.01")
_BASIS = Decimal("0.0001")

# Observable contract: clients branch on these keys.
EXPENSE_KEYS = (
    "mortgage",
    "propertyTax",
    "insurance",
    "hoa",
    "utilities",
    "cleaning",
    "platformFees",
    "maintenance",
    "occupancyTax",
    "permit",
    "propertyManagement",
)


# ---------------------------------------------------------------------
# Rounding / formatting
# ---------------------------------------------------------------------

def round_money(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_EVEN)


def round_ratio(value: Decimal) -> Decimal:
    return value.quantize(_BASIS, rounding=ROUND_HALF_EVEN)


def fmt_number(value: Decimal) -> str:
    """7.0 -> '7', 6.890 -> '6.89', 1.5 -> '1.5'."""
    return f"{value.normalize():f}"


def fmt_percent(rate: Decimal) -> str:
    """0.0125 -> '1.25%'."""
    return f"{fmt_number(rate * HUNDRED)}%"


def format_combination(neighborhood: str, bedrooms: int, bathrooms: Decimal) -> str:
    """('Mission Bay', 2, 2.0) -> 'Mission Bay (2BR/2BA)'."""
    return f"{neighborhood} ({bedrooms}BR/{fmt_number(bathrooms)}BA)"


# ---------------------------------------------------------------------
# Mortgage
# ---------------------------------------------------------------------

def monthly_mortgage_payment(principal: Decimal, annual_rate_percent: Decimal, years: int) -> Decimal:
    """
    Standard fixed-rate amortization formula:
    M = P * [ r(1+r)^n / ((1+r)^n - 1) ]
    P = loan principal
    r = monthly interest rate (annual percent / 100 / 12)
    n = number of payments (months)

    Unrounded; callers round when the value is surfaced.
    """
    if principal <= 0:
        return ZERO

    r = annual_rate_percent / HUNDRED / TWELVE
    n = years * 12

    if r == 0:
        return principal / n

    factor = (1 + r) ** n
    return principal * r * factor / (factor - 1)


# ---------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class ExpenseProjection:
    """Full-precision annual expenses plus the provenance of each line."""

    mortgage: Decimal
    property_tax: Decimal
    insurance: Decimal
    hoa: Decimal
    utilities: Decimal
    cleaning: Decimal
    platform_fees: Decimal
    maintenance: Decimal
    occupancy_tax: Decimal
    permit: Decimal
    property_management: Decimal

    loan_amount: Decimal
    monthly_mortgage: Decimal
    estimated_turns: Decimal
    sources: dict[str, str] = field(default_factory=dict)

    def values(self) -> dict[str, Decimal]:
        return {
            "mortgage": self.mortgage,
            "propertyTax": self.property_tax,
            "insurance": self.insurance,
            "hoa": self.hoa,
            "utilities": self.utilities,
            "cleaning": self.cleaning,
            "platformFees": self.platform_fees,
            "maintenance": self.maintenance,
            "occupancyTax": self.occupancy_tax,
            "permit": self.permit,
            "propertyManagement": self.property_management,
        }

    @property
    def total(self) -> Decimal:
        return sum(self.values().values(), ZERO)

    @property
    def operating_total(self) -> Decimal:
        # NOI excludes debt service
        return self.total - self.mortgage

    def to_section(self) -> ExpensesSection:
        breakdown = {
            key: ExpenseItem(value=round_money(value), monthly=False, source=self.sources[key])
            for key, value in self.values().items()
        }
        # Summing the rounded lines keeps annual_total == sum(breakdown) exact.
        annual_total = sum((item.value for item in breakdown.values()), ZERO)
        return ExpensesSection(
            annual_total=annual_total,
            monthly=round_money(annual_total / TWELVE),
            breakdown=breakdown,
        )


def estimate_turns(gross_revenue: Decimal, avg_price: Decimal, assumptions: AnalysisAssumptions) -> Decimal:
    """One turn per average-priced booking; configured default when there is no price."""
    if avg_price > 0:
        return gross_revenue / avg_price
    return assumptions.default_estimated_turns


def project_expenses(
    request: AnalyzeRequest,
    gross_revenue: Decimal,
    avg_price: Decimal,
    interest_rate: Decimal,
    assumptions: AnalysisAssumptions,
) -> ExpenseProjection:
    a = assumptions
    purchase_price = request.purchase_price or ZERO

    down_payment = purchase_price * (request.down_payment_percent / HUNDRED)
    loan_amount = purchase_price - down_payment
    monthly_mortgage = monthly_mortgage_payment(loan_amount, interest_rate, request.loan_term_years)

    turns = estimate_turns(gross_revenue, avg_price, a)
    hoa = request.hoa_monthly

    if request.self_managed:
        management = ZERO
        management_source = "Self-managed (user selected)"
    else:
        management = gross_revenue * a.property_management_rate
        management_source = f"{fmt_percent(a.property_management_rate)} of gross revenue"

    sources = {
        "mortgage": (
            f"Calculated: ${loan_amount:,.0f} loan @ {fmt_number(interest_rate)}% "
            f"(Freddie Mac PMMS), {request.loan_term_years}yr"
        ),
        "propertyTax": f"San Diego County {fmt_percent(a.property_tax_rate)} of purchase price",
        "insurance": "Estimated STR insurance, San Diego metro",
        "hoa": f"User provided: ${fmt_number(hoa)}/month" if hoa > 0 else "None",
        "utilities": f"SDG&E average {request.bedrooms}BR, 2024",
        "cleaning": (
            f"Calculated: ${fmt_number(a.cleaning_cost_per_turn)}/turn "
            f"x estimated {turns:,.0f} turns/year"
        ),
        "platformFees": f"Airbnb {fmt_percent(a.platform_fee_rate)} host-only fee",
        "maintenance": f"{fmt_percent(a.maintenance_rate)} of gross revenue (VRMA benchmark)",
        "occupancyTax": f"San Diego TOT {fmt_percent(a.occupancy_tax_rate)} (Municipal Code 35.0103)",
        "permit": "San Diego STRO annual renewal, 2024",
        "propertyManagement": management_source,
    }

    return ExpenseProjection(
        mortgage=monthly_mortgage * TWELVE,
        property_tax=purchase_price * a.property_tax_rate,
        insurance=a.annual_insurance,
        hoa=hoa * TWELVE,
        utilities=a.annual_utilities,
        cleaning=turns * a.cleaning_cost_per_turn,
        platform_fees=gross_revenue * a.platform_fee_rate,
        maintenance=gross_revenue * a.maintenance_rate,
        occupancy_tax=gross_revenue * a.occupancy_tax_rate,
        permit=a.permit_fee,
        property_management=management,
        loan_amount=loan_amount,
        monthly_mortgage=monthly_mortgage,
        estimated_turns=turns,
        sources=sources,
    )


# ---------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------

def calculate_metrics(
    request: AnalyzeRequest,
    gross_revenue: Decimal,
    expenses: ExpenseProjection,
    avg_price: Decimal,
) -> MetricsSection:
    """
    Investor-facing return metrics. Every division has a zero guard that
    yields 0 instead of raising.
    """
    purchase_price = request.purchase_price or ZERO
    total = expenses.total

    # --- NOI (Net Operating Income) ---
    # Revenue after operating expenses, BEFORE debt.
    noi = gross_revenue - expenses.operating_total

    # --- Cash Flow After Debt ---
    cash_flow = gross_revenue - total

    # --- Cash on Cash Return ---
    down_payment = purchase_price * (request.down_payment_percent / HUNDRED)
    cash_on_cash = cash_flow / down_payment if down_payment > 0 else ZERO

    # --- Cap Rate / Gross Yield ---
    cap_rate = noi / purchase_price if purchase_price > 0 else ZERO
    gross_yield = gross_revenue / purchase_price if purchase_price > 0 else ZERO

    # --- Breakeven Occupancy ---
    # share of the year booked at the average nightly price that covers all expenses
    break_even = total / (avg_price * DAYS_PER_YEAR) if avg_price > 0 else ZERO

    return MetricsSection(
        cash_on_cash_return=round_ratio(cash_on_cash),
        cap_rate=round_ratio(cap_rate),
        net_operating_income=round_money(noi),
        annual_cash_flow=round_money(cash_flow),
        break_even_occupancy=round_ratio(break_even),
        gross_yield=round_ratio(gross_yield),
    )
