# src/stayvest/services/validation.py

from typing import Any, Iterable

from pydantic import ValidationError

from stayvest.domain.analysis import AnalyzeRequest
from stayvest.domain.errors import AnalysisValidationError

# Wire names -> labels used in "<Label> is required." messages
_FIELD_LABELS = {
    "market": "Market",
    "neighborhood": "Neighborhood",
    "bedrooms": "Bedrooms",
    "bathrooms": "Bathrooms",
    "purchasePrice": "PurchasePrice",
    "downPaymentPercent": "DownPaymentPercent",
    "interestRate": "InterestRate",
    "loanTermYears": "LoanTermYears",
    "selfManaged": "SelfManaged",
    "hoaMonthly": "HoaMonthly",
}


def _message_for(err: dict[str, Any], field: str) -> str:
    """
    Turn one pydantic error into a client-facing sentence.

    Our own validators raise ValueError with a finished message; pydantic
    prefixes those with "Value error, ", so prefer the original exception.
    """
    label = _FIELD_LABELS.get(field, field)
    if err.get("type") == "missing":
        return f"{label} is required."
    ctx = err.get("ctx") or {}
    original = ctx.get("error")
    if isinstance(original, Exception):
        return str(original)
    return f"{label}: {err.get('msg', 'invalid value')}"


def field_errors(raw_errors: Iterable[dict[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic / FastAPI error dicts by wire field name."""
    errors: dict[str, list[str]] = {}
    for err in raw_errors:
        loc = err.get("loc") or ("request",)
        field = str(loc[-1]) if loc[0] == "body" and len(loc) > 1 else str(loc[0])
        errors.setdefault(field, []).append(_message_for(err, field))
    return errors


def validate_analyze_request(request: AnalyzeRequest) -> dict[str, list[str]]:
    """
    Business rules that need the whole request. Range checks already ran
    when the model was constructed.
    """
    errors: dict[str, list[str]] = {}

    if request.purchase_price is None or request.purchase_price <= 0:
        errors["purchasePrice"] = ["PurchasePrice must be greater than zero."]

    return errors


def parse_analyze_request(raw: dict[str, Any]) -> AnalyzeRequest:
    """
    Build and fully validate an AnalyzeRequest from a raw payload.

    Raises AnalysisValidationError carrying every violated constraint,
    keyed by camelCase field name.
    """
    try:
        request = AnalyzeRequest.model_validate(raw)
    except ValidationError as exc:
        errors = field_errors(exc.errors())
        # report the business rule alongside the range failures
        price = raw.get("purchasePrice", raw.get("purchase_price"))
        try:
            price_ok = price is not None and float(price) > 0
        except (TypeError, ValueError):
            price_ok = True  # already reported as a type error
        if not price_ok and "purchasePrice" not in errors:
            errors["purchasePrice"] = ["PurchasePrice must be greater than zero."]
        raise AnalysisValidationError(errors) from exc

    errors = validate_analyze_request(request)
    if errors:
        raise AnalysisValidationError(errors)
    return request


def ensure_valid(request: AnalyzeRequest) -> AnalyzeRequest:
    errors = validate_analyze_request(request)
    if errors:
        raise AnalysisValidationError(errors)
    return request
