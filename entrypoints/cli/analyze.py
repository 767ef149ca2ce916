# entrypoints/cli/analyze.py
from __future__ import annotations

import argparse
import json
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "src")))

from stayvest.adapters.config import config
from stayvest.adapters.sql_repo import SqlMarketRepository
from stayvest.domain.errors import AnalysisValidationError
from stayvest.services.analysis_service import AnalysisService
from stayvest.services.validation import parse_analyze_request


def main() -> None:
    ap = argparse.ArgumentParser(description="Run an STR investment analysis against the local database.")
    ap.add_argument("--db", default=config.DB_URI)
    ap.add_argument("--market", default="san-diego")
    ap.add_argument("--neighborhood", required=True)
    ap.add_argument("--bedrooms", type=int, required=True)
    ap.add_argument("--bathrooms", type=float, required=True)
    ap.add_argument("--price", type=float, required=True, help="purchase price")
    ap.add_argument("--down", type=float, default=20.0, help="down payment percent")
    ap.add_argument("--rate", type=float, default=None, help="interest rate percent (default: configured PMMS rate)")
    ap.add_argument("--term", type=int, default=30)
    ap.add_argument("--managed", action="store_true", help="use professional management")
    ap.add_argument("--hoa", type=float, default=0.0, help="monthly HOA")
    args = ap.parse_args()

    payload = {
        "market": args.market,
        "neighborhood": args.neighborhood,
        "bedrooms": args.bedrooms,
        "bathrooms": str(args.bathrooms),
        "purchasePrice": str(args.price),
        "downPaymentPercent": str(args.down),
        "interestRate": None if args.rate is None else str(args.rate),
        "loanTermYears": args.term,
        "selfManaged": not args.managed,
        "hoaMonthly": str(args.hoa),
    }

    try:
        request = parse_analyze_request(payload)
    except AnalysisValidationError as e:
        raise SystemExit(f"Invalid request: {e}") from e

    result = AnalysisService(SqlMarketRepository(args.db)).analyze(request)

    if result.status == "not_found":
        print(result.error_message)
        print("Supported combinations:")
        for combo in result.supported_combinations:
            print("  ", combo)
        raise SystemExit(1)
    if result.status == "upstream_error":
        raise SystemExit(result.error_message)

    print(json.dumps(result.response.model_dump(mode="json", by_alias=True), indent=2))


if __name__ == "__main__":
    main()
