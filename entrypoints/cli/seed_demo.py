# entrypoints/cli/seed_demo.py
from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime, timezone

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "src")))

from stayvest.adapters.config import config
from stayvest.adapters.sql_repo import SqlMarketRepository

MARKET = "san-diego"

# (neighbourhood, bedrooms, bathrooms, listings, avg revenue, occupancy days, avg price, rating)
DEMO_COMBOS = [
    ("Mission Bay", 2, 2.0, 64, 68500.0, 241.0, 312.0, 4.86),
    ("Mission Bay", 3, 2.0, 41, 84200.0, 228.0, 405.0, 4.83),
    ("Pacific Beach", 1, 1.0, 88, 39800.0, 252.0, 171.0, 4.79),
    ("Pacific Beach", 2, 1.0, 57, 52100.0, 236.0, 238.0, 4.81),
    ("North Park", 2, 1.0, 23, 37600.0, 219.0, 182.0, 4.88),
    ("La Jolla", 3, 2.5, 12, 97400.0, 204.0, 512.0, 4.91),
]

PROFILES = {
    "Mission Bay": "Bayfront and beach access drive year-round family demand.",
    "Pacific Beach": "Young, nightlife-oriented crowd; strong summer peaks.",
    "North Park": "Walkable craft-beer district popular with weekend visitors.",
    "La Jolla": "Premium coastal market with high nightly rates and longer stays.",
}


def _demo_rows() -> dict[str, list[dict]]:
    now = datetime.now(timezone.utc)
    metrics, insights, listings = [], [], []

    for hood, beds, baths, count, revenue, occupancy, price, rating in DEMO_COMBOS:
        metrics.append(
            dict(
                market=MARKET,
                neighbourhood=hood,
                bedrooms=beds,
                room_type="Entire home/apt",
                property_type="Entire home",
                listing_count=count,
                avg_revenue=revenue,
                avg_occupancy=occupancy,
                avg_price=price,
                avg_rating=rating,
            )
        )
        insights.append(
            dict(
                market=MARKET,
                neighbourhood=hood,
                bedrooms=beds,
                bathrooms=baths,
                profile=f"{beds}BR/{baths:g}BA homes in {hood} book steadily through the year.",
                success_factors=["Walk to beach", "Dedicated parking"],
                risk_factors=["STRO permit cap", "Seasonal softness in winter"],
                premium_amenities=["Hot tub", "Ocean view"],
                review_count=count * 35,
                computed_at=now,
            )
        )
        # a spread of listings around the averages for the percentile lookup
        for i, factor in enumerate((0.8, 0.9, 1.0, 1.1, 1.2)):
            listings.append(
                dict(
                    market=MARKET,
                    neighbourhood=hood,
                    bedrooms=beds,
                    bathrooms=baths,
                    room_type="Entire home/apt",
                    property_type="Entire home",
                    price=round(price * factor, 2),
                    estimated_revenue_l365d=round(revenue * factor, 2),
                    estimated_occupancy_l365d=occupancy,
                )
            )

    profiles = [
        dict(market=MARKET, neighbourhood=hood, profile=text, generated_at=now)
        for hood, text in PROFILES.items()
    ]
    return dict(metrics=metrics, insights=insights, profiles=profiles, listings=listings)


def main() -> None:
    ap = argparse.ArgumentParser(description="Load a small San Diego demo dataset.")
    ap.add_argument("--db", default=config.DB_URI, help="SQLAlchemy URI (default: STAYVEST_DB_URI)")
    args = ap.parse_args()

    repo = SqlMarketRepository(args.db)
    written = repo.seed(**_demo_rows())
    print(f"Seeded {written} rows into {args.db}")
    print("Supported combinations:")
    for combo in repo.get_supported_combinations():
        print("  ", combo)


if __name__ == "__main__":
    main()
