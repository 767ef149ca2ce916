# tests/test_seed_demo.py
import runpy
import sys
from decimal import Decimal
from pathlib import Path

from stayvest.adapters.sql_repo import SqlMarketRepository

SEED_SCRIPT = Path(__file__).resolve().parents[1] / "entrypoints" / "cli" / "seed_demo.py"


def test_seed_demo_loads_a_queryable_dataset(tmp_path, monkeypatch, capsys):
    db_uri = f"sqlite:///{tmp_path / 'demo.db'}"
    monkeypatch.setattr(sys, "argv", ["seed_demo.py", "--db", db_uri])

    runpy.run_path(str(SEED_SCRIPT), run_name="__main__")

    out = capsys.readouterr().out
    assert f"into {db_uri}" in out
    assert "Mission Bay (2BR/2BA)" in out

    repo = SqlMarketRepository(db_uri)
    stats = repo.get_comparable_statistics("san-diego", "Mission Bay", 2, Decimal("2"))
    assert stats is not None
    assert stats.listing_count == 64
    assert stats.computed_at is not None
    assert repo.get_percentiles("san-diego", "Mission Bay", 2).comparables_count == 5
