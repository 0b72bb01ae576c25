import sqlite3
from datetime import date

import pytest

from finassist.aggregate import compute_category_breakdown, compute_totals
from finassist.ledger import Ledger
from finassist.logic import ValidationError
from finassist.models import Totals
from finassist.settings import Settings


def _settings(tmp_path):
    return Settings(data_dir=tmp_path, db_path=tmp_path / "t.sqlite")


def test_load_empty_ledger(tmp_path):
    ledger = Ledger.load(_settings(tmp_path))
    assert len(ledger) == 0
    assert ledger.transactions == ()


def test_add_prepends_and_persists(tmp_path):
    settings = _settings(tmp_path)
    ledger = Ledger.load(settings)

    first = ledger.add("income", "1000", "Salário", "salario")
    second = ledger.add("expense", "25.50", "Almoço", "food")

    assert len(ledger) == 2
    assert ledger.transactions[0] == second
    assert ledger.transactions[1] == first

    reloaded = Ledger.load(settings)
    assert reloaded.transactions == ledger.transactions


def test_add_builds_transaction_fields(tmp_path):
    ledger = Ledger.load(_settings(tmp_path))

    txn = ledger.add(
        "expense", " 12.30 ", "  Cinema ", "", now_ms=1_700_000_000_000, today=date(2024, 1, 5)
    )

    assert txn.kind == "expense"
    assert txn.amount == 12.3
    assert txn.description == "Cinema"
    assert txn.category == "other"
    assert txn.date_display == "05/01/2024"
    assert txn.created_at == 1_700_000_000_000
    assert txn.id == 1_700_000_000_000


def test_ids_stay_unique_within_the_same_millisecond(tmp_path):
    ledger = Ledger.load(_settings(tmp_path))

    ids = [ledger.add("income", "1", f"t{i}", now_ms=5000).id for i in range(3)]

    assert ids == [5000, 5001, 5002]


def test_ids_keep_increasing_after_reload_and_clear(tmp_path):
    settings = _settings(tmp_path)
    ledger = Ledger.load(settings)
    ledger.add("income", "1", "a", now_ms=9000)

    reloaded = Ledger.load(settings)
    assert reloaded.add("income", "1", "b", now_ms=100).id == 9001

    reloaded.clear()
    assert reloaded.add("income", "1", "c", now_ms=100).id == 9002


@pytest.mark.parametrize(
    "amount,description",
    [("0", "x"), ("", "x"), ("abc", "x"), ("10", ""), ("10", "   ")],
)
def test_invalid_add_leaves_ledger_unchanged(tmp_path, amount, description):
    settings = _settings(tmp_path)
    ledger = Ledger.load(settings)
    ledger.add("income", "5", "seed")

    with pytest.raises(ValidationError):
        ledger.add("expense", amount, description, "food")

    assert len(ledger) == 1
    assert len(Ledger.load(settings)) == 1


def test_invalid_kind_is_rejected(tmp_path):
    ledger = Ledger.load(_settings(tmp_path))
    with pytest.raises(ValidationError):
        ledger.add("transfer", "5", "x")
    assert len(ledger) == 0


def test_clear_resets_totals_and_breakdown(tmp_path):
    settings = _settings(tmp_path)
    ledger = Ledger.load(settings)
    ledger.add("income", "500", "pay")
    ledger.add("expense", "120", "market", "food")

    ledger.clear()

    assert len(ledger) == 0
    assert compute_totals(ledger.transactions) == Totals(0.0, 0.0, 0.0)
    assert compute_category_breakdown(ledger.transactions) == []
    assert len(Ledger.load(settings)) == 0


def test_recent_returns_newest_first(tmp_path):
    ledger = Ledger.load(_settings(tmp_path))
    for i in range(12):
        ledger.add("expense", "1", f"item {i}")

    recent = ledger.recent()

    assert len(recent) == 10
    assert recent[0].description == "item 11"
    assert recent[-1].description == "item 2"


def _failing_save(*args, **kwargs):
    raise sqlite3.OperationalError("database is locked")


def test_failed_write_on_add_leaves_ledger_unchanged(tmp_path, monkeypatch):
    settings = _settings(tmp_path)
    ledger = Ledger.load(settings)
    ledger.add("income", "5", "seed", now_ms=1000)

    monkeypatch.setattr("finassist.ledger.save_transactions", _failing_save)
    with pytest.raises(sqlite3.OperationalError):
        ledger.add("expense", "3", "lost", now_ms=2000)

    assert [txn.description for txn in ledger.transactions] == ["seed"]
    monkeypatch.undo()
    assert ledger.add("expense", "3", "kept", now_ms=1500).id == 1500
    assert Ledger.load(settings).transactions == ledger.transactions


def test_failed_write_on_clear_leaves_ledger_unchanged(tmp_path, monkeypatch):
    settings = _settings(tmp_path)
    ledger = Ledger.load(settings)
    ledger.add("income", "5", "seed")

    monkeypatch.setattr("finassist.ledger.save_transactions", _failing_save)
    with pytest.raises(sqlite3.OperationalError):
        ledger.clear()

    assert len(ledger) == 1
    assert len(Ledger.load(settings)) == 1
