import datetime as dt
import logging
from pathlib import Path

import pytest

from pledger_core.domain.models import Record
from pledger_core.io.ledger import HEADER
from pledger_core.services.store import LedgerStore


TODAY = dt.date(2026, 10, 19)


@pytest.fixture
def store(tmp_path: Path) -> LedgerStore:
    return LedgerStore(tmp_path / "ledger.csv", tmp_path / "backup.csv")


def _rec(name, date, kind="Expense", amount=10.0, category="General", probability=1.0):
    return Record(kind, name, category, amount, date, probability)


def test_add_persists_to_primary_and_backup_sorted(store: LedgerStore):
    store.add(_rec("Late", dt.date(2026, 10, 20)))
    store.add(_rec("Early", dt.date(2026, 1, 2)))

    assert [r.name for r in store.all()] == ["Early", "Late"]
    primary = store.ledger_path.read_text().splitlines()
    assert primary[0] == HEADER
    assert primary[1].startswith("Expense,Early,")
    assert store.backup_path.read_text() == store.ledger_path.read_text()


def test_add_item_defaults_category(store: LedgerStore):
    record = store.add_item("Income", "Gift", None, 50.0, TODAY, 0.5)
    assert record.category == "General"
    assert store.find_first_by_name("Gift") == record


def test_add_item_rejects_bad_input(store: LedgerStore):
    with pytest.raises(ValueError):
        store.add_item("Salary", "x", None, 1.0, TODAY, 1.0)
    with pytest.raises(ValueError):
        store.add_item("Income", "x", None, 1.0, TODAY, 1.2)
    assert len(store) == 0


def test_edit_changes_only_the_first_match(store: LedgerStore):
    store.add(_rec("Dup", dt.date(2026, 1, 1), amount=1.0))
    store.add(_rec("Dup", dt.date(2026, 2, 1), amount=2.0))

    assert store.edit("Dup", "Food", 99.0, dt.date(2026, 1, 5), 0.5)
    first, second = store.all()
    assert (first.kind, first.name, first.category, first.amount, first.probability) == (
        "Expense",
        "Dup",
        "Food",
        99.0,
        0.5,
    )
    assert second.amount == 2.0


def test_delete_removes_every_match(store: LedgerStore):
    store.add(_rec("Dup", dt.date(2026, 1, 1)))
    store.add(_rec("Keep", dt.date(2026, 1, 2)))
    store.add(_rec("Dup", dt.date(2026, 1, 3)))

    assert store.delete("Dup")
    assert [r.name for r in store.all()] == ["Keep"]

    reloaded = LedgerStore(store.ledger_path)
    reloaded.load()
    assert [r.name for r in reloaded.all()] == ["Keep"]


def test_missing_names_change_nothing(store: LedgerStore):
    store.add(_rec("Only", dt.date(2026, 1, 1)))
    before = store.ledger_path.read_text()
    assert store.find_first_by_name("Ghost") is None
    assert not store.edit("Ghost", "x", 1.0, TODAY, 1.0)
    assert not store.delete("Ghost")
    assert store.ledger_path.read_text() == before


def test_sort_is_stable_and_idempotent(store: LedgerStore):
    same_day = dt.date(2026, 5, 5)
    for name in ("b", "a", "c"):
        store._records.append(_rec(name, same_day))
    store._records.append(_rec("first", dt.date(2026, 1, 1)))

    store.sort_by_date()
    once = store.all()
    store.sort_by_date()
    assert store.all() == once
    assert [r.name for r in once] == ["first", "b", "a", "c"]


def test_month_filters(store: LedgerStore):
    for name, date in [
        ("this-month", dt.date(2026, 10, 31)),
        ("last-year-same-month", dt.date(2025, 10, 10)),
        ("next-month", dt.date(2026, 11, 1)),
        ("earlier", dt.date(2026, 3, 1)),
        ("next-year", dt.date(2027, 1, 1)),
    ]:
        store._records.append(_rec(name, date))

    assert [r.name for r in store.items_in_current_month(TODAY)] == ["this-month"]
    assert {r.name for r in store.items_up_to_end_of_current_month(TODAY)} == {
        "this-month",
        "last-year-same-month",
        "earlier",
    }


def test_load_keeps_records_before_a_bad_line(tmp_path: Path):
    path = tmp_path / "ledger.csv"
    path.write_text(HEADER + "\nIncome,Salary,Work,10,2026-01-01,1\nBogus,X,Y,1,2026-01-02,1\n")
    store = LedgerStore(path)
    report = store.load()
    assert report.loaded == 1
    assert not report.ok
    assert [r.name for r in store.all()] == ["Salary"]


def test_save_reports_failed_backup(tmp_path: Path):
    blocked = tmp_path / "blocked"
    blocked.mkdir()
    store = LedgerStore(tmp_path / "ledger.csv", blocked)
    report = store.add(_rec("x", TODAY))
    assert report.written == [tmp_path / "ledger.csv"]
    assert blocked in report.failed
    assert store.last_save is report


def test_categories_in_first_seen_order(store: LedgerStore):
    store._records.extend(
        [
            _rec("a", TODAY, category="Food"),
            _rec("b", TODAY, category="Rent"),
            _rec("c", TODAY, category="Food"),
        ]
    )
    assert store.categories() == ["Food", "Rent"]


def test_first_run_without_a_file_logs_no_warnings(tmp_path: Path, caplog):
    store = LedgerStore(tmp_path / "ledger.csv", tmp_path / "backup.csv")
    with caplog.at_level(logging.DEBUG):
        report = store.load()
    assert report.loaded == 0
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
