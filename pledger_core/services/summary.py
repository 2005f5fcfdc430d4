from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from pledger_core.domain.models import (
    ASSET,
    EXPENSE,
    INCOME,
    KINDS,
    LIABILITY,
    DetailedSummary,
    MonthSummary,
    Record,
)
from pledger_core.services.store import LedgerStore


def records_frame(records: Iterable[Record]) -> pd.DataFrame:
    rows = [
        {
            "kind": r.kind,
            "name": r.name,
            "category": r.category,
            "amount": r.amount,
            "date": pd.Timestamp(r.date),
            "probability": r.probability,
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=["kind", "name", "category", "amount", "date", "probability"])
    df["date"] = pd.to_datetime(df["date"])
    df["amount"] = df["amount"].astype(float)
    return df


def totals_by_kind(df: pd.DataFrame) -> pd.Series:
    """Amount totals indexed by every kind, zero where a kind is absent."""
    return df.groupby("kind")["amount"].sum().reindex(list(KINDS), fill_value=0.0).astype(float)


def _net(totals: pd.Series) -> float:
    # Liabilities are left out of the end-of-month net.
    return float(totals[INCOME] + totals[ASSET] - totals[EXPENSE])


def top_expense_categories(df: pd.DataFrame, top_n: int = 3) -> List[Tuple[str, float]]:
    expenses = df[df["kind"] == EXPENSE]
    if expenses.empty:
        return []
    ranked = expenses.groupby("category", sort=False)["amount"].sum().sort_values(ascending=False, kind="stable")
    return [(str(cat), float(total)) for cat, total in ranked.head(top_n).items()]


def month_summary(store: LedgerStore, today: Optional[dt.date] = None) -> MonthSummary:
    today = today or dt.date.today()
    totals = totals_by_kind(records_frame(store.items_in_current_month(today)))
    return MonthSummary(
        month=today.replace(day=1),
        asset=float(totals[ASSET]),
        liability=float(totals[LIABILITY]),
        income=float(totals[INCOME]),
        expense=float(totals[EXPENSE]),
    )


def detailed_summary(store: LedgerStore, today: Optional[dt.date] = None, top_n: int = 3) -> DetailedSummary:
    """
    Projected net counts everything up to the end of this month;
    current net only what is dated on or before today.
    """
    today = today or dt.date.today()
    df = records_frame(store.items_up_to_end_of_current_month(today))
    current = df[df["date"] <= pd.Timestamp(today)]
    return DetailedSummary(
        month=today.replace(day=1),
        as_of=today,
        projected_net=_net(totals_by_kind(df)),
        current_net=_net(totals_by_kind(current)),
        top_expense_categories=top_expense_categories(df, top_n),
    )
