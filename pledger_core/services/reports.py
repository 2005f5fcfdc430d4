from __future__ import annotations

from typing import Iterable

import pandas as pd

from pledger_core.domain.models import ASSET, EXPENSE, INCOME, KINDS, LIABILITY, Record
from pledger_core.services.summary import records_frame


def _pivot_by(df: pd.DataFrame, key: pd.Series) -> pd.DataFrame:
    table = df.assign(period=key).groupby(["period", "kind"])["amount"].sum().unstack(fill_value=0.0)
    return table.reindex(columns=list(KINDS), fill_value=0.0).astype(float)


def monthly_report(records: Iterable[Record], year: int) -> pd.DataFrame:
    """Totals per kind for each month of `year`; all twelve months present."""
    df = records_frame(records)
    df = df[df["date"].dt.year == year]
    months = pd.Index(range(1, 13), name="month")
    if df.empty:
        return pd.DataFrame(0.0, index=months, columns=list(KINDS))
    table = _pivot_by(df, df["date"].dt.month)
    table = table.reindex(months, fill_value=0.0)
    table.index.name = "month"
    return table


def annual_report(records: Iterable[Record]) -> pd.DataFrame:
    df = records_frame(records)
    if df.empty:
        return pd.DataFrame(columns=list(KINDS), dtype=float)
    table = _pivot_by(df, df["date"].dt.year)
    table.index.name = "year"
    return table


def income_vs_expenses(records: Iterable[Record]) -> pd.DataFrame:
    df = records_frame(records)
    if df.empty:
        return pd.DataFrame(columns=["income", "expense", "net"], dtype=float)
    table = _pivot_by(df, df["date"].dt.to_period("M").astype(str))
    out = pd.DataFrame(
        {
            "income": table[INCOME],
            "expense": table[EXPENSE],
        }
    )
    out["net"] = out["income"] - out["expense"]
    out.index.name = "month"
    return out


def asset_liability_breakdown(records: Iterable[Record]) -> dict:
    """
    Per-category totals for assets and liabilities, plus net worth.
    """
    df = records_frame(records)
    assets = df[df["kind"] == ASSET].groupby("category", sort=False)["amount"].sum()
    liabilities = df[df["kind"] == LIABILITY].groupby("category", sort=False)["amount"].sum()
    total_assets = float(assets.sum())
    total_liabilities = float(liabilities.sum())
    return {
        "assets": {str(k): float(v) for k, v in assets.items()},
        "liabilities": {str(k): float(v) for k, v in liabilities.items()},
        "total_assets": total_assets,
        "total_liabilities": total_liabilities,
        "net_worth": total_assets - total_liabilities,
    }
