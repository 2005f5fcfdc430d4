from pledger_core.services.reports import (  # noqa: F401
    annual_report,
    asset_liability_breakdown,
    income_vs_expenses,
    monthly_report,
)
from pledger_core.services.scenario import evaluate_scenarios  # noqa: F401
from pledger_core.services.store import LedgerStore  # noqa: F401
from pledger_core.services.summary import detailed_summary, month_summary  # noqa: F401

__all__ = [
    "LedgerStore",
    "evaluate_scenarios",
    "month_summary",
    "detailed_summary",
    "monthly_report",
    "annual_report",
    "income_vs_expenses",
    "asset_liability_breakdown",
]
