from pledger_core.domain.models import (  # noqa: F401
    ASSET,
    DEFAULT_CATEGORY,
    EXPENSE,
    INCOME,
    KINDS,
    LIABILITY,
    DetailedSummary,
    LedgerConfig,
    LoadReport,
    MonthSummary,
    Record,
    SaveReport,
    ScenarioOutcome,
    ScenarioResult,
)

__all__ = [
    "ASSET",
    "DEFAULT_CATEGORY",
    "EXPENSE",
    "INCOME",
    "KINDS",
    "LIABILITY",
    "DetailedSummary",
    "LedgerConfig",
    "LoadReport",
    "MonthSummary",
    "Record",
    "SaveReport",
    "ScenarioOutcome",
    "ScenarioResult",
]
