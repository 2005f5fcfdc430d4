from __future__ import annotations

import dataclasses
import datetime as dt
from pathlib import Path
from typing import Dict, List, Optional, Tuple

ASSET = "Asset"
LIABILITY = "Liability"
INCOME = "Income"
EXPENSE = "Expense"

KINDS = (ASSET, LIABILITY, INCOME, EXPENSE)

# Income and assets raise the net position, expenses and liabilities lower it.
SIGNS = {ASSET: 1.0, LIABILITY: -1.0, INCOME: 1.0, EXPENSE: -1.0}

DEFAULT_CATEGORY = "General"


@dataclasses.dataclass(frozen=True)
class Record:
    kind: str  # one of KINDS, case-sensitive
    name: str
    category: str = DEFAULT_CATEGORY
    amount: float = 0.0
    date: dt.date = dataclasses.field(default_factory=dt.date.today)
    probability: float = 1.0

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"Unknown record kind: {self.kind!r}")
        if not 0.0 <= self.probability <= 1.0:
            raise ValueError(f"Probability must be within [0, 1], got {self.probability}")

    @property
    def signed_amount(self) -> float:
        return SIGNS[self.kind] * self.amount

    @property
    def is_fixed(self) -> bool:
        return self.probability == 0.0 or self.probability == 1.0

    @property
    def month_key(self) -> Tuple[int, int]:
        return (self.date.year, self.date.month)

    def replace(self, category: str, amount: float, date: dt.date, probability: float) -> "Record":
        """Edits never change kind or name; everything else is replaced."""
        return Record(
            kind=self.kind,
            name=self.name,
            category=category,
            amount=amount,
            date=date,
            probability=probability,
        )


@dataclasses.dataclass(frozen=True)
class LedgerConfig:
    ledger_path: Path
    backup_path: Path
    top_categories: int = 3
    default_category: str = DEFAULT_CATEGORY


@dataclasses.dataclass(frozen=True)
class ScenarioOutcome:
    total: float
    probability: float

    @property
    def probability_pct(self) -> float:
        return min(max(self.probability * 100.0, 0.0), 100.0)


@dataclasses.dataclass
class ScenarioResult:
    fixed_total: float
    variable_count: int
    combinations: int
    best_case: float
    worst_case: float
    most_likely: ScenarioOutcome
    least_likely: ScenarioOutcome

    def snapshot(self) -> Dict[str, float]:
        return {
            "best_case": self.best_case,
            "worst_case": self.worst_case,
            "most_likely": self.most_likely.total,
            "most_likely_pct": self.most_likely.probability_pct,
            "least_likely": self.least_likely.total,
            "least_likely_pct": self.least_likely.probability_pct,
        }


@dataclasses.dataclass
class MonthSummary:
    month: dt.date
    asset: float
    liability: float
    income: float
    expense: float


@dataclasses.dataclass
class DetailedSummary:
    month: dt.date
    as_of: dt.date
    projected_net: float
    current_net: float
    top_expense_categories: List[Tuple[str, float]]


@dataclasses.dataclass
class LoadReport:
    loaded: int
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclasses.dataclass
class SaveReport:
    written: List[Path] = dataclasses.field(default_factory=list)
    failed: Dict[Path, str] = dataclasses.field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed
