from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import List, Optional

from pledger_core.domain.models import DEFAULT_CATEGORY, LedgerConfig, LoadReport, Record, SaveReport
from pledger_core.io import ledger as ledger_io


logger = logging.getLogger(__name__)


def _month_key(today: Optional[dt.date]) -> tuple:
    today = today or dt.date.today()
    return (today.year, today.month)


class LedgerStore:
    """
    Ordered, in-memory record collection backed by a primary CSV and a backup copy.

    Records stay in insertion order until the next save, which sorts by date.
    Name lookups are not unique: edits touch the first match, deletes remove every match.
    """

    def __init__(self, ledger_path: str | Path, backup_path: Optional[str | Path] = None):
        self.ledger_path = Path(ledger_path)
        self.backup_path = Path(backup_path) if backup_path is not None else None
        self._records: List[Record] = []
        self.last_save: Optional[SaveReport] = None

    @classmethod
    def from_config(cls, config: LedgerConfig) -> "LedgerStore":
        return cls(config.ledger_path, config.backup_path)

    def __len__(self) -> int:
        return len(self._records)

    # -------------------------------
    # Persistence
    # -------------------------------

    @property
    def paths(self) -> List[Path]:
        paths = [self.ledger_path]
        if self.backup_path is not None:
            paths.append(self.backup_path)
        return paths

    def load(self) -> LoadReport:
        records, error = ledger_io.load_ledger(self.ledger_path)
        self._records = records
        if error:
            logger.debug("Ledger loaded with %d records; %s", len(records), error)
        return LoadReport(loaded=len(records), error=error)

    def save(self) -> SaveReport:
        self.sort_by_date()
        report = ledger_io.save_ledger(self._records, self.paths)
        self.last_save = report
        if report.failed:
            logger.warning("Ledger saved to %d of %d targets", len(report.written), len(self.paths))
        return report

    # -------------------------------
    # Mutations
    # -------------------------------

    def add(self, record: Record) -> SaveReport:
        self._records.append(record)
        logger.info("Added %s %r", record.kind, record.name)
        return self.save()

    def add_item(
        self,
        kind: str,
        name: str,
        category: Optional[str],
        amount: float,
        date: dt.date,
        probability: float,
    ) -> Record:
        record = Record(
            kind=kind,
            name=name,
            category=category or DEFAULT_CATEGORY,
            amount=amount,
            date=date,
            probability=probability,
        )
        self.add(record)
        return record

    def edit(self, name: str, category: str, amount: float, date: dt.date, probability: float) -> bool:
        for idx, record in enumerate(self._records):
            if record.name == name:
                self._records[idx] = record.replace(category, amount, date, probability)
                logger.info("Edited %r", name)
                self.save()
                return True
        logger.info("Edit skipped, no record named %r", name)
        return False

    def delete(self, name: str) -> bool:
        kept = [r for r in self._records if r.name != name]
        removed = len(self._records) - len(kept)
        if not removed:
            logger.info("Delete skipped, no record named %r", name)
            return False
        self._records = kept
        logger.info("Deleted %d record(s) named %r", removed, name)
        self.save()
        return True

    def sort_by_date(self) -> None:
        # list.sort is stable; ISO dates order the same as their zero-padded strings
        self._records.sort(key=lambda r: r.date)

    # -------------------------------
    # Queries
    # -------------------------------

    def find_first_by_name(self, name: str) -> Optional[Record]:
        for record in self._records:
            if record.name == name:
                return record
        return None

    def all(self) -> List[Record]:
        return list(self._records)

    def items_in_current_month(self, today: Optional[dt.date] = None) -> List[Record]:
        key = _month_key(today)
        return [r for r in self._records if r.month_key == key]

    def items_up_to_end_of_current_month(self, today: Optional[dt.date] = None) -> List[Record]:
        key = _month_key(today)
        return [r for r in self._records if r.month_key <= key]

    def categories(self) -> List[str]:
        seen: List[str] = []
        for record in self._records:
            if record.category not in seen:
                seen.append(record.category)
        return seen
