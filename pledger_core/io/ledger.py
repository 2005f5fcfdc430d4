from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import pandas as pd

from pledger_core.domain.models import KINDS, Record, SaveReport


logger = logging.getLogger(__name__)

COLUMNS = ["Type", "Name", "Category", "Amount", "Date", "Probability"]
HEADER = ",".join(COLUMNS)

# One row per chunk so that rows decoded before a malformed line survive the failure.
_CHUNK_ROWS = 1

Source = Union[Path, IO[str]]


class LedgerParseError(ValueError):
    def __init__(self, row: int, reason: str):
        super().__init__(f"row {row}: {reason}")
        self.row = row
        self.reason = reason


def encode_records(records: Iterable[Record]) -> str:
    rows = [
        [r.kind, r.name, r.category, float(r.amount), r.date.isoformat(), float(r.probability)]
        for r in records
    ]
    df = pd.DataFrame(rows, columns=COLUMNS)
    return df.to_csv(index=False, lineterminator="\n")


def _decode_row(values: Sequence, row: int) -> Record:
    if len(values) != len(COLUMNS) or any(not isinstance(v, str) for v in values):
        raise LedgerParseError(row, f"expected {len(COLUMNS)} fields")
    kind, name, category, amount, date, probability = values
    if kind not in KINDS:
        raise LedgerParseError(row, f"unknown type {kind!r}")
    try:
        return Record(
            kind=kind,
            name=name,
            category=category,
            amount=float(amount),
            date=dt.date.fromisoformat(date),
            probability=float(probability),
        )
    except ValueError as exc:
        raise LedgerParseError(row, str(exc)) from exc


def iter_records(source: Source) -> Iterator[Record]:
    """
    Lazily decode a ledger CSV.
    - Any row equal to the header is skipped, wherever it appears.
    - The first malformed row, including one with too many or too few fields,
      raises LedgerParseError; records yielded before it stay valid.
    """
    row = 0
    try:
        # The python engine reads line by line and rejects rows wider than the first one.
        with pd.read_csv(
            source,
            header=None,
            dtype=str,
            keep_default_na=False,
            engine="python",
            on_bad_lines="error",
            chunksize=_CHUNK_ROWS,
        ) as reader:
            for chunk in reader:
                for values in chunk.itertuples(index=False, name=None):
                    row += 1
                    if list(values) == COLUMNS:
                        continue
                    yield _decode_row(values, row)
    except pd.errors.EmptyDataError:
        return
    except pd.errors.ParserError as exc:
        raise LedgerParseError(row + 1, f"expected {len(COLUMNS)} fields ({exc})") from exc


def load_ledger(csv_path: Union[str, Path]) -> Tuple[List[Record], Optional[str]]:
    """Never raises: returns whatever was decoded plus an error message, if any."""
    path = Path(csv_path)
    records: List[Record] = []
    if not path.exists():
        msg = f"Ledger file not found: {path}"
        logger.info(msg)
        return records, msg

    try:
        for record in iter_records(path):
            records.append(record)
    except (LedgerParseError, OSError, UnicodeDecodeError) as exc:
        msg = f"Failed to load {path} after {len(records)} records: {exc}"
        logger.error(msg)
        return records, msg

    logger.debug("Loaded %d records from %s", len(records), path)
    return records, None


def save_ledger(records: Iterable[Record], paths: Iterable[Union[str, Path]]) -> SaveReport:
    """Writes identical content to every path; one failing target does not stop the others."""
    payload = encode_records(records)
    report = SaveReport()
    for target in paths:
        path = Path(target)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write ledger to %s: %s", path, exc)
            report.failed[path] = str(exc)
        else:
            report.written.append(path)
    return report
