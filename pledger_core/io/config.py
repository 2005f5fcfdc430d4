from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from pledger_core.domain.models import DEFAULT_CATEGORY, LedgerConfig


def default_data_dir() -> Path:
    return Path.home() / ".pledger"


def default_ledger_config() -> LedgerConfig:
    data_dir = default_data_dir()
    return LedgerConfig(
        ledger_path=data_dir / "ledger.csv",
        backup_path=data_dir / "ledger_backup.csv",
    )


def load_ledger_config(path: Optional[str | Path] = None) -> LedgerConfig:
    """
    Reads a JSON config; missing keys fall back to the defaults.
    Relative ledger paths are resolved against the config file's directory.
    """
    defaults = default_ledger_config()
    if path is None:
        return defaults

    data = _read_json(path)
    base = Path(path).parent
    return LedgerConfig(
        ledger_path=_resolve(base, data.get("ledger_path"), defaults.ledger_path),
        backup_path=_resolve(base, data.get("backup_path"), defaults.backup_path),
        top_categories=int(data.get("top_categories", defaults.top_categories)),
        default_category=str(data.get("default_category", DEFAULT_CATEGORY)),
    )


def _resolve(base: Path, raw: Optional[str], fallback: Path) -> Path:
    if not raw:
        return fallback
    p = Path(raw).expanduser()
    return p if p.is_absolute() else base / p


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
