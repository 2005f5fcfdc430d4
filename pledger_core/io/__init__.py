from pledger_core.io.ledger import load_ledger, save_ledger  # noqa: F401
from pledger_core.io.config import load_ledger_config  # noqa: F401

__all__ = ["load_ledger", "save_ledger", "load_ledger_config"]
