"""Monthly household expense ledger: entries, storage, auth, export and REST API."""

from .months import MonthEntry, MonthTotals, to_number, validate_month
from .store import LedgerStore
from .export import export_csv

__all__ = [
    "MonthEntry",
    "MonthTotals",
    "to_number",
    "validate_month",
    "LedgerStore",
    "export_csv",
]
