"""RDTI activity ledger package."""

from .application import aggregate_contributors, aggregate_effort, build_ledger, propagate_activity_tags, resolve_contributors, run_ledger_pipeline
from .config import LedgerSettings, load_settings
from .ingestion import read_input_excel, write_output_excel

__all__ = [
    "LedgerSettings",
    "load_settings",
    "read_input_excel",
    "write_output_excel",
    "propagate_activity_tags",
    "aggregate_effort",
    "resolve_contributors",
    "aggregate_contributors",
    "build_ledger",
    "run_ledger_pipeline",
]
