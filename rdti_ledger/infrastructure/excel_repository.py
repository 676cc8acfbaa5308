"""Infrastructure adapter for Excel-based data repository."""

from __future__ import annotations

import logging
from pathlib import Path

import polars as pl

from rdti_ledger.ingestion import InputTable, read_input_excel, write_output_excel

logger = logging.getLogger(__name__)


def load_ticket_table(path: Path) -> InputTable:
    return read_input_excel(path)


def save_output_workbook(path: Path, sheets: dict[str, pl.DataFrame]) -> tuple[bool, str]:
    try:
        write_output_excel(path, sheets)
    except PermissionError as exc:
        logger.error("Could not write %s (file may be open/locked): %s", path, exc)
        return False, str(exc)
    return True, ""
