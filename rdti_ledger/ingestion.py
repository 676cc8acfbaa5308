"""Excel ingestion/output helpers with Polars-first and openpyxl fallback."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Sequence

import polars as pl

logger = logging.getLogger(__name__)

MAX_SHEET_NAME_LENGTH = 31


@dataclass(frozen=True)
class InputTable:
    """Header names and text-only rows of the first worksheet."""

    headers: list[str]
    rows: list[dict[str, str]] = field(default_factory=list)


def _import_openpyxl() -> tuple[Any, Any]:
    try:
        from openpyxl import Workbook, load_workbook
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("openpyxl is required for Excel fallback I/O.") from exc
    return Workbook, load_workbook


def _normalize_headers(raw_headers: Sequence[Any]) -> list[str]:
    headers: list[str] = []
    seen: dict[str, int] = {}
    for idx, value in enumerate(raw_headers):
        base = str(value).strip() if value not in (None, "") else f"column_{idx + 1}"
        count = seen.get(base, 0)
        name = base if count == 0 else f"{base}_{count + 1}"
        seen[base] = count + 1
        headers.append(name)
    return headers


def cell_text(value: Any, hyperlink: Any = None) -> str:
    """Reduce a cell to plain text: rich text to its display text, links to text or target."""
    if value is None or value == "":
        target = getattr(hyperlink, "target", hyperlink)
        return str(target) if target else ""
    if isinstance(value, float):
        if value != value:
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def _read_with_polars(path: Path) -> InputTable:
    if not hasattr(pl, "read_excel"):
        raise RuntimeError("polars.read_excel is not available in this environment.")

    # Zero schema inference keeps every column as text.
    frame = pl.read_excel(path, sheet_id=1, infer_schema_length=0)
    if isinstance(frame, dict):
        frame = next(iter(frame.values()))
    if frame.width == 0:
        raise ValueError(f"No header row found in {path}")

    headers = _normalize_headers(frame.columns)
    frame.columns = headers
    rows: list[dict[str, str]] = []
    for record in frame.iter_rows(named=True):
        if all(value in (None, "") for value in record.values()):
            continue
        rows.append({name: cell_text(record.get(name)) for name in headers})
    return InputTable(headers=headers, rows=rows)


def _read_with_openpyxl(path: Path) -> InputTable:
    _, load_workbook = _import_openpyxl()
    # Hyperlinks are only exposed outside read-only mode.
    workbook = load_workbook(path, data_only=True, rich_text=True)
    try:
        if not workbook.worksheets:
            raise ValueError(f"No sheets found in {path}")
        worksheet = workbook.worksheets[0]
        row_iter = worksheet.iter_rows()
        header_cells = next(row_iter, None)
        if header_cells is None or all(cell.value in (None, "") for cell in header_cells):
            raise ValueError(f"No header row found in {path}")

        headers = _normalize_headers([cell.value for cell in header_cells])
        rows: list[dict[str, str]] = []
        for cells in row_iter:
            if all(cell.value is None and cell.hyperlink is None for cell in cells):
                continue
            row_data: dict[str, str] = {}
            for idx, name in enumerate(headers):
                if idx < len(cells):
                    row_data[name] = cell_text(cells[idx].value, cells[idx].hyperlink)
                else:
                    row_data[name] = ""
            rows.append(row_data)
    finally:
        workbook.close()
    return InputTable(headers=headers, rows=rows)


def read_input_excel(path: str | Path) -> InputTable:
    """Read the first worksheet as text rows keyed by header name."""
    excel_path = Path(path)
    if not excel_path.exists():
        raise FileNotFoundError(f"Input Excel file not found: {excel_path}")

    try:
        table = _read_with_polars(excel_path)
    except Exception as exc:
        logger.debug("Polars Excel read failed (%s); falling back to openpyxl", exc)
        try:
            table = _read_with_openpyxl(excel_path)
        except ValueError:
            raise
        except Exception as fallback_exc:
            raise ValueError(f"No readable sheet in {excel_path}: {fallback_exc}") from fallback_exc
    logger.info("Read %d rows with %d columns from %s", len(table.rows), len(table.headers), excel_path)
    return table


def _excel_cell_value(value: Any) -> Any:
    if isinstance(value, float) and (value != value or value in (float("inf"), float("-inf"))):
        return None
    return value


def _write_with_polars(path: Path, sheets: Dict[str, pl.DataFrame]) -> bool:
    if not sheets:
        return False

    try:
        import xlsxwriter

        with xlsxwriter.Workbook(str(path)) as workbook:
            for sheet_name, frame in sheets.items():
                frame.write_excel(workbook=workbook, worksheet=str(sheet_name)[:MAX_SHEET_NAME_LENGTH])
        return True
    except Exception as exc:
        logger.debug("Polars Excel write failed (%s); falling back to openpyxl", exc)
        return False


def _write_with_openpyxl(path: Path, sheets: Dict[str, pl.DataFrame]) -> None:
    Workbook, _ = _import_openpyxl()
    workbook = Workbook()
    default_sheet = workbook.active
    workbook.remove(default_sheet)

    for sheet_name, frame in sheets.items():
        worksheet = workbook.create_sheet(title=str(sheet_name)[:MAX_SHEET_NAME_LENGTH])
        worksheet.append(frame.columns)
        for row in frame.iter_rows(named=False):
            worksheet.append([_excel_cell_value(value) for value in row])

    workbook.save(path)


def write_output_excel(path: str | Path, sheets: Dict[str, pl.DataFrame]) -> None:
    """Write every sheet into one workbook, replacing ``path`` only once the write succeeded."""
    excel_path = Path(path)
    excel_path.parent.mkdir(parents=True, exist_ok=True)
    partial_path = excel_path.with_name(f"~{excel_path.stem}.partial{excel_path.suffix or '.xlsx'}")

    try:
        if not _write_with_polars(partial_path, sheets):
            _write_with_openpyxl(partial_path, sheets)
        os.replace(partial_path, excel_path)
    finally:
        if partial_path.exists():
            partial_path.unlink()
