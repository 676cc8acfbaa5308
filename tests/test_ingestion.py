from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from rdti_ledger.ingestion import (
    _excel_cell_value,
    _normalize_headers,
    _read_with_openpyxl,
    cell_text,
    read_input_excel,
)


def test_cell_text_normalizes_scalars() -> None:
    assert cell_text(None) == ""
    assert cell_text("TASK-1") == "TASK-1"
    assert cell_text(3.0) == "3"
    assert cell_text(2.5) == "2.5"
    assert cell_text(float("nan")) == ""
    assert cell_text(7) == "7"


def test_cell_text_prefers_display_text_over_link_target() -> None:
    link = SimpleNamespace(target="https://jira.example/browse/TASK-1")
    assert cell_text("TASK-1", link) == "TASK-1"
    assert cell_text(None, link) == "https://jira.example/browse/TASK-1"
    assert cell_text("", "https://jira.example/browse/TASK-2") == "https://jira.example/browse/TASK-2"


def test_cell_text_flattens_rich_text() -> None:
    rich_text = pytest.importorskip("openpyxl.cell.rich_text")
    styles = pytest.importorskip("openpyxl.cell.text")
    value = rich_text.CellRichText(["MAP-", rich_text.TextBlock(styles.InlineFont(b=True), "12")])
    assert cell_text(value) == "MAP-12"


def test_normalize_headers_dedupes_and_fills_blanks() -> None:
    assert _normalize_headers(["Key", None, "Key", " Mob "]) == ["Key", "column_2", "Key_2", "Mob"]


def test_missing_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_input_excel(tmp_path / "missing.xlsx")


def test_sheet_without_header_is_fatal(tmp_path: Path) -> None:
    openpyxl = pytest.importorskip("openpyxl")
    path = tmp_path / "empty.xlsx"
    openpyxl.Workbook().save(path)
    with pytest.raises(ValueError):
        read_input_excel(path)


def test_openpyxl_reader_handles_links_and_gaps(tmp_path: Path) -> None:
    openpyxl = pytest.importorskip("openpyxl")
    path = tmp_path / "tickets.xlsx"
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.append(["Work item key", "Parent", "Work Hours in Progress"])
    sheet.append(["TASK-1", None, 2])
    sheet.append([None, None, None])
    sheet.append(["TASK-2", "TASK-1 Importer", "1h"])
    sheet["A4"].hyperlink = "https://jira.example/browse/TASK-2"
    workbook.save(path)

    table = _read_with_openpyxl(path)

    assert table.headers == ["Work item key", "Parent", "Work Hours in Progress"]
    assert table.rows == [
        {"Work item key": "TASK-1", "Parent": "", "Work Hours in Progress": "2"},
        {"Work item key": "TASK-2", "Parent": "TASK-1 Importer", "Work Hours in Progress": "1h"},
    ]


def test_excel_cell_value_blanks_non_finite_floats() -> None:
    assert _excel_cell_value(float("nan")) is None
    assert _excel_cell_value(float("inf")) is None
    assert _excel_cell_value(2.5) == 2.5
    assert _excel_cell_value("TASK-1") == "TASK-1"
    assert _excel_cell_value(None) is None
