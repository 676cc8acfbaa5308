from __future__ import annotations

from typing import Any, Callable, Dict, List

import pytest

from rdti_ledger.config import LedgerSettings
from rdti_ledger.domain.hierarchy import HierarchyIndex
from rdti_ledger.domain.store import TicketStore, load

COLUMNS: List[str] = [
    "Work item key",
    "Summary",
    "Parent",
    "Linked work items",
    "Work type",
    "R&DTI Activity",
    "Work Hours in Progress",
    "Assignee",
    "Mob",
]

RowFactory = Callable[..., Dict[str, Any]]


def _make_row(
    key: str,
    *,
    parent: str = "",
    linked: str = "",
    work_type: str = "Task",
    tag: str = "",
    duration: str = "",
    assignee: str = "",
    mob: str = "",
    summary: str = "",
) -> Dict[str, Any]:
    return {
        "Work item key": key,
        "Summary": summary or f"Summary of {key}",
        "Parent": f"{parent} Title of {parent}" if parent else "",
        "Linked work items": linked,
        "Work type": work_type,
        "R&DTI Activity": tag,
        "Work Hours in Progress": duration,
        "Assignee": assignee,
        "Mob": mob,
    }


@pytest.fixture
def settings() -> LedgerSettings:
    return LedgerSettings()


@pytest.fixture
def make_row() -> RowFactory:
    return _make_row


@pytest.fixture
def build_store(settings: LedgerSettings) -> Callable[[List[Dict[str, Any]]], tuple[TicketStore, HierarchyIndex]]:
    def _build(rows: List[Dict[str, Any]]) -> tuple[TicketStore, HierarchyIndex]:
        store = load(rows, settings, columns=COLUMNS)
        return store, HierarchyIndex.build(store)

    return _build


@pytest.fixture
def scenario_rows(make_row: RowFactory) -> List[Dict[str, Any]]:
    """MAP-1 (Platform) links TASK-10; TASK-11 under TASK-10 logged 2h by Carol."""
    return [
        make_row("MAP-1", work_type="Idea", tag="Platform", linked="TASK-10"),
        make_row("TASK-10"),
        make_row("TASK-11", parent="TASK-10", duration="2h", mob="Carol"),
    ]


@pytest.fixture
def ticket_columns() -> List[str]:
    return list(COLUMNS)
