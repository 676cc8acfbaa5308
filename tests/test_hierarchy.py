from __future__ import annotations

import pytest

from rdti_ledger.domain.hierarchy import HierarchyCycleError
from rdti_ledger.domain.models import extract_parent_key, split_names


def test_extract_parent_key_takes_leading_token() -> None:
    assert extract_parent_key("TASK-10 Build the importer") == "TASK-10"
    assert extract_parent_key("TASK-10") == ""
    assert extract_parent_key(" TASK-10 Build the importer") == ""
    assert extract_parent_key("   ") == ""


def test_split_names_trims_and_drops_blanks() -> None:
    assert split_names(" TASK-1, TASK-2 ,,") == ("TASK-1", "TASK-2")
    assert split_names("") == ()


def test_children_follow_table_order(make_row, build_store) -> None:
    store, index = build_store(
        [
            make_row("TASK-1"),
            make_row("TASK-3", parent="TASK-1"),
            make_row("TASK-2", parent="TASK-1"),
        ]
    )
    children = index.children(store.get("TASK-1"))
    assert [ticket.key for ticket in children] == ["TASK-3", "TASK-2"]


def test_parent_match_requires_whole_key(make_row, build_store) -> None:
    store, index = build_store(
        [
            make_row("TASK-1"),
            make_row("TASK-10"),
            make_row("TASK-11", parent="TASK-10"),
        ]
    )
    assert index.children(store.get("TASK-1")) == []
    assert [ticket.key for ticket in index.children(store.get("TASK-10"))] == ["TASK-11"]


def test_descendants_are_depth_first_and_unique(make_row, build_store) -> None:
    store, index = build_store(
        [
            make_row("EPIC-1"),
            make_row("TASK-1", parent="EPIC-1"),
            make_row("SUB-1", parent="TASK-1"),
            make_row("TASK-2", parent="EPIC-1"),
            make_row("SUB-2", parent="TASK-2"),
        ]
    )
    keys = [ticket.key for ticket in index.descendants(store.get("EPIC-1"))]
    assert keys == ["TASK-1", "SUB-1", "TASK-2", "SUB-2"]
    assert index.descendant_keys(store.get("TASK-2")) == {"SUB-2"}


def test_missing_parent_is_not_an_error(make_row, build_store) -> None:
    store, index = build_store([make_row("TASK-1", parent="GONE-1")])
    assert index.descendants(store.get("TASK-1")) == []


def test_cycle_fails_fast(make_row, build_store) -> None:
    store, index = build_store(
        [
            make_row("TASK-1", parent="TASK-2"),
            make_row("TASK-2", parent="TASK-1"),
        ]
    )
    with pytest.raises(HierarchyCycleError) as excinfo:
        index.descendants(store.get("TASK-1"))
    assert excinfo.value.key == "TASK-1"


def test_self_parent_is_a_cycle(make_row, build_store) -> None:
    store, index = build_store([make_row("TASK-1", parent="TASK-1")])
    with pytest.raises(HierarchyCycleError):
        index.descendants(store.get("TASK-1"))


def test_duplicate_key_keeps_only_later_row_as_child(make_row, build_store) -> None:
    store, index = build_store(
        [
            make_row("TASK-1"),
            make_row("SUB-1", parent="TASK-1", duration="1h"),
            make_row("SUB-1", parent="TASK-1", duration="3h"),
        ]
    )
    children = index.children(store.get("TASK-1"))
    assert [ticket.duration_raw for ticket in children] == ["3h"]
