from __future__ import annotations

import pytest

from rdti_ledger.config import ColumnMap, duration_units
from rdti_ledger.domain.duration import is_assigned, parse_hours, people_count
from rdti_ledger.domain.models import Ticket


def _ticket(make_row, **kwargs) -> Ticket:
    return Ticket.from_row(make_row("TASK-1", **kwargs), ColumnMap())


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1d 2h 30m", 10.5),
        ("", 0.0),
        (None, 0.0),
        ("45m", 0.75),
        ("1.5h", 1.5),
        ("2h 1d", 10.0),
        ("3 h", 3.0),
        ("3w 2h", 2.0),
        ("not logged", 0.0),
    ],
)
def test_parse_hours(text, expected) -> None:
    assert parse_hours(text) == pytest.approx(expected)


def test_parse_hours_uses_configured_workday() -> None:
    assert parse_hours("1d 1h", duration_units(7.5)) == pytest.approx(8.5)


def test_people_count_counts_mob_members(make_row) -> None:
    assert people_count(_ticket(make_row, mob="Alice, Bob")) == 2
    assert people_count(_ticket(make_row, mob="Alice, , Bob,", assignee="Dan")) == 2


def test_people_count_defaults_to_one(make_row) -> None:
    assert people_count(_ticket(make_row, assignee="Unassigned")) == 1
    assert people_count(_ticket(make_row, assignee="Dan")) == 1
    assert people_count(_ticket(make_row)) == 1


def test_is_assigned_ignores_placeholder(make_row) -> None:
    assert is_assigned(_ticket(make_row, assignee="Dan"))
    assert not is_assigned(_ticket(make_row, assignee="Unassigned"))
    assert not is_assigned(_ticket(make_row))
