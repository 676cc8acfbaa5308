"""Duration text → hours, and head counts for effort attribution."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Mapping

from rdti_ledger.config import UNASSIGNED_PLACEHOLDER, duration_units
from rdti_ledger.domain.models import Ticket

DEFAULT_UNITS: dict[str, float] = duration_units()


@lru_cache(maxsize=8)
def _token_pattern(unit_names: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(name) for name in sorted(unit_names, key=len, reverse=True))
    return re.compile(rf"(\d+(?:\.\d+)?)\s*({alternatives})")


def parse_hours(text: str | None, units: Mapping[str, float] = DEFAULT_UNITS) -> float:
    """Sum every ``<number><unit>`` token in ``text``; anything else is ignored.

    ``"1d 2h 30m"`` is 10.5 with the default 8-hour day.
    """
    if not text or not units:
        return 0.0
    pattern = _token_pattern(tuple(units))
    total = 0.0
    for value, unit in pattern.findall(text):
        total += float(value) * units[unit]
    return total


def people_count(ticket: Ticket) -> int:
    """Mob size when a mob is recorded, otherwise one.

    An unassigned ticket still counts as one unit of effort, so the assignee only
    matters for contributor attribution, not for the count.
    """
    if ticket.mob:
        return len(ticket.mob)
    return 1


def is_assigned(ticket: Ticket, unassigned_placeholder: str = UNASSIGNED_PLACEHOLDER) -> bool:
    return bool(ticket.assignee) and ticket.assignee != unassigned_placeholder
