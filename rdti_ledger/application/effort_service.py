"""Application service for WIP hour rollups on activity tickets."""

from __future__ import annotations

import logging
from typing import Dict, List

from rdti_ledger.config import LedgerSettings
from rdti_ledger.domain.duration import parse_hours, people_count
from rdti_ledger.domain.hierarchy import HierarchyCycleError, HierarchyIndex
from rdti_ledger.domain.models import Ticket
from rdti_ledger.domain.store import TaggedTicketStore

logger = logging.getLogger(__name__)


def require_tagged(store: object) -> TaggedTicketStore:
    if not isinstance(store, TaggedTicketStore):
        raise TypeError("Activity tags must be propagated before rollups; got an untagged ticket store")
    return store


def rollup_targets(store: TaggedTicketStore, settings: LedgerSettings) -> List[Ticket]:
    return [ticket for ticket in store.tickets if ticket.is_activity(settings) and ticket.has_tag]


def countable_links(activity: Ticket, index: HierarchyIndex, settings: LedgerSettings) -> List[Ticket]:
    """Linked tickets of ``activity`` whose effort belongs to its rollup.

    A link that is also a descendant of another linked non-activity ticket is left
    out, since its hours already arrive through that ancestor. Linked activity tickets
    only count while they have no tag of their own.
    """
    linked = index.store.resolve(activity.linked_keys)
    covered: set[str] = set()
    for item in linked:
        if not item.is_activity(settings):
            covered.update(index.descendant_keys(item))

    selected: List[Ticket] = []
    for item in linked:
        if item.key in covered:
            continue
        if item.is_activity(settings) and item.has_tag:
            continue
        selected.append(item)
    return selected


class WipCalculator:
    """Bottom-up WIP hours per subtree, memoized for one store."""

    def __init__(self, index: HierarchyIndex, settings: LedgerSettings) -> None:
        self.index = index
        self.settings = settings
        self._memo: Dict[str, float] = {}

    def own_duration(self, ticket: Ticket) -> float:
        return parse_hours(ticket.duration_raw, self.settings.units)

    def own_hours(self, ticket: Ticket) -> float:
        return self.own_duration(ticket) * people_count(ticket)

    def wip_hours(self, ticket: Ticket) -> float:
        if ticket.key in self._memo:
            return self._memo[ticket.key]
        # Pre-order lists parents before children, so the reverse visits children first.
        for node in reversed([ticket, *self.index.descendants(ticket)]):
            if node.key not in self._memo:
                self._memo[node.key] = self._subtree_hours(node)
        return self._memo[ticket.key]

    def _subtree_hours(self, ticket: Ticket) -> float:
        children = self.index.children(ticket)
        if not children:
            return self.own_hours(ticket)

        child_sum = 0.0
        for child in children:
            if child.key not in self._memo:
                raise HierarchyCycleError(child.key)
            child_sum += self._memo[child.key]

        own_duration = self.own_duration(ticket)
        children_logged = any(self.own_duration(child) > 0 for child in children)
        child_people = sum(people_count(child) for child in children)
        if not children_logged and own_duration > 0 and child_people > people_count(ticket):
            # Time logged once on the parent, people recorded on the children.
            return own_duration * child_people
        return max(own_duration * people_count(ticket), child_sum)


def activity_wip_hours(activity: Ticket, calculator: WipCalculator) -> float:
    return sum(calculator.wip_hours(item) for item in countable_links(activity, calculator.index, calculator.settings))


def aggregate_effort(store: TaggedTicketStore, index: HierarchyIndex, settings: LedgerSettings) -> TaggedTicketStore:
    """Return a copy of ``store`` with ``sum_wip_hours`` set on every tagged activity ticket."""
    tagged = require_tagged(store)
    calculator = WipCalculator(index.rebind(tagged), settings)
    totals: Dict[str, float] = {}
    for activity in rollup_targets(tagged, settings):
        totals[activity.key] = activity_wip_hours(activity, calculator)

    logger.info("Rolled up WIP hours for %d activity tickets", len(totals))
    return tagged.map_tickets(  # type: ignore[return-value]
        lambda ticket: ticket.with_sum_wip_hours(totals[ticket.key])
        if ticket.key in totals and ticket.is_activity(settings) and ticket.has_tag
        else ticket
    )
