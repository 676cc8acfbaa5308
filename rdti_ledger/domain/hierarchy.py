"""Parent/child index over a ticket store."""

from __future__ import annotations

import logging
from typing import Dict, List

from rdti_ledger.domain.models import Ticket
from rdti_ledger.domain.store import TicketStore

logger = logging.getLogger(__name__)


class HierarchyCycleError(ValueError):
    """Raised when a parent chain loops back on itself."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Cyclic parent chain detected at work item {key}")
        self.key = key


class HierarchyIndex:
    """Parent key → child keys, built once per store.

    Child keys are derived only from ``parent_key`` values, which no pipeline stage
    changes, so an index can be rebound to a later store of the same table.
    """

    def __init__(self, store: TicketStore, children_by_parent: Dict[str, List[str]]) -> None:
        self._store = store
        self._children_by_parent = children_by_parent

    @classmethod
    def build(cls, store: TicketStore) -> "HierarchyIndex":
        children_by_parent: Dict[str, List[str]] = {}
        orphans = 0
        for ticket in store.tickets:
            if not ticket.key or not ticket.parent_key:
                continue
            if store.by_key.get(ticket.key) is not ticket:
                continue
            if ticket.parent_key not in store.by_key:
                orphans += 1
                logger.debug("Parent %s of %s not found in table", ticket.parent_key, ticket.key)
                continue
            children_by_parent.setdefault(ticket.parent_key, []).append(ticket.key)
        if orphans:
            logger.info("%d tickets reference a parent outside the table", orphans)
        return cls(store, children_by_parent)

    @property
    def store(self) -> TicketStore:
        return self._store

    def rebind(self, store: TicketStore) -> "HierarchyIndex":
        return HierarchyIndex(store, self._children_by_parent)

    def children(self, ticket: Ticket) -> List[Ticket]:
        return self._store.resolve(self._children_by_parent.get(ticket.key, []))

    def descendants(self, ticket: Ticket) -> List[Ticket]:
        """All descendants of ``ticket`` in depth-first pre-order, each exactly once."""
        ordered: List[Ticket] = []
        seen = {ticket.key}
        stack = list(reversed(self._children_by_parent.get(ticket.key, [])))
        while stack:
            key = stack.pop()
            if key in seen:
                raise HierarchyCycleError(key)
            seen.add(key)
            child = self._store.get(key)
            if child is None:
                continue
            ordered.append(child)
            stack.extend(reversed(self._children_by_parent.get(key, [])))
        return ordered

    def descendant_keys(self, ticket: Ticket) -> set[str]:
        return {item.key for item in self.descendants(ticket)}
