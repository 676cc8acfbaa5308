"""Application service for activity tag propagation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rdti_ledger.config import LedgerSettings
from rdti_ledger.domain.hierarchy import HierarchyIndex
from rdti_ledger.domain.models import Ticket
from rdti_ledger.domain.store import TaggedTicketStore, TicketStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagPropagationResult:
    store: TaggedTicketStore
    index: HierarchyIndex
    assigned: dict[str, str]


def linked_activity_tag(ticket: Ticket, store: TicketStore, settings: LedgerSettings, tags: dict[str, str]) -> str | None:
    """Tag of the first linked activity ticket that carries one, in link order."""
    for linked in store.resolve(ticket.linked_keys):
        if not linked.is_activity(settings):
            continue
        tag = linked.activity_tag or tags.get(linked.key, "")
        if tag:
            return tag
    return None


def propagate_activity_tags(
    store: TicketStore,
    settings: LedgerSettings,
    index: HierarchyIndex | None = None,
) -> TagPropagationResult:
    """Give untagged tickets the tag of their first tagged linked activity, then sweep descendants.

    Tags already present are never replaced; the input store is left untouched.
    """
    hierarchy = index.rebind(store) if index is not None else HierarchyIndex.build(store)
    assigned: dict[str, str] = {}
    touched: set[str] = set()

    def _current_tag(ticket: Ticket) -> str:
        return ticket.activity_tag or assigned.get(ticket.key, "")

    for ticket in store.tickets:
        if ticket.key in touched or _current_tag(ticket):
            continue
        if ticket.is_activity(settings):
            continue

        tag = linked_activity_tag(ticket, store, settings, assigned)
        if not tag:
            continue

        assigned[ticket.key] = tag
        touched.add(ticket.key)
        for descendant in hierarchy.descendants(ticket):
            if _current_tag(descendant):
                continue
            assigned[descendant.key] = tag
            touched.add(descendant.key)

    tagged = store.map_tickets(
        lambda ticket: ticket.with_activity_tag(assigned[ticket.key]) if ticket.key in assigned else ticket,
        store_type=TaggedTicketStore,
    )
    logger.info("Assigned activity tags to %d tickets from linked activity tickets", len(assigned))
    return TagPropagationResult(store=tagged, index=hierarchy.rebind(tagged), assigned=assigned)
